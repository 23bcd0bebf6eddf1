# appointments/exceptions.py
#
# Booking errors. A conflict is NOT an error: check_conflict() returns it.
# ------------------------------------------------------------------

from __future__ import annotations


class BookingError(Exception):
    """Base class for every failure raised by the booking layer."""


class InvalidRequest(BookingError, ValueError):
    """Malformed or semantically invalid booking proposal."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class StoreUnavailable(BookingError):
    """The appointment store could not be read or written; nothing was committed."""


class InvalidTransition(BookingError):
    """Status change not allowed by the appointment lifecycle."""


class AppointmentNotFound(BookingError, LookupError):
    pass
