# appointments/conflicts.py
#
# Booking conflict policy.
# ------------------------------------------------------------------
# • One overlap rule everywhere: half-open windows [start, start+duration).
#   Back-to-back visits (end == next start) never conflict.
# • A doctor, a room and a patient can each be in one scheduled visit at a time.
# • Only SCHEDULED appointments block; cancelled/completed/no-show never do.
# • Fails closed: anything that cannot be read raises InvalidRequest instead of
#   being treated as free.
# • Pure: no ORM access, no writes. Works on model instances or any object
#   exposing the same attribute names.
# ------------------------------------------------------------------

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Final, Iterable, NamedTuple, Optional, Union

from .exceptions import InvalidRequest

DEFAULT_DURATION_MINUTES: Final[int] = 30
MINUTES_PER_DAY: Final[int] = 24 * 60
BLOCKING_STATUS: Final[str] = "scheduled"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


# ------------------------------------------------------------------#
#                              Results                               #
# ------------------------------------------------------------------#
class ConflictReason(str, enum.Enum):
    # Declaration order is the tie-break order when several resources collide.
    DOCTOR_BUSY = "doctor_busy"
    ROOM_BUSY = "room_busy"
    PATIENT_DOUBLE_BOOKED = "patient_double_booked"


_REASON_MESSAGES: Final[dict[ConflictReason, str]] = {
    ConflictReason.DOCTOR_BUSY: "The doctor is already booked",
    ConflictReason.ROOM_BUSY: "The room is already booked",
    ConflictReason.PATIENT_DOUBLE_BOOKED: "The patient already has an appointment",
}


@dataclass(frozen=True)
class NoConflict:
    """The proposed booking may proceed."""


NO_CONFLICT: Final[NoConflict] = NoConflict()


@dataclass(frozen=True)
class Conflict:
    """The proposed booking collides with an existing scheduled appointment."""

    reason: ConflictReason
    with_id: object
    starts_at: str
    ends_at: str

    @property
    def message(self) -> str:
        return (
            f"{_REASON_MESSAGES[self.reason]} from {self.starts_at} to {self.ends_at} "
            f"(appointment {self.with_id}). Please pick a different slot."
        )


ConflictResult = Union[NoConflict, Conflict]


# ------------------------------------------------------------------#
#                          Booking request                           #
# ------------------------------------------------------------------#
@dataclass(frozen=True)
class BookingRequest:
    """A proposed appointment not yet committed to the store.

    `duration_minutes=None` means "use the policy default".
    `appointment_id` is set when the proposal replaces an existing appointment
    (reschedule); that appointment is never compared against itself.
    """

    patient_id: object
    doctor_id: object
    room_id: object
    date: Union[date, str]
    start_time: Union[time, str]
    duration_minutes: Optional[int] = None
    appointment_id: Optional[object] = None


# ------------------------------------------------------------------#
#                     Date / time normalization                      #
# ------------------------------------------------------------------#
class Window(NamedTuple):
    """Half-open interval in minutes since midnight."""

    start: int
    end: int

    def overlaps(self, other: "Window") -> bool:
        return self.start < other.end and other.start < self.end


def parse_date(value, *, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise InvalidRequest(field, f"{value!r} is not a valid date (YYYY-MM-DD).")


def to_minutes(value, *, field: str = "start_time") -> int:
    """Minutes since midnight for a `time` or an "HH:MM[:SS]" string."""
    if isinstance(value, time):
        hour, minute = value.hour, value.minute
        seconds = value.second or value.microsecond
    else:
        match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise InvalidRequest(field, f"{value!r} is not a valid time (HH:MM).")
        hour, minute = int(match.group(1)), int(match.group(2))
        seconds = int(match.group(3) or 0)
        if hour > 23 or minute > 59 or seconds > 59:
            raise InvalidRequest(field, f"{value!r} is not a valid time (HH:MM).")

    if seconds:
        raise InvalidRequest(field, "Times are booked to the minute; drop the seconds.")
    return hour * 60 + minute


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def check_duration(value, *, field: str = "duration_minutes") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequest(field, f"{value!r} is not a whole number of minutes.")
    if value <= 0:
        raise InvalidRequest(field, "Duration must be a positive number of minutes.")
    return value


def window_for(start_time, duration_minutes, *, field: Optional[str] = None) -> Window:
    """Window of a visit; `field` overrides the error label (existing rows)."""
    start = to_minutes(start_time, field=field or "start_time")
    end = start + check_duration(duration_minutes, field=field or "duration_minutes")
    if end > MINUTES_PER_DAY:
        raise InvalidRequest(
            field or "start_time", "The visit must end by midnight of the same day."
        )
    return Window(start, end)


def _same(a, b) -> bool:
    # Identifiers may arrive as ints from the ORM and as strings from the wire.
    return str(a) == str(b)


def validate_request(
    proposed: BookingRequest, *, default_duration: int = DEFAULT_DURATION_MINUTES
) -> tuple[date, Window]:
    """Return the proposal's (date, window) or raise InvalidRequest."""
    for field in ("patient_id", "doctor_id", "room_id"):
        value = getattr(proposed, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidRequest(field, "This identifier is required.")

    day = parse_date(proposed.date)
    duration = proposed.duration_minutes
    window = window_for(
        proposed.start_time,
        default_duration if duration is None else duration,
    )
    return day, window


def _shared_resource(proposed: BookingRequest, appt) -> Optional[ConflictReason]:
    if _same(appt.doctor_id, proposed.doctor_id):
        return ConflictReason.DOCTOR_BUSY
    if _same(appt.room_id, proposed.room_id):
        return ConflictReason.ROOM_BUSY
    if _same(appt.patient_id, proposed.patient_id):
        return ConflictReason.PATIENT_DOUBLE_BOOKED
    return None


# ------------------------------------------------------------------#
#                             Checker                                #
# ------------------------------------------------------------------#
def check_conflict(
    proposed: BookingRequest,
    existing: Iterable,
    *,
    default_duration: int = DEFAULT_DURATION_MINUTES,
) -> ConflictResult:
    """Decide whether `proposed` can be booked next to `existing`.

    `existing` may be pre-filtered (scheduled, same date) or not; rows that are
    not scheduled or fall on another date are skipped either way. The first
    colliding row in input order is reported, with the doctor reported before
    the room and the room before the patient when several resources collide.
    """
    default_duration = check_duration(default_duration, field="default_duration")
    day, window = validate_request(proposed, default_duration=default_duration)

    for appt in existing:
        if getattr(appt, "status", BLOCKING_STATUS) != BLOCKING_STATUS:
            continue

        other_id = getattr(appt, "id", None)
        if (
            proposed.appointment_id is not None
            and other_id is not None
            and _same(other_id, proposed.appointment_id)
        ):
            continue

        field = f"appointment {other_id}"
        if parse_date(appt.date, field=field) != day:
            continue

        duration = getattr(appt, "duration_minutes", None)
        other = window_for(
            appt.start_time,
            default_duration if duration is None else duration,
            field=field,
        )
        if not window.overlaps(other):
            continue

        reason = _shared_resource(proposed, appt)
        if reason is not None:
            return Conflict(
                reason=reason,
                with_id=other_id,
                starts_at=format_minutes(other.start),
                ends_at=format_minutes(other.end),
            )

    return NO_CONFLICT
