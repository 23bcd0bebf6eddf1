"""
appointments/services.py
Check‑and‑commit booking workflow on top of an AppointmentStore.

Every write runs as one unit of work:
    atomic → lock doctor/room/patient → read the day → check_conflict → write
A write race (unique‑constraint hit, lock timeout) rolls the unit back and the
whole unit is re‑run against freshly read data, up to
settings.CLINICFLOW_BOOKING_ATTEMPTS times. Any other store failure, or running
out of attempts, raises StoreUnavailable with nothing committed.
"""

from __future__ import annotations

import logging
from typing import Callable, Final, Optional, TypeVar, Union

from django.conf import settings
from django.db import DatabaseError, IntegrityError, OperationalError
from django.utils import timezone

from .conflicts import (
    BookingRequest,
    Conflict,
    ConflictResult,
    check_conflict,
    format_minutes,
    parse_date,
    to_minutes,
    validate_request,
)
from .exceptions import InvalidTransition, StoreUnavailable
from .models import Appointment, AppointmentStatus, default_duration
from .store import AppointmentStore, DjangoAppointmentStore

logger: Final[logging.Logger] = logging.getLogger(__name__)

T = TypeVar("T")


# ------------------------------------------------------------------ #
#                          Unit‑of‑work runner                        #
# ------------------------------------------------------------------ #
def _run_serialized(
    store: AppointmentStore,
    unit: Callable[[], T],
    *,
    what: str,
    attempts: Optional[int] = None,
) -> T:
    total = attempts or settings.CLINICFLOW_BOOKING_ATTEMPTS
    last_exc: Optional[Exception] = None

    for n in range(1, total + 1):
        try:
            with store.atomic():
                return unit()
        except (IntegrityError, OperationalError) as exc:
            last_exc = exc
            logger.warning(
                "%s: attempt %d/%d lost a write race (%s); retrying with fresh data.",
                what, n, total, exc,
            )
        except DatabaseError as exc:
            logger.error("%s: appointment store failed: %s", what, exc)
            raise StoreUnavailable(f"{what} failed: the appointment store is unavailable.") from exc

    logger.error("%s: giving up after %d attempts.", what, total)
    raise StoreUnavailable(
        f"{what} failed after {total} attempts; please try again."
    ) from last_exc


def _stamped(notes: str, label: str, reason: str, by: str) -> str:
    stamp = timezone.localtime().strftime("%Y-%m-%d %H:%M")
    who = f" by {by}" if by else ""
    line = f"[{label} {stamp}{who}] {reason}".rstrip()
    return f"{notes}\n{line}".strip()


# ------------------------------------------------------------------ #
#                               Booking                               #
# ------------------------------------------------------------------ #
def check_booking(
    request: BookingRequest, *, store: Optional[AppointmentStore] = None
) -> ConflictResult:
    """Dry run: would `request` be accepted right now? Nothing is written."""
    store = store or DjangoAppointmentStore()
    default = default_duration()
    validate_request(request, default_duration=default)

    try:
        with store.atomic():
            existing = store.find_by_date(request.date)
    except DatabaseError as exc:
        logger.error("Availability check failed: %s", exc)
        raise StoreUnavailable("Availability check failed: the appointment store is unavailable.") from exc

    return check_conflict(request, existing, default_duration=default)


def book_appointment(
    request: BookingRequest,
    *,
    notes: str = "",
    store: Optional[AppointmentStore] = None,
    attempts: Optional[int] = None,
) -> Union[Appointment, Conflict]:
    """Book `request` or return the Conflict that prevents it.

    Raises InvalidRequest for a malformed proposal and StoreUnavailable when
    the store cannot be read or written.
    """
    store = store or DjangoAppointmentStore()
    default = default_duration()
    validate_request(request, default_duration=default)

    def unit() -> Union[Appointment, Conflict]:
        store.lock(request)
        existing = store.find_by_date(request.date)
        result = check_conflict(request, existing, default_duration=default)
        if isinstance(result, Conflict):
            return result
        return store.insert(request, notes=notes)

    outcome = _run_serialized(store, unit, what="Booking", attempts=attempts)

    if isinstance(outcome, Conflict):
        logger.info(
            "Booking rejected (%s with appointment %s): doctor=%s room=%s patient=%s %s %s",
            outcome.reason.value, outcome.with_id,
            request.doctor_id, request.room_id, request.patient_id,
            request.date, request.start_time,
        )
    else:
        logger.info(
            "Booked appointment %s: doctor=%s room=%s patient=%s %s %s (%d min)",
            outcome.pk, outcome.doctor_id, outcome.room_id, outcome.patient_id,
            outcome.date, outcome.start_time.strftime("%H:%M"), outcome.duration_minutes,
        )
    return outcome


# ------------------------------------------------------------------ #
#                             Lifecycle                               #
# ------------------------------------------------------------------ #
def cancel_appointment(
    pk,
    *,
    reason: str = "",
    by: str = "",
    store: Optional[AppointmentStore] = None,
    attempts: Optional[int] = None,
) -> Appointment:
    """scheduled → cancelled. Cancelling a cancelled appointment is a no‑op."""
    store = store or DjangoAppointmentStore()

    def unit() -> Appointment:
        appt = store.get_for_update(pk)
        if appt.status == AppointmentStatus.CANCELLED:
            return appt
        if appt.status != AppointmentStatus.SCHEDULED:
            raise InvalidTransition(
                f"Cannot cancel an appointment that is {appt.get_status_display().lower()}."
            )
        store.lock(appt.as_booking_request())
        notes = _stamped(appt.notes, "Cancelled", reason.strip(), by) if reason.strip() else None
        return store.set_status(appt, AppointmentStatus.CANCELLED, notes=notes)

    appt = _run_serialized(store, unit, what="Cancellation", attempts=attempts)
    logger.info("Appointment %s is %s.", appt.pk, appt.status)
    return appt


def reschedule_appointment(
    pk,
    *,
    date,
    start_time,
    duration_minutes: Optional[int] = None,
    room_id=None,
    by: str = "",
    store: Optional[AppointmentStore] = None,
    attempts: Optional[int] = None,
) -> Union[Appointment, Conflict]:
    """Cancel `pk` and book the new slot in one unit of work.

    The old appointment is excluded from the conflict check, so moving a visit
    by a few minutes does not collide with itself. On Conflict nothing changes.
    """
    store = store or DjangoAppointmentStore()
    default = default_duration()

    def unit() -> Union[Appointment, Conflict]:
        old = store.get_for_update(pk)
        if old.status != AppointmentStatus.SCHEDULED:
            raise InvalidTransition(
                f"Only scheduled appointments can be rescheduled (this one is {old.status})."
            )

        proposal = BookingRequest(
            patient_id=old.patient_id,
            doctor_id=old.doctor_id,
            room_id=old.room_id if room_id is None else room_id,
            date=date,
            start_time=start_time,
            duration_minutes=old.duration_minutes if duration_minutes is None else duration_minutes,
            appointment_id=old.pk,
        )
        validate_request(proposal, default_duration=default)
        store.lock(proposal)

        existing = store.find_by_date(proposal.date)
        result = check_conflict(proposal, existing, default_duration=default)
        if isinstance(result, Conflict):
            return result

        original_notes = old.notes
        moved_to = f"moved to {parse_date(proposal.date)} {format_minutes(to_minutes(proposal.start_time))}"
        store.set_status(
            old,
            AppointmentStatus.CANCELLED,
            notes=_stamped(original_notes, "Rescheduled", moved_to, by),
        )
        new = BookingRequest(
            patient_id=proposal.patient_id,
            doctor_id=proposal.doctor_id,
            room_id=proposal.room_id,
            date=proposal.date,
            start_time=proposal.start_time,
            duration_minutes=proposal.duration_minutes,
        )
        return store.insert(new, notes=original_notes)

    outcome = _run_serialized(store, unit, what="Reschedule", attempts=attempts)
    if isinstance(outcome, Conflict):
        logger.info("Reschedule of %s rejected: %s", pk, outcome.reason.value)
    else:
        logger.info("Appointment %s rescheduled as %s.", pk, outcome.pk)
    return outcome


def remove_appointment(
    pk, *, store: Optional[AppointmentStore] = None, attempts: Optional[int] = None
) -> None:
    """Administrative hard delete, independent of the booking policy."""
    store = store or DjangoAppointmentStore()

    def unit() -> None:
        store.remove(store.get_for_update(pk))

    _run_serialized(store, unit, what="Removal", attempts=attempts)
    logger.info("Appointment %s removed.", pk)
