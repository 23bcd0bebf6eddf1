# appointments/store.py
#
# Appointment store capability used by the booking service.
# ------------------------------------------------------------------
# The service never touches the ORM directly; it is handed a store. The Django
# implementation below serializes check‑and‑commit per resource by locking the
# doctor, room and patient rows (always in that order) with SELECT ... FOR UPDATE
# inside the caller's transaction.
# ------------------------------------------------------------------

from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import time
from typing import Protocol, Sequence

from django.db import transaction

from doctor.models import Doctor
from patient.models import Patient
from room.models import Room

from .conflicts import BookingRequest, parse_date, to_minutes
from .exceptions import AppointmentNotFound, InvalidRequest
from .models import Appointment, AppointmentStatus, default_duration


class AppointmentStore(Protocol):
    def atomic(self) -> AbstractContextManager: ...

    def lock(self, request: BookingRequest) -> None: ...

    def find_by_date(self, day) -> Sequence[Appointment]: ...

    def insert(self, request: BookingRequest, *, notes: str = "") -> Appointment: ...

    def get_for_update(self, pk) -> Appointment: ...

    def set_status(self, appointment: Appointment, status: str, *, notes: str | None = None) -> Appointment: ...

    def remove(self, appointment: Appointment) -> None: ...


class DjangoAppointmentStore:
    """ORM-backed store. Every method expects to run inside `atomic()`."""

    def __init__(self, using: str | None = None):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    # ------------------------------------------------------------ #
    #                           Locking                            #
    # ------------------------------------------------------------ #
    def lock(self, request: BookingRequest) -> None:
        """Serialize concurrent bookings touching the same doctor/room/patient."""
        for field, model in (
            ("doctor_id", Doctor),
            ("room_id", Room),
            ("patient_id", Patient),
        ):
            pk = getattr(request, field)
            try:
                model.objects.using(self.using).select_for_update().only("pk").get(pk=pk)
            except (model.DoesNotExist, ValueError, TypeError):
                raise InvalidRequest(field, f"Unknown {model._meta.model_name} {pk!r}.") from None

    # ------------------------------------------------------------ #
    #                         Reads / writes                       #
    # ------------------------------------------------------------ #
    def find_by_date(self, day) -> list[Appointment]:
        return list(
            Appointment.objects.using(self.using)
            .scheduled()
            .on_date(parse_date(day))
            .order_by("start_time", "pk")
        )

    def insert(self, request: BookingRequest, *, notes: str = "") -> Appointment:
        minutes = to_minutes(request.start_time)
        appt = Appointment(
            patient_id=request.patient_id,
            doctor_id=request.doctor_id,
            room_id=request.room_id,
            date=parse_date(request.date),
            start_time=time(minutes // 60, minutes % 60),
            duration_minutes=(
                default_duration()
                if request.duration_minutes is None
                else request.duration_minutes
            ),
            notes=notes,
            status=AppointmentStatus.SCHEDULED,
        )
        appt.save(using=self.using, force_insert=True)
        return appt

    def get_for_update(self, pk) -> Appointment:
        try:
            return (
                Appointment.objects.using(self.using)
                .select_for_update()
                .get(pk=pk)
            )
        except (Appointment.DoesNotExist, ValueError, TypeError):
            raise AppointmentNotFound(f"Appointment {pk!r} not found.") from None

    def set_status(self, appointment: Appointment, status: str, *, notes: str | None = None) -> Appointment:
        appointment.status = status
        fields = ["status", "updated_at"]
        if notes is not None:
            appointment.notes = notes
            fields.append("notes")
        appointment.save(using=self.using, update_fields=fields)
        return appointment

    def remove(self, appointment: Appointment) -> None:
        appointment.delete(using=self.using)
