# appointments/models.py
#
# Clinic‑local wall‑clock scheduling record.
# ------------------------------------------------------------------
# • date + start_time are naïve local values (no timezone), minute resolution.
# • Each row carries its own duration; new rows default to
#   settings.CLINICFLOW_APPOINTMENT_MINUTES.
# • Only SCHEDULED rows block a slot; cancelled ones are rebookable.
# • Exact‑slot uniqueness per doctor / room / patient for SCHEDULED rows is a
#   DB‑level backstop; partial overlaps are caught by conflicts.check_conflict.
# ------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime, timedelta

from django.conf import settings
from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from doctor.models import Doctor
from patient.models import Patient
from room.models import Room

from .conflicts import BookingRequest, Conflict, check_conflict
from .exceptions import InvalidRequest


def default_duration() -> int:
    return settings.CLINICFLOW_APPOINTMENT_MINUTES


# ------------------------------------------------------------------#
#                            Choice enums                            #
# ------------------------------------------------------------------#
class AppointmentStatus(models.TextChoices):
    SCHEDULED = "scheduled", _("Scheduled")
    CANCELLED = "cancelled", _("Cancelled")
    COMPLETED = "completed", _("Completed")
    NO_SHOW = "no_show", _("No‑show")


_SCHEDULED = Q(status=AppointmentStatus.SCHEDULED)
_MODEL_FIELDS = ("date", "start_time", "duration_minutes")


class AppointmentQuerySet(models.QuerySet):
    def scheduled(self):
        return self.filter(_SCHEDULED)

    def on_date(self, day):
        return self.filter(date=day)


# ------------------------------------------------------------------#
#                              Appointment                           #
# ------------------------------------------------------------------#
class Appointment(models.Model):
    """Pure scheduling record – no clinical data."""

    patient = models.ForeignKey(
        Patient, on_delete=models.PROTECT, related_name="appointments"
    )
    doctor = models.ForeignKey(
        Doctor, on_delete=models.PROTECT, related_name="appointments"
    )
    room = models.ForeignKey(
        Room, on_delete=models.PROTECT, related_name="appointments"
    )

    date = models.DateField(_("Date"), db_index=True)
    start_time = models.TimeField(_("Start Time"))
    duration_minutes = models.PositiveSmallIntegerField(
        _("Duration (minutes)"),
        default=default_duration,
        validators=[MinValueValidator(1), MaxValueValidator(24 * 60)],
    )

    notes = models.TextField(_("Notes"), blank=True)
    status = models.CharField(
        max_length=20,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED,
        db_index=True,
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AppointmentQuerySet.as_manager()

    class Meta:
        ordering = ["date", "start_time", "pk"]
        constraints = [
            models.CheckConstraint(
                condition=Q(duration_minutes__gt=0),
                name="appointment_duration_positive",
            ),
            # Exact same start for the same resource on the same day
            # (does NOT consider non‑scheduled rows; allows re‑booking)
            models.UniqueConstraint(
                fields=["doctor", "date", "start_time"],
                condition=_SCHEDULED,
                name="uq_doctor_slot_scheduled",
            ),
            models.UniqueConstraint(
                fields=["room", "date", "start_time"],
                condition=_SCHEDULED,
                name="uq_room_slot_scheduled",
            ),
            models.UniqueConstraint(
                fields=["patient", "date", "start_time"],
                condition=_SCHEDULED,
                name="uq_patient_slot_scheduled",
            ),
        ]
        indexes = [
            models.Index(fields=["date", "status"], name="idx_appt_date_status"),
            models.Index(fields=["doctor", "date", "status"], name="idx_appt_doc_date_status"),
        ]

    # ----------------------------- Clean ---------------------------#
    def clean(self):
        """Admin/form path: same overlap rule as the booking service."""
        if self.status != AppointmentStatus.SCHEDULED:
            return
        if not (self.date and self.start_time and self.duration_minutes):
            return
        if not (self.doctor_id and self.room_id and self.patient_id):
            return

        try:
            result = check_conflict(
                self.as_booking_request(),
                Appointment.objects.scheduled().on_date(self.date),
                default_duration=default_duration(),
            )
        except InvalidRequest as exc:
            field = exc.field if exc.field in _MODEL_FIELDS else NON_FIELD_ERRORS
            raise ValidationError({field: exc.message}) from exc

        if isinstance(result, Conflict):
            raise ValidationError({"start_time": result.message})

    # ---------------------------- Helpers --------------------------#
    def as_booking_request(self) -> BookingRequest:
        return BookingRequest(
            patient_id=self.patient_id,
            doctor_id=self.doctor_id,
            room_id=self.room_id,
            date=self.date,
            start_time=self.start_time,
            duration_minutes=self.duration_minutes,
            appointment_id=self.pk,
        )

    @property
    def starts_at(self) -> datetime:
        """Naïve local datetime of the start of the visit."""
        return datetime.combine(self.date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(minutes=self.duration_minutes)

    @property
    def is_scheduled(self) -> bool:
        return self.status == AppointmentStatus.SCHEDULED

    # ---------------------------- Dunder ---------------------------#
    def __str__(self):
        return (
            f"{self.patient} → {self.doctor} @ {self.room} "
            f"{self.date:%Y-%m-%d} {self.start_time:%H:%M} ({self.status})"
        )
