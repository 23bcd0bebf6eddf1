# appointments/forms.py

from __future__ import annotations

from datetime import datetime, timedelta

from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from doctor.models import Doctor
from patient.models import Patient
from room.models import Room

from .conflicts import BookingRequest

# Allow booking "now" with a small margin
PAST_MARGIN = timedelta(minutes=1)

TIME_INPUT_FORMATS = ["%H:%M", "%H:%M:%S"]
DATE_INPUT_FORMATS = ["%Y-%m-%d"]


def _local_now() -> datetime:
    """Naïve clinic‑local wall clock, comparable with date + start_time."""
    return timezone.localtime().replace(tzinfo=None)


class _SlotFields(forms.Form):
    """date / start_time / duration shared by booking and rescheduling."""

    date = forms.DateField(input_formats=DATE_INPUT_FORMATS, label=_("Date"))
    start_time = forms.TimeField(input_formats=TIME_INPUT_FORMATS, label=_("Start Time"))
    # Positivity is enforced by the conflict checker so every caller gets the same error
    duration_minutes = forms.IntegerField(
        required=False,
        label=_("Duration (minutes)"),
        help_text=_("Defaults to the clinic's standard visit length."),
    )

    def clean(self):
        cleaned = super().clean()
        day = cleaned.get("date")
        start = cleaned.get("start_time")
        if day and start:
            if start.second or start.microsecond:
                self.add_error("start_time", _("Times are booked to the minute."))
            elif datetime.combine(day, start) < _local_now() - PAST_MARGIN:
                raise ValidationError(_("Cannot book an appointment in the past."))
        return cleaned


# =============================
# Booking Form (staff API)
# =============================
class BookingForm(_SlotFields):
    """
    Wire shape of a booking request. Only checks that the fields parse and the
    referenced directory entries exist; availability is decided by the service.
    """

    patient = forms.ModelChoiceField(queryset=Patient.objects.all(), label=_("Patient"))
    doctor = forms.ModelChoiceField(
        queryset=Doctor.objects.filter(available=True), label=_("Doctor")
    )
    room = forms.ModelChoiceField(queryset=Room.objects.all(), label=_("Room"))
    notes = forms.CharField(required=False, label=_("Notes"))

    def to_booking_request(self) -> BookingRequest:
        data = self.cleaned_data
        return BookingRequest(
            patient_id=data["patient"].pk,
            doctor_id=data["doctor"].pk,
            room_id=data["room"].pk,
            date=data["date"],
            start_time=data["start_time"],
            duration_minutes=data.get("duration_minutes"),
        )


# =============================
# Reschedule Form
# =============================
class RescheduleForm(_SlotFields):
    room = forms.ModelChoiceField(
        queryset=Room.objects.all(),
        required=False,
        label=_("Room"),
        help_text=_("Leave empty to keep the current room."),
    )
