# doctor/forms.py

from django import forms
from django.utils.translation import gettext_lazy as _

from ClinicFlow.phones import normalize_phone

from .models import Doctor, phone_validator


class DoctorForm(forms.ModelForm):
    """
    Create a doctor directory entry through the API.
    `available` defaults to True when the request does not mention it.
    """

    phone = forms.CharField(
        required=False,
        label=_("Phone Number"),
        help_text=_("Use international format, e.g. +14165550100."),
    )

    available = forms.NullBooleanField(required=False, label=_("Available for Booking"))

    class Meta:
        model = Doctor
        fields = ["full_name", "email", "specialty", "phone", "available"]
        labels = {
            "full_name": _("Doctor Name"),
            "specialty": _("Specialization"),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["specialty"].required = False

    def clean_phone(self):
        phone = self.cleaned_data.get("phone") or ""
        phone = normalize_phone(phone) if phone else ""
        if phone:
            phone_validator(phone)
        return phone

    def clean_specialty(self):
        return (self.cleaned_data.get("specialty") or "").strip() or "General"

    def clean_available(self):
        value = self.cleaned_data.get("available")
        return True if value is None else value
