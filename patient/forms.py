"""
patient/forms.py
API form for patient directory entries; normalises before model validation.
"""

from __future__ import annotations

from typing import Optional

from django import forms
from django.utils.translation import gettext_lazy as _

from ClinicFlow.phones import normalize_phone
from patient.models import Patient


# --------------------------------------------------------------- #
#                Utilities for normalization                      #
# --------------------------------------------------------------- #
def _collapse_ws(text: Optional[str]) -> str:
    if not text:
        return ""
    return " ".join(text.split()).strip()


class PatientForm(forms.ModelForm):
    class Meta:
        model = Patient
        fields = [
            "first_name",
            "last_name",
            "date_of_birth",
            "health_number",
            "phone",
            "email",
            "notes",
        ]
        labels = {
            "health_number": _("Health Card Number"),
        }

    def clean_first_name(self) -> str:
        return _collapse_ws(self.cleaned_data.get("first_name"))

    def clean_last_name(self) -> str:
        return _collapse_ws(self.cleaned_data.get("last_name"))

    def clean_email(self) -> str:
        return (self.cleaned_data.get("email") or "").strip().lower()

    def clean_phone(self) -> str:
        phone = self.cleaned_data.get("phone") or ""
        return normalize_phone(phone) if phone else ""

    def clean_health_number(self) -> str:
        return (self.cleaned_data.get("health_number") or "").replace(" ", "").upper()
