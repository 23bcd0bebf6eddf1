"""
patient/models.py
Patient directory record: identity and contact data only, no clinical fields.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.db.models.functions import Lower  # case-insensitive indexes/constraints
from django.utils.translation import gettext_lazy as _

from ClinicFlow.phones import normalize_phone

MOBILE_REGEX = re.compile(r"^\+?\d{7,15}$")


def validate_mobile(value: str) -> None:
    """E.164-like phone validator (+ optional, 7–15 digits)."""
    if value and not MOBILE_REGEX.match(value):
        raise ValidationError(
            _("%(value)s is not a valid phone number."),
            params={"value": value},
        )


def validate_dob(value) -> None:  # noqa: ANN001
    if value and value > date.today():
        raise ValidationError(_("Date of birth cannot be in the future."))


# ------------------------------------------------------------------ #
#                               Model                                 #
# ------------------------------------------------------------------ #
class Patient(models.Model):
    """Patient directory entry referenced by appointments."""

    # --- identity ---
    first_name = models.CharField(_("First Name"), max_length=100)
    last_name = models.CharField(_("Last Name"), max_length=100, db_index=True)
    date_of_birth = models.DateField(
        _("Date of Birth"),
        blank=True,
        null=True,
        validators=[validate_dob],
    )
    health_number = models.CharField(
        _("Health Card Number"),
        max_length=32,
        blank=True,
        help_text=_("Provincial health number; unique when present."),
    )

    # --- contact ---
    phone = models.CharField(
        _("Phone Number"),
        max_length=20,
        validators=[validate_mobile],
        blank=True,
        help_text=_("E.164 format: optional +, 7–15 digits."),
    )
    email = models.EmailField(_("Email Address"), max_length=100, blank=True)

    notes = models.TextField(_("Notes"), blank=True)

    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Patient")
        verbose_name_plural = _("Patients")
        ordering = ["last_name", "first_name", "pk"]
        indexes = [
            models.Index(Lower("last_name"), Lower("first_name"), name="idx_patient_name_lower"),
            models.Index(fields=["date_of_birth"], name="patient_pat_date_of_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["health_number"],
                condition=~Q(health_number=""),
                name="uniq_patient_health_number_nonempty",
            ),
        ]

    # ------------------------------------------------------------------ #
    #                               Hooks                                #
    # ------------------------------------------------------------------ #
    def save(self, *args, **kwargs):
        """Normalize names/contact data before validation and save."""
        self.first_name = " ".join((self.first_name or "").split())
        self.last_name = " ".join((self.last_name or "").split())
        self.health_number = (self.health_number or "").replace(" ", "").upper()

        if self.email:
            self.email = self.email.strip().lower()

        if self.phone:
            self.phone = normalize_phone(self.phone)

        # Enforce model-level validators even if saved programmatically
        self.full_clean()

        super().save(*args, **kwargs)

    # ------------------------------------------------------------------ #
    #                            Properties                              #
    # ------------------------------------------------------------------ #
    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    @property
    def age(self) -> Optional[int]:
        """Exact age in years, or None without a date of birth."""
        if not self.date_of_birth:
            return None
        today = date.today()
        dob = self.date_of_birth
        return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))

    def __str__(self) -> str:
        return self.full_name or f"Patient #{self.pk}"
