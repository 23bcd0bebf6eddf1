# doctor/models.py
from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from ClinicFlow.phones import normalize_phone


# ------------------------------------------------------------------ #
#                             Validators                             #
# ------------------------------------------------------------------ #
phone_validator = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Enter a valid phone number (7–15 digits, optional leading +)."),
)

def validate_phone(value: str) -> None:
    phone_validator(value)

# ------------------------------------------------------------------ #
#                               Model                                #
# ------------------------------------------------------------------ #
class Doctor(models.Model):
    """
    A bookable doctor. Appointments reference it; the conflict checker only
    compares its primary key.
    """

    full_name = models.CharField(
        max_length=255,
        verbose_name=_("Full Name"),
    )

    email = models.EmailField(
        max_length=254,
        unique=True,
        verbose_name=_("Email"),
    )

    specialty = models.CharField(
        max_length=100,
        default="General",
        verbose_name=_("Specialty"),
        help_text=_("Doctor’s area of expertise."),
    )

    phone = models.CharField(
        max_length=20,
        blank=True,
        validators=[validate_phone],
        verbose_name=_("Phone Number"),
        help_text=_("E.164‑like: optional +, 7–15 digits."),
    )

    available = models.BooleanField(
        default=True,
        verbose_name=_("Available for Booking"),
        help_text=_("Shows whether this doctor can be booked."),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created At"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated At"))

    class Meta:
        verbose_name = _("Doctor")
        verbose_name_plural = _("Doctors")
        ordering = ["full_name", "pk"]
        indexes = [
            models.Index(fields=["specialty"], name="doctor_doct_special_idx"),
            models.Index(fields=["available", "specialty"], name="doctor_doct_availab_idx"),
        ]

    def clean(self):
        if self.full_name and not self.full_name.strip():
            raise ValidationError({"full_name": _("Full name cannot be blank spaces.")})

    def save(self, *args, **kwargs):
        # Normalise before validation so "+1 (416) 555-0100" passes the phone validator
        if self.full_name:
            self.full_name = " ".join(self.full_name.split()) or self.full_name
        if self.phone:
            self.phone = normalize_phone(self.phone)
        if self.email:
            self.email = self.email.strip().lower()
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.full_name or f"Doctor #{self.pk}"
