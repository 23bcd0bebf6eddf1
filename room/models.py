# room/models.py
from __future__ import annotations

from django.core.validators import RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

room_code_validator = RegexValidator(
    regex=r"^[A-Z0-9][A-Z0-9\-]{0,19}$",
    message=_("Room code: letters, digits and dashes (max 20)."),
)


class Room(models.Model):
    """Consultation room. Bookable like a doctor: one visit at a time."""

    name = models.CharField(_("Name"), max_length=100)
    code = models.CharField(
        _("Code"),
        max_length=20,
        unique=True,
        validators=[room_code_validator],
        help_text=_("Short unique code, e.g. RM-101."),
    )
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["code"]

    def save(self, *args, **kwargs):
        self.name = " ".join((self.name or "").split())
        self.code = (self.code or "").strip().upper()
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"
