"""
patient/admin.py
Patient directory admin: searchable by name, health number and contact data.
"""

from __future__ import annotations

from typing import Sequence

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from patient.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    # --------------------------- list columns -------------------- #
    list_display: Sequence[str] = (
        "full_name_col",
        "age_col",
        "health_number",
        "phone",
        "email",
        "created_at",
    )
    search_fields: Sequence[str] = (
        "first_name",
        "last_name",
        "health_number",
        "phone",
        "email",
    )
    list_filter: Sequence[str] = ("created_at",)
    ordering: Sequence[str] = ("last_name", "first_name")
    readonly_fields: Sequence[str] = ("created_at", "updated_at")
    list_per_page = 50
    date_hierarchy = "created_at"

    fieldsets = (
        (_("Identity"), {"fields": ("first_name", "last_name", "date_of_birth", "health_number")}),
        (_("Contact"), {"fields": ("phone", "email")}),
        (_("Notes"), {"fields": ("notes",)}),
        (_("Timestamps"), {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    @admin.display(description=_("Name"), ordering="last_name")
    def full_name_col(self, obj: Patient) -> str:
        return obj.full_name

    @admin.display(description=_("Age"))
    def age_col(self, obj: Patient) -> str:
        if obj.age is None:
            return format_html('<span style="color:#6c757d;">—</span>')
        return str(obj.age)
