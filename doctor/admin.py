from django.contrib import admin
from .models import Doctor

@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    """
    Doctor directory. Availability controls whether new bookings accept the doctor.
    """

    list_display = (
        "full_name",
        "specialty",
        "email",
        "phone",
        "available",
        "upcoming_count",
    )
    list_display_links = ("full_name",)
    list_filter = ("available", "specialty")
    list_editable = ("available",)
    search_fields = ("full_name", "specialty", "phone", "email")
    ordering = ("full_name",)
    list_per_page = 25
    date_hierarchy = "created_at"
    empty_value_display = "-"

    readonly_fields = ("created_at", "updated_at")

    fieldsets = (
        (
            "Identity",
            {
                "fields": (
                    "full_name",
                    "specialty",
                ),
            },
        ),
        (
            "Contact Information",
            {
                "fields": (
                    "email",
                    "phone",
                ),
            },
        ),
        (
            "Booking",
            {
                "fields": ("available",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.display(description="Scheduled visits")
    def upcoming_count(self, obj):
        return obj.appointments.filter(status="scheduled").count()
