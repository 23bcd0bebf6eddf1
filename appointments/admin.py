# appointments/admin.py

from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import Appointment, AppointmentStatus


# ---------------------------
# Custom Filters
# ---------------------------
class AppointmentDateRangeFilter(admin.SimpleListFilter):
    title = "Time Range"
    parameter_name = "time_range"

    def lookups(self, request, model_admin):
        return [
            ('past', 'Past'),
            ('today', 'Today'),
            ('future', 'Future'),
        ]

    def queryset(self, request, queryset):
        value = self.value()
        if not value:
            return queryset
        today = timezone.localdate()
        if value == 'past':
            return queryset.filter(date__lt=today)
        if value == 'today':
            return queryset.filter(date=today)
        if value == 'future':
            return queryset.filter(date__gt=today)
        return queryset


# ---------------------------
# Appointment Admin
# ---------------------------
@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = [
        'get_patient_name',
        'doctor',
        'room',
        'date',
        'start_time',
        'duration_minutes',
        'colored_status',
    ]
    list_filter = [
        'doctor',
        'room',
        'status',
        AppointmentDateRangeFilter,
    ]
    search_fields = [
        'patient__first_name',
        'patient__last_name',
        'doctor__full_name',
        'room__code',
        'notes',
    ]
    list_select_related = ('patient', 'doctor', 'room')
    date_hierarchy = 'date'
    ordering = ['-date', '-start_time']
    readonly_fields = ('created_at', 'updated_at')
    # Slot and status changes go through the booking service (cancel, reschedule)
    locked_fields = ('patient', 'doctor', 'room', 'date', 'start_time', 'duration_minutes', 'status')
    list_per_page = 50

    actions = ['mark_completed', 'mark_no_show', 'mark_cancelled']

    def has_add_permission(self, request):
        # New bookings need the locked check-and-commit of the API
        return False

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return self.readonly_fields
        return self.locked_fields + self.readonly_fields

    # ----- Display helpers -----
    @admin.display(description='Patient Name', ordering='patient__last_name')
    def get_patient_name(self, obj):
        return obj.patient.full_name or '—'

    @admin.display(description='Status', ordering='status')
    def colored_status(self, obj):
        color_map = {
            AppointmentStatus.SCHEDULED: '#0d6efd',  # blue
            AppointmentStatus.COMPLETED: '#28a745',  # green
            AppointmentStatus.CANCELLED: '#dc3545',  # red
            AppointmentStatus.NO_SHOW:   '#ffc107',  # amber
        }
        color = color_map.get(obj.status, '#6c757d')
        return format_html(
            '<span style="padding:2px 6px; border-radius:4px; '
            'background:{}; color:#fff; font-size:12px;">{}</span>',
            color,
            obj.get_status_display(),
        )

    # ----- Actions -----
    # Only scheduled rows move; cancelled is terminal.
    @admin.action(description='Mark selected appointments as COMPLETED')
    def mark_completed(self, request, queryset):
        updated = queryset.scheduled().update(status=AppointmentStatus.COMPLETED)
        self.message_user(request, f"{updated} appointment(s) marked as completed.")

    @admin.action(description='Mark selected appointments as NO-SHOW')
    def mark_no_show(self, request, queryset):
        updated = queryset.scheduled().update(status=AppointmentStatus.NO_SHOW)
        self.message_user(request, f"{updated} appointment(s) marked as no-show.")

    @admin.action(description='Mark selected appointments as CANCELLED')
    def mark_cancelled(self, request, queryset):
        updated = queryset.scheduled().update(status=AppointmentStatus.CANCELLED)
        self.message_user(request, f"{updated} appointment(s) marked as cancelled.")
