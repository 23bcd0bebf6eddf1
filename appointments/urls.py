# appointments/urls.py
#
# Staff-only JSON API. Mounted under /api/appointments/.
# ------------------------------------------------------------------

from django.urls import path
from . import views

app_name = "appointments"

urlpatterns = [
    # Collection: list (GET) / book (POST)
    path("", views.appointment_collection, name="appointment_list"),
    # Dry-run availability check
    path("check/", views.check_availability, name="check_availability"),

    # Single appointment
    path("<int:pk>/", views.appointment_detail, name="appointment_detail"),
    path("<int:pk>/cancel/", views.cancel, name="cancel_appointment"),
    path("<int:pk>/reschedule/", views.reschedule, name="reschedule_appointment"),

    # Calendar export
    path("doctor/<int:doctor_id>/calendar.ics", views.doctor_calendar, name="doctor_calendar"),
]
