# ClinicFlow/urls.py

"""
URL configuration for ClinicFlow project.
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # Appointments: booking, cancellation, rescheduling, calendar export
    path('api/appointments/', include('appointments.urls', namespace='appointments')),

    # Directories
    path('api/doctors/', include('doctor.urls', namespace='doctor')),
    path('api/patients/', include('patient.urls', namespace='patient')),
    path('api/rooms/', include('room.urls', namespace='room')),
]
