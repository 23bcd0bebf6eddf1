# patient/urls.py
from django.urls import path

from . import views

app_name = "patient"

urlpatterns = [
    path("", views.patient_collection, name="list"),
    path("<int:pk>/", views.patient_detail, name="detail"),
]
