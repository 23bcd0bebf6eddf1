# room/urls.py
from django.urls import path

from . import views

app_name = "room"

urlpatterns = [
    path("", views.room_collection, name="list"),
    path("<int:pk>/", views.room_detail, name="detail"),
]
