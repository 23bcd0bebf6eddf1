# appointments/tests/factories.py
from datetime import time, timedelta

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone
from factory.django import DjangoModelFactory

from appointments.models import Appointment, AppointmentStatus
from doctor.models import Doctor
from patient.models import Patient
from room.models import Room

User = get_user_model()


def next_week():
    return timezone.localdate() + timedelta(days=7)


class UserFactory(DjangoModelFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user{n}")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    is_staff = True
    password = factory.django.Password("testpass123")


class DoctorFactory(DjangoModelFactory):
    class Meta:
        model = Doctor

    full_name = factory.Faker("name")
    email = factory.Sequence(lambda n: f"doctor{n}@clinic.example")
    specialty = factory.Iterator(["General", "Cardiology", "Dermatology"])
    available = True


class PatientFactory(DjangoModelFactory):
    class Meta:
        model = Patient

    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    date_of_birth = factory.Faker("date_of_birth", minimum_age=1, maximum_age=90)


class RoomFactory(DjangoModelFactory):
    class Meta:
        model = Room

    name = factory.Sequence(lambda n: f"Exam room {n}")
    code = factory.Sequence(lambda n: f"RM-{100 + n}")


class AppointmentFactory(DjangoModelFactory):
    class Meta:
        model = Appointment

    patient = factory.SubFactory(PatientFactory)
    doctor = factory.SubFactory(DoctorFactory)
    room = factory.SubFactory(RoomFactory)
    date = factory.LazyFunction(next_week)
    start_time = time(9, 0)
    duration_minutes = 30
    status = AppointmentStatus.SCHEDULED
