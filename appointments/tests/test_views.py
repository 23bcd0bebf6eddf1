import json
from datetime import time, timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from appointments.models import Appointment, AppointmentStatus

from .factories import (
    AppointmentFactory,
    DoctorFactory,
    PatientFactory,
    RoomFactory,
    UserFactory,
)


class ApiTestCase(TestCase):
    def setUp(self):
        self.staff = UserFactory(username="reception")
        self.client.force_login(self.staff)
        self.doctor = DoctorFactory()
        self.room = RoomFactory()
        self.patient = PatientFactory()
        self.day = timezone.localdate() + timedelta(days=5)

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def payload(self, **overrides):
        data = {
            "patient": self.patient.pk,
            "doctor": self.doctor.pk,
            "room": self.room.pk,
            "date": self.day.isoformat(),
            "start_time": "09:00",
            "duration_minutes": 30,
        }
        data.update(overrides)
        return data


class PermissionTests(ApiTestCase):
    def test_anonymous_gets_401(self):
        self.client.logout()
        resp = self.client.get(reverse("appointments:appointment_list"))
        self.assertEqual(resp.status_code, 401)
        self.assertFalse(resp.json()["success"])

    def test_non_staff_gets_403(self):
        self.client.force_login(UserFactory(is_staff=False))
        resp = self.client.get(reverse("appointments:appointment_list"))
        self.assertEqual(resp.status_code, 403)

    def test_wrong_method(self):
        resp = self.client.put(reverse("appointments:appointment_list"))
        self.assertEqual(resp.status_code, 405)


class BookingApiTests(ApiTestCase):
    url_name = "appointments:appointment_list"

    def test_book_returns_201(self):
        resp = self.post_json(reverse(self.url_name), self.payload(notes="New patient"))
        self.assertEqual(resp.status_code, 201)
        body = resp.json()["appointment"]
        self.assertEqual(body["start_time"], "09:00")
        self.assertEqual(body["end_time"], "09:30")
        self.assertEqual(body["room_name"], self.room.name)
        self.assertEqual(body["notes"], "New patient")
        self.assertEqual(body["status"], AppointmentStatus.SCHEDULED)

    def test_form_encoded_body_is_accepted(self):
        resp = self.client.post(reverse(self.url_name), self.payload())
        self.assertEqual(resp.status_code, 201)

    def test_conflict_returns_409(self):
        existing = AppointmentFactory(doctor=self.doctor, date=self.day, start_time=time(9, 0))
        resp = self.post_json(reverse(self.url_name), self.payload(start_time="09:15"))
        self.assertEqual(resp.status_code, 409)
        body = resp.json()
        self.assertEqual(body["reason"], "doctor_busy")
        self.assertEqual(body["conflict_with"], existing.pk)
        self.assertEqual(body["conflict_start"], "09:00")
        self.assertEqual(body["conflict_end"], "09:30")
        self.assertEqual(Appointment.objects.count(), 1)

    def test_zero_duration_is_400(self):
        resp = self.post_json(reverse(self.url_name), self.payload(duration_minutes=0))
        self.assertEqual(resp.status_code, 400)
        self.assertIn("duration_minutes", resp.json()["errors"])

    def test_past_slot_is_400(self):
        yesterday = timezone.localdate() - timedelta(days=1)
        resp = self.post_json(reverse(self.url_name), self.payload(date=yesterday.isoformat()))
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Cannot book an appointment in the past.", resp.json()["errors"]["__all__"])

    def test_unavailable_doctor_is_400(self):
        off_duty = DoctorFactory(available=False)
        resp = self.post_json(reverse(self.url_name), self.payload(doctor=off_duty.pk))
        self.assertEqual(resp.status_code, 400)
        self.assertIn("doctor", resp.json()["errors"])

    def test_malformed_json_is_400(self):
        resp = self.client.post(
            reverse(self.url_name), data="{not json", content_type="application/json"
        )
        self.assertEqual(resp.status_code, 400)

    def test_availability_check(self):
        url = reverse("appointments:check_availability")
        self.assertTrue(self.post_json(url, self.payload()).json()["available"])

        AppointmentFactory(room=self.room, date=self.day, start_time=time(9, 0))
        body = self.post_json(url, self.payload(start_time="09:20")).json()
        self.assertFalse(body["available"])
        self.assertEqual(body["reason"], "room_busy")
        self.assertEqual(Appointment.objects.count(), 1)


class ListApiTests(ApiTestCase):
    def test_filters(self):
        mine = AppointmentFactory(doctor=self.doctor, date=self.day)
        AppointmentFactory(date=self.day, start_time=time(10, 0))
        AppointmentFactory(doctor=self.doctor, date=self.day + timedelta(days=1))

        url = reverse("appointments:appointment_list")
        body = self.client.get(url, {"doctor": self.doctor.pk, "date": self.day.isoformat()}).json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["appointments"][0]["id"], mine.pk)

    def test_status_filter(self):
        AppointmentFactory(status=AppointmentStatus.CANCELLED)
        AppointmentFactory(start_time=time(11, 0))
        url = reverse("appointments:appointment_list")
        self.assertEqual(self.client.get(url, {"status": "cancelled"}).json()["count"], 1)
        self.assertEqual(self.client.get(url).json()["count"], 2)
        self.assertEqual(self.client.get(url, {"status": "archived"}).status_code, 400)

    def test_bad_filters_are_400(self):
        url = reverse("appointments:appointment_list")
        self.assertEqual(self.client.get(url, {"doctor": "abc"}).status_code, 400)
        self.assertEqual(self.client.get(url, {"date": "01/06/2025"}).status_code, 400)


class LifecycleApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.appt = AppointmentFactory(
            doctor=self.doctor, room=self.room, patient=self.patient, date=self.day
        )

    def test_detail(self):
        resp = self.client.get(reverse("appointments:appointment_detail", args=[self.appt.pk]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["appointment"]["patient_id"], self.patient.pk)

    def test_detail_missing_is_404(self):
        resp = self.client.get(reverse("appointments:appointment_detail", args=[999999]))
        self.assertEqual(resp.status_code, 404)

    def test_cancel(self):
        resp = self.post_json(
            reverse("appointments:cancel_appointment", args=[self.appt.pk]),
            {"reason": "Sick"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["appointment"]["status"], AppointmentStatus.CANCELLED)
        self.assertIn("Sick", resp.json()["appointment"]["notes"])

    def test_cancel_completed_is_409(self):
        Appointment.objects.filter(pk=self.appt.pk).update(status=AppointmentStatus.COMPLETED)
        resp = self.post_json(reverse("appointments:cancel_appointment", args=[self.appt.pk]), {})
        self.assertEqual(resp.status_code, 409)

    def test_reschedule(self):
        resp = self.post_json(
            reverse("appointments:reschedule_appointment", args=[self.appt.pk]),
            {"date": self.day.isoformat(), "start_time": "09:10"},
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["replaces"], self.appt.pk)
        self.assertEqual(body["appointment"]["start_time"], "09:10")

    def test_reschedule_conflict_is_409(self):
        AppointmentFactory(patient=self.patient, date=self.day, start_time=time(13, 0))
        resp = self.post_json(
            reverse("appointments:reschedule_appointment", args=[self.appt.pk]),
            {"date": self.day.isoformat(), "start_time": "12:45"},
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["reason"], "patient_double_booked")

    def test_delete_requires_superuser(self):
        url = reverse("appointments:appointment_detail", args=[self.appt.pk])
        self.assertEqual(self.client.delete(url).status_code, 403)

        self.client.force_login(UserFactory(is_superuser=True))
        resp = self.client.delete(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["deleted_id"], self.appt.pk)
        self.assertFalse(Appointment.objects.filter(pk=self.appt.pk).exists())


class CalendarApiTests(ApiTestCase):
    def test_calendar_download(self):
        AppointmentFactory(doctor=self.doctor, date=self.day)
        AppointmentFactory(doctor=self.doctor, date=self.day, start_time=time(15, 0),
                           status=AppointmentStatus.CANCELLED)
        resp = self.client.get(reverse("appointments:doctor_calendar", args=[self.doctor.pk]))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp["Content-Type"].startswith("text/calendar"))
        self.assertIn(f'doctor-{self.doctor.pk}.ics', resp["Content-Disposition"])
        self.assertEqual(resp.content.decode().count("BEGIN:VEVENT"), 1)

    def test_calendar_range(self):
        AppointmentFactory(doctor=self.doctor, date=self.day)
        url = reverse("appointments:doctor_calendar", args=[self.doctor.pk])
        later = (self.day + timedelta(days=1)).isoformat()
        self.assertNotIn("BEGIN:VEVENT", self.client.get(url, {"from": later}).content.decode())
        self.assertEqual(self.client.get(url, {"to": "someday"}).status_code, 400)
