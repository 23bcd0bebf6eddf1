from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from appointments.tests.factories import AppointmentFactory, UserFactory
from room.models import Room


class RoomModelTests(TestCase):
    def test_code_is_upper_cased(self):
        room = Room.objects.create(name="Exam  1", code=" rm-1 ")
        self.assertEqual(room.code, "RM-1")
        self.assertEqual(str(room), "Exam 1 (RM-1)")

    def test_bad_code(self):
        with self.assertRaises(ValidationError):
            Room.objects.create(name="Lab", code="RM 1")


class RoomApiTests(TestCase):
    def setUp(self):
        self.client.force_login(UserFactory())

    def test_create_and_list(self):
        resp = self.client.post(reverse("room:list"), {"name": "Procedure", "code": "proc-2"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["room"]["code"], "PROC-2")
        rooms = self.client.get(reverse("room:list")).json()["rooms"]
        self.assertEqual([r["code"] for r in rooms], ["PROC-2"])

    def test_duplicate_code(self):
        Room.objects.create(name="A", code="RM-9")
        resp = self.client.post(reverse("room:list"), {"name": "B", "code": "rm-9"})
        self.assertEqual(resp.status_code, 400)

    def test_delete_with_appointments_is_409(self):
        appt = AppointmentFactory()
        resp = self.client.delete(reverse("room:detail", args=[appt.room_id]))
        self.assertEqual(resp.status_code, 409)
