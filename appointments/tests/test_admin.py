from datetime import time

from django.test import TestCase
from django.urls import reverse

from appointments.models import Appointment, AppointmentStatus

from .factories import AppointmentFactory, UserFactory


class AppointmentAdminTests(TestCase):
    def setUp(self):
        self.client.force_login(UserFactory(is_superuser=True))
        self.scheduled = AppointmentFactory()
        self.cancelled = AppointmentFactory(status=AppointmentStatus.CANCELLED)

    def test_changelist_renders(self):
        resp = self.client.get(reverse("admin:appointments_appointment_changelist"))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Scheduled")

    def test_mark_completed_only_moves_scheduled_rows(self):
        self.client.post(
            reverse("admin:appointments_appointment_changelist"),
            {
                "action": "mark_completed",
                "_selected_action": [self.scheduled.pk, self.cancelled.pk],
            },
        )
        statuses = dict(Appointment.objects.values_list("pk", "status"))
        self.assertEqual(statuses[self.scheduled.pk], AppointmentStatus.COMPLETED)
        self.assertEqual(statuses[self.cancelled.pk], AppointmentStatus.CANCELLED)

    def test_change_form_cannot_reopen_a_cancelled_appointment(self):
        url = reverse("admin:appointments_appointment_change", args=[self.cancelled.pk])
        resp = self.client.post(
            url,
            {
                "status": AppointmentStatus.SCHEDULED,
                "date": self.cancelled.date.isoformat(),
                "start_time": "10:00",
                "notes": "edited",
            },
        )
        self.assertEqual(resp.status_code, 302)
        self.cancelled.refresh_from_db()
        self.assertEqual(self.cancelled.status, AppointmentStatus.CANCELLED)
        self.assertEqual(self.cancelled.start_time, time(9, 0))
        self.assertEqual(self.cancelled.notes, "edited")

    def test_change_form_cannot_move_a_scheduled_slot(self):
        url = reverse("admin:appointments_appointment_change", args=[self.scheduled.pk])
        self.client.post(url, {"start_time": "15:00", "notes": "moved?"})
        self.scheduled.refresh_from_db()
        self.assertEqual(self.scheduled.start_time, time(9, 0))

    def test_add_is_disabled(self):
        resp = self.client.get(reverse("admin:appointments_appointment_add"))
        self.assertEqual(resp.status_code, 403)
