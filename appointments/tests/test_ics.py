from datetime import date, datetime, time, timezone as dt_timezone

from django.test import SimpleTestCase, TestCase

from appointments.ics import PRODID, escape_text, fold_line, generate_doctor_calendar
from appointments.models import AppointmentStatus

from .factories import AppointmentFactory, DoctorFactory, PatientFactory, RoomFactory


class EscapeTextTests(SimpleTestCase):
    def test_escapes_special_characters(self):
        self.assertEqual(escape_text("a,b;c\\d\ne"), r"a\,b\;c\\d\ne")


class FoldLineTests(SimpleTestCase):
    def assertFolded(self, folded, original):
        for physical in folded.split("\r\n"):
            self.assertLessEqual(len(physical.encode("utf-8")), 75)
        self.assertEqual(folded.replace("\r\n ", ""), original)

    def test_short_line_is_untouched(self):
        self.assertEqual(fold_line("SUMMARY:Visit"), "SUMMARY:Visit")

    def test_exactly_75_octets_is_untouched(self):
        line = "X" * 75
        self.assertEqual(fold_line(line), line)

    def test_long_line_is_folded(self):
        line = "DESCRIPTION:" + "a" * 200
        folded = fold_line(line)
        self.assertIn("\r\n ", folded)
        self.assertFolded(folded, line)

    def test_multibyte_characters_are_not_split(self):
        line = "SUMMARY:" + "\u00e9\u0644" * 60
        self.assertFolded(fold_line(line), line)


class DoctorCalendarTests(TestCase):
    def setUp(self):
        self.doctor = DoctorFactory(full_name="Dana Smith")
        self.patient = PatientFactory(first_name="Ali", last_name="Hassan")
        self.room = RoomFactory(name="Room 2, East")
        self.now = datetime(2025, 5, 1, 12, 0, tzinfo=dt_timezone.utc)

    def render(self, appointments):
        return generate_doctor_calendar(self.doctor, appointments, now=self.now)

    def test_envelope(self):
        ics = self.render([])
        self.assertTrue(ics.startswith("BEGIN:VCALENDAR\r\nVERSION:2.0\r\n"))
        self.assertIn(f"PRODID:{PRODID}\r\n", ics)
        self.assertIn("X-WR-CALNAME:Dana Smith\r\n", ics)
        self.assertTrue(ics.endswith("END:VCALENDAR\r\n"))
        self.assertNotIn("BEGIN:VEVENT", ics)

    def test_event_lines(self):
        appt = AppointmentFactory(
            doctor=self.doctor,
            patient=self.patient,
            room=self.room,
            date=date(2030, 6, 1),
            start_time=time(9, 0),
            duration_minutes=45,
            notes="Follow-up; bring results",
        )
        ics = self.render([appt])
        self.assertIn(f"UID:{appt.pk}@clinicflow.local\r\n", ics)
        self.assertIn("DTSTAMP:20250501T120000Z\r\n", ics)
        self.assertIn("DTSTART:20300601T090000\r\n", ics)
        self.assertIn("DTEND:20300601T094500\r\n", ics)
        self.assertIn("SUMMARY:Visit with Ali Hassan\r\n", ics)
        self.assertIn("DESCRIPTION:Follow-up\\; bring results\r\n", ics)
        self.assertIn("LOCATION:Room 2\\, East\r\n", ics)

    def test_skips_unscheduled_and_other_doctors(self):
        cancelled = AppointmentFactory(doctor=self.doctor, status=AppointmentStatus.CANCELLED)
        other = AppointmentFactory(start_time=time(10, 0))
        self.assertNotIn("BEGIN:VEVENT", self.render([cancelled, other]))

    def test_no_description_without_notes(self):
        appt = AppointmentFactory(doctor=self.doctor)
        self.assertNotIn("DESCRIPTION:", self.render([appt]))

    def test_long_notes_are_folded(self):
        notes = "Patient reports intermittent headaches over several weeks " * 4
        appt = AppointmentFactory(doctor=self.doctor, notes=notes.strip())
        ics = self.render([appt])
        for line in ics.split("\r\n"):
            self.assertLessEqual(len(line.encode("utf-8")), 75)
        self.assertIn(f"DESCRIPTION:{notes.strip()}", ics.replace("\r\n ", ""))
