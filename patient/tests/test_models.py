from datetime import date, timedelta

from django.core.exceptions import ValidationError
from django.test import TestCase

from ClinicFlow.phones import normalize_phone
from patient.models import Patient


class NormalizePhoneTests(TestCase):
    def test_local_number_gets_country_code(self):
        self.assertEqual(normalize_phone("(416) 555-0100"), "+14165550100")

    def test_unparseable_number_is_kept_compact(self):
        self.assertEqual(normalize_phone("abc 12"), "abc12")


class PatientModelTests(TestCase):
    def test_save_normalises(self):
        p = Patient.objects.create(
            first_name=" Ali ", last_name="Hassan  Jr", health_number="1234 567 890 ab",
            phone="416 555 0100", email=" Ali@Example.COM ",
        )
        self.assertEqual(p.full_name, "Ali Hassan Jr")
        self.assertEqual(p.health_number, "1234567890AB")
        self.assertEqual(p.phone, "+14165550100")
        self.assertEqual(p.email, "ali@example.com")

    def test_future_birth_date_is_rejected(self):
        with self.assertRaises(ValidationError):
            Patient.objects.create(
                first_name="A", last_name="B", date_of_birth=date.today() + timedelta(days=1)
            )

    def test_health_number_unique_when_present(self):
        Patient.objects.create(first_name="A", last_name="B", health_number="X1")
        with self.assertRaises(ValidationError):
            Patient.objects.create(first_name="C", last_name="D", health_number="x1")
        Patient.objects.create(first_name="E", last_name="F")
        Patient.objects.create(first_name="G", last_name="H")

    def test_age(self):
        today = date.today()
        p = Patient(first_name="A", last_name="B", date_of_birth=date(today.year - 30, 1, 1))
        self.assertEqual(p.age, 30)
        self.assertIsNone(Patient(first_name="A", last_name="B").age)
