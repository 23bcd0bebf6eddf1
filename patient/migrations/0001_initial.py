import django.db.models.functions.text
from django.db import migrations, models

import patient.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=100, verbose_name="First Name")),
                ("last_name", models.CharField(db_index=True, max_length=100, verbose_name="Last Name")),
                ("date_of_birth", models.DateField(blank=True, null=True, validators=[patient.models.validate_dob], verbose_name="Date of Birth")),
                ("health_number", models.CharField(blank=True, help_text="Provincial health number; unique when present.", max_length=32, verbose_name="Health Card Number")),
                ("phone", models.CharField(blank=True, help_text="E.164 format: optional +, 7–15 digits.", max_length=20, validators=[patient.models.validate_mobile], verbose_name="Phone Number")),
                ("email", models.EmailField(blank=True, max_length=100, verbose_name="Email Address")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
            ],
            options={
                "verbose_name": "Patient",
                "verbose_name_plural": "Patients",
                "ordering": ["last_name", "first_name", "pk"],
                "indexes": [
                    models.Index(
                        django.db.models.functions.text.Lower("last_name"),
                        django.db.models.functions.text.Lower("first_name"),
                        name="idx_patient_name_lower",
                    ),
                    models.Index(fields=["date_of_birth"], name="patient_pat_date_of_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("health_number", ""), _negated=True),
                        fields=("health_number",),
                        name="uniq_patient_health_number_nonempty",
                    ),
                ],
            },
        ),
    ]
