import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import appointments.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("doctor", "0001_initial"),
        ("patient", "0001_initial"),
        ("room", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Appointment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(db_index=True, verbose_name="Date")),
                ("start_time", models.TimeField(verbose_name="Start Time")),
                (
                    "duration_minutes",
                    models.PositiveSmallIntegerField(
                        default=appointments.models.default_duration,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(1440),
                        ],
                        verbose_name="Duration (minutes)",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                            ("no_show", "No‑show"),
                        ],
                        db_index=True,
                        default="scheduled",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("doctor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="appointments", to="doctor.doctor")),
                ("patient", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="appointments", to="patient.patient")),
                ("room", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="appointments", to="room.room")),
            ],
            options={
                "ordering": ["date", "start_time", "pk"],
                "indexes": [
                    models.Index(fields=["date", "status"], name="idx_appt_date_status"),
                    models.Index(fields=["doctor", "date", "status"], name="idx_appt_doc_date_status"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("duration_minutes__gt", 0)),
                        name="appointment_duration_positive",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("status", "scheduled")),
                        fields=("doctor", "date", "start_time"),
                        name="uq_doctor_slot_scheduled",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("status", "scheduled")),
                        fields=("room", "date", "start_time"),
                        name="uq_room_slot_scheduled",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("status", "scheduled")),
                        fields=("patient", "date", "start_time"),
                        name="uq_patient_slot_scheduled",
                    ),
                ],
            },
        ),
    ]
