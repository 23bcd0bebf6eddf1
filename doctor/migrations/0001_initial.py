from django.db import migrations, models

import doctor.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Doctor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=255, verbose_name="Full Name")),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="Email")),
                ("specialty", models.CharField(default="General", help_text="Doctor’s area of expertise.", max_length=100, verbose_name="Specialty")),
                ("phone", models.CharField(blank=True, help_text="E.164‑like: optional +, 7–15 digits.", max_length=20, validators=[doctor.models.validate_phone], verbose_name="Phone Number")),
                ("available", models.BooleanField(default=True, help_text="Shows whether this doctor can be booked.", verbose_name="Available for Booking")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
            ],
            options={
                "verbose_name": "Doctor",
                "verbose_name_plural": "Doctors",
                "ordering": ["full_name", "pk"],
                "indexes": [
                    models.Index(fields=["specialty"], name="doctor_doct_special_idx"),
                    models.Index(fields=["available", "specialty"], name="doctor_doct_availab_idx"),
                ],
            },
        ),
    ]
