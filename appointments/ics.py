# appointments/ics.py
#
# iCalendar (RFC 5545) feed of a doctor's scheduled visits.
# DTSTART/DTEND are floating local times (no TZID): the clinic wall clock.
# ------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone
from typing import Iterable, Optional

from doctor.models import Doctor

from .models import Appointment, AppointmentStatus

PRODID = "-//ClinicFlow//Appointments//EN"
UID_DOMAIN = "clinicflow.local"
# Content lines longer than this many octets are folded (RFC 5545 3.1)
MAX_LINE_OCTETS = 75


def escape_text(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold `line` into CRLF + space continuations of at most 75 octets each.

    Splits only between characters, never inside a UTF-8 sequence.
    """
    parts: list[str] = []
    current: list[str] = []
    size = 0
    for char in line:
        width = len(char.encode("utf-8"))
        if size + width > MAX_LINE_OCTETS:
            parts.append("".join(current))
            # continuation lines start with a space, which counts toward the limit
            current, size = [" "], 1
        current.append(char)
        size += width
    parts.append("".join(current))
    return "\r\n".join(parts)


def _local(dt: datetime) -> str:
    return dt.strftime("%Y%m%dT%H%M%S")


def _utc_stamp(now: Optional[datetime]) -> str:
    now = now or datetime.now(dt_timezone.utc)
    return now.astimezone(dt_timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def generate_doctor_calendar(
    doctor: Doctor,
    appointments: Iterable[Appointment],
    *,
    now: Optional[datetime] = None,
) -> str:
    """Render `appointments` of `doctor` as a VCALENDAR string (CRLF lines).

    Rows that are not scheduled, or belong to another doctor, are left out.
    """
    stamp = _utc_stamp(now)
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        f"X-WR-CALNAME:{escape_text(str(doctor))}",
    ]

    for appt in appointments:
        if appt.status != AppointmentStatus.SCHEDULED or appt.doctor_id != doctor.pk:
            continue
        patient = appt.patient.full_name if appt.patient_id else "Unknown patient"
        room = appt.room.name if appt.room_id else "Unknown room"

        lines += [
            "BEGIN:VEVENT",
            f"UID:{appt.pk}@{UID_DOMAIN}",
            f"DTSTAMP:{stamp}",
            f"DTSTART:{_local(appt.starts_at)}",
            f"DTEND:{_local(appt.ends_at)}",
            f"SUMMARY:{escape_text(f'Visit with {patient}')}",
        ]
        if appt.notes:
            lines.append(f"DESCRIPTION:{escape_text(appt.notes)}")
        lines += [
            f"LOCATION:{escape_text(room)}",
            "END:VEVENT",
        ]

    lines.append("END:VCALENDAR")
    return "\r\n".join(fold_line(line) for line in lines) + "\r\n"
