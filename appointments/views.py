from __future__ import annotations

import logging
from typing import Final

from django.core.paginator import Paginator
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from ClinicFlow.http import form_errors, json_error, json_success, request_data, staff_required
from doctor.models import Doctor

from .conflicts import Conflict, parse_date
from .exceptions import AppointmentNotFound, InvalidRequest, InvalidTransition, StoreUnavailable
from .forms import BookingForm, RescheduleForm
from .ics import generate_doctor_calendar
from .models import Appointment, AppointmentStatus
from .services import (
    book_appointment,
    cancel_appointment,
    check_booking,
    remove_appointment,
    reschedule_appointment,
)

logger: Final[logging.Logger] = logging.getLogger(__name__)

PAGE_SIZE = 50


# ------------------------------------------------------------------#
#                           Helpers                                  #
# ------------------------------------------------------------------#
def _user_name(u) -> str:
    return u.get_full_name() or u.get_username() or "staff"


def serialize_appointment(appt: Appointment) -> dict:
    return {
        "id": appt.pk,
        "patient_id": appt.patient_id,
        "patient_name": appt.patient.full_name,
        "doctor_id": appt.doctor_id,
        "doctor_name": appt.doctor.full_name,
        "room_id": appt.room_id,
        "room_name": appt.room.name,
        "date": appt.date.isoformat(),
        "start_time": appt.start_time.strftime("%H:%M"),
        "end_time": appt.ends_at.strftime("%H:%M"),
        "duration_minutes": appt.duration_minutes,
        "notes": appt.notes,
        "status": appt.status,
    }


def _conflict_response(conflict: Conflict) -> JsonResponse:
    return json_error(
        conflict.message,
        status=409,
        reason=conflict.reason.value,
        conflict_with=conflict.with_id,
        conflict_start=conflict.starts_at,
        conflict_end=conflict.ends_at,
    )


def _invalid_response(exc: InvalidRequest) -> JsonResponse:
    return json_error(exc.message, status=400, errors={exc.field: [exc.message]})


def _unavailable_response(exc: StoreUnavailable) -> JsonResponse:
    return json_error(str(exc), status=503)


def _load(pk: int) -> Appointment:
    return get_object_or_404(
        Appointment.objects.select_related("patient", "doctor", "room"), pk=pk
    )


# ------------------------------------------------------------------#
#                        Appointment collection                     #
# ------------------------------------------------------------------#
@staff_required
@require_http_methods(["GET", "POST"])
def appointment_collection(request: HttpRequest):
    if request.method == "POST":
        return _create_appointment(request)
    return _list_appointments(request)


def _list_appointments(request: HttpRequest) -> JsonResponse:
    qs = Appointment.objects.select_related("patient", "doctor", "room")

    try:
        day = request.GET.get("date")
        if day:
            qs = qs.on_date(parse_date(day))
        for param in ("doctor", "room", "patient"):
            value = request.GET.get(param)
            if value:
                qs = qs.filter(**{f"{param}_id": int(value)})
    except InvalidRequest as exc:
        return _invalid_response(exc)
    except ValueError:
        return json_error("Identifier filters must be integers.", status=400)

    status_key = (request.GET.get("status") or "all").lower()
    if status_key in AppointmentStatus.values:
        qs = qs.filter(status=status_key)
    elif status_key != "all":
        return json_error(f"Unknown status {status_key!r}.", status=400)

    page = Paginator(qs.order_by("date", "start_time", "pk"), PAGE_SIZE).get_page(
        request.GET.get("page")
    )
    return json_success(
        {
            "appointments": [serialize_appointment(a) for a in page],
            "page": page.number,
            "num_pages": page.paginator.num_pages,
            "count": page.paginator.count,
        }
    )


def _create_appointment(request: HttpRequest) -> JsonResponse:
    try:
        form = BookingForm(request_data(request))
    except ValueError as exc:
        return json_error(str(exc), status=400)
    if not form.is_valid():
        return json_error("Please correct the errors below.", status=400, errors=form_errors(form))

    try:
        outcome = book_appointment(
            form.to_booking_request(), notes=form.cleaned_data.get("notes") or ""
        )
    except InvalidRequest as exc:
        return _invalid_response(exc)
    except StoreUnavailable as exc:
        return _unavailable_response(exc)

    if isinstance(outcome, Conflict):
        return _conflict_response(outcome)
    return json_success({"appointment": serialize_appointment(_load(outcome.pk))}, status=201)


@staff_required
@require_POST
def check_availability(request: HttpRequest):
    """Dry‑run of a booking: same validation and policy, nothing is written."""
    try:
        form = BookingForm(request_data(request))
    except ValueError as exc:
        return json_error(str(exc), status=400)
    if not form.is_valid():
        return json_error("Please correct the errors below.", status=400, errors=form_errors(form))

    try:
        result = check_booking(form.to_booking_request())
    except InvalidRequest as exc:
        return _invalid_response(exc)
    except StoreUnavailable as exc:
        return _unavailable_response(exc)

    if isinstance(result, Conflict):
        return json_success(
            {
                "available": False,
                "reason": result.reason.value,
                "message": result.message,
                "conflict_with": result.with_id,
                "conflict_start": result.starts_at,
                "conflict_end": result.ends_at,
            }
        )
    return json_success({"available": True})


# ------------------------------------------------------------------#
#                        Single appointment                         #
# ------------------------------------------------------------------#
@staff_required
@require_http_methods(["GET", "DELETE"])
def appointment_detail(request: HttpRequest, pk: int):
    appt = _load(pk)
    if request.method == "GET":
        return json_success({"appointment": serialize_appointment(appt)})

    # Hard delete, superusers only
    if not request.user.is_superuser:
        return json_error("Only administrators can delete appointments permanently.", status=403)
    try:
        remove_appointment(appt.pk)
    except AppointmentNotFound:
        return json_error("Appointment not found.", status=404)
    except StoreUnavailable as exc:
        return _unavailable_response(exc)
    logger.info("Appointment %s deleted by %s.", pk, _user_name(request.user))
    return json_success({"deleted_id": pk})


@staff_required
@require_POST
def cancel(request: HttpRequest, pk: int):
    """Soft cancel: scheduled → cancelled; the slot is free immediately."""
    try:
        data = request_data(request)
    except ValueError as exc:
        return json_error(str(exc), status=400)

    try:
        appt = cancel_appointment(
            pk,
            reason=str(data.get("reason") or ""),
            by=_user_name(request.user),
        )
    except AppointmentNotFound:
        return json_error("Appointment not found.", status=404)
    except InvalidTransition as exc:
        return json_error(str(exc), status=409)
    except StoreUnavailable as exc:
        return _unavailable_response(exc)
    return json_success({"appointment": serialize_appointment(_load(appt.pk))})


@staff_required
@require_POST
def reschedule(request: HttpRequest, pk: int):
    try:
        form = RescheduleForm(request_data(request))
    except ValueError as exc:
        return json_error(str(exc), status=400)
    if not form.is_valid():
        return json_error("Please correct the errors below.", status=400, errors=form_errors(form))

    data = form.cleaned_data
    try:
        outcome = reschedule_appointment(
            pk,
            date=data["date"],
            start_time=data["start_time"],
            duration_minutes=data.get("duration_minutes"),
            room_id=data["room"].pk if data.get("room") else None,
            by=_user_name(request.user),
        )
    except AppointmentNotFound:
        return json_error("Appointment not found.", status=404)
    except InvalidRequest as exc:
        return _invalid_response(exc)
    except InvalidTransition as exc:
        return json_error(str(exc), status=409)
    except StoreUnavailable as exc:
        return _unavailable_response(exc)

    if isinstance(outcome, Conflict):
        return _conflict_response(outcome)
    return json_success(
        {"appointment": serialize_appointment(_load(outcome.pk)), "replaces": pk}, status=201
    )


# ------------------------------------------------------------------#
#                         Calendar export                           #
# ------------------------------------------------------------------#
@staff_required
@require_GET
def doctor_calendar(request: HttpRequest, doctor_id: int):
    doctor = get_object_or_404(Doctor, pk=doctor_id)
    qs = (
        Appointment.objects.scheduled()
        .filter(doctor=doctor)
        .select_related("patient", "room")
        .order_by("date", "start_time", "pk")
    )
    try:
        start, end = request.GET.get("from"), request.GET.get("to")
        if start:
            qs = qs.filter(date__gte=parse_date(start, field="from"))
        if end:
            qs = qs.filter(date__lte=parse_date(end, field="to"))
    except InvalidRequest as exc:
        return _invalid_response(exc)

    response = HttpResponse(
        generate_doctor_calendar(doctor, qs), content_type="text/calendar; charset=utf-8"
    )
    response["Content-Disposition"] = f'attachment; filename="doctor-{doctor.pk}.ics"'
    return response
