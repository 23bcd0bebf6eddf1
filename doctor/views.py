# doctor/views.py
from __future__ import annotations

import logging
from typing import Final

from django.db.models import Count, ProtectedError, Q
from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from ClinicFlow.http import form_errors, json_error, json_success, request_data, staff_required

from .forms import DoctorForm
from .models import Doctor

logger: Final[logging.Logger] = logging.getLogger(__name__)


def serialize_doctor(doc: Doctor) -> dict:
    return {
        "id": doc.pk,
        "full_name": doc.full_name,
        "email": doc.email,
        "specialty": doc.specialty,
        "phone": doc.phone,
        "available": doc.available,
    }


# ------------------------------------------------------------------ #
#                           Collection                               #
# ------------------------------------------------------------------ #
@staff_required
@require_http_methods(["GET", "POST"])
def doctor_collection(request: HttpRequest):
    if request.method == "GET":
        qs = Doctor.objects.all()
        q = (request.GET.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(full_name__icontains=q) | Q(specialty__icontains=q))
        if request.GET.get("available") in ("1", "true"):
            qs = qs.filter(available=True)
        return json_success({"doctors": [serialize_doctor(d) for d in qs]})

    try:
        form = DoctorForm(request_data(request))
    except ValueError as exc:
        return json_error(str(exc), status=400)
    if not form.is_valid():
        return json_error("Please correct the errors below.", status=400, errors=form_errors(form))

    doctor = form.save()
    logger.info("Doctor %s (%s) created.", doctor.pk, doctor.full_name)
    return json_success({"doctor": serialize_doctor(doctor)}, status=201)


# ------------------------------------------------------------------ #
#                             Detail                                 #
# ------------------------------------------------------------------ #
@staff_required
@require_http_methods(["GET", "DELETE"])
def doctor_detail(request: HttpRequest, pk: int):
    doctor = get_object_or_404(
        Doctor.objects.annotate(
            scheduled=Count("appointments", filter=Q(appointments__status="scheduled"))
        ),
        pk=pk,
    )
    if request.method == "GET":
        return json_success(
            {"doctor": {**serialize_doctor(doctor), "scheduled_appointments": doctor.scheduled}}
        )

    try:
        doctor.delete()
    except ProtectedError:
        return json_error(
            "This doctor has appointments on record; mark them unavailable instead.",
            status=409,
        )
    logger.info("Doctor %s deleted.", pk)
    return json_success({"deleted_id": pk})
