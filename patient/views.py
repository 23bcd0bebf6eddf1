# patient/views.py
from __future__ import annotations

import logging
from typing import Final

from django.core.paginator import Paginator
from django.db.models import ProtectedError, Q
from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from ClinicFlow.http import form_errors, json_error, json_success, request_data, staff_required

from .forms import PatientForm
from .models import Patient

logger: Final[logging.Logger] = logging.getLogger(__name__)

PAGE_SIZE = 50


def serialize_patient(p: Patient) -> dict:
    return {
        "id": p.pk,
        "first_name": p.first_name,
        "last_name": p.last_name,
        "full_name": p.full_name,
        "date_of_birth": p.date_of_birth.isoformat() if p.date_of_birth else None,
        "age": p.age,
        "health_number": p.health_number,
        "phone": p.phone,
        "email": p.email,
        "notes": p.notes,
    }


# ------------------------------------------------------------------ #
#                           Collection                               #
# ------------------------------------------------------------------ #
@staff_required
@require_http_methods(["GET", "POST"])
def patient_collection(request: HttpRequest):
    if request.method == "GET":
        qs = Patient.objects.all()
        q = (request.GET.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(first_name__icontains=q)
                | Q(last_name__icontains=q)
                | Q(health_number__icontains=q)
                | Q(phone__icontains=q)
                | Q(email__icontains=q)
            )
        page = Paginator(qs, PAGE_SIZE).get_page(request.GET.get("page"))
        return json_success(
            {
                "patients": [serialize_patient(p) for p in page],
                "page": page.number,
                "num_pages": page.paginator.num_pages,
                "count": page.paginator.count,
            }
        )

    try:
        form = PatientForm(request_data(request))
    except ValueError as exc:
        return json_error(str(exc), status=400)
    if not form.is_valid():
        return json_error("Please correct the errors below.", status=400, errors=form_errors(form))

    patient = form.save()
    logger.info("Patient %s created.", patient.pk)
    return json_success({"patient": serialize_patient(patient)}, status=201)


# ------------------------------------------------------------------ #
#                             Detail                                 #
# ------------------------------------------------------------------ #
@staff_required
@require_http_methods(["GET", "DELETE"])
def patient_detail(request: HttpRequest, pk: int):
    patient = get_object_or_404(Patient, pk=pk)
    if request.method == "GET":
        return json_success({"patient": serialize_patient(patient)})

    try:
        patient.delete()
    except ProtectedError:
        return json_error("This patient has appointments on record and cannot be deleted.", status=409)
    logger.info("Patient %s deleted.", pk)
    return json_success({"deleted_id": pk})
