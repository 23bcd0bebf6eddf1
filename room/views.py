# room/views.py
from __future__ import annotations

import logging
from typing import Final

from django.db.models import ProtectedError
from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from ClinicFlow.http import form_errors, json_error, json_success, request_data, staff_required

from .forms import RoomForm
from .models import Room

logger: Final[logging.Logger] = logging.getLogger(__name__)


def serialize_room(room: Room) -> dict:
    return {"id": room.pk, "name": room.name, "code": room.code}


@staff_required
@require_http_methods(["GET", "POST"])
def room_collection(request: HttpRequest):
    if request.method == "GET":
        return json_success({"rooms": [serialize_room(r) for r in Room.objects.all()]})

    try:
        form = RoomForm(request_data(request))
    except ValueError as exc:
        return json_error(str(exc), status=400)
    if not form.is_valid():
        return json_error("Please correct the errors below.", status=400, errors=form_errors(form))

    room = form.save()
    logger.info("Room %s (%s) created.", room.pk, room.code)
    return json_success({"room": serialize_room(room)}, status=201)


@staff_required
@require_http_methods(["GET", "DELETE"])
def room_detail(request: HttpRequest, pk: int):
    room = get_object_or_404(Room, pk=pk)
    if request.method == "GET":
        return json_success({"room": serialize_room(room)})

    try:
        room.delete()
    except ProtectedError:
        return json_error("This room has appointments on record and cannot be deleted.", status=409)
    logger.info("Room %s deleted.", pk)
    return json_success({"deleted_id": pk})
