# ClinicFlow/http.py
#
# JSON helpers shared by the API views of every app.
# ------------------------------------------------------------------

from __future__ import annotations

import json
from functools import wraps

from django.http import HttpRequest, JsonResponse, QueryDict


def json_success(data: dict | None = None, *, status: int = 200) -> JsonResponse:
    return JsonResponse({"success": True, **(data or {})}, status=status)


def json_error(msg: str, *, status: int = 400, **extra) -> JsonResponse:
    return JsonResponse({"success": False, "error": msg, **extra}, status=status)


def staff_required(view):
    """Session-authenticated staff only; answers in JSON instead of redirecting."""

    @wraps(view)
    def wrapper(request: HttpRequest, *a, **kw):
        user = request.user
        if not user.is_authenticated:
            return json_error("Authentication required.", status=401)
        if not (user.is_staff or user.is_superuser):
            return json_error("You do not have permission to access this resource.", status=403)
        return view(request, *a, **kw)

    return wrapper


def request_data(request: HttpRequest) -> QueryDict | dict:
    """
    Body of a POST as a mapping.
    - application/json -> decoded object (must be a JSON object)
    - anything else    -> request.POST
    Raises ValueError for a malformed JSON body.
    """
    if request.content_type == "application/json":
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ValueError(f"Malformed JSON body: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("JSON body must be an object.")
        return data
    return request.POST


def form_errors(form) -> dict[str, list[str]]:
    return {field: [str(e) for e in errors] for field, errors in form.errors.items()}
