"""JSON helpers shared by the app views.

Domain code raises Django exceptions; views wrapped with ``json_api`` turn
them into JSON error bodies with the matching status code.
"""
from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Any

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.http import Http404, JsonResponse

logger = logging.getLogger(__name__)


class Conflict(Exception):
    """The request clashes with existing state (HTTP 409)."""


def json_error(message: str, status: int = 400, **extra: Any) -> JsonResponse:
    payload = {"error": message}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def validation_payload(exc: ValidationError) -> dict[str, Any]:
    if hasattr(exc, "error_dict"):
        return {"error": "Validation failed.", "fields": exc.message_dict}
    return {"error": " ".join(exc.messages)}


def json_body(request) -> dict[str, Any]:
    """Request data as a dict: JSON bodies are decoded, form posts use request.POST."""
    content_type = (request.content_type or "").lower()
    if content_type == "application/json":
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ValidationError("Request body is not valid JSON.") from exc
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object.")
        return data
    return request.POST.dict()


def json_api(view_func):
    """Map domain exceptions raised by a view to JSON error responses."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except ValidationError as exc:
            return JsonResponse(validation_payload(exc), status=400)
        except PermissionDenied as exc:
            return json_error(str(exc) or "Access denied.", status=403)
        except (ObjectDoesNotExist, Http404) as exc:
            return json_error(str(exc) or "Not found.", status=404)
        except Conflict as exc:
            return json_error(str(exc), status=409)

    return _wrapped
