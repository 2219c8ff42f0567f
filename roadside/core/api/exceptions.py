"""DRF exception handler producing the ``{"success": false, ...}`` envelope.

Every error leaving the HTTP API has the shape::

    {"success": false, "message": "<human readable>", "errors": {...}?}

Validation errors keep the field breakdown under ``errors``. Anything DRF does
not already understand is logged server-side and reported as a generic 500.
"""

from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from roadside.emergency.exceptions import EmergencyRequestNotFound
from roadside.emergency.exceptions import InvalidStatusTransition

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"


def _first_message(detail: Any) -> str:
    """Pick a single readable message out of a DRF ``detail`` structure."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            inner = _first_message(value)
            if key in ("detail", "non_field_errors"):
                return inner
            return f"{key}: {inner}"
        return ""
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def _translate(exc: Exception) -> Exception:
    if isinstance(exc, InvalidStatusTransition):
        return exceptions.ValidationError({"detail": str(exc)})
    if isinstance(exc, (EmergencyRequestNotFound, ObjectDoesNotExist)):
        return exceptions.NotFound(str(exc) or None)
    if isinstance(exc, Http404):
        return exceptions.NotFound()
    if isinstance(exc, DjangoPermissionDenied):
        return exceptions.PermissionDenied(str(exc) or None)
    return exc


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    exc = _translate(exc)
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled API error in %s",
            type(view).__name__ if view is not None else "unknown view",
            exc_info=exc,
        )
        return Response(
            {"success": False, "message": GENERIC_SERVER_ERROR},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    body: dict[str, Any] = {
        "success": False,
        "message": _first_message(response.data),
    }
    if isinstance(exc, exceptions.ValidationError) and isinstance(
        response.data, dict
    ):
        errors = {k: v for k, v in response.data.items() if k != "detail"}
        if errors:
            body["errors"] = errors
    response.data = body
    return response
