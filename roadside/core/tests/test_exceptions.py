from http import HTTPStatus

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework.test import APIRequestFactory
from rest_framework.views import APIView

from roadside.core.api.exceptions import GENERIC_SERVER_ERROR
from roadside.core.api.exceptions import api_exception_handler
from roadside.emergency.exceptions import EmergencyRequestNotFound
from roadside.emergency.exceptions import InvalidStatusTransition


def _handle(exc):
    request = APIRequestFactory().get("/")
    return api_exception_handler(exc, {"view": APIView(), "request": request})


def test_validation_error_keeps_field_errors():
    resp = _handle(exceptions.ValidationError({"email": ["This field is required."]}))
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["success"] is False
    assert resp.data["message"] == "email: This field is required."
    assert resp.data["errors"] == {"email": ["This field is required."]}


def test_invalid_transition_is_bad_request_without_errors():
    resp = _handle(
        InvalidStatusTransition(7, "PENDING", "This request has already been accepted"),
    )
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data == {
        "success": False,
        "message": "This request has already been accepted",
    }


def test_missing_request_is_not_found():
    resp = _handle(EmergencyRequestNotFound(42))
    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert resp.data["message"] == "Emergency request not found"


def test_http404_is_not_found():
    resp = _handle(Http404())
    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert resp.data["success"] is False


def test_django_permission_denied_is_forbidden():
    resp = _handle(PermissionDenied("Only the assigned provider can complete."))
    assert resp.status_code == HTTPStatus.FORBIDDEN
    assert resp.data["message"] == "Only the assigned provider can complete."


def test_unexpected_error_is_generic_500(caplog):
    resp = _handle(RuntimeError("boom"))
    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert resp.data == {"success": False, "message": GENERIC_SERVER_ERROR}
    assert "boom" not in str(resp.data)
    assert "Unhandled API error" in caplog.text
