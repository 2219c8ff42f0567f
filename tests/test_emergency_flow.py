"""End-to-end HTTP walk through one roadside assistance call."""

from http import HTTPStatus
from unittest import mock

import pytest
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db

PASSWORD = "Tow-truck-2024!"


def _register_and_login(email, phone, role, **extra):
    anonymous = APIClient()
    resp = anonymous.post(
        "/api/v1/auth/register/",
        {
            "name": email.split("@")[0],
            "email": email,
            "phone": phone,
            "password": PASSWORD,
            "role": role,
            **extra,
        },
        format="json",
    )
    assert resp.status_code == HTTPStatus.CREATED
    user_id = resp.json()["user"]["id"]

    resp = anonymous.post(
        "/api/v1/auth/jwt/create/",
        {"login": phone, "password": PASSWORD},
        format="json",
    )
    assert resp.status_code == HTTPStatus.OK
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.json()['access']}")
    return user_id, client


@mock.patch("roadside.realtime.events.emergency.emit_event_to_user")
@mock.patch("roadside.realtime.events.notifications.emit_event_to_user")
def test_request_accept_complete(
    _notify,
    assigned,
    django_capture_on_commit_callbacks,
):
    driver_id, driver = _register_and_login(
        "driver@example.com",
        "+9779800000011",
        "USER",
    )
    mechanic_id, mechanic = _register_and_login(
        "mechanic@example.com",
        "+9779800000012",
        "SERVICE_PROVIDER",
    )

    resp = mechanic.post(
        "/api/v1/location/update/",
        {"latitude": 27.70, "longitude": 85.32},
        format="json",
    )
    assert resp.status_code == HTTPStatus.OK

    resp = driver.post(
        "/api/v1/vehicles/",
        {"brand": "Suzuki", "model": "Swift", "year": 2017, "vin": "MA3FC31S0HB000001"},
        format="json",
    )
    vehicle_id = resp.json()["vehicle"]["id"]

    with django_capture_on_commit_callbacks(execute=True):
        resp = driver.post(
            "/api/v1/emergency/requests/",
            {
                "vehicle_id": vehicle_id,
                "assistance_type": "TOWING",
                "latitude": 27.705,
                "longitude": 85.325,
            },
            format="json",
        )
    assert resp.status_code == HTTPStatus.CREATED
    assert resp.json()["nearby_providers"] == 1
    request_id = resp.json()["request"]["id"]

    resp = mechanic.get(
        "/api/v1/emergency/requests/nearby/",
        {"latitude": 27.70, "longitude": 85.32},
    )
    assert [r["id"] for r in resp.json()["requests"]] == [request_id]

    with django_capture_on_commit_callbacks(execute=True):
        resp = mechanic.post(f"/api/v1/emergency/requests/{request_id}/accept/")
    assert resp.status_code == HTTPStatus.OK
    assert assigned.call_args.args[:2] == (driver_id, "emergency_provider_assigned")

    resp = mechanic.get(
        "/api/v1/emergency/requests/nearby/",
        {"latitude": 27.70, "longitude": 85.32},
    )
    assert resp.json()["requests"] == []

    resp = mechanic.post(f"/api/v1/emergency/requests/{request_id}/complete/")
    assert resp.json()["request"]["status"] == "COMPLETED"

    # opening message, auto-reply, accepted and completed messages
    resp = driver.get(f"/api/v1/chat/history/{mechanic_id}/")
    assert len(resp.json()["chats"]) == 4
    resp = driver.get("/api/v1/chat/unread/")
    assert resp.json()["unread_count"] == 3

    resp = driver.get("/api/v1/notifications/")
    titles = {n["title"] for n in resp.json()["notifications"]}
    assert titles == {
        "Emergency request sent",
        "Emergency request accepted",
        "Emergency request completed",
    }
