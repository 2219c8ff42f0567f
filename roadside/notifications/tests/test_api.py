from http import HTTPStatus

import pytest

from roadside.notifications.models import Notification
from roadside.notifications.services import create_notification
from tests.factories import create_user

pytestmark = pytest.mark.django_db

URL = "/api/v1/notifications/"


def test_list_own_notifications_newest_first(client_for, user):
    first = create_notification(user, "first")
    second = create_notification(user, "second", title="Hi")
    create_notification(create_user(), "not mine")

    resp = client_for(user).get(URL)
    assert resp.status_code == HTTPStatus.OK
    items = resp.json()["notifications"]
    assert [n["id"] for n in items] == [second.pk, first.pk]
    assert items[0]["title"] == "Hi"
    assert items[0]["notification_type"] == Notification.Type.OTHER


def test_mark_read(client_for, user):
    note = create_notification(user, "ping")
    resp = client_for(user).post(f"{URL}{note.pk}/mark-read/")
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["notification"]["is_read"] is True
    note.refresh_from_db()
    assert note.is_read


def test_mark_read_of_someone_else_is_not_found(client_for, user):
    note = create_notification(create_user(), "ping")
    resp = client_for(user).post(f"{URL}{note.pk}/mark-read/")
    assert resp.status_code == HTTPStatus.NOT_FOUND
    note.refresh_from_db()
    assert not note.is_read


def test_mark_all_read(client_for, user):
    create_notification(user, "a")
    create_notification(user, "b")
    other = create_notification(create_user(), "c")

    resp = client_for(user).post(f"{URL}mark-all-read/")
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["updated"] == 2
    assert not Notification.objects.filter(recipient=user, is_read=False).exists()
    other.refresh_from_db()
    assert not other.is_read
