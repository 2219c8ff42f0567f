from http import HTTPStatus
from unittest import mock

import pytest

from roadside.chat.models import ChatMessage
from tests.factories import create_message

pytestmark = pytest.mark.django_db

PUBLISH = "roadside.realtime.events.chat.emit_event_to_user"


def test_history(client_for, user, provider):
    m1 = create_message(user, provider, "hi")
    m2 = create_message(provider, user, "on my way")
    resp = client_for(user).get(f"/api/v1/chat/history/{provider.pk}/")
    assert resp.status_code == HTTPStatus.OK
    chats = resp.json()["chats"]
    assert [c["id"] for c in chats] == [m1.pk, m2.pk]
    assert chats[1]["sender"]["company_name"] == "Valley Towing"


def test_mark_conversation_read_notifies_sender(
    client_for,
    user,
    provider,
    django_capture_on_commit_callbacks,
):
    m1 = create_message(provider, user)
    m2 = create_message(provider, user)
    with mock.patch(PUBLISH) as emit:
        with django_capture_on_commit_callbacks(execute=True):
            resp = client_for(user).post(f"/api/v1/chat/read/{provider.pk}/")
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["message_ids"] == [m1.pk, m2.pk]
    assert not ChatMessage.objects.filter(is_read=False).exists()
    emit.assert_called_once_with(
        provider.pk,
        "messages_read",
        {"messageIds": [m1.pk, m2.pk], "readerId": user.pk},
    )


def test_mark_read_with_nothing_unread_publishes_nothing(
    client_for,
    user,
    provider,
    django_capture_on_commit_callbacks,
):
    with mock.patch(PUBLISH) as emit:
        with django_capture_on_commit_callbacks(execute=True):
            resp = client_for(user).post(f"/api/v1/chat/read/{provider.pk}/")
    assert resp.json()["message_ids"] == []
    emit.assert_not_called()


def test_unread_count(client_for, user, provider):
    create_message(provider, user)
    create_message(provider, user, is_read=True)
    resp = client_for(user).get("/api/v1/chat/unread/")
    assert resp.json() == {"success": True, "unread_count": 1}


def test_conversations(client_for, user, provider):
    latest = create_message(provider, user, "latest")
    resp = client_for(user).get("/api/v1/chat/conversations/service_provider/")
    assert resp.status_code == HTTPStatus.OK
    conversations = resp.json()["conversations"]
    assert [c["id"] for c in conversations] == [latest.pk]
    assert conversations[0]["other_user"]["id"] == provider.pk


def test_conversations_unknown_role(client_for, user):
    resp = client_for(user).get("/api/v1/chat/conversations/pilot/")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert "role" in resp.json()["errors"]


def test_chat_requires_authentication(api_client):
    assert api_client.get("/api/v1/chat/unread/").status_code == HTTPStatus.UNAUTHORIZED
