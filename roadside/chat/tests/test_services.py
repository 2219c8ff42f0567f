import pytest

from roadside.chat import services
from roadside.chat.models import ChatMessage
from roadside.users.models import User
from tests.factories import create_message
from tests.factories import create_provider
from tests.factories import create_user

pytestmark = pytest.mark.django_db


def test_send_message_strips_and_persists(user, provider):
    msg = services.send_message(user.pk, provider.pk, "  need a tow  ")
    assert msg.message == "need a tow"
    assert msg.is_read is False
    assert ChatMessage.objects.get(pk=msg.pk).receiver_id == provider.pk


def test_send_message_rejects_blank(user, provider):
    with pytest.raises(ValueError, match="required"):
        services.send_message(user.pk, provider.pk, "   ")
    assert not ChatMessage.objects.exists()


def test_send_message_unknown_receiver(user):
    with pytest.raises(User.DoesNotExist):
        services.send_message(user.pk, 999999, "hello?")


def test_serialize_message(user, provider):
    user.name = "Sita Sharma"
    user.profile_image = "https://cdn.example.com/sita.png"
    user.save(update_fields=["name", "profile_image"])
    msg = create_message(user, provider, "hi")
    data = services.serialize_message(msg)
    assert data["id"] == msg.pk
    assert data["senderId"] == user.pk
    assert data["receiverId"] == provider.pk
    assert data["message"] == "hi"
    assert data["isRead"] is False
    assert data["createdAt"] == msg.created_at.isoformat()
    assert data["sender"] == {
        "id": user.pk,
        "name": "Sita Sharma",
        "profileImage": "https://cdn.example.com/sita.png",
    }


def test_serialize_message_without_profile_image(user, provider):
    msg = services.send_message(user.pk, provider.pk, "hello")
    assert services.serialize_message(msg)["sender"]["profileImage"] is None


def test_mark_read_groups_by_sender():
    reader = create_user()
    alice = create_user()
    bob = create_user()
    m1 = create_message(alice, reader)
    m2 = create_message(bob, reader)
    m3 = create_message(alice, reader)

    grouped = services.mark_read([m1.pk, m2.pk, m3.pk], reader.pk)

    assert grouped == {alice.pk: [m1.pk, m3.pk], bob.pk: [m2.pk]}
    assert not ChatMessage.objects.filter(is_read=False).exists()


def test_mark_read_ignores_messages_to_someone_else():
    reader = create_user()
    alice = create_user()
    foreign = create_message(alice, create_user())
    own = create_message(alice, reader)

    grouped = services.mark_read([foreign.pk, own.pk], reader.pk)

    assert grouped == {alice.pk: [own.pk]}
    foreign.refresh_from_db()
    assert not foreign.is_read


def test_mark_read_empty():
    assert services.mark_read([], 1) == {}


def test_mark_conversation_read(user, provider):
    m1 = create_message(provider, user)
    create_message(provider, user, is_read=True)
    m3 = create_message(provider, user)
    create_message(user, provider)

    assert services.mark_conversation_read(provider.pk, user.pk) == [m1.pk, m3.pk]
    assert services.unread_count(user.pk) == 0
    assert services.unread_count(provider.pk) == 1
    assert services.mark_conversation_read(provider.pk, user.pk) == []


def test_history_is_both_directions_oldest_first(user, provider):
    m1 = create_message(user, provider, "hi")
    m2 = create_message(provider, user, "hello")
    create_message(user, create_user(), "elsewhere")

    assert list(services.history(user.pk, provider.pk)) == [m1, m2]
    assert list(services.history(provider.pk, user.pk)) == [m1, m2]


def test_conversations_by_role_keeps_latest_per_counterpart(user, provider):
    other_provider = create_provider()
    vendor = create_user(role=User.Role.VENDOR, company_name="Parts")
    create_message(user, provider, "first")
    latest = create_message(provider, user, "second")
    only = create_message(user, other_provider, "hey")
    create_message(user, vendor, "vendor chat")

    conversations = services.conversations_by_role(user.pk, "service_provider")

    assert conversations == [only, latest]
    assert conversations[0].other_user == other_provider
    assert conversations[1].other_user == provider
