"""Chat persistence. Delivery is the realtime relay's job."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING
from typing import Any

from django.contrib.auth import get_user_model
from django.db.models import Q

from roadside.chat.models import ChatMessage

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

    from django.db.models import QuerySet

User = get_user_model()


def send_message(sender_id: int, receiver_id: int, message: str) -> ChatMessage:
    """Persist a message. Raises ``User.DoesNotExist`` for an unknown sender or receiver."""

    text = (message or "").strip()
    if not text:
        msg = "Message text is required."
        raise ValueError(msg)
    receiver = User.objects.only("id").get(pk=receiver_id)
    sender = User.objects.only("id", "name", "profile_image").get(pk=sender_id)
    return ChatMessage.objects.create(
        sender=sender,
        receiver=receiver,
        message=text,
    )


def serialize_message(message: ChatMessage) -> dict[str, Any]:
    """Realtime payload of a message, with a summary of who sent it."""

    sender = message.sender
    return {
        "id": message.id,
        "senderId": message.sender_id,
        "receiverId": message.receiver_id,
        "message": message.message,
        "isRead": message.is_read,
        "createdAt": message.created_at.isoformat(),
        "sender": {
            "id": sender.id,
            "name": sender.name,
            "profileImage": sender.profile_image or None,
        },
    }


def mark_read(message_ids: Iterable[int], reader_id: int) -> dict[int, list[int]]:
    """Mark the listed messages addressed to ``reader_id`` as read.

    Returns the listed message ids grouped by their sender, so every sender
    can be told which of their messages were read.
    """

    ids = {int(i) for i in message_ids}
    if not ids:
        return {}
    addressed = ChatMessage.objects.filter(pk__in=ids, receiver_id=reader_id)
    rows = list(addressed.order_by("id").values_list("id", "sender_id"))
    addressed.filter(is_read=False).update(is_read=True)

    by_sender: dict[int, list[int]] = defaultdict(list)
    for message_id, sender_id in rows:
        by_sender[sender_id].append(message_id)
    return dict(by_sender)


def mark_conversation_read(sender_id: int, reader_id: int) -> list[int]:
    """Mark every unread message from ``sender_id`` to ``reader_id`` as read."""

    unread = ChatMessage.objects.filter(
        sender_id=sender_id,
        receiver_id=reader_id,
        is_read=False,
    )
    ids = list(unread.order_by("id").values_list("id", flat=True))
    if ids:
        ChatMessage.objects.filter(pk__in=ids).update(is_read=True)
    return ids


def unread_count(user_id: int) -> int:
    return ChatMessage.objects.filter(receiver_id=user_id, is_read=False).count()


def history(user_id: int, other_user_id: int) -> QuerySet[ChatMessage]:
    """Both directions of a conversation, oldest first."""

    return (
        ChatMessage.objects.filter(
            Q(sender_id=user_id, receiver_id=other_user_id)
            | Q(sender_id=other_user_id, receiver_id=user_id),
        )
        .select_related("sender", "receiver")
        .order_by("created_at", "id")
    )


def conversations_by_role(user_id: int, role: str) -> list[ChatMessage]:
    """Latest message per counterpart whose role is ``role``.

    Each returned message carries the counterpart on ``other_user``.
    """

    role = role.upper()
    messages = (
        ChatMessage.objects.filter(
            Q(sender_id=user_id, receiver__role=role)
            | Q(receiver_id=user_id, sender__role=role),
        )
        .select_related("sender", "receiver")
        .order_by("-created_at", "-id")
    )
    latest: dict[int, ChatMessage] = {}
    for message in messages:
        other = message.receiver if message.sender_id == user_id else message.sender
        if other.pk in latest:
            continue
        message.other_user = other
        latest[other.pk] = message
    return list(latest.values())
