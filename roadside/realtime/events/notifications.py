"""Live ``notification`` events for freshly stored notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from roadside.realtime.socketio import emit_event_to_user

if TYPE_CHECKING:  # import for type checking only
    from roadside.notifications.models import Notification

EVENT = "notification"


def notification_payload(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.pk,
        "type": notification.notification_type,
        "title": notification.title,
        "message": notification.message,
        "isRead": notification.is_read,
        "createdAt": notification.created_at.isoformat(),
    }


def publish_notification_created(notification: Notification) -> int:
    return emit_event_to_user(
        notification.recipient_id,
        EVENT,
        notification_payload(notification),
    )
