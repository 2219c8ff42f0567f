from __future__ import annotations

from typing import TYPE_CHECKING

from roadside.notifications.models import Notification

if TYPE_CHECKING:  # import for type checking only
    from roadside.users.models import User


def create_notification(
    recipient: User | int,
    message: str,
    *,
    title: str = "",
    notification_type: str = Notification.Type.OTHER,
) -> Notification:
    """Persist a notification; the post_save signal publishes it after commit."""

    recipient_id = recipient if isinstance(recipient, int) else recipient.pk
    return Notification.objects.create(
        recipient_id=recipient_id,
        title=title,
        message=message,
        notification_type=notification_type,
    )
