from __future__ import annotations

from typing import TYPE_CHECKING

from roadside.realtime.socketio import emit_event_to_user

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Sequence


def publish_messages_read(
    sender_id: int,
    message_ids: Sequence[int],
    reader_id: int,
) -> None:
    """Tell ``sender_id`` which of their messages ``reader_id`` has read."""

    emit_event_to_user(
        sender_id,
        "messages_read",
        {"messageIds": list(message_ids), "readerId": reader_id},
    )
