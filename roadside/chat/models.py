from django.conf import settings
from django.db import models


class ChatMessage(models.Model):
    """A direct message between two users. Only ``is_read`` ever changes."""

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
    )
    message = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["receiver", "is_read"], name="chat_unread_idx"),
        ]

    def __str__(self):
        return f"{self.sender_id} -> {self.receiver_id}: {self.message[:40]}"
