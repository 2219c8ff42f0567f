from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class NotificationQuerySet(models.QuerySet):
    def for_recipient(self, user):
        return self.filter(recipient=user)

    def unread(self):
        return self.filter(is_read=False)

    def mark_read(self) -> int:
        return self.unread().update(is_read=True)


class Notification(models.Model):
    """Something a user should see, delivered live when they are connected."""

    class Type(models.TextChoices):
        EMERGENCY = "emergency", _("Emergency")
        CHAT = "chat", _("Chat")
        ACCOUNT = "account", _("Account")
        OTHER = "other", _("Other")

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    title = models.CharField(max_length=255, blank=True)
    message = models.TextField()
    notification_type = models.CharField(
        max_length=20,
        choices=Type.choices,
        default=Type.OTHER,
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="notification_unread_idx"),
        ]

    def __str__(self):
        return f"{self.get_notification_type_display()} for {self.recipient_id}"
