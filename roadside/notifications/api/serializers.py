from rest_framework import serializers

from roadside.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer[Notification]):
    class Meta:
        model = Notification
        fields = ("id", "notification_type", "title", "message", "is_read", "created_at")
        read_only_fields = fields
