from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import GenericViewSet

from roadside.core.api.responses import success
from roadside.notifications.models import Notification

from .serializers import NotificationSerializer


@extend_schema_view(
    list=extend_schema(tags=["Notifications"]),
    mark_read=extend_schema(tags=["Notifications"], request=None),
    mark_all_read=extend_schema(tags=["Notifications"], request=None),
)
class NotificationViewSet(GenericViewSet):
    """The caller's notifications, newest first.

    Other users' notifications are invisible, so touching one is a 404.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return Notification.objects.for_recipient(self.request.user)

    def list(self, request):
        notifications = self.get_serializer(self.get_queryset(), many=True).data
        return success(notifications=notifications)

    @action(detail=True, methods=["post"], url_path="mark-read")
    def mark_read(self, request, pk=None):
        notification = self.get_object()
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read"])
        return success(notification=self.get_serializer(notification).data)

    @action(detail=False, methods=["post"], url_path="mark-all-read")
    def mark_all_read(self, request):
        updated = self.get_queryset().mark_read()
        return success("All notifications marked as read", updated=updated)
