from django.db import transaction
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import GenericViewSet

from roadside.chat import services
from roadside.core.api.responses import success
from roadside.realtime.events.chat import publish_messages_read
from roadside.users.models import User

from .serializers import ChatMessageSerializer
from .serializers import ConversationSerializer


@extend_schema_view(
    history=extend_schema(tags=["Chat"]),
    mark_read=extend_schema(tags=["Chat"], request=None),
    unread=extend_schema(tags=["Chat"]),
    conversations=extend_schema(tags=["Chat"]),
)
class ChatViewSet(GenericViewSet):
    """Direct messages of the authenticated user.

    Sending happens over Socket.IO (``private_message``); this viewset only
    reads history and manages read state.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ChatMessageSerializer

    @action(detail=False, url_path=r"history/(?P<other_user_id>\d+)")
    def history(self, request, other_user_id=None):
        messages = services.history(request.user.pk, int(other_user_id))
        return success(chats=ChatMessageSerializer(messages, many=True).data)

    @action(detail=False, methods=["post"], url_path=r"read/(?P<sender_id>\d+)")
    def mark_read(self, request, sender_id=None):
        sender_id = int(sender_id)
        reader_id = request.user.pk
        ids = services.mark_conversation_read(sender_id, reader_id)
        if ids:
            transaction.on_commit(
                lambda: publish_messages_read(sender_id, ids, reader_id),
            )
        return success("Messages marked as read", message_ids=ids)

    @action(detail=False)
    def unread(self, request):
        return success(unread_count=services.unread_count(request.user.pk))

    @action(detail=False, url_path=r"conversations/(?P<role>[A-Za-z_]+)")
    def conversations(self, request, role=None):
        role = role.upper()
        if role not in User.Role.values:
            raise ValidationError({"role": f"Unknown role '{role}'."})
        messages = services.conversations_by_role(request.user.pk, role)
        return success(
            conversations=ConversationSerializer(messages, many=True).data,
        )
