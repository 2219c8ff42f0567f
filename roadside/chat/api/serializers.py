from rest_framework import serializers

from roadside.chat.models import ChatMessage
from roadside.users.api.serializers import PublicUserSerializer


class ChatMessageSerializer(serializers.ModelSerializer):
    sender = PublicUserSerializer(read_only=True)
    receiver = PublicUserSerializer(read_only=True)

    class Meta:
        model = ChatMessage
        fields = ("id", "sender", "receiver", "message", "is_read", "created_at")
        read_only_fields = fields


class ConversationSerializer(ChatMessageSerializer):
    other_user = PublicUserSerializer(read_only=True)

    class Meta(ChatMessageSerializer.Meta):
        fields = (*ChatMessageSerializer.Meta.fields, "other_user")
        read_only_fields = fields
