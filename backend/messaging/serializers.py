"""
Messaging app serializers.
"""

from __future__ import annotations

from rest_framework import serializers

from accounts.serializers import UserSummarySerializer

from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    """
    Message as shown in a thread.

    ``show_timestamp`` comes from the ``headers`` context entry
    (``{message_id: bool}``) computed by ``messaging.threads``; single
    messages outside a thread always show it.
    """

    sender = UserSummarySerializer(read_only=True)
    receiver = UserSummarySerializer(read_only=True)
    show_timestamp = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = [
            "id",
            "sender",
            "receiver",
            "case",
            "content",
            "timestamp",
            "read",
            "show_timestamp",
        ]
        read_only_fields = fields

    def get_show_timestamp(self, obj: Message) -> bool:
        return self.context.get("headers", {}).get(obj.pk, True)


class MessageCreateSerializer(serializers.Serializer):
    """Request body for ``POST /api/messages/``."""

    receiver_id = serializers.IntegerField(min_value=1)
    content = serializers.CharField(max_length=5000, trim_whitespace=True)
    case_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class MessageFilterSerializer(serializers.Serializer):
    """Query parameters for ``GET /api/messages/``."""

    other_user_id = serializers.IntegerField(min_value=1, required=False)
    case_id = serializers.IntegerField(min_value=1, required=False)


class MarkConversationReadSerializer(serializers.Serializer):
    other_user_id = serializers.IntegerField(min_value=1)
