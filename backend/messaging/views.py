"""
Messaging app views.

Thin ViewSet: validate → service → serialize.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.domain.access import ActorContext

from .serializers import (
    MarkConversationReadSerializer,
    MessageCreateSerializer,
    MessageFilterSerializer,
    MessageSerializer,
)
from .services import MessageService
from .threads import timestamp_headers


class MessageViewSet(viewsets.ViewSet):
    """
    /api/messages/

    Direct messages between users.  Lists are returned oldest first with
    a per-message ``show_timestamp`` flag for the thread UI.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List messages",
        parameters=[
            OpenApiParameter(name="other_user_id", type=int, location=OpenApiParameter.QUERY, description="Only the thread with this user."),
            OpenApiParameter(name="case_id", type=int, location=OpenApiParameter.QUERY, description="Only messages about this case."),
        ],
        responses={200: OpenApiResponse(response=MessageSerializer(many=True))},
        tags=["Messages"],
    )
    def list(self, request: Request) -> Response:
        """
        GET /api/messages/
        """
        filter_serializer = MessageFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        messages = list(
            MessageService.list_conversation(
                ActorContext.from_user(request.user),
                other_user_id=filter_serializer.validated_data.get("other_user_id"),
                case_id=filter_serializer.validated_data.get("case_id"),
            )
        )
        headers = dict(zip((m.pk for m in messages), timestamp_headers(messages)))
        serializer = MessageSerializer(messages, many=True, context={"headers": headers})
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Send a message",
        request=MessageCreateSerializer,
        responses={
            201: OpenApiResponse(response=MessageSerializer, description="Message stored; receiver notified."),
            400: OpenApiResponse(description="Validation error."),
            404: OpenApiResponse(description="Receiver or case not found."),
        },
        tags=["Messages"],
    )
    def create(self, request: Request) -> Response:
        """
        POST /api/messages/
        """
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = MessageService.append(
            ActorContext.from_user(request.user),
            receiver_id=serializer.validated_data["receiver_id"],
            content=serializer.validated_data["content"],
            case_id=serializer.validated_data.get("case_id"),
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"], url_path="read")
    @extend_schema(
        summary="Mark a message read",
        request=None,
        responses={
            200: OpenApiResponse(response=MessageSerializer),
            403: OpenApiResponse(description="Only the receiver may mark it read."),
            404: OpenApiResponse(description="Message not found."),
        },
        tags=["Messages"],
    )
    def read(self, request: Request, pk: str = None) -> Response:
        """
        PATCH /api/messages/{id}/read/
        """
        message = MessageService.mark_read(pk, ActorContext.from_user(request.user))
        return Response(MessageSerializer(message).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["patch"], url_path="mark-conversation-read")
    @extend_schema(
        summary="Mark a whole thread read",
        request=MarkConversationReadSerializer,
        responses={200: OpenApiResponse(description="`{\"updated\": <count>}`")},
        tags=["Messages"],
    )
    def mark_conversation_read(self, request: Request) -> Response:
        """
        PATCH /api/messages/mark-conversation-read/
        """
        serializer = MarkConversationReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = MessageService.mark_conversation_read(
            ActorContext.from_user(request.user),
            serializer.validated_data["other_user_id"],
        )
        return Response({"updated": updated}, status=status.HTTP_200_OK)
