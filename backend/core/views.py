"""
Core app views — **Thin Views**.

Each view delegates all business logic to the corresponding service in
``core.services``.  Views are responsible only for:

1. Validating the request body.
2. Calling the service with the caller's ``ActorContext``.
3. Serialising the result and returning an HTTP ``Response``.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from core.domain.access import ActorContext

from .serializers import (
    DashboardStatsSerializer,
    MarkAllReadResponseSerializer,
    NotificationCreateSerializer,
    NotificationSerializer,
)
from .services import DashboardStatsService, NotificationInboxService


class DashboardStatsView(APIView):
    """
    **GET /api/dashboard/stats/**

    Return role-aware dashboard counters for the authenticated user.  See
    ``DashboardStatsService`` for which counters each role receives.

    **Authentication**: Required (``IsAuthenticated``).
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Dashboard statistics",
        description=(
            "Counters for the caller's dashboard. Clients and lawyers see "
            "their own cases; police see cases filed at their station."
        ),
        responses={200: OpenApiResponse(response=DashboardStatsSerializer, description="Dashboard stats.")},
        tags=["Dashboard"],
    )
    def get(self, request: Request) -> Response:
        service = DashboardStatsService(ActorContext.from_user(request.user))
        serializer = DashboardStatsSerializer(service.get_stats())
        return Response(serializer.data, status=status.HTTP_200_OK)


class NotificationViewSet(viewsets.ViewSet):
    """
    **Notification API** — the authenticated user's inbox.

    Endpoints
    ---------
    GET    /api/notifications/                  → newest 50 notifications
    POST   /api/notifications/                  → create (internal use)
    PATCH  /api/notifications/{id}/read/        → mark one as read
    PATCH  /api/notifications/mark-all-read/    → mark all as read
    DELETE /api/notifications/{id}/             → delete one

    Another user's notification answers ``404`` like a missing one.
    """

    permission_classes = [IsAuthenticated]

    def _service(self, request: Request) -> NotificationInboxService:
        return NotificationInboxService(ActorContext.from_user(request.user))

    @extend_schema(
        summary="List notifications",
        description="Return the caller's 50 most recent notifications, newest first.",
        responses={200: OpenApiResponse(response=NotificationSerializer(many=True), description="Notification list.")},
        tags=["Notifications"],
    )
    def list(self, request: Request) -> Response:
        notifications = self._service(request).list_notifications()
        serializer = NotificationSerializer(notifications, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create notification",
        description="Internal creation path: store one notification for `user_id`.",
        request=NotificationCreateSerializer,
        responses={
            201: OpenApiResponse(response=NotificationSerializer, description="Created."),
            400: OpenApiResponse(description="Validation error."),
            404: OpenApiResponse(description="Recipient or case not found."),
        },
        tags=["Notifications"],
    )
    def create(self, request: Request) -> Response:
        serializer = NotificationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        notification = self._service(request).create(
            user_id=data["user_id"],
            notification_type=data["type"],
            title=data["title"],
            message=data["message"],
            case_id=data.get("case_id"),
        )
        return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Delete notification",
        responses={
            204: OpenApiResponse(description="Deleted."),
            404: OpenApiResponse(description="Not found."),
        },
        tags=["Notifications"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        self._service(request).delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch"], url_path="read")
    @extend_schema(
        summary="Mark notification as read",
        description="Mark a single notification as read by ID. Idempotent.",
        request=None,
        responses={
            200: OpenApiResponse(response=NotificationSerializer, description="Updated notification."),
            404: OpenApiResponse(description="Not found."),
        },
        tags=["Notifications"],
    )
    def mark_as_read(self, request: Request, pk: str = None) -> Response:
        notification = self._service(request).mark_as_read(pk)
        return Response(NotificationSerializer(notification).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["patch"], url_path="mark-all-read")
    @extend_schema(
        summary="Mark all notifications as read",
        request=None,
        responses={200: OpenApiResponse(response=MarkAllReadResponseSerializer, description="Count updated.")},
        tags=["Notifications"],
    )
    def mark_all_read(self, request: Request) -> Response:
        updated = self._service(request).mark_all_as_read()
        return Response({"updated": updated}, status=status.HTTP_200_OK)
