"""
Core app serializers.

Serializers for the notification inbox and the dashboard counters.  The
dashboard serializer is **response-only** and works on the plain dict
produced by ``DashboardStatsService``; which keys are present depends on
the caller's role.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Notification, NotificationType


# ════════════════════════════════════════════════════════════════════
#  Notifications
# ════════════════════════════════════════════════════════════════════

class NotificationSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for ``Notification`` instances.

    Used by the Notification ViewSet to list and return notifications
    for the authenticated user.
    """

    type_display = serializers.CharField(source="get_type_display", read_only=True)

    class Meta:
        model = Notification
        fields = [
            "id",
            "title",
            "message",
            "type",
            "type_display",
            "is_read",
            "case",
            "case_request",
            "created_at",
        ]
        read_only_fields = fields


class NotificationCreateSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/notifications/``.

    Example::

        {"user_id": 7, "type": "case_approved", "title": "...", "message": "..."}
    """

    user_id = serializers.IntegerField(
        min_value=1,
        help_text="PK of the recipient.",
    )
    type = serializers.ChoiceField(
        choices=NotificationType.choices,
        help_text="Notification type.",
    )
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    case_id = serializers.IntegerField(
        min_value=1,
        required=False,
        allow_null=True,
        help_text="Optional related case.",
    )


class MarkAllReadResponseSerializer(serializers.Serializer):
    updated = serializers.IntegerField(help_text="Number of notifications marked read.")


# ════════════════════════════════════════════════════════════════════
#  Dashboard Statistics
# ════════════════════════════════════════════════════════════════════

class DashboardStatsSerializer(serializers.Serializer):
    """
    Response serializer for ``GET /api/dashboard/stats/``.

    Response shape per role::

        client: {"active_cases", "pending_approvals", "upcoming_hearings", "total_cases"}
        lawyer: {"pending_requests", "active_cases", "upcoming_hearings"}
        police: {"pending_review", "approved_today", "rejected_cases"}
    """

    # ── Client / Lawyer ──────────────────────────────────────────────
    active_cases = serializers.IntegerField(
        required=False,
        help_text="Cases under review or approved.",
    )
    upcoming_hearings = serializers.IntegerField(
        required=False,
        help_text="Cases with a hearing date after today.",
    )
    pending_approvals = serializers.IntegerField(
        required=False,
        help_text="Client cases awaiting a police decision.",
    )
    total_cases = serializers.IntegerField(required=False)
    pending_requests = serializers.IntegerField(
        required=False,
        help_text="Case requests waiting for the lawyer's answer.",
    )

    # ── Police ───────────────────────────────────────────────────────
    pending_review = serializers.IntegerField(required=False)
    approved_today = serializers.IntegerField(required=False)
    rejected_cases = serializers.IntegerField(required=False)

