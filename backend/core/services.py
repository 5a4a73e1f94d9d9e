"""
Core app service layer.

Contains the notification inbox and the role-aware dashboard counters.
Views in ``core.views`` are thin wrappers that delegate to these services.

CROSS-APP IMPORT RULEBOOK
-------------------------
``core`` sits below every other app.  Models from ``cases`` and
``case_requests`` are resolved lazily with ``apps.get_model`` inside
methods so that importing ``core`` never pulls in an app that itself
imports ``core``.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from django.apps import apps
from django.contrib.auth import get_user_model
from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from core.constants import NOTIFICATION_LIST_LIMIT
from core.domain.access import ActorContext
from core.domain.notifications import NotificationService
from core.domain.transactions import get_or_not_found

from .models import Notification

logger = logging.getLogger(__name__)

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Notification Inbox Service
# ═══════════════════════════════════════════════════════════════════

class NotificationInboxService:
    """
    Reads and mutations on one user's notification inbox.

    Every lookup is filtered by recipient, so another user's notification
    is indistinguishable from a missing one (``NotFound``).
    """

    def __init__(self, actor: ActorContext) -> None:
        self.actor = actor

    def _own(self) -> QuerySet[Notification]:
        return Notification.objects.filter(recipient_id=self.actor.id)

    def list_notifications(self) -> list[Notification]:
        """Return the newest ``NOTIFICATION_LIST_LIMIT`` notifications."""
        return list(
            self._own()
            .order_by("-created_at", "-id")[:NOTIFICATION_LIST_LIMIT]
        )

    def mark_as_read(self, notification_id: Any) -> Notification:
        notification = get_or_not_found(self._own(), pk=notification_id)
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read", "updated_at"])
        return notification

    def mark_all_as_read(self) -> int:
        """Mark every unread notification read; return how many changed."""
        updated = self._own().filter(is_read=False).update(is_read=True)
        logger.info("Marked %d notification(s) read for user=%s", updated, self.actor.id)
        return updated

    def delete(self, notification_id: Any) -> None:
        notification = get_or_not_found(self._own(), pk=notification_id)
        notification.delete()

    def create(
        self,
        *,
        user_id: Any,
        notification_type: str,
        title: str,
        message: str,
        case_id: Any = None,
    ) -> Notification:
        """
        Internal creation path used by ``POST /api/notifications/``.

        Raises
        ------
        NotFound
            ``user_id`` or ``case_id`` does not resolve.
        """
        recipient = get_or_not_found(User.objects.filter(is_active=True), pk=user_id)
        case = None
        if case_id is not None:
            Case = apps.get_model("cases", "Case")
            case = get_or_not_found(Case.objects.all(), pk=case_id)

        (notification,) = NotificationService.create(
            recipients=recipient,
            notification_type=notification_type,
            title=title,
            message=message,
            case=case,
        )
        return notification


# ═══════════════════════════════════════════════════════════════════
#  Dashboard Stats Service
# ═══════════════════════════════════════════════════════════════════

class DashboardStatsService:
    """
    Produces the counters consumed by ``DashboardStatsSerializer``.

    The keys returned depend on the actor's role:

    * **Client**: ``active_cases``, ``pending_approvals``,
      ``upcoming_hearings``, ``total_cases`` over the client's own cases.
    * **Lawyer**: ``pending_requests``, ``active_cases``,
      ``upcoming_hearings`` over the lawyer's requests and cases.
    * **Police**: ``pending_review``, ``approved_today``,
      ``rejected_cases`` over the cases filed at the officer's station.
    """

    def __init__(self, actor: ActorContext) -> None:
        self.actor = actor

    def get_stats(self) -> dict[str, int]:
        from accounts.models import UserRole

        handlers = {
            UserRole.CLIENT: self._client_stats,
            UserRole.LAWYER: self._lawyer_stats,
            UserRole.POLICE: self._police_stats,
        }
        return handlers[self.actor.role]()

    # ── Private helpers ─────────────────────────────────────────────

    @staticmethod
    def _today() -> datetime.date:
        return timezone.localdate()

    def _visible_cases(self) -> QuerySet:
        from cases.services import CaseQueryService

        return CaseQueryService.get_visible_queryset(self.actor)

    def _active_filter(self) -> Q:
        from cases.models import CaseStatus

        return Q(status__in=[CaseStatus.UNDER_REVIEW, CaseStatus.APPROVED])

    def _client_stats(self) -> dict[str, int]:
        from cases.models import CaseStatus

        return self._visible_cases().aggregate(
            active_cases=Count("id", filter=self._active_filter()),
            pending_approvals=Count("id", filter=Q(status=CaseStatus.UNDER_REVIEW)),
            upcoming_hearings=Count("id", filter=Q(hearing_date__gt=self._today())),
            total_cases=Count("id"),
        )

    def _lawyer_stats(self) -> dict[str, int]:
        from case_requests.models import CaseRequestStatus

        CaseRequest = apps.get_model("case_requests", "CaseRequest")

        stats = self._visible_cases().aggregate(
            active_cases=Count("id", filter=self._active_filter()),
            upcoming_hearings=Count("id", filter=Q(hearing_date__gt=self._today())),
        )
        stats["pending_requests"] = CaseRequest.objects.filter(
            lawyer_id=self.actor.id,
            status=CaseRequestStatus.PENDING,
        ).count()
        return stats

    def _police_stats(self) -> dict[str, int]:
        from cases.models import CaseStatus

        start_of_day = timezone.make_aware(
            datetime.datetime.combine(self._today(), datetime.time.min),
        )
        return self._visible_cases().aggregate(
            pending_review=Count("id", filter=Q(status=CaseStatus.UNDER_REVIEW)),
            approved_today=Count(
                "id",
                filter=Q(status=CaseStatus.APPROVED, updated_at__gte=start_of_day),
            ),
            rejected_cases=Count("id", filter=Q(status=CaseStatus.REJECTED)),
        )
