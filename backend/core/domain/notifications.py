"""
core.domain.notifications — Notification creation and transition fan-out.

Two entry points:

* ``NotificationService.create`` — one ``Notification`` per recipient.
  Used directly by the internal ``POST /api/notifications/`` path.
* ``NotificationFanout.on_transition`` — turns one ``TransitionEvent``
  into the full set of per-recipient notifications (and, for case
  decisions, emails).

Design decisions
----------------
* The fan-out runs **after** the state commit.  Services call it once the
  ``transaction.atomic()`` block holding the conditional write has exited,
  so an aborted transition never produces notifications.
* The fan-out never raises.  Each notification row is written in its own
  savepoint; database errors and ``SideEffectFailure`` from email are
  logged and collected in the returned ``FanoutReport``.  Nothing is
  retried here.
* Email is only sent for case approval and rejection.

Usage::

    from core.domain.notifications import EventKind, NotificationFanout, TransitionEvent

    NotificationFanout.on_transition(
        TransitionEvent(kind=EventKind.CASE_APPROVED, actor_id=actor.id, case=case)
    )
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from django.db import DatabaseError, models, transaction

from core.domain.email import EmailDispatcher
from core.domain.exceptions import SideEffectFailure

if TYPE_CHECKING:
    from accounts.models import User
    from case_requests.models import CaseRequest
    from cases.models import Case
    from core.models import Notification
    from messaging.models import Message

logger = logging.getLogger(__name__)

# ── Notification type → (title, message template) ──────────────────
_TEMPLATES: dict[str, tuple[str, str]] = {
    "case_approved":     ("Case Approved",     'Your case "{title}" has been approved. PNR: {pnr}'),
    "hearing_scheduled": ("Hearing Scheduled", 'A hearing for case "{title}" is scheduled on {hearing_date}.'),
    "case_rejected":     ("Case Rejected",     'Your case "{title}" has been rejected.{reason}'),
    "case_created":      ("Case Created",      'Case "{title}" has been created ({status}).'),
    "case_request":      ("New Case Request",  'You have a new case request "{title}" from {client}.'),
    "new_message":       ("New Message",       "You have a new message from {sender}."),
}


class EventKind(enum.Enum):
    """Transition events the fan-out knows how to route."""

    CASE_APPROVED = "case_approved"
    CASE_REJECTED = "case_rejected"
    CASE_CREATED = "case_created"
    CASE_REQUEST_CREATED = "case_request_created"
    MESSAGE_SENT = "message_sent"


@dataclass(frozen=True)
class TransitionEvent:
    """
    One committed state change.  Only the entity fields relevant to
    ``kind`` are populated.
    """

    kind: EventKind
    actor_id: Any = None
    case: Case | None = None
    case_request: CaseRequest | None = None
    message: Message | None = None


@dataclass(frozen=True)
class NotificationIntent:
    recipient: User
    type: str
    context: dict[str, Any]
    case: Case | None = None
    case_request: CaseRequest | None = None


@dataclass(frozen=True)
class EmailIntent:
    to: str
    template: str  # "approved" | "rejected"
    context: dict[str, Any]


@dataclass
class FanoutReport:
    """What the fan-out managed to deliver, and what it had to drop."""

    notifications: list[Notification] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def render(notification_type: str, **context: Any) -> tuple[str, str]:
    """Return ``(title, message)`` for a notification type."""
    title, template = _TEMPLATES.get(
        notification_type,
        (notification_type.replace("_", " ").title(), "{detail}"),
    )
    context.setdefault("detail", "")
    return title, template.format(**context)


class NotificationService:
    """
    Stateless helper for creating ``Notification`` records.

    All methods are classmethods — no instance state is needed.
    """

    @classmethod
    def create(
        cls,
        *,
        recipients: User | Iterable[User],
        notification_type: str,
        title: str,
        message: str,
        case: Case | None = None,
        case_request: CaseRequest | None = None,
    ) -> list[Notification]:
        """
        Create one ``Notification`` per recipient.

        Args:
            recipients:        A single ``User`` or iterable of users.
            notification_type: A ``NotificationType`` value.
            title, message:    Rendered text.
            case:              Optional back-reference to the case.
            case_request:      Optional back-reference to the request.

        Returns:
            List of created ``Notification`` instances.
        """
        from core.models import Notification  # lazy import — avoids circular deps

        if isinstance(recipients, models.Model):
            recipients = [recipients]
        else:
            recipients = list(recipients)

        if not recipients:
            logger.warning(
                "NotificationService.create called with empty recipients "
                "for type=%s",
                notification_type,
            )
            return []

        notifications = [
            Notification.objects.create(
                recipient=recipient,
                title=title,
                message=message,
                type=notification_type,
                case=case,
                case_request=case_request,
            )
            for recipient in recipients
        ]

        logger.info(
            "Created %d notification(s) [%s]",
            len(notifications),
            notification_type,
        )
        return notifications


class NotificationFanout:
    """
    Routes a ``TransitionEvent`` to its recipients.

    Routing table
    -------------
    ┌──────────────────────┬──────────────────────┬───────────────────────────────┐
    │ Event                │ Recipients           │ Notification type(s)          │
    ├──────────────────────┼──────────────────────┼───────────────────────────────┤
    │ CASE_APPROVED        │ client, lawyer       │ case_approved (+ email),      │
    │                      │                      │ hearing_scheduled             │
    │ CASE_REJECTED        │ client, lawyer       │ case_rejected (+ email)       │
    │ CASE_CREATED         │ client               │ case_created                  │
    │ CASE_REQUEST_CREATED │ lawyer               │ case_request                  │
    │ MESSAGE_SENT         │ receiver             │ new_message                   │
    └──────────────────────┴──────────────────────┴───────────────────────────────┘
    """

    @classmethod
    def on_transition(cls, event: TransitionEvent) -> FanoutReport:
        """
        Persist every notification for ``event`` and send its emails.

        Never raises; failures are logged and listed in the report.
        """
        report = FanoutReport()
        intents, emails = cls.plan(event)

        for intent in intents:
            title, message = render(intent.type, **intent.context)
            try:
                with transaction.atomic():
                    report.notifications.extend(
                        NotificationService.create(
                            recipients=intent.recipient,
                            notification_type=intent.type,
                            title=title,
                            message=message,
                            case=intent.case,
                            case_request=intent.case_request,
                        )
                    )
            except DatabaseError:
                logger.exception(
                    "Could not persist %s notification for user=%s after %s",
                    intent.type,
                    intent.recipient.pk,
                    event.kind.value,
                )
                report.failures.append(f"notification:{intent.type}:{intent.recipient.pk}")

        for email in emails:
            sender = getattr(EmailDispatcher, f"send_case_{email.template}")
            try:
                report.emails.append(sender(to=email.to, **email.context))
            except SideEffectFailure as exc:
                logger.warning(
                    "Email side effect for %s dropped: %s",
                    event.kind.value,
                    exc,
                )
                report.failures.append(f"email:{email.template}:{email.to}")
            except Exception:
                logger.exception(
                    "Unexpected error sending %s email to %s after %s",
                    email.template,
                    email.to,
                    event.kind.value,
                )
                report.failures.append(f"email:{email.template}:{email.to}")

        return report

    @classmethod
    def plan(cls, event: TransitionEvent) -> tuple[list[NotificationIntent], list[EmailIntent]]:
        """Compute the notifications and emails owed for ``event``."""
        planner = {
            EventKind.CASE_APPROVED: cls._plan_case_approved,
            EventKind.CASE_REJECTED: cls._plan_case_rejected,
            EventKind.CASE_CREATED: cls._plan_case_created,
            EventKind.CASE_REQUEST_CREATED: cls._plan_case_request_created,
            EventKind.MESSAGE_SENT: cls._plan_message_sent,
        }[event.kind]
        return planner(event)

    # ── Planners ────────────────────────────────────────────────────

    @staticmethod
    def _case_parties(case: Case) -> list[User]:
        return [user for user in (case.client, case.lawyer) if user is not None]

    @classmethod
    def _plan_case_approved(cls, event: TransitionEvent):
        case = event.case
        parties = cls._case_parties(case)
        context = {
            "title": case.title,
            "pnr": case.pnr,
            "hearing_date": case.hearing_date.isoformat() if case.hearing_date else "",
        }
        intents = [
            NotificationIntent(user, "case_approved", context, case=case)
            for user in parties
        ]
        if case.hearing_date:
            intents += [
                NotificationIntent(user, "hearing_scheduled", context, case=case)
                for user in parties
            ]
        emails = [
            EmailIntent(
                to=user.email,
                template="approved",
                context={
                    "case_title": case.title,
                    "pnr": case.pnr,
                    "hearing_date": context["hearing_date"],
                },
            )
            for user in parties
            if user.email
        ]
        return intents, emails

    @classmethod
    def _plan_case_rejected(cls, event: TransitionEvent):
        case = event.case
        parties = cls._case_parties(case)
        reason = case.rejection_reason
        context = {
            "title": case.title,
            "reason": f" Reason: {reason}" if reason else "",
        }
        intents = [
            NotificationIntent(user, "case_rejected", context, case=case)
            for user in parties
        ]
        emails = [
            EmailIntent(
                to=user.email,
                template="rejected",
                context={"case_title": case.title, "reason": reason},
            )
            for user in parties
            if user.email
        ]
        return intents, emails

    @staticmethod
    def _plan_case_created(event: TransitionEvent):
        case = event.case
        context = {"title": case.title, "status": case.get_status_display().lower()}
        return [NotificationIntent(case.client, "case_created", context, case=case)], []

    @staticmethod
    def _plan_case_request_created(event: TransitionEvent):
        request = event.case_request
        context = {"title": request.title, "client": request.client.name or request.client.email}
        return [
            NotificationIntent(request.lawyer, "case_request", context, case_request=request)
        ], []

    @staticmethod
    def _plan_message_sent(event: TransitionEvent):
        message = event.message
        context = {"sender": message.sender.name or message.sender.email}
        return [
            NotificationIntent(message.receiver, "new_message", context, case=message.case)
        ], []
