"""
Cases app Service Layer.

This module is the **single source of truth** for all business logic
in the ``cases`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
a DRF ``Response``.

Architecture
------------
- ``PoliceStationService``  — Station directory lookups.
- ``CaseQueryService``      — Role-scoped querysets and detail lookups.
- ``CaseCreationService``   — Direct draft creation and request-driven creation.
- ``CaseDraftService``      — Editing a case while it is still a draft.
- ``CaseWorkflowService``   — submit / review / approve / reject transitions.
- ``CaseDocumentService``   — Appending opaque document references.

Workflow State-Machine Overview
--------------------------------
  DRAFT
    → SUBMITTED      (client submits; all filing details present)
    → UNDER_REVIEW   (police at the case's station starts review)
    → APPROVED       (police assigns PNR + hearing date)
  SUBMITTED | UNDER_REVIEW
    → REJECTED       (police rejects, optional reason)

The legality table lives in ``cases.workflow``.  This module loads the
case, asks the engine for the outcome, commits it with a conditional
write and then runs the fan-out.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet

from accounts.models import UserRole
from core.domain.access import ActorContext, apply_role_scope, require_role
from core.domain.exceptions import Conflict, InvalidTransition, MissingField, Unauthorized
from core.domain.notifications import EventKind, NotificationFanout, TransitionEvent
from core.domain.transactions import conditional_transition, get_or_not_found

from . import workflow
from .models import Case, CaseStatus, CaseStatusLog, PoliceStation

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Police Station Service
# ═══════════════════════════════════════════════════════════════════


class PoliceStationService:
    """Read-only access to the police station directory."""

    @staticmethod
    def list_stations(*, city: str | None = None) -> QuerySet[PoliceStation]:
        qs = PoliceStation.objects.all()
        if city:
            qs = qs.filter(city__iexact=city)
        return qs


# ═══════════════════════════════════════════════════════════════════
#  Case Query Service
# ═══════════════════════════════════════════════════════════════════


#: Role → visibility filter.  Police never see drafts, only cases filed
#: with their own station.
CASE_SCOPE_RULES = {
    UserRole.CLIENT: lambda qs, actor: qs.filter(client_id=actor.id),
    UserRole.LAWYER: lambda qs, actor: qs.filter(lawyer_id=actor.id),
    UserRole.POLICE: lambda qs, actor: (
        qs.filter(police_station__code=actor.police_station_code)
        .exclude(status=CaseStatus.DRAFT)
        if actor.police_station_code
        else qs.none()
    ),
}


class CaseQueryService:
    """
    Constructs role-scoped querysets for listing cases.

    All heavy query concerns (filter assembly, ordering) live here so the
    view stays thin.
    """

    @staticmethod
    def get_visible_queryset(actor: ActorContext) -> QuerySet[Case]:
        qs = Case.objects.select_related("client", "lawyer", "police_station")
        return apply_role_scope(qs, actor, scope_rules=CASE_SCOPE_RULES)

    @classmethod
    def get_filtered_queryset(
        cls,
        actor: ActorContext,
        filters: dict[str, Any],
    ) -> QuerySet[Case]:
        """
        Build a role-scoped, filtered queryset of ``Case`` objects.

        Parameters
        ----------
        actor : ActorContext
            The requesting user.
        filters : dict
            Cleaned query-parameter dict from ``CaseFilterSerializer``.
            Supported keys: ``status``, ``case_type``, ``city``,
            ``search`` (title / description / PNR).

        Returns
        -------
        QuerySet[Case]
        """
        qs = cls.get_visible_queryset(actor)

        if filters.get("status"):
            qs = qs.filter(status=filters["status"])
        if filters.get("case_type"):
            qs = qs.filter(case_type=filters["case_type"])
        if filters.get("city"):
            qs = qs.filter(city__iexact=filters["city"])
        if filters.get("search"):
            term = filters["search"]
            qs = qs.filter(
                Q(title__icontains=term)
                | Q(description__icontains=term)
                | Q(pnr__iexact=term)
            )
        return qs

    @classmethod
    def get_case_detail(cls, actor: ActorContext, case_id: Any) -> Case:
        """
        Return one case visible to ``actor``.

        Raises
        ------
        NotFound
            If the case does not exist or the actor may not see it.
        """
        return get_or_not_found(cls.get_visible_queryset(actor), pk=case_id)

    @classmethod
    def get_status_log(cls, actor: ActorContext, case_id: Any) -> QuerySet[CaseStatusLog]:
        case = cls.get_case_detail(actor, case_id)
        return case.status_logs.select_related("changed_by").order_by("created_at", "id")


# ═══════════════════════════════════════════════════════════════════
#  Case Creation Service
# ═══════════════════════════════════════════════════════════════════


class CaseCreationService:
    """
    Handles the two ways a case comes into existence: a client filing it
    directly, or a lawyer accepting a case request.
    """

    @staticmethod
    def create_case(validated_data: dict[str, Any], actor: ActorContext) -> Case:
        """
        Create a new case as a ``DRAFT`` owned by the requesting client.

        Parameters
        ----------
        validated_data : dict
            Cleaned data from ``CaseCreateSerializer``.  Required:
            ``title``.  Optional: ``description``, ``case_type``,
            ``victim``, ``accused``, ``city``, ``police_station``,
            ``lawyer``, ``documents``.
        actor : ActorContext
            Must be a client.

        Returns
        -------
        Case
            The new draft.  A ``case_created`` notification is sent to
            the client after commit.
        """
        require_role(actor, UserRole.CLIENT, message="Only clients can file a case.")

        lawyer = validated_data.get("lawyer")
        if lawyer is not None and lawyer.role != UserRole.LAWYER:
            raise Unauthorized("The selected user is not a lawyer.")

        with transaction.atomic():
            case = Case.objects.create(
                client_id=actor.id,
                status=CaseStatus.DRAFT,
                **validated_data,
            )
            CaseStatusLog.objects.create(
                case=case,
                from_status="",
                to_status=CaseStatus.DRAFT,
                changed_by_id=actor.id,
                message="Case created.",
            )

        logger.info("Case #%s created by client=%s", case.pk, actor.id)
        NotificationFanout.on_transition(
            TransitionEvent(kind=EventKind.CASE_CREATED, actor_id=actor.id, case=case)
        )
        return case

    @staticmethod
    def build_from_request(case_request, actor: ActorContext) -> Case:
        """
        Build the ``Case`` for an accepted case request.

        Must be called inside the caller's ``transaction.atomic()`` block,
        right after the request's conditional write.  The new case is
        ``SUBMITTED`` when every filing detail is present, ``DRAFT``
        otherwise.

        Parameters
        ----------
        case_request : CaseRequest
            The request, already carrying the acceptance details.
        actor : ActorContext
            The accepting lawyer.

        Returns
        -------
        Case
        """
        victim = dict(case_request.victim or {})
        victim.setdefault("name", case_request.victim_name)
        accused = dict(case_request.accused or {})
        accused.setdefault("name", case_request.accused_name)

        case = Case(
            title=case_request.title,
            description=case_request.description,
            case_type=case_request.case_type,
            victim=victim,
            accused=accused,
            client_id=case_request.client_id,
            lawyer_id=case_request.lawyer_id,
            police_station_id=case_request.police_station_id,
            city=case_request.city,
            documents=list(case_request.documents or []),
            status=CaseStatus.DRAFT,
        )
        if not case.missing_filing_details:
            case.status = CaseStatus.SUBMITTED
        case.save()

        CaseStatusLog.objects.create(
            case=case,
            from_status="",
            to_status=case.status,
            changed_by_id=actor.id,
            message=f"Created from case request #{case_request.pk}.",
        )
        return case


# ═══════════════════════════════════════════════════════════════════
#  Case Draft Service
# ═══════════════════════════════════════════════════════════════════


class CaseDraftService:
    """Edits to a case that has not been submitted yet."""

    @staticmethod
    def update_draft(case_id: Any, validated_data: dict[str, Any], actor: ActorContext) -> Case:
        """
        Apply ``validated_data`` to a draft owned by the requesting client.

        The write is conditional on the case still being a draft, so an
        edit racing a submit cannot change a submitted case.

        Raises
        ------
        NotFound
            Case missing or not visible.
        Unauthorized
            Actor is not the owning client.
        InvalidTransition
            Case is no longer a draft.
        """
        case = CaseQueryService.get_case_detail(actor, case_id)
        if not actor.is_role(UserRole.CLIENT) or str(case.client_id) != str(actor.id):
            raise Unauthorized("Only the client who filed the case can edit it.")

        if not validated_data:
            return case

        changes = dict(validated_data)
        if "lawyer" in changes:
            lawyer = changes.pop("lawyer")
            if lawyer is not None and lawyer.role != UserRole.LAWYER:
                raise Unauthorized("The selected user is not a lawyer.")
            changes["lawyer_id"] = lawyer.pk if lawyer else None
        if "police_station" in changes:
            station = changes.pop("police_station")
            changes["police_station_id"] = station.pk if station else None

        # draft → draft: a conditional write that only lands on drafts
        updated = conditional_transition(
            model=Case,
            pk=case.pk,
            expected_status=CaseStatus.DRAFT,
            target_status=CaseStatus.DRAFT,
            changes=changes,
        )
        logger.info("Draft case #%s updated by client=%s", case.pk, actor.id)
        return updated


# ═══════════════════════════════════════════════════════════════════
#  Case Workflow Service
# ═══════════════════════════════════════════════════════════════════


class CaseWorkflowService:
    """
    Manages **all** status transitions in the case lifecycle.

    Every public method follows the same path:

        1. Load the case (``NotFound`` if missing).
        2. Ask ``cases.workflow.transition`` for the outcome
           (``Unauthorized`` → ``InvalidTransition`` → ``MissingField``).
        3. ``apply_outcome``: conditional write from the state read in
           step 1, audit log row, all inside ``transaction.atomic()``.
        4. After the atomic block: notification / email fan-out.

    Design Pattern: State Machine + Command
    ----------------------------------------
    Each transition is a command ``(case, action, actor, payload)``.  The
    losing side of two concurrent commands on the same case fails its
    conditional write with ``InvalidTransition``.
    """

    @staticmethod
    def _load(case_id: Any) -> Case:
        return get_or_not_found(
            Case.objects.select_related("client", "lawyer", "police_station"),
            pk=case_id,
        )

    @staticmethod
    def evaluate(
        case: Case,
        action: str,
        actor: ActorContext,
        payload: dict[str, Any] | None = None,
    ) -> workflow.TransitionOutcome:
        """Run the engine for ``action`` against ``case`` as read."""
        return workflow.transition(
            workflow.Entity.CASE,
            case.status,
            action,
            actor,
            owner_id=case.client_id,
            police_station_code=case.police_station.code if case.police_station else None,
            payload=payload,
        )

    @staticmethod
    def apply_outcome(
        case: Case,
        outcome: workflow.TransitionOutcome,
        actor: ActorContext,
        *,
        changes: dict[str, Any] | None = None,
        message: str = "",
    ) -> Case:
        """
        Commit ``outcome`` for ``case`` and run its side effects.

        ``case.status`` is the pre-state the outcome was computed from;
        the write only lands if the stored status still equals it.

        Raises
        ------
        InvalidTransition
            Another request moved the case first.
        Conflict
            The PNR is already assigned to another case, or the write
            hit another integrity constraint.
        """
        try:
            with transaction.atomic():
                updated = conditional_transition(
                    model=Case,
                    pk=case.pk,
                    expected_status=case.status,
                    target_status=outcome.new_state,
                    changes=changes,
                )
                CaseStatusLog.objects.create(
                    case=updated,
                    from_status=case.status,
                    to_status=outcome.new_state,
                    changed_by_id=actor.id,
                    message=message,
                )
        except IntegrityError as exc:
            pnr = (changes or {}).get("pnr")
            if pnr and Case.objects.filter(pnr=pnr).exclude(pk=case.pk).exists():
                raise Conflict(f"PNR '{pnr}' is already assigned to another case.") from exc
            logger.exception("Integrity error committing case #%s -> %s", case.pk, outcome.new_state)
            raise Conflict("The case could not be updated because it conflicts with existing data.") from exc

        logger.info(
            "Case #%s: %s -> %s by user=%s",
            case.pk, case.status, outcome.new_state, actor.id,
        )

        for effect in outcome.side_effects:
            NotificationFanout.on_transition(
                TransitionEvent(kind=effect, actor_id=actor.id, case=updated)
            )
        return updated

    @classmethod
    def submit(cls, case_id: Any, actor: ActorContext) -> Case:
        """
        **Client submits a draft case to its police station.**

        Transitions: ``DRAFT`` → ``SUBMITTED``.

        Raises
        ------
        MissingField
            If ``case_type``, ``city``, ``police_station`` or the
            victim / accused names are missing.
        """
        case = cls._load(case_id)
        outcome = cls.evaluate(case, workflow.CaseAction.SUBMIT, actor)
        missing = case.missing_filing_details
        if missing:
            raise MissingField(fields=missing)
        return cls.apply_outcome(case, outcome, actor, message="Submitted for review.")

    @classmethod
    def start_review(cls, case_id: Any, actor: ActorContext) -> Case:
        """
        **Police reviewer picks up a submitted case.**

        Transitions: ``SUBMITTED`` → ``UNDER_REVIEW``.
        """
        case = cls._load(case_id)
        outcome = cls.evaluate(case, workflow.CaseAction.REVIEW, actor)
        return cls.apply_outcome(case, outcome, actor, message="Review started.")

    @classmethod
    def approve(
        cls,
        case_id: Any,
        actor: ActorContext,
        *,
        pnr: str | None,
        hearing_date,
    ) -> Case:
        """
        **Police reviewer approves a case.**

        Transitions: ``UNDER_REVIEW`` → ``APPROVED``.

        Both ``pnr`` and ``hearing_date`` are required and written in the
        same conditional update as the status.  Client and lawyer each
        receive ``case_approved`` and ``hearing_scheduled`` notifications
        plus an approval email.

        Raises
        ------
        MissingField
            ``pnr`` or ``hearing_date`` absent; status is unchanged.
        Conflict
            ``pnr`` is already used by another case.
        """
        case = cls._load(case_id)
        pnr = (pnr or "").strip() or None
        outcome = cls.evaluate(
            case,
            workflow.CaseAction.APPROVE,
            actor,
            payload={"pnr": pnr, "hearing_date": hearing_date},
        )
        if Case.objects.filter(pnr=pnr).exclude(pk=case.pk).exists():
            raise Conflict(f"PNR '{pnr}' is already assigned to another case.")

        return cls.apply_outcome(
            case,
            outcome,
            actor,
            changes={"pnr": pnr, "hearing_date": hearing_date},
            message=f"Approved with PNR {pnr}, hearing on {hearing_date}.",
        )

    @classmethod
    def reject(cls, case_id: Any, actor: ActorContext, *, reason: str = "") -> Case:
        """
        **Police reviewer rejects a case.**

        Transitions: ``SUBMITTED`` | ``UNDER_REVIEW`` → ``REJECTED``.
        Client and lawyer are notified and emailed, with the reason when
        one is given.
        """
        case = cls._load(case_id)
        outcome = cls.evaluate(case, workflow.CaseAction.REJECT, actor)
        return cls.apply_outcome(
            case,
            outcome,
            actor,
            changes={"rejection_reason": reason or ""},
            message=reason or "Rejected.",
        )


# ═══════════════════════════════════════════════════════════════════
#  Case Document Service
# ═══════════════════════════════════════════════════════════════════


class CaseDocumentService:
    """Appends opaque upload references to a case's ordered document list."""

    @staticmethod
    def append_documents(case_id: Any, documents: list[str], actor: ActorContext) -> Case:
        """
        Append ``documents`` to the case, preserving order.

        Only the case's client or lawyer may attach documents, and not
        once the case has been rejected.
        """
        case = CaseQueryService.get_case_detail(actor, case_id)
        if str(actor.id) not in {str(case.client_id), str(case.lawyer_id)}:
            raise Unauthorized("Only the client or lawyer on this case can attach documents.")
        if case.status == CaseStatus.REJECTED:
            raise InvalidTransition(
                current=case.status,
                target=case.status,
                reason="documents cannot be added to a rejected case",
            )

        with transaction.atomic():
            locked = Case.objects.select_for_update().get(pk=case.pk)
            locked.documents = list(locked.documents or []) + list(documents)
            locked.save(update_fields=["documents", "updated_at"])

        logger.info("Attached %d document(s) to case #%s", len(documents), case.pk)
        return CaseQueryService.get_case_detail(actor, case_id)
