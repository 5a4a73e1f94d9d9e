"""
Case Requests Service Layer.

All business logic for the client → lawyer request handshake.  Views stay
thin: validate, call one of these methods, serialize.

Architecture
------------
- ``CaseRequestQueryService`` — role-scoped listing and lookups.
- ``CaseRequestService``      — create / accept / reject / respond.

Lifecycle
---------
  PENDING → ACCEPTED   (lawyer accepts; a Case is built in the same
                        transaction and the client is notified)
  PENDING → REJECTED   (lawyer declines, optional response text)

Both outcomes are final.  A second accept or reject, including one that
lost a race with a concurrent call, fails with ``InvalidTransition``.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet

from accounts.models import UserRole
from cases import workflow
from cases.models import Case
from cases.services import CaseCreationService
from core.domain.access import ActorContext, apply_role_scope, require_role
from core.domain.exceptions import InvalidTransition, Unauthorized
from core.domain.notifications import EventKind, NotificationFanout, TransitionEvent
from core.domain.transactions import conditional_transition, get_or_not_found

from .models import CaseRequest, CaseRequestStatus

logger = logging.getLogger(__name__)

#: Fields a lawyer may fill in when accepting a request.
ACCEPTANCE_DETAIL_FIELDS = ("case_type", "victim", "accused", "city", "police_station")


# ═══════════════════════════════════════════════════════════════════
#  Query Service
# ═══════════════════════════════════════════════════════════════════


REQUEST_SCOPE_RULES = {
    UserRole.CLIENT: lambda qs, actor: qs.filter(client_id=actor.id),
    UserRole.LAWYER: lambda qs, actor: qs.filter(lawyer_id=actor.id),
}


class CaseRequestQueryService:
    """Role-scoped reads.  Police have no access to case requests."""

    @staticmethod
    def get_visible_queryset(actor: ActorContext) -> QuerySet[CaseRequest]:
        qs = CaseRequest.objects.select_related("client", "lawyer", "police_station", "case")
        return apply_role_scope(qs, actor, scope_rules=REQUEST_SCOPE_RULES)

    @classmethod
    def list_requests(cls, actor: ActorContext, *, status: str | None = None) -> QuerySet[CaseRequest]:
        """
        Requests the actor sent (client) or received (lawyer), newest first.

        Parameters
        ----------
        status : str, optional
            Restrict to one ``CaseRequestStatus``.
        """
        qs = cls.get_visible_queryset(actor)
        if status:
            qs = qs.filter(status=status)
        return qs

    @classmethod
    def get_request(cls, actor: ActorContext, request_id: Any) -> CaseRequest:
        return get_or_not_found(cls.get_visible_queryset(actor), pk=request_id)


# ═══════════════════════════════════════════════════════════════════
#  Command Service
# ═══════════════════════════════════════════════════════════════════


class CaseRequestService:
    """
    Mutations on case requests.

    ``accept`` and ``reject`` go through ``cases.workflow`` for the
    legality check and ``conditional_transition`` for the write, exactly
    like case transitions.
    """

    @staticmethod
    def _load(request_id: Any) -> CaseRequest:
        return get_or_not_found(
            CaseRequest.objects.select_related("client", "lawyer"),
            pk=request_id,
        )

    @staticmethod
    def create(validated_data: dict[str, Any], actor: ActorContext) -> CaseRequest:
        """
        Client sends a new request to a lawyer.

        The status is always ``PENDING`` regardless of input.  Contact
        fields default to the client's own profile when omitted.  The
        lawyer receives a ``case_request`` notification after commit.

        Parameters
        ----------
        validated_data : dict
            From ``CaseRequestCreateSerializer``: ``lawyer`` (User),
            ``title``, ``description``, ``victim_name``, ``accused_name``,
            optional ``client_phone``, ``client_email``, ``documents``.
        actor : ActorContext
            Must be a client.
        """
        require_role(actor, UserRole.CLIENT, message="Only clients can send case requests.")

        data = dict(validated_data)
        data.pop("status", None)
        lawyer = data.pop("lawyer")
        if lawyer.role != UserRole.LAWYER:
            raise Unauthorized("Case requests can only be sent to lawyers.")

        with transaction.atomic():
            case_request = CaseRequest.objects.create(
                client_id=actor.id,
                lawyer=lawyer,
                status=CaseRequestStatus.PENDING,
                **data,
            )
            client = case_request.client
            defaults = {}
            if not case_request.client_phone and client.phone:
                defaults["client_phone"] = client.phone
            if not case_request.client_email:
                defaults["client_email"] = client.email
            if defaults:
                for field, value in defaults.items():
                    setattr(case_request, field, value)
                case_request.save(update_fields=[*defaults, "updated_at"])

        logger.info(
            "Case request #%s sent by client=%s to lawyer=%s",
            case_request.pk, actor.id, lawyer.pk,
        )
        NotificationFanout.on_transition(
            TransitionEvent(
                kind=EventKind.CASE_REQUEST_CREATED,
                actor_id=actor.id,
                case_request=case_request,
            )
        )
        return case_request

    @classmethod
    def accept(
        cls,
        request_id: Any,
        actor: ActorContext,
        details: dict[str, Any] | None = None,
    ) -> CaseRequest:
        """
        **Lawyer accepts a pending request.**

        Transitions: ``PENDING`` → ``ACCEPTED`` and builds the ``Case``.

        Steps performed inside one ``transaction.atomic()``:
            1. Conditional write of the request status plus the
               acceptance details.
            2. ``CaseCreationService.build_from_request`` creates the case
               (``SUBMITTED`` if fully detailed, else ``DRAFT``).
            3. Link the request to the new case.

        After commit the client receives one ``case_created``
        notification.

        Parameters
        ----------
        details : dict, optional
            Any of ``case_type``, ``victim``, ``accused``, ``city``,
            ``police_station`` and ``lawyer_response``.

        Returns
        -------
        CaseRequest
            The accepted request, with ``case`` populated.

        Raises
        ------
        Unauthorized
            Actor is not the addressed lawyer.
        InvalidTransition
            Request is not pending (already processed, or lost a race).
        """
        details = details or {}
        case_request = cls._load(request_id)
        outcome = workflow.transition(
            workflow.Entity.CASE_REQUEST,
            case_request.status,
            workflow.CaseRequestAction.ACCEPT,
            actor,
            owner_id=case_request.lawyer_id,
        )

        changes: dict[str, Any] = {
            field: details[field] for field in ACCEPTANCE_DETAIL_FIELDS if field in details
        }
        if "lawyer_response" in details:
            changes["lawyer_response"] = details["lawyer_response"] or ""

        with transaction.atomic():
            accepted = conditional_transition(
                model=CaseRequest,
                pk=case_request.pk,
                expected_status=case_request.status,
                target_status=outcome.new_state,
                changes=changes,
            )
            case = CaseCreationService.build_from_request(accepted, actor)
            CaseRequest.objects.filter(pk=accepted.pk).update(case=case)
            accepted.case = case

        logger.info(
            "Case request #%s accepted by lawyer=%s; case #%s created (%s)",
            accepted.pk, actor.id, case.pk, case.status,
        )

        case = Case.objects.select_related("client", "lawyer").get(pk=case.pk)
        for effect in outcome.side_effects:
            NotificationFanout.on_transition(
                TransitionEvent(kind=effect, actor_id=actor.id, case=case, case_request=accepted)
            )
        return accepted

    @classmethod
    def reject(
        cls,
        request_id: Any,
        actor: ActorContext,
        response: str | None = None,
    ) -> CaseRequest:
        """
        **Lawyer declines a pending request.**

        Transitions: ``PENDING`` → ``REJECTED``.  Only the status and the
        optional ``lawyer_response`` change.
        """
        case_request = cls._load(request_id)
        outcome = workflow.transition(
            workflow.Entity.CASE_REQUEST,
            case_request.status,
            workflow.CaseRequestAction.REJECT,
            actor,
            owner_id=case_request.lawyer_id,
        )
        changes = {"lawyer_response": response} if response is not None else None

        rejected = conditional_transition(
            model=CaseRequest,
            pk=case_request.pk,
            expected_status=case_request.status,
            target_status=outcome.new_state,
            changes=changes,
        )
        logger.info("Case request #%s rejected by lawyer=%s", rejected.pk, actor.id)
        return rejected

    @classmethod
    def respond(cls, request_id: Any, actor: ActorContext, lawyer_response: str) -> CaseRequest:
        """
        Update only ``lawyer_response``; allowed in any status.
        """
        case_request = cls._load(request_id)
        if not actor.is_role(UserRole.LAWYER) or str(case_request.lawyer_id) != str(actor.id):
            raise Unauthorized("Only the addressed lawyer can respond to this request.")

        CaseRequest.objects.filter(pk=case_request.pk).update(lawyer_response=lawyer_response)
        case_request.refresh_from_db()
        return case_request

    @classmethod
    def update(cls, request_id: Any, actor: ActorContext, data: dict[str, Any]) -> CaseRequest:
        """
        ``PATCH /api/case-requests/{id}/`` — ``{status?, lawyer_response?, ...}``.

        Dispatches on ``status``: ``accepted`` → ``accept``,
        ``rejected`` → ``reject``, absent → ``respond``.  Asking to move
        back to ``pending`` is an ``InvalidTransition``.
        """
        target = data.get("status")
        response = data.get("lawyer_response")

        if target == CaseRequestStatus.ACCEPTED:
            return cls.accept(request_id, actor, data)
        if target == CaseRequestStatus.REJECTED:
            return cls.reject(request_id, actor, response)
        if target == CaseRequestStatus.PENDING:
            current = cls._load(request_id).status
            raise InvalidTransition(
                current=current,
                target=CaseRequestStatus.PENDING,
                reason="requests never return to pending",
            )
        return cls.respond(request_id, actor, response or "")
