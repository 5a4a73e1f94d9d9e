"""
cases.workflow — Status transition engine for cases and case requests.

The engine is pure: it reads the current state, the actor and the
payload, and either returns the target state plus the side effects owed,
or raises.  It never touches the database.  Services apply the outcome
through ``core.domain.transactions.conditional_transition`` and run the
side effects through the notification fan-out once the write committed.

Transition table
----------------
┌──────────────┬─────────┬──────────────────────────┬───────────────────────────┬──────────────┐
│ Entity       │ Action  │ Actor                    │ From                      │ To           │
├──────────────┼─────────┼──────────────────────────┼───────────────────────────┼──────────────┤
│ case_request │ accept  │ lawyer owning request    │ pending                   │ accepted     │
│ case_request │ reject  │ lawyer owning request    │ pending                   │ rejected     │
│ case         │ submit  │ client owning case       │ draft                     │ submitted    │
│ case         │ review  │ police at case's station │ submitted                 │ under_review │
│ case         │ approve │ police at case's station │ under_review (+pnr, date) │ approved     │
│ case         │ reject  │ police at case's station │ submitted, under_review   │ rejected     │
└──────────────┴─────────┴──────────────────────────┴───────────────────────────┴──────────────┘

Checks run in a fixed order: role and ownership (``Unauthorized``), then
the pre-state (``InvalidTransition``), then required payload fields
(``MissingField``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.core.exceptions import ImproperlyConfigured
from django.db import models

from accounts.models import UserRole
from case_requests.models import CaseRequestStatus
from core.domain.access import ActorContext
from core.domain.exceptions import InvalidTransition, MissingField, Unauthorized
from core.domain.notifications import EventKind

from .models import CaseStatus

logger = logging.getLogger(__name__)


class Entity(models.TextChoices):
    CASE = "case", "Case"
    CASE_REQUEST = "case_request", "Case Request"


class CaseAction(models.TextChoices):
    SUBMIT = "submit", "Submit"
    REVIEW = "review", "Start Review"
    APPROVE = "approve", "Approve"
    REJECT = "reject", "Reject"


class CaseRequestAction(models.TextChoices):
    ACCEPT = "accept", "Accept"
    REJECT = "reject", "Reject"


class Ownership(models.TextChoices):
    """How an actor must relate to the entity beyond holding the role."""

    OWNER = "owner", "Actor owns the entity"
    STATION = "station", "Actor belongs to the entity's police station"


@dataclass(frozen=True)
class TransitionRule:
    role: UserRole
    ownership: Ownership
    sources: frozenset[str]
    target: str
    required: tuple[str, ...] = ()
    side_effects: tuple[EventKind, ...] = ()


@dataclass(frozen=True)
class TransitionOutcome:
    new_state: str
    side_effects: tuple[EventKind, ...]


RULES: dict[tuple[str, str], TransitionRule] = {
    # ── Case requests ────────────────────────────────────────────────
    (Entity.CASE_REQUEST, CaseRequestAction.ACCEPT): TransitionRule(
        role=UserRole.LAWYER,
        ownership=Ownership.OWNER,
        sources=frozenset({CaseRequestStatus.PENDING}),
        target=CaseRequestStatus.ACCEPTED,
        side_effects=(EventKind.CASE_CREATED,),
    ),
    (Entity.CASE_REQUEST, CaseRequestAction.REJECT): TransitionRule(
        role=UserRole.LAWYER,
        ownership=Ownership.OWNER,
        sources=frozenset({CaseRequestStatus.PENDING}),
        target=CaseRequestStatus.REJECTED,
    ),
    # ── Cases ────────────────────────────────────────────────────────
    (Entity.CASE, CaseAction.SUBMIT): TransitionRule(
        role=UserRole.CLIENT,
        ownership=Ownership.OWNER,
        sources=frozenset({CaseStatus.DRAFT}),
        target=CaseStatus.SUBMITTED,
    ),
    (Entity.CASE, CaseAction.REVIEW): TransitionRule(
        role=UserRole.POLICE,
        ownership=Ownership.STATION,
        sources=frozenset({CaseStatus.SUBMITTED}),
        target=CaseStatus.UNDER_REVIEW,
    ),
    (Entity.CASE, CaseAction.APPROVE): TransitionRule(
        role=UserRole.POLICE,
        ownership=Ownership.STATION,
        sources=frozenset({CaseStatus.UNDER_REVIEW}),
        target=CaseStatus.APPROVED,
        required=("pnr", "hearing_date"),
        side_effects=(EventKind.CASE_APPROVED,),
    ),
    (Entity.CASE, CaseAction.REJECT): TransitionRule(
        role=UserRole.POLICE,
        ownership=Ownership.STATION,
        sources=frozenset({CaseStatus.SUBMITTED, CaseStatus.UNDER_REVIEW}),
        target=CaseStatus.REJECTED,
        side_effects=(EventKind.CASE_REJECTED,),
    ),
}

_ACTIONS_BY_ENTITY = {
    Entity.CASE: CaseAction,
    Entity.CASE_REQUEST: CaseRequestAction,
}

_unruled = [
    f"{entity}.{action}"
    for entity, actions in _ACTIONS_BY_ENTITY.items()
    for action in actions
    if (entity, action) not in RULES
]
if _unruled:
    raise ImproperlyConfigured(
        f"Transition table has no rule for: {', '.join(_unruled)}"
    )


def get_rule(entity: str, action: str) -> TransitionRule:
    try:
        return RULES[(entity, action)]
    except KeyError:
        raise InvalidTransition(reason=f"'{action}' is not an action on {entity}")


def transition(
    entity: str,
    current_state: str,
    action: str,
    actor: ActorContext,
    *,
    owner_id: Any = None,
    police_station_code: str | None = None,
    payload: dict[str, Any] | None = None,
) -> TransitionOutcome:
    """
    Validate one transition and compute its outcome.

    Parameters
    ----------
    entity : str
        ``Entity.CASE`` or ``Entity.CASE_REQUEST``.
    current_state : str
        Stored status of the entity as read by the caller.
    action : str
        A ``CaseAction`` / ``CaseRequestAction`` value.
    actor : ActorContext
        Who is acting.
    owner_id :
        The user owning the entity (client for a case, lawyer for a
        request).  Used by owner-scoped rules.
    police_station_code : str, optional
        Code of the station the case is filed with.  Used by
        station-scoped rules.
    payload : dict, optional
        Values supplied with the action (``pnr``, ``hearing_date`` …).

    Returns
    -------
    TransitionOutcome

    Raises
    ------
    Unauthorized
        Wrong role, or the actor does not own / serve the entity.
    InvalidTransition
        ``current_state`` is not a legal source for the action.
    MissingField
        A field required to enter the target state is absent.
    """
    rule = get_rule(entity, action)
    payload = payload or {}

    if actor.role != rule.role:
        raise Unauthorized(
            f"Only a {rule.role.label.lower()} may {action} a {Entity(entity).label.lower()}."
        )
    if rule.ownership == Ownership.OWNER:
        if owner_id is None or str(owner_id) != str(actor.id):
            raise Unauthorized(f"You do not own this {Entity(entity).label.lower()}.")
    elif rule.ownership == Ownership.STATION:
        if not actor.police_station_code or actor.police_station_code != police_station_code:
            raise Unauthorized("This case is filed with a different police station.")

    if current_state not in rule.sources:
        raise InvalidTransition(
            current=current_state,
            target=rule.target,
            reason=f"cannot {action} from '{current_state}'",
        )

    missing = [name for name in rule.required if payload.get(name) in (None, "")]
    if missing:
        raise MissingField(fields=missing)

    logger.debug(
        "Transition %s.%s by user=%s: %s -> %s",
        entity, action, actor.id, current_state, rule.target,
    )
    return TransitionOutcome(new_state=rule.target, side_effects=rule.side_effects)
