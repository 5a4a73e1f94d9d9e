"""
core.domain.access — Actor context and role guards shared by every app.

Role checks never read ambient request state.  A view builds an
``ActorContext`` from ``request.user`` once and passes it explicitly into
every service call; services and the transition engine only ever look at
that value.

    ┌─────────┐  ActorContext   ┌────────────────┐      ┌──────────────────┐
    │  View   │────────────────▶│  App service   │─────▶│ core.domain      │
    │ (thin)  │                 │ (owns logic)   │      │   .access        │
    └─────────┘                 └────────────────┘      └──────────────────┘

Usage in an app's service layer::

    from core.domain.access import ActorContext, require_role
    from accounts.models import UserRole

    def submit(case_id, actor: ActorContext):
        require_role(actor, UserRole.CLIENT)
        ...

Role-scoped querysets follow the same pattern as the workflow: each app
owns a ``{role: filter_fn}`` mapping and passes it to
``apply_role_scope``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from django.db.models import QuerySet

from core.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from accounts.models import User, UserRole

# Takes (queryset, actor) and returns a filtered queryset.
ScopeFilter = Callable[[QuerySet, "ActorContext"], QuerySet]


@dataclass(frozen=True)
class ActorContext:
    """
    The authenticated identity a handler acts on behalf of.

    ``police_station_code`` is only meaningful for police reviewers.
    """

    id: Any
    role: UserRole
    police_station_code: str | None = None

    @classmethod
    def from_user(cls, user: User) -> ActorContext:
        """Build the context from an authenticated ``User``."""
        from accounts.models import UserRole

        return cls(
            id=user.pk,
            role=UserRole(user.role),
            police_station_code=user.police_station_code or None,
        )

    def is_role(self, role: UserRole) -> bool:
        return self.role == role


def require_role(actor: ActorContext, *allowed_roles: UserRole, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` if the actor's role is not
    among ``allowed_roles``.

    Example::

        require_role(actor, UserRole.CLIENT)
    """
    if actor.role in allowed_roles:
        return
    raise PermissionDenied(
        message
        or (
            f"Role '{actor.role}' is not permitted for this operation. "
            f"Required: {', '.join(str(r) for r in allowed_roles)}."
        )
    )


def apply_role_scope(
    queryset: QuerySet,
    actor: ActorContext,
    *,
    scope_rules: dict[str, ScopeFilter],
) -> QuerySet:
    """
    Filter ``queryset`` down to what ``actor`` may see.

    Roles without an entry in ``scope_rules`` see nothing.

    Example::

        qs = apply_role_scope(
            Case.objects.all(),
            actor,
            scope_rules={
                UserRole.CLIENT: lambda qs, a: qs.filter(client_id=a.id),
                UserRole.LAWYER: lambda qs, a: qs.filter(lawyer_id=a.id),
            },
        )
    """
    filter_fn = scope_rules.get(actor.role)
    if filter_fn is None:
        return queryset.none()
    return filter_fn(queryset, actor)
