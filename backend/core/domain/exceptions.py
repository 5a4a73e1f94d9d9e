"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  ``core.domain.exception_handler`` maps them to HTTP
responses.

Mapping cheatsheet
------------------
┌─────────────────────┬──────────────────────────────┬──────┐
│ Domain Exception    │ DRF / HTTP equivalent        │ Code │
├─────────────────────┼──────────────────────────────┼──────┤
│ DomainError         │ ValidationError / 400        │ 400  │
│ MissingField        │ ValidationError / 400        │ 400  │
│ PermissionDenied    │ PermissionDenied / 403       │ 403  │
│ Unauthorized        │ PermissionDenied / 403       │ 403  │
│ NotFound            │ NotFound / 404               │ 404  │
│ Conflict            │ APIException / 409           │ 409  │
│ InvalidTransition   │ APIException / 409           │ 409  │
└─────────────────────┴──────────────────────────────┴──────┘

``SideEffectFailure`` has no HTTP mapping: it is raised by best-effort
collaborators (email) and always caught by the notification fan-out.

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if current not in rule.sources:
        raise InvalidTransition(current=current, target=rule.target)
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.

    Attributes
    ----------
    status_code : int or None
        HTTP status the exception handler answers with; ``None`` means
        the error never reaches a response.
    """

    status_code: int | None = 400

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)

    def as_response_data(self) -> dict:
        """Body of the error response."""
        return {"detail": self.message}


class PermissionDenied(DomainError):
    """
    The authenticated user does not have the required role for this
    operation.

    Maps to HTTP 403.
    """

    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class Unauthorized(PermissionDenied):
    """
    The actor's role or ownership does not allow the requested action on
    this particular entity (e.g. a lawyer accepting a request addressed
    to another lawyer, a police reviewer from a different station).

    Maps to HTTP 403.
    """

    def __init__(self, message: str = "You are not allowed to perform this action on this record.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist (or is not visible to the
    requesting user).

    Maps to HTTP 404.
    """

    status_code = 404

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class MissingField(DomainError):
    """
    Data required to enter the target state is absent, e.g. approving a
    case without a PNR or a hearing date.

    Maps to HTTP 400.
    """

    def __init__(self, message: str | None = None, *, fields: list[str] | None = None) -> None:
        self.fields = list(fields or [])
        if message is None:
            if self.fields:
                message = f"Missing required field(s): {', '.join(self.fields)}."
            else:
                message = "A required field is missing."
        super().__init__(message)

    def as_response_data(self) -> dict:
        data = super().as_response_data()
        if self.fields:
            data["fields"] = self.fields
        return data


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: duplicate PNR, duplicate creation attempt.
    Maps to HTTP 409.
    """

    status_code = 409

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A state-machine transition that is not allowed from the current status.

    Also raised for the losing side of two concurrent transitions on the
    same record: its conditional write matches zero rows.

    Example::

        raise InvalidTransition(
            current="approved",
            target="rejected",
            reason="Case has already been resolved.",
        )
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            if reason:
                parts.append(f"({reason})")
            message = " ".join(parts) + "."
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class SideEffectFailure(DomainError):
    """
    A best-effort external call (email delivery) failed.

    Never aborts an already-committed transition; the fan-out logs it and
    moves on.
    """

    status_code = None

    def __init__(self, message: str = "A side effect could not be delivered.", *, effect: str | None = None) -> None:
        super().__init__(message)
        self.effect = effect
