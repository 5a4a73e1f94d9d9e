"""
core.domain.transactions — Helpers for safe state transitions.

Every status change in the system goes through
``conditional_transition``: a single ``UPDATE ... WHERE pk = %s AND
status IN (...)`` executed inside ``transaction.atomic()``.  The row is
never locked across operations; if another request moved the record first,
the update matches zero rows and the caller gets ``InvalidTransition``
instead of silently overwriting the winner.

Usage::

    from core.domain.transactions import conditional_transition

    case = conditional_transition(
        model=Case,
        pk=case.pk,
        expected_status=CaseStatus.UNDER_REVIEW,
        target_status=CaseStatus.APPROVED,
        changes={"pnr": pnr, "hearing_date": hearing_date},
    )
"""

from __future__ import annotations

from typing import Any, Iterable, TypeVar

from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.utils import timezone

from core.domain.exceptions import InvalidTransition, NotFound

M = TypeVar("M", bound=models.Model)


def conditional_transition(
    *,
    model: type[M],
    pk: Any,
    expected_status: str | Iterable[str],
    target_status: str,
    status_field: str = "status",
    changes: dict[str, Any] | None = None,
) -> M:
    """
    Atomically move a row from one of ``expected_status`` to
    ``target_status``.

    Steps performed inside ``transaction.atomic()``:
        1. Issue one conditional ``UPDATE`` filtered on the primary key
           *and* the expected pre-state.
        2. If no row matched, distinguish a vanished row (``NotFound``)
           from a row whose status moved on (``InvalidTransition``).
        3. Re-read and return the committed row.

    Args:
        model:           Django model class owning the row.
        pk:              Primary key of the row.
        expected_status: The status (or statuses) the caller validated
                         against.  The write only lands if the stored
                         value still matches.
        target_status:   New status value.
        status_field:    Name of the status column.
        changes:         Extra column values written in the same UPDATE.

    Returns:
        The freshly re-read instance.

    Raises:
        NotFound:          If the row no longer exists.
        InvalidTransition: If the stored status no longer matches.
    """
    if isinstance(expected_status, str):
        expected = [expected_status]
    else:
        expected = list(expected_status)

    values: dict[str, Any] = {status_field: target_status}
    if changes:
        values.update(changes)
    if any(f.name == "updated_at" for f in model._meta.concrete_fields):
        # QuerySet.update() bypasses auto_now
        values.setdefault("updated_at", timezone.now())

    with transaction.atomic():
        updated = (
            model.objects
            .filter(pk=pk, **{f"{status_field}__in": expected})
            .update(**values)
        )
        if updated == 0:
            current = (
                model.objects
                .filter(pk=pk)
                .values_list(status_field, flat=True)
                .first()
            )
            if current is None:
                raise NotFound(f"{model.__name__} with pk={pk} does not exist.")
            raise InvalidTransition(
                current=str(current),
                target=str(target_status),
                reason=(
                    f"expected {' or '.join(str(s) for s in expected)}, "
                    f"the record was already processed"
                ),
            )

    return model.objects.get(pk=pk)


def get_or_not_found(queryset: models.QuerySet, **lookup: Any) -> Any:
    """
    Fetch a single row or raise the domain ``NotFound``.

    A lookup value the field cannot coerce (e.g. ``pk="abc"`` on an
    integer key) matches nothing, so it is reported as ``NotFound`` too.

    Args:
        queryset: Base queryset (may already be scoped to the caller).
        **lookup: Field lookups passed to ``get()``.

    Returns:
        The matched model instance.
    """
    missing = f"{queryset.model.__name__} matching {lookup!r} does not exist."
    try:
        return queryset.get(**lookup)
    except queryset.model.DoesNotExist:
        raise NotFound(missing)
    except (ValueError, TypeError, ValidationError) as exc:
        raise NotFound(missing) from exc
