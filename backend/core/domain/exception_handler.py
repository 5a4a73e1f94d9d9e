"""
core.domain.exception_handler — turns domain errors into HTTP responses.

Every ``DomainError`` subclass carries its own ``status_code`` and
builds its own body via ``as_response_data()``, so the handler only has
to defer to DRF for framework exceptions and dispatch the rest.

Registered in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    Answer DRF and domain exceptions; return ``None`` for anything else
    so DRF re-raises it as a server error.
    """
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    if not isinstance(exc, DomainError) or exc.status_code is None:
        return None

    view = context.get("view")
    logger.warning(
        "%s -> %d in %s: %s",
        type(exc).__name__,
        exc.status_code,
        type(view).__name__ if view is not None else "unknown view",
        exc.message,
    )
    return Response(exc.as_response_data(), status=exc.status_code)
