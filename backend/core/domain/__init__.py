"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF exception handler translating those exceptions.
transactions       Conditional-write status transitions.
access             ``ActorContext``, role guards and role-scoped querysets.
notifications      Notification creation and post-commit transition fan-out.
email              Best-effort outbound email over ``django.core.mail``.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidTransition
    from core.domain.notifications import NotificationFanout, TransitionEvent
    from core.domain.transactions import conditional_transition
    from core.domain.access import ActorContext, apply_role_scope
"""
