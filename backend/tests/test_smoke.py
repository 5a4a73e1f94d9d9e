"""
Smoke tests — verify that Django boots, URL routing resolves, and
the core domain modules are importable.

These tests do NOT require real data; they just prove the plumbing
works.
"""

from __future__ import annotations

import pytest
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure every app's entry route reverses and resolves."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("accounts:register",          "/api/accounts/auth/register/"),
        ("accounts:login",             "/api/accounts/auth/login/"),
        ("accounts:me",                "/api/accounts/me/"),
        ("accounts:lawyer-list",       "/api/accounts/lawyers/"),
        ("case-list",                  "/api/cases/"),
        ("police-station-list",        "/api/police-stations/"),
        ("case-request-list",          "/api/case-requests/"),
        ("message-list",               "/api/messages/"),
        ("core:notification-list",     "/api/notifications/"),
        ("core:notification-mark-all-read", "/api/notifications/mark-all-read/"),
        ("core:dashboard-stats",       "/api/dashboard/stats/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, expected_path: str):
        assert reverse(url_name) == expected_path

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_path_resolves_to_view(self, url_name: str, expected_path: str):
        match = resolve(expected_path)
        assert match.func is not None
        assert match.view_name == url_name

    def test_detail_actions(self):
        assert reverse("case-approve", args=[7]) == "/api/cases/7/approve/"
        assert reverse("case-status-log", args=[7]) == "/api/cases/7/status-log/"
        assert reverse("case-request-accept", args=[3]) == "/api/case-requests/3/accept/"
        assert reverse("message-read", args=[9]) == "/api/messages/9/read/"
        assert reverse("core:notification-mark-as-read", args=[5]) == "/api/notifications/5/read/"


# ════════════════════════════════════════════════════════════════════
#  Core Domain Module Import Tests
# ════════════════════════════════════════════════════════════════════

class TestCoreDomainImports:
    """Verify that shared domain utility modules are importable."""

    def test_import_exceptions(self):
        from core.domain.exceptions import (
            Conflict,
            DomainError,
            InvalidTransition,
            MissingField,
            NotFound,
            PermissionDenied,
            SideEffectFailure,
            Unauthorized,
        )
        assert issubclass(InvalidTransition, Conflict)
        assert issubclass(Conflict, DomainError)
        assert issubclass(Unauthorized, PermissionDenied)
        assert issubclass(NotFound, DomainError)
        assert issubclass(MissingField, DomainError)
        assert issubclass(SideEffectFailure, DomainError)

    def test_import_notifications(self):
        from core.domain.notifications import NotificationFanout, NotificationService
        assert hasattr(NotificationService, "create")
        assert hasattr(NotificationFanout, "on_transition")

    def test_import_transactions(self):
        from core.domain.transactions import conditional_transition, get_or_not_found
        assert callable(conditional_transition)
        assert callable(get_or_not_found)

    def test_import_access(self):
        from core.domain.access import ActorContext, apply_role_scope, require_role
        assert callable(apply_role_scope)
        assert callable(require_role)
        assert callable(ActorContext.from_user)


# ════════════════════════════════════════════════════════════════════
#  Exception Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:
    """Unit tests for domain exception classes."""

    def test_domain_error_message(self):
        from core.domain.exceptions import DomainError
        err = DomainError("test message")
        assert str(err) == "test message"

    def test_invalid_transition_structured(self):
        from core.domain.exceptions import InvalidTransition
        err = InvalidTransition(
            current="approved",
            target="rejected",
            reason="Case has already been resolved",
        )
        assert "approved" in str(err)
        assert "rejected" in str(err)
        assert err.current == "approved"
        assert err.target == "rejected"

    def test_missing_field_lists_fields(self):
        from core.domain.exceptions import MissingField
        err = MissingField(fields=["pnr", "hearing_date"])
        assert err.fields == ["pnr", "hearing_date"]
        assert str(err) == "Missing required field(s): pnr, hearing_date."


class TestDomainExceptionHandler:
    """Unit tests for core.domain.exception_handler."""

    @pytest.mark.parametrize("exc_name,expected_status", [
        ("DomainError", 400),
        ("PermissionDenied", 403),
        ("Unauthorized", 403),
        ("NotFound", 404),
        ("Conflict", 409),
        ("InvalidTransition", 409),
    ])
    def test_status_per_exception(self, exc_name: str, expected_status: int):
        from core.domain import exceptions
        from core.domain.exception_handler import domain_exception_handler

        exc = getattr(exceptions, exc_name)("boom")
        response = domain_exception_handler(exc, {})
        assert response.status_code == expected_status
        assert response.data == {"detail": "boom"}

    def test_missing_field_body_lists_fields(self):
        from core.domain.exception_handler import domain_exception_handler
        from core.domain.exceptions import MissingField

        response = domain_exception_handler(MissingField(fields=["pnr"]), {})
        assert response.status_code == 400
        assert response.data == {
            "detail": "Missing required field(s): pnr.",
            "fields": ["pnr"],
        }

    def test_side_effect_failure_and_foreign_errors_are_not_answered(self):
        from core.domain.exception_handler import domain_exception_handler
        from core.domain.exceptions import SideEffectFailure

        assert domain_exception_handler(SideEffectFailure("smtp down"), {}) is None
        assert domain_exception_handler(RuntimeError("boom"), {}) is None


# ════════════════════════════════════════════════════════════════════
#  Access Helper Unit Tests
# ════════════════════════════════════════════════════════════════════

class TestAccessHelpers:
    """Unit tests for core.domain.access helpers."""

    def test_apply_role_scope_unknown_role_sees_nothing(self):
        from unittest.mock import MagicMock
        from accounts.models import UserRole
        from core.domain.access import ActorContext, apply_role_scope

        qs = MagicMock()
        actor = ActorContext(id=1, role=UserRole.POLICE)
        apply_role_scope(qs, actor, scope_rules={UserRole.CLIENT: lambda q, a: q})
        qs.none.assert_called_once()

    def test_apply_role_scope_uses_rule(self):
        from unittest.mock import MagicMock
        from accounts.models import UserRole
        from core.domain.access import ActorContext, apply_role_scope

        qs = MagicMock()
        actor = ActorContext(id=42, role=UserRole.CLIENT)
        apply_role_scope(
            qs, actor,
            scope_rules={UserRole.CLIENT: lambda q, a: q.filter(client_id=a.id)},
        )
        qs.filter.assert_called_once_with(client_id=42)

    def test_require_role_raises(self):
        from accounts.models import UserRole
        from core.domain.access import ActorContext, require_role
        from core.domain.exceptions import PermissionDenied

        actor = ActorContext(id=1, role=UserRole.LAWYER)
        with pytest.raises(PermissionDenied):
            require_role(actor, UserRole.CLIENT)
