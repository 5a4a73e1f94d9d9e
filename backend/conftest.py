"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating test users.
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``police_station`` factory fixture for station directory rows.
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            client = create_user()
            lawyer = create_user(role="lawyer", city="Delhi",
                                 specialization=["criminal"])
            officer = create_user(role="police", police_station_code="DEL-001")
    """
    from accounts.models import User, UserRole

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        password: str = "TestPass123!",
        email: str | None = None,
        name: str | None = None,
        role: str = UserRole.CLIENT,
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"{role}{_counter}"
        if email is None:
            email = f"{username}@test.local"
        if name is None:
            name = f"Test {role.title()} {_counter}"

        return User.objects.create_user(
            username=username,
            password=password,
            email=email,
            name=name,
            role=role,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper function that creates a user and returns an
    ``Authorization`` header dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(role="lawyer")
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/dashboard/stats/")
            assert resp.status_code != 401

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(**user_kwargs) -> dict[str, str]:
        user = create_user(**user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def police_station(db):
    """
    Factory fixture for ``PoliceStation`` rows.

    Usage::

        station = police_station(code="DEL-001", city="Delhi")
    """
    from cases.models import PoliceStation

    def _factory(*, code: str = "DEL-001", city: str = "Delhi", **kwargs) -> PoliceStation:
        kwargs.setdefault("name", f"{city} Central Station")
        return PoliceStation.objects.create(code=code, city=city, **kwargs)

    return _factory
