"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service function / method, and
return the result wrapped in a DRF ``Response``.

Architecture
------------
- ``UserRegistrationService`` — self-service sign-up for every role.
- ``AuthenticationService``   — email login + JWT issuance.
- ``CurrentUserService``      — "Me" endpoint helpers.
- ``LawyerDirectoryService``  — public lawyer search by city / case type.
"""

from __future__ import annotations

import logging

from django.apps import apps
from django.contrib.auth import authenticate as django_authenticate
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from rest_framework_simplejwt.tokens import RefreshToken

from core.domain.exceptions import Conflict, DomainError
from core.domain.transactions import get_or_not_found

from .models import UserRole

logger = logging.getLogger(__name__)

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Registration Service
# ═══════════════════════════════════════════════════════════════════


class UserRegistrationService:
    """
    Handles self-service sign-up.
    """

    @staticmethod
    def register_user(validated_data: dict) -> User:
        """
        Create a new user with the role they signed up for.

        Parameters
        ----------
        validated_data : dict
            Cleaned data from ``RegisterRequestSerializer``.  The
            password has already passed ``AUTH_PASSWORD_VALIDATORS`` and
            fields that do not apply to the role have been dropped.

        Returns
        -------
        User
            The newly created (and saved) ``User`` instance.

        Raises
        ------
        core.domain.exceptions.Conflict
            If the email or username is already taken.
        core.domain.exceptions.DomainError
            If a police reviewer names a station that does not exist.
        """
        password = validated_data.pop("password")

        conflicts = []
        if User.objects.filter(email__iexact=validated_data["email"]).exists():
            conflicts.append("email")
        if User.objects.filter(username__iexact=validated_data["username"]).exists():
            conflicts.append("username")
        if conflicts:
            raise Conflict(
                f"The following field(s) already exist: {', '.join(conflicts)}."
            )

        if validated_data["role"] == UserRole.POLICE:
            PoliceStation = apps.get_model("cases", "PoliceStation")
            code = validated_data["police_station_code"]
            if not PoliceStation.objects.filter(code=code).exists():
                raise DomainError(f"Unknown police station code '{code}'.")

        try:
            with transaction.atomic():
                user = User.objects.create_user(password=password, **validated_data)
        except IntegrityError:
            raise Conflict("A user with this email or username already exists.")

        logger.info("Registered user=%s as %s", user.pk, user.role)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """
    Handles email login and JWT token generation.
    """

    @staticmethod
    def authenticate(email: str, password: str, request=None) -> User | None:
        """
        Validate credentials and return the user if successful.

        Parameters
        ----------
        email : str
            The login address (matched case-insensitively).
        password : str
            The raw password.

        Returns
        -------
        User or None
            The authenticated user, or ``None`` if credentials are
            invalid or the user is inactive.
        """
        user = django_authenticate(request=request, email=email, password=password)
        if user is None:
            logger.info("Failed login attempt for %s", email)
        return user

    @staticmethod
    def generate_tokens(user: User) -> dict[str, str]:
        """
        Issue a JWT access/refresh token pair for the given user.

        The access token carries ``role`` and ``name`` claims so the
        frontend can route without a separate ``/me/`` call.

        Returns
        -------
        dict
            ``{"access": "<token>", "refresh": "<token>"}``.
        """
        refresh = RefreshToken.for_user(user)
        refresh["role"] = user.role
        refresh["name"] = user.name
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


# ═══════════════════════════════════════════════════════════════════
#  Current User Service
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:
    """Helpers for the ``/me/`` endpoint."""

    @staticmethod
    def get_profile(user: User) -> User:
        """Re-read the authenticated user so the response is never stale."""
        return User.objects.get(pk=user.pk)

    @staticmethod
    def update_profile(user: User, validated_data: dict) -> User:
        """
        Apply a partial profile update.

        Only the fields exposed by ``MeUpdateSerializer`` can reach this
        method; ``role`` and ``email`` are not editable here.
        """
        for field, value in validated_data.items():
            setattr(user, field, value)
        user.save(update_fields=list(validated_data.keys()))
        return user


# ═══════════════════════════════════════════════════════════════════
#  Lawyer Directory Service
# ═══════════════════════════════════════════════════════════════════


class LawyerDirectoryService:
    """
    Read-only lawyer search used by clients when choosing whom to send
    a case request to.
    """

    @staticmethod
    def list_lawyers(*, city: str | None = None, case_type: str | None = None) -> list[User]:
        """
        Return active lawyers, best rated first.

        Parameters
        ----------
        city : str, optional
            Case-insensitive exact match on ``city``.
        case_type : str, optional
            Keep only lawyers whose ``specialization`` list contains this
            value (case-insensitive).

        Returns
        -------
        list[User]
        """
        qs: QuerySet = User.objects.filter(
            role=UserRole.LAWYER,
            is_active=True,
        ).order_by("-rating", "-experience", "id")

        if city:
            qs = qs.filter(city__iexact=city)

        lawyers = list(qs)
        if case_type:
            wanted = case_type.lower()
            # JSON containment is not portable across backends
            lawyers = [
                lawyer for lawyer in lawyers
                if wanted in {str(s).lower() for s in (lawyer.specialization or [])}
            ]
        return lawyers

    @staticmethod
    def get_lawyer(lawyer_id: int) -> User:
        """
        Retrieve a single lawyer profile.

        Raises
        ------
        NotFound
            If the id does not exist or is not a lawyer.
        """
        return get_or_not_found(User.objects.filter(role=UserRole.LAWYER), pk=lawyer_id)
