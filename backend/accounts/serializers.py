"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — all domain
rules are delegated to ``services.py``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth.validators import UnicodeUsernameValidator
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import UserRole
from .services import AuthenticationService

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class RegisterRequestSerializer(serializers.ModelSerializer):
    """
    Validates new-user registration data.

    Required fields: email, password, password_confirm, name, role.
    ``username`` defaults to the email address.

    Lawyer profile fields (``city``, ``specialization``, ``experience``,
    ``description``) are kept for lawyers; ``city`` is kept for every
    role.  ``police_station_code`` is required for, and only kept for,
    police reviewers.  ``rating`` is never writable.
    """

    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Checked against AUTH_PASSWORD_VALIDATORS.",
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Must match 'password'.",
    )
    role = serializers.ChoiceField(choices=UserRole.choices)

    class Meta:
        model = User
        fields = [
            "username",
            "email",
            "password",
            "password_confirm",
            "name",
            "phone",
            "role",
            "city",
            "specialization",
            "experience",
            "description",
            "police_station_code",
        ]
        extra_kwargs = {
            "username": {"required": False, "validators": [UnicodeUsernameValidator()]},
            "email": {"required": True, "validators": []},
            "name": {"required": True, "allow_blank": False},
        }

    def validate_specialization(self, value):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise serializers.ValidationError("Must be a list of case types.")
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """
        Cross-field validation:
        1. Ensure password and password_confirm match.
        2. Run Django's password validators against the would-be user.
        3. Police reviewers must name their station.
        4. Drop profile fields that do not apply to the chosen role.
        """
        if attrs["password"] != attrs.pop("password_confirm"):
            raise serializers.ValidationError(
                {"password_confirm": "Passwords do not match."}
            )

        attrs["email"] = attrs["email"].strip().lower()
        attrs.setdefault("username", attrs["email"])

        candidate = User(
            username=attrs["username"],
            email=attrs["email"],
            name=attrs.get("name", ""),
        )
        try:
            validate_password(attrs["password"], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})

        role = attrs["role"]
        if role == UserRole.POLICE:
            code = attrs.get("police_station_code", "").strip()
            if not code:
                raise serializers.ValidationError(
                    {"police_station_code": "Required for police reviewers."}
                )
            attrs["police_station_code"] = code
        else:
            attrs.pop("police_station_code", None)

        if role != UserRole.LAWYER:
            for field in ("specialization", "experience", "description"):
                attrs.pop(field, None)

        return attrs


class LoginRequestSerializer(serializers.Serializer):
    """
    Accepts ``email`` + ``password`` and resolves the user.

    On success ``validated_data["user"]`` holds the authenticated user.
    """

    email = serializers.EmailField(help_text="Account email address.")
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="User account password.",
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        user = AuthenticationService.authenticate(
            attrs["email"],
            attrs["password"],
            request=self.context.get("request"),
        )
        if user is None:
            raise serializers.ValidationError(
                {"detail": "Invalid credentials."},
                code="authentication",
            )
        attrs["user"] = user
        return attrs


class TokenResponseSerializer(serializers.Serializer):
    """Response shape of a successful login (documentation only)."""

    access = serializers.CharField()
    refresh = serializers.CharField()
    user = serializers.SerializerMethodField()

    def get_user(self, obj) -> dict:
        return UserDetailSerializer(obj["user"]).data


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference embedded in cases, requests and messages."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "role"]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """Full profile of the authenticated user (``/me/``)."""

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "name",
            "phone",
            "role",
            "city",
            "specialization",
            "experience",
            "rating",
            "description",
            "police_station_code",
            "date_joined",
        ]
        read_only_fields = fields


class MeUpdateSerializer(serializers.ModelSerializer):
    """Fields a user may change on their own profile."""

    class Meta:
        model = User
        fields = [
            "name",
            "phone",
            "city",
            "specialization",
            "experience",
            "description",
        ]

    def validate_specialization(self, value):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise serializers.ValidationError("Must be a list of case types.")
        return value


class LawyerSerializer(serializers.ModelSerializer):
    """Public lawyer profile returned by the directory."""

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "city",
            "specialization",
            "experience",
            "rating",
            "description",
        ]
        read_only_fields = fields
