"""
Cases app serializers.

Contains all Request and Response serializers for the Cases API.
Serializers handle field definitions, read/write constraints, and field-level
validation only.  **No business logic or workflow transitions live here**
— those belong in ``services.py`` and ``workflow.py``.

Structure
---------
1. Filter / query-param serializers
2. Party (victim / accused) serializers
3. Case read serializers (list, detail, status log)
4. Case write serializers (create, draft update, documents)
5. Workflow action serializers (approve, reject)
6. Police station serializers
"""

from __future__ import annotations

import re
from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import serializers

from accounts.models import UserRole
from accounts.serializers import UserSummarySerializer

from .models import Case, CaseStatus, CaseStatusLog, CaseType, PoliceStation

User = get_user_model()

# ── Phone number validation regex ───────────────────────────────────
_PHONE_REGEX = re.compile(r"^\+?[\d\s-]{7,20}$")


def _validate_phone(value: str) -> str:
    if value and not _PHONE_REGEX.match(value):
        raise serializers.ValidationError("Enter a valid phone number.")
    return value


# ═══════════════════════════════════════════════════════════════════
#  1. Filter / Query-Parameter Serializers
# ═══════════════════════════════════════════════════════════════════


class CaseFilterSerializer(serializers.Serializer):
    """
    Validates and cleans query-parameter filters for ``GET /api/cases/``.

    All fields are optional.  The view passes the validated dict directly
    to ``CaseQueryService.get_filtered_queryset``.
    """

    status = serializers.ChoiceField(
        choices=CaseStatus.choices,
        required=False,
        help_text="Filter by case status. Options: " + ", ".join([c[0] for c in CaseStatus.choices]) + ".",
    )
    case_type = serializers.ChoiceField(choices=CaseType.choices, required=False)
    city = serializers.CharField(required=False, max_length=100)
    search = serializers.CharField(
        required=False,
        max_length=255,
        allow_blank=False,
        help_text="Free-text search against title, description and PNR.",
    )


# ═══════════════════════════════════════════════════════════════════
#  2. Party Serializers
# ═══════════════════════════════════════════════════════════════════


class VictimSerializer(serializers.Serializer):
    """``{"name", "phone", "email"?}``"""

    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    phone = serializers.CharField(
        max_length=20, required=False, allow_blank=True, validators=[_validate_phone],
    )
    email = serializers.EmailField(required=False, allow_blank=True)


class AccusedSerializer(serializers.Serializer):
    """``{"name", "phone"?, "address"?}``"""

    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    phone = serializers.CharField(
        max_length=20, required=False, allow_blank=True, validators=[_validate_phone],
    )
    address = serializers.CharField(required=False, allow_blank=True)


# ═══════════════════════════════════════════════════════════════════
#  3. Case Read Serializers
# ═══════════════════════════════════════════════════════════════════


class CaseListSerializer(serializers.ModelSerializer):
    """
    Compact representation for the list endpoint.
    """

    status_display = serializers.CharField(source="get_status_display", read_only=True)
    police_station_code = serializers.CharField(
        source="police_station.code", read_only=True, default=None,
    )
    client_name = serializers.CharField(source="client.name", read_only=True)
    lawyer_name = serializers.CharField(source="lawyer.name", read_only=True, default=None)

    class Meta:
        model = Case
        fields = [
            "id",
            "title",
            "case_type",
            "status",
            "status_display",
            "city",
            "police_station_code",
            "client",
            "client_name",
            "lawyer",
            "lawyer_name",
            "pnr",
            "hearing_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CaseStatusLogSerializer(serializers.ModelSerializer):
    """Read-only serializer for the case audit trail."""

    changed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = CaseStatusLog
        fields = [
            "id",
            "from_status",
            "to_status",
            "changed_by",
            "changed_by_name",
            "message",
            "created_at",
        ]
        read_only_fields = fields

    def get_changed_by_name(self, obj: CaseStatusLog) -> str | None:
        """Return the actor's display name or None."""
        if obj.changed_by is None:
            return None
        return obj.changed_by.name or obj.changed_by.email


class PoliceStationSerializer(serializers.ModelSerializer):
    class Meta:
        model = PoliceStation
        fields = ["id", "name", "code", "city", "address", "phone", "email"]
        read_only_fields = fields


class CaseDetailSerializer(serializers.ModelSerializer):
    """
    Full case representation with nested parties and station.
    """

    status_display = serializers.CharField(source="get_status_display", read_only=True)
    victim = VictimSerializer(read_only=True)
    accused = AccusedSerializer(read_only=True)
    client = UserSummarySerializer(read_only=True)
    lawyer = UserSummarySerializer(read_only=True, allow_null=True)
    police_station = PoliceStationSerializer(read_only=True, allow_null=True)
    missing_details = serializers.ListField(
        source="missing_filing_details",
        child=serializers.CharField(),
        read_only=True,
    )

    class Meta:
        model = Case
        fields = [
            "id",
            "title",
            "description",
            "case_type",
            "victim",
            "accused",
            "client",
            "lawyer",
            "police_station",
            "city",
            "status",
            "status_display",
            "pnr",
            "hearing_date",
            "rejection_reason",
            "documents",
            "missing_details",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  4. Case Write Serializers
# ═══════════════════════════════════════════════════════════════════


class CaseCreateSerializer(serializers.ModelSerializer):
    """
    Request body for ``POST /api/cases/``.

    Only ``title`` is required; the case starts as a draft and can be
    completed with ``PATCH /api/cases/{id}/`` before submission.
    ``police_station`` is given by station code.
    """

    victim = VictimSerializer(required=False)
    accused = AccusedSerializer(required=False)
    lawyer = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=UserRole.LAWYER),
        required=False,
        allow_null=True,
    )
    police_station = serializers.SlugRelatedField(
        slug_field="code",
        queryset=PoliceStation.objects.all(),
        required=False,
        allow_null=True,
    )
    documents = serializers.ListField(
        child=serializers.CharField(max_length=500),
        required=False,
    )

    class Meta:
        model = Case
        fields = [
            "title",
            "description",
            "case_type",
            "victim",
            "accused",
            "lawyer",
            "police_station",
            "city",
            "documents",
        ]
        extra_kwargs = {
            "description": {"required": False},
            "case_type": {"required": False},
            "city": {"required": False},
        }


class CaseUpdateSerializer(CaseCreateSerializer):
    """
    Request body for ``PATCH /api/cases/{id}/`` (drafts only).

    Same fields as creation, all optional.
    """

    class Meta(CaseCreateSerializer.Meta):
        extra_kwargs = {
            "title": {"required": False},
            **CaseCreateSerializer.Meta.extra_kwargs,
        }


class CaseDocumentsSerializer(serializers.Serializer):
    """Request body for ``POST /api/cases/{id}/documents/``."""

    documents = serializers.ListField(
        child=serializers.CharField(max_length=500),
        allow_empty=False,
        help_text="Opaque upload references, appended in order.",
    )


# ═══════════════════════════════════════════════════════════════════
#  5. Workflow Action Serializers
# ═══════════════════════════════════════════════════════════════════


class CaseApproveSerializer(serializers.Serializer):
    """
    Request body for ``PATCH /api/cases/{id}/approve/``.

    Both fields are declared optional here so that their absence is
    reported by the workflow as a ``MissingField`` error listing exactly
    what is missing.
    """

    pnr = serializers.CharField(
        max_length=100,
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Police registration number to assign.",
    )
    hearing_date = serializers.DateField(
        required=False,
        allow_null=True,
        help_text="ISO 8601 date of the first hearing.",
    )


class CaseRejectSerializer(serializers.Serializer):
    """Request body for ``PATCH /api/cases/{id}/reject/``."""

    reason = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        max_length=2000,
        help_text="Optional reason, included in the notification and email.",
    )

    def validate_reason(self, value: str) -> str:
        return value.strip()


class PoliceStationFilterSerializer(serializers.Serializer):
    city = serializers.CharField(required=False, max_length=100)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if "city" in attrs:
            attrs["city"] = attrs["city"].strip()
        return attrs
