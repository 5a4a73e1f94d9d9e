"""
Case requests app serializers.

Request and Response serializers only; the handshake rules live in
``services.py`` and ``cases.workflow``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import serializers

from accounts.models import UserRole
from accounts.serializers import UserSummarySerializer
from cases.models import CaseType, PoliceStation
from cases.serializers import AccusedSerializer, CaseListSerializer, VictimSerializer

from .models import CaseRequest, CaseRequestStatus

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Read Serializers
# ═══════════════════════════════════════════════════════════════════


class CaseRequestSerializer(serializers.ModelSerializer):
    """Full request representation, with the resulting case once accepted."""

    client = UserSummarySerializer(read_only=True)
    lawyer = UserSummarySerializer(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    victim = VictimSerializer(read_only=True)
    accused = AccusedSerializer(read_only=True)
    police_station = serializers.SlugRelatedField(slug_field="code", read_only=True)
    case = CaseListSerializer(read_only=True, allow_null=True)

    class Meta:
        model = CaseRequest
        fields = [
            "id",
            "client",
            "lawyer",
            "title",
            "description",
            "victim_name",
            "accused_name",
            "client_phone",
            "client_email",
            "documents",
            "status",
            "status_display",
            "lawyer_response",
            "case_type",
            "victim",
            "accused",
            "city",
            "police_station",
            "case",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CaseRequestFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CaseRequestStatus.choices, required=False)


# ═══════════════════════════════════════════════════════════════════
#  Write Serializers
# ═══════════════════════════════════════════════════════════════════


class CaseRequestCreateSerializer(serializers.ModelSerializer):
    """
    Request body for ``POST /api/case-requests/``.

    ``lawyer`` is the PK of a user with the lawyer role.  Any ``status``
    sent by the client is ignored; new requests are always pending.
    """

    lawyer = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=UserRole.LAWYER, is_active=True),
    )
    documents = serializers.ListField(
        child=serializers.CharField(max_length=500),
        required=False,
    )

    class Meta:
        model = CaseRequest
        fields = [
            "lawyer",
            "title",
            "description",
            "victim_name",
            "accused_name",
            "client_phone",
            "client_email",
            "documents",
        ]
        extra_kwargs = {
            "client_phone": {"required": False},
            "client_email": {"required": False},
        }


class CaseRequestAcceptSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/case-requests/{id}/accept/``.

    Every field is optional.  When ``case_type``, ``city``,
    ``police_station`` and both party names are known, the new case is
    filed as submitted; otherwise it starts as a draft.
    """

    case_type = serializers.ChoiceField(choices=CaseType.choices, required=False)
    victim = VictimSerializer(required=False)
    accused = AccusedSerializer(required=False)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    police_station = serializers.SlugRelatedField(
        slug_field="code",
        queryset=PoliceStation.objects.all(),
        required=False,
        allow_null=True,
    )
    lawyer_response = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class CaseRequestRejectSerializer(serializers.Serializer):
    """Request body for ``POST /api/case-requests/{id}/reject/``."""

    lawyer_response = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        max_length=2000,
    )


class CaseRequestUpdateSerializer(CaseRequestAcceptSerializer):
    """
    Request body for ``PATCH /api/case-requests/{id}/``:
    ``{status?, lawyer_response?}`` plus the acceptance details when
    ``status`` is ``accepted``.
    """

    status = serializers.ChoiceField(choices=CaseRequestStatus.choices, required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not attrs:
            raise serializers.ValidationError("Provide 'status' or 'lawyer_response'.")
        return attrs
