"""
Cases app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

No database queries or workflow logic live here.

ViewSets
--------
- ``CaseViewSet``          — All case endpoints.  Custom @action methods
  handle the workflow and sub-resource operations.
- ``PoliceStationViewSet`` — Read-only station directory.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.domain.access import ActorContext

from .serializers import (
    CaseApproveSerializer,
    CaseCreateSerializer,
    CaseDetailSerializer,
    CaseDocumentsSerializer,
    CaseFilterSerializer,
    CaseListSerializer,
    CaseRejectSerializer,
    CaseStatusLogSerializer,
    CaseUpdateSerializer,
    PoliceStationFilterSerializer,
    PoliceStationSerializer,
)
from .services import (
    CaseCreationService,
    CaseDocumentService,
    CaseDraftService,
    CaseQueryService,
    CaseWorkflowService,
    PoliceStationService,
)

logger = logging.getLogger(__name__)


class CaseViewSet(viewsets.ViewSet):
    """
    Central ViewSet for the cases app.

    Uses ``viewsets.ViewSet`` (not ``ModelViewSet``) so every action is
    explicitly defined, preventing accidental exposure of unintended
    CRUD operations.

    Permission Strategy
    -------------------
    The base permission is ``IsAuthenticated``.  Role and ownership
    checks are enforced exclusively inside the service layer and the
    workflow engine, never in the view.
    """

    permission_classes = [IsAuthenticated]

    # ── Standard CRUD ────────────────────────────────────────────────
    @extend_schema(
        summary="List cases",
        description=(
            "List cases visible to the authenticated user: clients see their own "
            "cases, lawyers the cases they represent, police the non-draft cases "
            "filed with their station."
        ),
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="Filter by case status."),
            OpenApiParameter(name="case_type", type=str, location=OpenApiParameter.QUERY, description="Filter by case type."),
            OpenApiParameter(name="city", type=str, location=OpenApiParameter.QUERY, description="Filter by city."),
            OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY, description="Search title, description or PNR."),
        ],
        responses={
            200: OpenApiResponse(response=CaseListSerializer(many=True), description="Filtered list of cases."),
        },
        tags=["Cases"],
    )
    def list(self, request: Request) -> Response:
        """
        GET /api/cases/
        """
        filter_serializer = CaseFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        qs = CaseQueryService.get_filtered_queryset(
            ActorContext.from_user(request.user),
            filter_serializer.validated_data,
        )
        serializer = CaseListSerializer(qs, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="File a new case",
        description="Client files a case directly. The case starts as a draft.",
        request=CaseCreateSerializer,
        responses={
            201: OpenApiResponse(response=CaseDetailSerializer, description="Draft case created."),
            400: OpenApiResponse(description="Validation error."),
            403: OpenApiResponse(description="Only clients may file cases."),
        },
        tags=["Cases"],
    )
    def create(self, request: Request) -> Response:
        """
        POST /api/cases/
        """
        serializer = CaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        case = CaseCreationService.create_case(
            serializer.validated_data, ActorContext.from_user(request.user),
        )
        out = CaseDetailSerializer(case, context={"request": request})
        return Response(out.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve case details",
        responses={
            200: OpenApiResponse(response=CaseDetailSerializer, description="Full case detail."),
            404: OpenApiResponse(description="Case not found."),
        },
        tags=["Cases"],
    )
    def retrieve(self, request: Request, pk: int = None) -> Response:
        """
        GET /api/cases/{id}/
        """
        case = CaseQueryService.get_case_detail(ActorContext.from_user(request.user), pk)
        serializer = CaseDetailSerializer(case, context={"request": request})
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Edit a draft case",
        description="Client completes or corrects the details of a case that is still a draft.",
        request=CaseUpdateSerializer,
        responses={
            200: OpenApiResponse(response=CaseDetailSerializer, description="Case updated."),
            400: OpenApiResponse(description="Validation error."),
            403: OpenApiResponse(description="Not the owning client."),
            404: OpenApiResponse(description="Case not found."),
            409: OpenApiResponse(description="Case is no longer a draft."),
        },
        tags=["Cases"],
    )
    def partial_update(self, request: Request, pk: int = None) -> Response:
        """
        PATCH /api/cases/{id}/
        """
        serializer = CaseUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        case = CaseDraftService.update_draft(
            pk, serializer.validated_data, ActorContext.from_user(request.user),
        )
        out = CaseDetailSerializer(case, context={"request": request})
        return Response(out.data, status=status.HTTP_200_OK)

    # ── Workflow @actions ─────────────────────────────────────────────

    @action(detail=True, methods=["post"], url_path="submit")
    @extend_schema(
        summary="Submit a draft case",
        description=(
            "Client submits a draft to its police station. Fails with 400 listing "
            "the missing details if the case is incomplete."
        ),
        request=None,
        responses={
            200: OpenApiResponse(response=CaseDetailSerializer, description="Case submitted."),
            400: OpenApiResponse(description="Filing details missing."),
            403: OpenApiResponse(description="Only the owning client can submit."),
            404: OpenApiResponse(description="Case not found."),
            409: OpenApiResponse(description="Case is not a draft."),
        },
        tags=["Cases – Workflow"],
    )
    def submit(self, request: Request, pk: int = None) -> Response:
        """
        POST /api/cases/{id}/submit/
        """
        case = CaseWorkflowService.submit(pk, ActorContext.from_user(request.user))
        serializer = CaseDetailSerializer(case, context={"request": request})
        return Response(serializer.data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="review")
    @extend_schema(
        summary="Start reviewing a case",
        description="Police reviewer at the case's station picks up a submitted case.",
        request=None,
        responses={
            200: OpenApiResponse(response=CaseDetailSerializer, description="Case under review."),
            403: OpenApiResponse(description="Not a reviewer at this station."),
            404: OpenApiResponse(description="Case not found."),
            409: OpenApiResponse(description="Case is not submitted."),
        },
        tags=["Cases – Workflow"],
    )
    def review(self, request: Request, pk: int = None) -> Response:
        """
        POST /api/cases/{id}/review/
        """
        case = CaseWorkflowService.start_review(pk, ActorContext.from_user(request.user))
        serializer = CaseDetailSerializer(case, context={"request": request})
        return Response(serializer.data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["patch"], url_path="approve")
    @extend_schema(
        summary="Approve a case",
        description=(
            "Police reviewer approves a case under review, assigning its PNR and "
            "hearing date. Client and lawyer are notified and emailed."
        ),
        request=CaseApproveSerializer,
        responses={
            200: OpenApiResponse(response=CaseDetailSerializer, description="Case approved."),
            400: OpenApiResponse(description="PNR or hearing date missing."),
            403: OpenApiResponse(description="Not a reviewer at this station."),
            404: OpenApiResponse(description="Case not found."),
            409: OpenApiResponse(description="Case not under review, or PNR already used."),
        },
        tags=["Cases – Workflow"],
    )
    def approve(self, request: Request, pk: int = None) -> Response:
        """
        PATCH /api/cases/{id}/approve/
        """
        serializer = CaseApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        case = CaseWorkflowService.approve(
            pk,
            ActorContext.from_user(request.user),
            pnr=serializer.validated_data.get("pnr"),
            hearing_date=serializer.validated_data.get("hearing_date"),
        )
        out = CaseDetailSerializer(case, context={"request": request})
        return Response(out.data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["patch"], url_path="reject")
    @extend_schema(
        summary="Reject a case",
        description="Police reviewer rejects a submitted or under-review case.",
        request=CaseRejectSerializer,
        responses={
            200: OpenApiResponse(response=CaseDetailSerializer, description="Case rejected."),
            403: OpenApiResponse(description="Not a reviewer at this station."),
            404: OpenApiResponse(description="Case not found."),
            409: OpenApiResponse(description="Case already resolved."),
        },
        tags=["Cases – Workflow"],
    )
    def reject(self, request: Request, pk: int = None) -> Response:
        """
        PATCH /api/cases/{id}/reject/
        """
        serializer = CaseRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        case = CaseWorkflowService.reject(
            pk,
            ActorContext.from_user(request.user),
            reason=serializer.validated_data["reason"],
        )
        out = CaseDetailSerializer(case, context={"request": request})
        return Response(out.data, status=status.HTTP_200_OK)

    # ── Sub-resources ────────────────────────────────────────────────

    @action(detail=True, methods=["get"], url_path="status-log")
    @extend_schema(
        summary="Case status history",
        responses={
            200: OpenApiResponse(response=CaseStatusLogSerializer(many=True), description="Audit trail, oldest first."),
            404: OpenApiResponse(description="Case not found."),
        },
        tags=["Cases"],
    )
    def status_log(self, request: Request, pk: int = None) -> Response:
        """
        GET /api/cases/{id}/status-log/
        """
        logs = CaseQueryService.get_status_log(ActorContext.from_user(request.user), pk)
        return Response(CaseStatusLogSerializer(logs, many=True).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="documents")
    @extend_schema(
        summary="Attach documents",
        request=CaseDocumentsSerializer,
        responses={
            200: OpenApiResponse(response=CaseDetailSerializer, description="Documents appended."),
            403: OpenApiResponse(description="Not a party to this case."),
            404: OpenApiResponse(description="Case not found."),
        },
        tags=["Cases"],
    )
    def documents(self, request: Request, pk: int = None) -> Response:
        """
        POST /api/cases/{id}/documents/
        """
        serializer = CaseDocumentsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        case = CaseDocumentService.append_documents(
            pk,
            serializer.validated_data["documents"],
            ActorContext.from_user(request.user),
        )
        out = CaseDetailSerializer(case, context={"request": request})
        return Response(out.data, status=status.HTTP_200_OK)


class PoliceStationViewSet(viewsets.ViewSet):
    """
    GET /api/police-stations/?city=

    Read-only station directory used when filling in a case.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List police stations",
        parameters=[
            OpenApiParameter(name="city", type=str, location=OpenApiParameter.QUERY, description="Filter by city."),
        ],
        responses={200: OpenApiResponse(response=PoliceStationSerializer(many=True))},
        tags=["Police Stations"],
    )
    def list(self, request: Request) -> Response:
        filter_serializer = PoliceStationFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        stations = PoliceStationService.list_stations(
            city=filter_serializer.validated_data.get("city"),
        )
        return Response(PoliceStationSerializer(stations, many=True).data, status=status.HTTP_200_OK)
