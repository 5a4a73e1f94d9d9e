"""
Case requests app views.

Thin ViewSet: validate → service → serialize.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.domain.access import ActorContext

from .serializers import (
    CaseRequestAcceptSerializer,
    CaseRequestCreateSerializer,
    CaseRequestFilterSerializer,
    CaseRequestRejectSerializer,
    CaseRequestSerializer,
    CaseRequestUpdateSerializer,
)
from .services import CaseRequestQueryService, CaseRequestService


class CaseRequestViewSet(viewsets.ViewSet):
    """
    /api/case-requests/

    Clients send requests to lawyers; lawyers accept or reject them.
    Each user only ever sees requests they sent or received.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List case requests",
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="pending, accepted or rejected."),
        ],
        responses={200: OpenApiResponse(response=CaseRequestSerializer(many=True))},
        tags=["Case Requests"],
    )
    def list(self, request: Request) -> Response:
        """
        GET /api/case-requests/
        """
        filter_serializer = CaseRequestFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        qs = CaseRequestQueryService.list_requests(
            ActorContext.from_user(request.user),
            status=filter_serializer.validated_data.get("status"),
        )
        return Response(CaseRequestSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Send a case request",
        request=CaseRequestCreateSerializer,
        responses={
            201: OpenApiResponse(response=CaseRequestSerializer, description="Request sent; lawyer notified."),
            400: OpenApiResponse(description="Validation error."),
            403: OpenApiResponse(description="Only clients may send requests."),
        },
        tags=["Case Requests"],
    )
    def create(self, request: Request) -> Response:
        """
        POST /api/case-requests/
        """
        serializer = CaseRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        case_request = CaseRequestService.create(
            serializer.validated_data, ActorContext.from_user(request.user),
        )
        return Response(CaseRequestSerializer(case_request).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve a case request",
        responses={
            200: OpenApiResponse(response=CaseRequestSerializer),
            404: OpenApiResponse(description="Not found."),
        },
        tags=["Case Requests"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        """
        GET /api/case-requests/{id}/
        """
        case_request = CaseRequestQueryService.get_request(ActorContext.from_user(request.user), pk)
        return Response(CaseRequestSerializer(case_request).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update a case request",
        description=(
            "Lawyer sets `status` to `accepted` or `rejected`, and/or updates "
            "`lawyer_response`. Accepting builds the case."
        ),
        request=CaseRequestUpdateSerializer,
        responses={
            200: OpenApiResponse(response=CaseRequestSerializer),
            403: OpenApiResponse(description="Not the addressed lawyer."),
            409: OpenApiResponse(description="Request already processed."),
        },
        tags=["Case Requests"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        """
        PATCH /api/case-requests/{id}/
        """
        serializer = CaseRequestUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        case_request = CaseRequestService.update(
            pk, ActorContext.from_user(request.user), serializer.validated_data,
        )
        return Response(CaseRequestSerializer(case_request).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="accept")
    @extend_schema(
        summary="Accept a case request",
        request=CaseRequestAcceptSerializer,
        responses={
            200: OpenApiResponse(response=CaseRequestSerializer, description="Accepted; case created."),
            403: OpenApiResponse(description="Not the addressed lawyer."),
            404: OpenApiResponse(description="Not found."),
            409: OpenApiResponse(description="Request already processed."),
        },
        tags=["Case Requests"],
    )
    def accept(self, request: Request, pk: str = None) -> Response:
        """
        POST /api/case-requests/{id}/accept/
        """
        serializer = CaseRequestAcceptSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        case_request = CaseRequestService.accept(
            pk, ActorContext.from_user(request.user), serializer.validated_data,
        )
        return Response(CaseRequestSerializer(case_request).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="reject")
    @extend_schema(
        summary="Reject a case request",
        request=CaseRequestRejectSerializer,
        responses={
            200: OpenApiResponse(response=CaseRequestSerializer, description="Rejected."),
            403: OpenApiResponse(description="Not the addressed lawyer."),
            404: OpenApiResponse(description="Not found."),
            409: OpenApiResponse(description="Request already processed."),
        },
        tags=["Case Requests"],
    )
    def reject(self, request: Request, pk: str = None) -> Response:
        """
        POST /api/case-requests/{id}/reject/
        """
        serializer = CaseRequestRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        case_request = CaseRequestService.reject(
            pk,
            ActorContext.from_user(request.user),
            serializer.validated_data.get("lawyer_response"),
        )
        return Response(CaseRequestSerializer(case_request).data, status=status.HTTP_200_OK)
