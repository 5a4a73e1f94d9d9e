"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``RegisterView``     — POST /auth/register/
- ``LoginView``        — POST /auth/login/
- ``MeView``           — GET / PATCH /me/
- ``LawyerViewSet``    — /lawyers/  (list, retrieve)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics, status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    LawyerSerializer,
    LoginRequestSerializer,
    MeUpdateSerializer,
    RegisterRequestSerializer,
    TokenResponseSerializer,
    UserDetailSerializer,
)
from .services import (
    AuthenticationService,
    CurrentUserService,
    LawyerDirectoryService,
    UserRegistrationService,
)


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class RegisterView(generics.CreateAPIView):
    """
    POST /api/accounts/auth/register/

    Public endpoint.  Creates a client, lawyer or police reviewer.

    Request body  → ``RegisterRequestSerializer``
    Response body → ``UserDetailSerializer`` (201 Created)
    """

    permission_classes = [AllowAny]
    serializer_class = RegisterRequestSerializer

    @extend_schema(
        summary="Register",
        description=(
            "Create an account.  Police reviewers must supply an existing "
            "police_station_code; lawyer profile fields are kept for lawyers only."
        ),
        request=RegisterRequestSerializer,
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="Account created."),
            400: OpenApiResponse(description="Validation error or unknown station."),
            409: OpenApiResponse(description="Email or username already taken."),
        },
        tags=["Accounts"],
    )
    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserRegistrationService.register_user(serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  Authenticates a user by email + password and
    returns a SimpleJWT token pair plus the user's profile.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        description="Exchange email + password for a JWT access/refresh pair.",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(response=TokenResponseSerializer, description="Authenticated."),
            400: OpenApiResponse(description="Invalid credentials."),
        },
        tags=["Accounts"],
    )
    def post(self, request: Request) -> Response:
        serializer = LoginRequestSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data["user"]
        payload = AuthenticationService.generate_tokens(user)
        payload["user"] = UserDetailSerializer(user).data

        return Response(payload, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET  /api/accounts/me/  → Retrieve current user profile.
    PATCH /api/accounts/me/ → Update own profile fields.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user profile",
        responses={200: OpenApiResponse(response=UserDetailSerializer)},
        tags=["Accounts"],
    )
    def get(self, request: Request) -> Response:
        user = CurrentUserService.get_profile(request.user)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update own profile",
        request=MeUpdateSerializer,
        responses={
            200: OpenApiResponse(response=UserDetailSerializer, description="Profile updated."),
            400: OpenApiResponse(description="Validation error."),
        },
        tags=["Accounts"],
    )
    def patch(self, request: Request) -> Response:
        serializer = MeUpdateSerializer(
            instance=request.user, data=request.data, partial=True,
        )
        serializer.is_valid(raise_exception=True)
        user = CurrentUserService.update_profile(request.user, serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Lawyer Directory ViewSet
# ═══════════════════════════════════════════════════════════════════


class LawyerViewSet(viewsets.ViewSet):
    """
    /api/accounts/lawyers/

    Read-only lawyer directory used by clients to pick a lawyer for a
    case request.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search lawyers",
        parameters=[
            OpenApiParameter(name="city", type=str, location=OpenApiParameter.QUERY, description="Filter by city."),
            OpenApiParameter(name="case_type", type=str, location=OpenApiParameter.QUERY, description="Filter by specialization."),
        ],
        responses={200: OpenApiResponse(response=LawyerSerializer(many=True))},
        tags=["Accounts"],
    )
    def list(self, request: Request) -> Response:
        lawyers = LawyerDirectoryService.list_lawyers(
            city=request.query_params.get("city"),
            case_type=request.query_params.get("case_type"),
        )
        return Response(LawyerSerializer(lawyers, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Lawyer profile",
        responses={
            200: OpenApiResponse(response=LawyerSerializer),
            404: OpenApiResponse(description="Lawyer not found."),
        },
        tags=["Accounts"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        lawyer = LawyerDirectoryService.get_lawyer(pk)
        return Response(LawyerSerializer(lawyer).data, status=status.HTTP_200_OK)
