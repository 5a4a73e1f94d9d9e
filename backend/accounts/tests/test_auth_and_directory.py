"""
Integration tests — login, current profile and the lawyer directory.

Endpoints under test:
    POST  /api/accounts/auth/login/          (accounts:login)
    POST  /api/accounts/auth/token/refresh/  (accounts:token-refresh)
    GET   /api/accounts/me/                  (accounts:me)
    PATCH /api/accounts/me/                  (accounts:me)
    GET   /api/accounts/lawyers/             (accounts:lawyer-list)
    GET   /api/accounts/lawyers/{id}/        (accounts:lawyer-detail)

Login payload:        {"email": "...", "password": "..."}
Login response keys:  {"access": "...", "refresh": "...", "user": {...}}
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import UserRole

User = get_user_model()

_PASSWORD = "Str0ng!Pass77"


class TestLogin(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            username="login_user",
            password=_PASSWORD,
            email="login_user@example.com",
            name="Login User",
            role=UserRole.LAWYER,
        )

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("accounts:login")

    def test_login_returns_token_pair_and_profile(self):
        resp = self.client.post(
            self.url,
            {"email": "login_user@example.com", "password": _PASSWORD},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertIn("access", resp.data)
        self.assertIn("refresh", resp.data)
        self.assertEqual(resp.data["user"]["email"], "login_user@example.com")
        self.assertEqual(resp.data["user"]["role"], UserRole.LAWYER)

        token = AccessToken(resp.data["access"])
        self.assertEqual(token["role"], UserRole.LAWYER)
        self.assertEqual(token["name"], "Login User")

    def test_email_is_case_insensitive(self):
        resp = self.client.post(
            self.url,
            {"email": "LOGIN_USER@example.com", "password": _PASSWORD},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)

    def test_wrong_password(self):
        resp = self.client.post(
            self.url,
            {"email": "login_user@example.com", "password": "nope"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertNotIn("access", resp.data)

    def test_refresh(self):
        login = self.client.post(
            self.url,
            {"email": "login_user@example.com", "password": _PASSWORD},
            format="json",
        )
        resp = self.client.post(
            reverse("accounts:token-refresh"),
            {"refresh": login.data["refresh"]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn("access", resp.data)


class TestMeEndpoint(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            username="me_user",
            password=_PASSWORD,
            email="me_user@example.com",
            name="Me Tester",
            role=UserRole.CLIENT,
        )

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("accounts:me")

    def test_requires_authentication(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_get_profile(self):
        self.client.force_authenticate(self.user)
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["name"], "Me Tester")
        self.assertEqual(resp.data["role"], UserRole.CLIENT)

    def test_patch_profile_cannot_change_role(self):
        self.client.force_authenticate(self.user)
        resp = self.client.patch(
            self.url,
            {"city": "Pune", "phone": "9123456789", "role": "police"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.city, "Pune")
        self.assertEqual(self.user.role, UserRole.CLIENT)


class TestLawyerDirectory(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.client_user = User.objects.create_user(
            username="dir_client",
            password=_PASSWORD,
            email="dir_client@example.com",
            role=UserRole.CLIENT,
        )
        cls.criminal_delhi = User.objects.create_user(
            username="dir_lawyer_1",
            password=_PASSWORD,
            email="dir_lawyer_1@example.com",
            name="Criminal Delhi",
            role=UserRole.LAWYER,
            city="Delhi",
            specialization=["Criminal", "cyber"],
            rating="4.50",
        )
        cls.family_delhi = User.objects.create_user(
            username="dir_lawyer_2",
            password=_PASSWORD,
            email="dir_lawyer_2@example.com",
            name="Family Delhi",
            role=UserRole.LAWYER,
            city="Delhi",
            specialization=["family"],
            rating="4.90",
        )
        cls.criminal_mumbai = User.objects.create_user(
            username="dir_lawyer_3",
            password=_PASSWORD,
            email="dir_lawyer_3@example.com",
            name="Criminal Mumbai",
            role=UserRole.LAWYER,
            city="Mumbai",
            specialization=["criminal"],
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(self.client_user)

    def test_lists_only_lawyers_best_rated_first(self):
        resp = self.client.get(reverse("accounts:lawyer-list"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [row["id"] for row in resp.data],
            [self.family_delhi.pk, self.criminal_delhi.pk, self.criminal_mumbai.pk],
        )

    def test_filter_by_city_and_case_type(self):
        resp = self.client.get(
            reverse("accounts:lawyer-list"),
            {"city": "delhi", "case_type": "criminal"},
        )
        self.assertEqual([row["id"] for row in resp.data], [self.criminal_delhi.pk])

    def test_retrieve_non_lawyer_is_not_found(self):
        resp = self.client.get(reverse("accounts:lawyer-detail", args=[self.client_user.pk]))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_retrieve_lawyer(self):
        resp = self.client.get(reverse("accounts:lawyer-detail", args=[self.family_delhi.pk]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["specialization"], ["family"])

    def test_retrieve_non_numeric_id_is_not_found(self):
        resp = self.client.get("/api/accounts/lawyers/abc/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
