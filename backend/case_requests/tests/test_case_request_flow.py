"""
Integration tests for the client -> lawyer request handshake.

Endpoints exercised:
- POST  /api/case-requests/
- GET   /api/case-requests/
- POST  /api/case-requests/{id}/accept/
- POST  /api/case-requests/{id}/reject/
- PATCH /api/case-requests/{id}/
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from case_requests.models import CaseRequest, CaseRequestStatus
from cases.models import Case, CaseStatus, PoliceStation
from core.models import Notification, NotificationType

User = get_user_model()


class TestCaseRequestFlow(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.station = PoliceStation.objects.create(
            name="Koramangala Police Station",
            code="BLR-001",
            city="Bangalore",
        )
        cls.password = "Request!Pass123"
        cls.client_user = User.objects.create_user(
            username="req_client",
            password=cls.password,
            email="req_client@example.com",
            name="Meera Client",
            phone="9000000001",
            role=UserRole.CLIENT,
        )
        cls.lawyer = User.objects.create_user(
            username="req_lawyer",
            password=cls.password,
            email="req_lawyer@example.com",
            name="Arjun Lawyer",
            role=UserRole.LAWYER,
            city="Bangalore",
        )
        cls.other_lawyer = User.objects.create_user(
            username="req_other_lawyer",
            password=cls.password,
            email="req_other_lawyer@example.com",
            name="Kiran Lawyer",
            role=UserRole.LAWYER,
        )
        cls.officer = User.objects.create_user(
            username="req_officer",
            password=cls.password,
            email="req_officer@example.com",
            name="Inspector Rao",
            role=UserRole.POLICE,
            police_station_code="BLR-001",
        )

    def setUp(self):
        self.client = APIClient()

    def login_as(self, user) -> None:
        resp = self.client.post(
            reverse("accounts:login"),
            {"email": user.email, "password": self.password},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")

    def send_request(self, **overrides) -> int:
        self.login_as(self.client_user)
        payload = {
            "lawyer": self.lawyer.pk,
            "title": "Cheque bounce",
            "description": "Cheque of Rs. 50,000 returned unpaid.",
            "victim_name": "Meera Client",
            "accused_name": "Suresh Trader",
            "documents": ["uploads/cheque.jpg"],
        }
        payload.update(overrides)
        resp = self.client.post(reverse("case-request-list"), payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        return resp.data["id"]

    def complete_details(self) -> dict:
        return {
            "case_type": "civil",
            "victim": {"name": "Meera Client", "phone": "9000000001"},
            "accused": {"name": "Suresh Trader", "address": "MG Road"},
            "city": "Bangalore",
            "police_station": "BLR-001",
        }

    # ── Create ───────────────────────────────────────────────────────

    def test_create_is_pending_and_notifies_lawyer(self):
        request_id = self.send_request(status="accepted")

        case_request = CaseRequest.objects.get(pk=request_id)
        self.assertEqual(case_request.status, CaseRequestStatus.PENDING)
        self.assertEqual(case_request.client_email, "req_client@example.com")
        self.assertEqual(case_request.client_phone, "9000000001")
        self.assertEqual(
            Notification.objects.filter(
                recipient=self.lawyer,
                type=NotificationType.CASE_REQUEST,
                case_request=case_request,
            ).count(),
            1,
        )

    def test_lawyer_cannot_send_request(self):
        self.login_as(self.lawyer)
        resp = self.client.post(
            reverse("case-request-list"),
            {
                "lawyer": self.other_lawyer.pk,
                "title": "x",
                "description": "x",
                "victim_name": "x",
                "accused_name": "x",
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_listing_is_scoped(self):
        request_id = self.send_request()

        self.login_as(self.lawyer)
        resp = self.client.get(reverse("case-request-list"))
        self.assertEqual([row["id"] for row in resp.data], [request_id])

        self.login_as(self.other_lawyer)
        resp = self.client.get(reverse("case-request-list"))
        self.assertEqual(resp.data, [])

        self.login_as(self.officer)
        resp = self.client.get(reverse("case-request-list"))
        self.assertEqual(resp.data, [])

    # ── Accept ───────────────────────────────────────────────────────

    def test_accept_with_complete_details_creates_submitted_case(self):
        request_id = self.send_request()
        Notification.objects.all().delete()
        self.login_as(self.lawyer)

        resp = self.client.post(
            reverse("case-request-accept", args=[request_id]),
            self.complete_details(),
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["status"], CaseRequestStatus.ACCEPTED)

        cases = Case.objects.filter(source_request__pk=request_id)
        self.assertEqual(cases.count(), 1)
        case = cases.get()
        self.assertEqual(case.status, CaseStatus.SUBMITTED)
        self.assertEqual(case.client_id, self.client_user.pk)
        self.assertEqual(case.lawyer_id, self.lawyer.pk)
        self.assertEqual(case.police_station_id, self.station.pk)
        self.assertEqual(case.documents, ["uploads/cheque.jpg"])
        self.assertEqual(resp.data["case"]["id"], case.pk)

        created = Notification.objects.filter(type=NotificationType.CASE_CREATED)
        self.assertEqual(created.count(), 1)
        self.assertEqual(created.get().recipient_id, self.client_user.pk)

    def test_accept_without_details_creates_draft(self):
        request_id = self.send_request()
        self.login_as(self.lawyer)

        resp = self.client.post(reverse("case-request-accept", args=[request_id]), {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        case = Case.objects.get(source_request__pk=request_id)
        self.assertEqual(case.status, CaseStatus.DRAFT)
        self.assertEqual(case.victim["name"], "Meera Client")
        self.assertEqual(case.accused["name"], "Suresh Trader")

    def test_second_accept_is_invalid_transition(self):
        request_id = self.send_request()
        self.login_as(self.lawyer)
        url = reverse("case-request-accept", args=[request_id])

        first = self.client.post(url, self.complete_details(), format="json")
        second = self.client.post(url, self.complete_details(), format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Case.objects.count(), 1)

    def test_reject_after_accept_is_invalid_transition(self):
        request_id = self.send_request()
        self.login_as(self.lawyer)
        self.client.post(reverse("case-request-accept", args=[request_id]), {}, format="json")

        resp = self.client.post(reverse("case-request-reject", args=[request_id]), {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(CaseRequest.objects.get(pk=request_id).status, CaseRequestStatus.ACCEPTED)

    def test_other_lawyer_cannot_accept(self):
        request_id = self.send_request()
        self.login_as(self.other_lawyer)

        resp = self.client.post(reverse("case-request-accept", args=[request_id]), {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Case.objects.exists())

    # ── Reject ───────────────────────────────────────────────────────

    def test_reject_with_response(self):
        request_id = self.send_request()
        self.login_as(self.lawyer)

        resp = self.client.post(
            reverse("case-request-reject", args=[request_id]),
            {"lawyer_response": "Outside my practice area."},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["status"], CaseRequestStatus.REJECTED)
        self.assertEqual(resp.data["lawyer_response"], "Outside my practice area.")
        self.assertIsNone(resp.data["case"])
        self.assertFalse(Case.objects.exists())

        second = self.client.post(reverse("case-request-reject", args=[request_id]), {}, format="json")
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)

    # ── PATCH {status, lawyer_response} ─────────────────────────────

    def test_patch_status_accepted(self):
        request_id = self.send_request()
        self.login_as(self.lawyer)

        resp = self.client.patch(
            reverse("case-request-detail", args=[request_id]),
            {"status": "accepted", "lawyer_response": "Happy to help.", **self.complete_details()},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["status"], CaseRequestStatus.ACCEPTED)
        self.assertEqual(resp.data["lawyer_response"], "Happy to help.")
        self.assertEqual(Case.objects.get().status, CaseStatus.SUBMITTED)

    def test_patch_response_only(self):
        request_id = self.send_request()
        self.login_as(self.lawyer)

        resp = self.client.patch(
            reverse("case-request-detail", args=[request_id]),
            {"lawyer_response": "Please send the bank memo."},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["status"], CaseRequestStatus.PENDING)
        self.assertEqual(resp.data["lawyer_response"], "Please send the bank memo.")

    def test_patch_back_to_pending_is_invalid_transition(self):
        request_id = self.send_request()
        self.login_as(self.lawyer)
        self.client.post(reverse("case-request-reject", args=[request_id]), {}, format="json")

        resp = self.client.patch(
            reverse("case-request-detail", args=[request_id]),
            {"status": "pending"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
