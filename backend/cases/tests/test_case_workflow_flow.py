"""
Integration tests for the case lifecycle:
draft -> submitted -> under_review -> approved | rejected.

Endpoints exercised:
- POST  /api/cases/
- PATCH /api/cases/{id}/
- POST  /api/cases/{id}/submit/
- POST  /api/cases/{id}/review/
- PATCH /api/cases/{id}/approve/
- PATCH /api/cases/{id}/reject/
- GET   /api/cases/{id}/status-log/
- POST  /api/cases/{id}/documents/
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from cases.models import Case, CaseStatus, PoliceStation
from core.models import Notification, NotificationType

User = get_user_model()


class CaseFlowTestMixin:
    """Shared users, station and helpers for the lifecycle tests."""

    @classmethod
    def setUpTestData(cls):
        cls.station = PoliceStation.objects.create(
            name="Connaught Place Police Station",
            code="DEL-001",
            city="Delhi",
        )
        cls.other_station = PoliceStation.objects.create(
            name="Bandra Police Station",
            code="MUM-001",
            city="Mumbai",
        )

        cls.password = "Flow!Pass123"
        cls.client_user = User.objects.create_user(
            username="flow_client",
            password=cls.password,
            email="flow_client@example.com",
            name="Asha Client",
            role=UserRole.CLIENT,
        )
        cls.lawyer = User.objects.create_user(
            username="flow_lawyer",
            password=cls.password,
            email="flow_lawyer@example.com",
            name="Ravi Lawyer",
            role=UserRole.LAWYER,
            city="Delhi",
            specialization=["criminal"],
        )
        cls.officer = User.objects.create_user(
            username="flow_officer",
            password=cls.password,
            email="flow_officer@example.com",
            name="Inspector Singh",
            role=UserRole.POLICE,
            police_station_code="DEL-001",
        )
        cls.other_officer = User.objects.create_user(
            username="flow_other_officer",
            password=cls.password,
            email="flow_other_officer@example.com",
            name="Inspector Rao",
            role=UserRole.POLICE,
            police_station_code="MUM-001",
        )

    def setUp(self):
        self.client = APIClient()
        self.login_url = reverse("accounts:login")

    def login_as(self, user) -> str:
        """
        Authenticate via the real login endpoint and set the Bearer token.
        """
        resp = self.client.post(
            self.login_url,
            {"email": user.email, "password": self.password},
            format="json",
        )
        self.assertEqual(
            resp.status_code,
            status.HTTP_200_OK,
            msg=f"Login failed for {user.email}: {resp.data}",
        )
        token = resp.data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return token

    def complete_payload(self, **overrides) -> dict:
        payload = {
            "title": "Stolen motorcycle",
            "description": "Motorcycle stolen from the parking lot.",
            "case_type": "criminal",
            "victim": {"name": "Asha Client", "phone": "9876543210"},
            "accused": {"name": "Unknown"},
            "city": "Delhi",
            "police_station": "DEL-001",
            "lawyer": self.lawyer.pk,
        }
        payload.update(overrides)
        return payload

    def create_draft(self, **overrides) -> int:
        self.login_as(self.client_user)
        resp = self.client.post(
            reverse("case-list"),
            self.complete_payload(**overrides),
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        return resp.data["id"]

    def arrange_case_in_status(self, target: str) -> int:
        """Drive a new case through the real endpoints up to ``target``."""
        case_id = self.create_draft()
        if target == CaseStatus.DRAFT:
            return case_id

        resp = self.client.post(reverse("case-submit", args=[case_id]), format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        if target == CaseStatus.SUBMITTED:
            return case_id

        self.login_as(self.officer)
        resp = self.client.post(reverse("case-review", args=[case_id]), format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        return case_id


class TestCaseCreateAndSubmit(CaseFlowTestMixin, TestCase):

    def test_create_starts_as_draft_and_notifies_client(self):
        case_id = self.create_draft()

        case = Case.objects.get(pk=case_id)
        self.assertEqual(case.status, CaseStatus.DRAFT)
        self.assertEqual(case.client_id, self.client_user.pk)
        self.assertEqual(case.lawyer_id, self.lawyer.pk)
        self.assertEqual(case.police_station_id, self.station.pk)
        self.assertEqual(
            Notification.objects.filter(
                recipient=self.client_user,
                type=NotificationType.CASE_CREATED,
                case=case,
            ).count(),
            1,
        )

    def test_lawyer_cannot_file_a_case(self):
        self.login_as(self.lawyer)
        resp = self.client.post(reverse("case-list"), self.complete_payload(), format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Case.objects.exists())

    def test_submit_moves_draft_to_submitted_and_logs(self):
        case_id = self.create_draft()

        resp = self.client.post(reverse("case-submit", args=[case_id]), format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["status"], CaseStatus.SUBMITTED)

        log_resp = self.client.get(reverse("case-status-log", args=[case_id]))
        self.assertEqual(log_resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [(row["from_status"], row["to_status"]) for row in log_resp.data],
            [("", CaseStatus.DRAFT), (CaseStatus.DRAFT, CaseStatus.SUBMITTED)],
        )

    def test_submit_incomplete_draft_reports_missing_fields(self):
        case_id = self.create_draft(police_station=None, accused={})

        resp = self.client.post(reverse("case-submit", args=[case_id]), format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["fields"], ["police_station", "accused.name"])
        self.assertEqual(Case.objects.get(pk=case_id).status, CaseStatus.DRAFT)

    def test_draft_edit_then_submit(self):
        case_id = self.create_draft(police_station=None)

        resp = self.client.patch(
            reverse("case-detail", args=[case_id]),
            {"police_station": "DEL-001"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["missing_details"], [])

        resp = self.client.post(reverse("case-submit", args=[case_id]), format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)

    def test_submitted_case_can_no_longer_be_edited(self):
        case_id = self.arrange_case_in_status(CaseStatus.SUBMITTED)

        resp = self.client.patch(
            reverse("case-detail", args=[case_id]),
            {"title": "Changed"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Case.objects.get(pk=case_id).title, "Stolen motorcycle")

    def test_second_submit_is_invalid_transition(self):
        case_id = self.arrange_case_in_status(CaseStatus.SUBMITTED)

        resp = self.client.post(reverse("case-submit", args=[case_id]), format="json")

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)


class TestPoliceReview(CaseFlowTestMixin, TestCase):

    def test_police_do_not_see_drafts(self):
        case_id = self.create_draft()
        self.login_as(self.officer)

        resp = self.client.get(reverse("case-list"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertNotIn(case_id, [row["id"] for row in resp.data])

        resp = self.client.get(reverse("case-detail", args=[case_id]))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_non_numeric_case_id_is_not_found(self):
        self.login_as(self.officer)

        self.assertEqual(self.client.get("/api/cases/abc/").status_code, status.HTTP_404_NOT_FOUND)
        resp = self.client.patch(
            "/api/cases/abc/approve/",
            {"pnr": "PNR-X", "hearing_date": "2030-03-15"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_review_by_officer_of_station(self):
        case_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)
        self.assertEqual(Case.objects.get(pk=case_id).status, CaseStatus.UNDER_REVIEW)

    def test_officer_of_other_station_is_unauthorized(self):
        case_id = self.arrange_case_in_status(CaseStatus.SUBMITTED)
        self.login_as(self.other_officer)

        resp = self.client.post(reverse("case-review", args=[case_id]), format="json")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Case.objects.get(pk=case_id).status, CaseStatus.SUBMITTED)

    def test_client_cannot_review(self):
        case_id = self.arrange_case_in_status(CaseStatus.SUBMITTED)

        resp = self.client.post(reverse("case-review", args=[case_id]), format="json")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)


class TestCaseApprove(CaseFlowTestMixin, TestCase):

    def test_approve_without_pnr_and_date_is_missing_field(self):
        case_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)

        resp = self.client.patch(reverse("case-approve", args=[case_id]), {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["fields"], ["pnr", "hearing_date"])
        case = Case.objects.get(pk=case_id)
        self.assertEqual(case.status, CaseStatus.UNDER_REVIEW)
        self.assertIsNone(case.pnr)

    def test_approve_with_only_pnr_is_missing_hearing_date(self):
        case_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)

        resp = self.client.patch(
            reverse("case-approve", args=[case_id]),
            {"pnr": "PNR-2024-001"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["fields"], ["hearing_date"])
        self.assertEqual(Case.objects.get(pk=case_id).status, CaseStatus.UNDER_REVIEW)

    def test_approve_sets_fields_and_fans_out(self):
        case_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)
        Notification.objects.all().delete()
        mail.outbox.clear()

        resp = self.client.patch(
            reverse("case-approve", args=[case_id]),
            {"pnr": "PNR-2024-001", "hearing_date": "2030-03-15"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["status"], CaseStatus.APPROVED)
        self.assertEqual(resp.data["pnr"], "PNR-2024-001")
        self.assertEqual(resp.data["hearing_date"], "2030-03-15")

        for user in (self.client_user, self.lawyer):
            types = sorted(
                Notification.objects.filter(recipient=user, case_id=case_id)
                .values_list("type", flat=True)
            )
            self.assertEqual(
                types,
                [NotificationType.CASE_APPROVED, NotificationType.HEARING_SCHEDULED],
            )
        approved = Notification.objects.get(
            recipient=self.client_user, type=NotificationType.CASE_APPROVED,
        )
        self.assertIn("PNR-2024-001", approved.message)

        self.assertEqual(
            sorted(email.to[0] for email in mail.outbox),
            sorted([self.client_user.email, self.lawyer.email]),
        )
        self.assertIn("Case Approved", mail.outbox[0].subject)
        self.assertIn("PNR-2024-001", mail.outbox[0].body)

    def test_approve_from_submitted_is_invalid_transition(self):
        case_id = self.arrange_case_in_status(CaseStatus.SUBMITTED)
        self.login_as(self.officer)

        resp = self.client.patch(
            reverse("case-approve", args=[case_id]),
            {"pnr": "PNR-2024-002", "hearing_date": "2030-03-15"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Case.objects.get(pk=case_id).status, CaseStatus.SUBMITTED)

    def test_duplicate_pnr_is_conflict(self):
        first_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)
        resp = self.client.patch(
            reverse("case-approve", args=[first_id]),
            {"pnr": "PNR-DUP", "hearing_date": "2030-03-15"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)

        second_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)
        resp = self.client.patch(
            reverse("case-approve", args=[second_id]),
            {"pnr": "PNR-DUP", "hearing_date": "2030-04-01"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Case.objects.get(pk=second_id).status, CaseStatus.UNDER_REVIEW)


class TestCaseReject(CaseFlowTestMixin, TestCase):

    def test_reject_under_review_with_reason(self):
        case_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)
        mail.outbox.clear()

        resp = self.client.patch(
            reverse("case-reject", args=[case_id]),
            {"reason": "Insufficient evidence"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["status"], CaseStatus.REJECTED)
        self.assertEqual(resp.data["rejection_reason"], "Insufficient evidence")
        self.assertIsNone(resp.data["pnr"])

        rejected = Notification.objects.filter(type=NotificationType.CASE_REJECTED, case_id=case_id)
        self.assertEqual(
            set(rejected.values_list("recipient_id", flat=True)),
            {self.client_user.pk, self.lawyer.pk},
        )
        self.assertIn("Insufficient evidence", rejected.first().message)
        self.assertEqual(len(mail.outbox), 2)
        self.assertIn("Insufficient evidence", mail.outbox[0].body)

    def test_reject_submitted_without_reason(self):
        case_id = self.arrange_case_in_status(CaseStatus.SUBMITTED)
        self.login_as(self.officer)

        resp = self.client.patch(reverse("case-reject", args=[case_id]), {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["rejection_reason"], "")

    def test_rejected_case_is_terminal(self):
        case_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)
        self.client.patch(reverse("case-reject", args=[case_id]), {}, format="json")

        resp = self.client.patch(
            reverse("case-approve", args=[case_id]),
            {"pnr": "PNR-LATE", "hearing_date": "2030-03-15"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Case.objects.get(pk=case_id).status, CaseStatus.REJECTED)

    def test_documents_refused_on_rejected_case(self):
        case_id = self.arrange_case_in_status(CaseStatus.UNDER_REVIEW)
        self.client.patch(reverse("case-reject", args=[case_id]), {}, format="json")
        self.login_as(self.client_user)

        resp = self.client.post(
            reverse("case-documents", args=[case_id]),
            {"documents": ["uploads/late.pdf"]},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)


class TestCaseDocuments(CaseFlowTestMixin, TestCase):

    def test_append_preserves_order(self):
        case_id = self.create_draft(documents=["uploads/fir.pdf"])

        resp = self.client.post(
            reverse("case-documents", args=[case_id]),
            {"documents": ["uploads/photo-1.jpg", "uploads/photo-2.jpg"]},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(
            resp.data["documents"],
            ["uploads/fir.pdf", "uploads/photo-1.jpg", "uploads/photo-2.jpg"],
        )

    def test_lawyer_on_case_may_attach(self):
        case_id = self.create_draft()
        self.login_as(self.lawyer)

        resp = self.client.post(
            reverse("case-documents", args=[case_id]),
            {"documents": ["uploads/vakalatnama.pdf"]},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
