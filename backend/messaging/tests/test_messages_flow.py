"""
Integration tests for direct messages.

Endpoints exercised:
- POST  /api/messages/
- GET   /api/messages/?other_user_id=&case_id=
- PATCH /api/messages/{id}/read/
- PATCH /api/messages/mark-conversation-read/
"""

from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from cases.models import Case
from core.models import Notification, NotificationType
from messaging.models import Message

User = get_user_model()


class TestMessagesFlow(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.password = "Message!Pass123"
        cls.client_user = User.objects.create_user(
            username="msg_client",
            password=cls.password,
            email="msg_client@example.com",
            name="Nisha Client",
            role=UserRole.CLIENT,
        )
        cls.lawyer = User.objects.create_user(
            username="msg_lawyer",
            password=cls.password,
            email="msg_lawyer@example.com",
            name="Vikram Lawyer",
            role=UserRole.LAWYER,
        )
        cls.outsider = User.objects.create_user(
            username="msg_outsider",
            password=cls.password,
            email="msg_outsider@example.com",
            name="Someone Else",
            role=UserRole.CLIENT,
        )
        cls.case = Case.objects.create(
            title="Tenancy dispute",
            client=cls.client_user,
            lawyer=cls.lawyer,
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

    def test_send_notifies_receiver_only(self):
        self.login_as(self.client_user)

        resp = self.client.post(
            reverse("message-list"),
            {"receiver_id": self.lawyer.pk, "content": "Hello, any update?", "case_id": self.case.pk},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        self.assertFalse(resp.data["read"])
        notes = Notification.objects.filter(type=NotificationType.NEW_MESSAGE)
        self.assertEqual(list(notes.values_list("recipient_id", flat=True)), [self.lawyer.pk])
        self.assertIn("Nisha Client", notes.get().message)
        self.assertEqual(notes.get().case_id, self.case.pk)

    def test_cannot_message_self(self):
        self.login_as(self.client_user)
        resp = self.client.post(
            reverse("message-list"),
            {"receiver_id": self.client_user.pk, "content": "note to self"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_receiver_is_not_found(self):
        self.login_as(self.client_user)
        resp = self.client.post(
            reverse("message-list"),
            {"receiver_id": 999999, "content": "hello?"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_conversation_is_ordered_with_headers(self):
        base = timezone.now() - timedelta(hours=1)
        later = Message.objects.create(
            sender=self.lawyer, receiver=self.client_user, content="third",
            timestamp=base + timedelta(minutes=10),
        )
        first = Message.objects.create(
            sender=self.client_user, receiver=self.lawyer, content="first",
            timestamp=base,
        )
        second = Message.objects.create(
            sender=self.lawyer, receiver=self.client_user, content="second",
            timestamp=base + timedelta(minutes=2),
        )
        Message.objects.create(
            sender=self.outsider, receiver=self.client_user, content="unrelated",
            timestamp=base + timedelta(minutes=1),
        )
        self.login_as(self.client_user)

        resp = self.client.get(reverse("message-list"), {"other_user_id": self.lawyer.pk})

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([row["id"] for row in resp.data], [first.pk, second.pk, later.pk])
        self.assertEqual([row["show_timestamp"] for row in resp.data], [True, False, True])

    def test_identical_timestamps_keep_insertion_order(self):
        sent_at = timezone.now() - timedelta(minutes=30)
        zulu = Message.objects.create(
            sender=self.client_user, receiver=self.lawyer, content="zulu", timestamp=sent_at,
        )
        alpha = Message.objects.create(
            sender=self.lawyer, receiver=self.client_user, content="alpha", timestamp=sent_at,
        )
        self.login_as(self.lawyer)

        resp = self.client.get(reverse("message-list"), {"other_user_id": self.client_user.pk})

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([row["id"] for row in resp.data], [zulu.pk, alpha.pk])
        self.assertEqual([row["content"] for row in resp.data], ["zulu", "alpha"])
        self.assertEqual([row["show_timestamp"] for row in resp.data], [True, False])

    def test_filter_by_case(self):
        Message.objects.create(sender=self.client_user, receiver=self.lawyer, content="general")
        about_case = Message.objects.create(
            sender=self.client_user, receiver=self.lawyer, content="about the case", case=self.case,
        )
        self.login_as(self.lawyer)

        resp = self.client.get(reverse("message-list"), {"case_id": self.case.pk})

        self.assertEqual([row["id"] for row in resp.data], [about_case.pk])

    def test_mark_read_is_idempotent_for_receiver(self):
        message = Message.objects.create(sender=self.client_user, receiver=self.lawyer, content="hi")
        self.login_as(self.lawyer)
        url = reverse("message-read", args=[message.pk])

        first = self.client.patch(url, {}, format="json")
        second = self.client.patch(url, {}, format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertTrue(second.data["read"])
        message.refresh_from_db()
        self.assertTrue(message.read)

    def test_mark_read_with_non_numeric_id_is_not_found(self):
        self.login_as(self.lawyer)

        resp = self.client.patch("/api/messages/abc/read/", {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_read_by_sender_is_unauthorized(self):
        message = Message.objects.create(sender=self.client_user, receiver=self.lawyer, content="hi")
        self.login_as(self.client_user)

        resp = self.client.patch(reverse("message-read", args=[message.pk]), {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        message.refresh_from_db()
        self.assertFalse(message.read)

    def test_mark_read_by_outsider_is_unauthorized(self):
        message = Message.objects.create(sender=self.client_user, receiver=self.lawyer, content="hi")
        self.login_as(self.outsider)

        resp = self.client.patch(reverse("message-read", args=[message.pk]), {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_mark_conversation_read(self):
        for text in ("one", "two"):
            Message.objects.create(sender=self.lawyer, receiver=self.client_user, content=text)
        Message.objects.create(sender=self.client_user, receiver=self.lawyer, content="mine")
        Message.objects.create(sender=self.outsider, receiver=self.client_user, content="other")
        self.login_as(self.client_user)

        resp = self.client.patch(
            reverse("message-mark-conversation-read"),
            {"other_user_id": self.lawyer.pk},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data, {"updated": 2})
        self.assertEqual(Message.objects.filter(receiver=self.client_user, read=False).count(), 1)
        self.assertFalse(Message.objects.get(content="mine").read)
