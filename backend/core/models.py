"""
Core app models.

Provides abstract base models and the per-recipient ``Notification`` inbox
shared by every app.
"""

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


class NotificationType(models.TextChoices):
    """Closed set of events that produce an in-app notification."""

    CASE_APPROVED = "case_approved", "Case Approved"
    CASE_REJECTED = "case_rejected", "Case Rejected"
    HEARING_SCHEDULED = "hearing_scheduled", "Hearing Scheduled"
    NEW_MESSAGE = "new_message", "New Message"
    CASE_CREATED = "case_created", "Case Created"
    CASE_REQUEST = "case_request", "Case Request"


class Notification(TimeStampedModel):
    """
    Notification delivered to a single recipient's mailbox.

    ``case`` and ``case_request`` are weak back-references used by the UI
    to link to the triggering record; deleting that record keeps the
    notification.
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="Recipient",
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    message = models.TextField(verbose_name="Message")
    type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        verbose_name="Type",
        db_index=True,
    )
    is_read = models.BooleanField(default=False, verbose_name="Read")

    case = models.ForeignKey(
        "cases.Case",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
        verbose_name="Related Case",
    )
    case_request = models.ForeignKey(
        "case_requests.CaseRequest",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
        verbose_name="Related Case Request",
    )

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="core_notif_recipient_read"),
        ]

    def __str__(self):
        return f"[{self.recipient}] {self.title}"
