"""
Case requests app models.

A ``CaseRequest`` is a client's ask for representation addressed to one
lawyer.  The lawyer either accepts it, which builds the shared ``Case``,
or rejects it.  Both outcomes are final.
"""

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class CaseRequestStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACCEPTED = "accepted", "Accepted"
    REJECTED = "rejected", "Rejected"


class CaseRequest(TimeStampedModel):
    """
    A client → lawyer request for representation.

    Only ``pending → accepted`` and ``pending → rejected`` are legal.
    Once resolved the request is immutable except for
    ``lawyer_response``.

    The detail fields (``case_type``, ``victim``, ``accused``, ``city``,
    ``police_station``) are filled in by the lawyer on acceptance and
    copied into the new ``Case``.
    """

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_case_requests",
        verbose_name="Client",
    )
    lawyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_case_requests",
        verbose_name="Lawyer",
    )

    title = models.CharField(max_length=255, verbose_name="Title")
    description = models.TextField(verbose_name="Description")
    victim_name = models.CharField(max_length=255, verbose_name="Victim Name")
    accused_name = models.CharField(max_length=255, verbose_name="Accused Name")
    client_phone = models.CharField(max_length=20, blank=True, default="", verbose_name="Client Phone")
    client_email = models.EmailField(blank=True, default="", verbose_name="Client Email")
    documents = models.JSONField(default=list, blank=True, verbose_name="Documents")

    status = models.CharField(
        max_length=10,
        choices=CaseRequestStatus.choices,
        default=CaseRequestStatus.PENDING,
        verbose_name="Status",
    )
    lawyer_response = models.TextField(blank=True, default="", verbose_name="Lawyer Response")

    # ── Filled on acceptance ─────────────────────────────────────────
    case_type = models.CharField(max_length=30, blank=True, default="", verbose_name="Case Type")
    victim = models.JSONField(default=dict, blank=True, verbose_name="Victim Details")
    accused = models.JSONField(default=dict, blank=True, verbose_name="Accused Details")
    city = models.CharField(max_length=100, blank=True, default="", verbose_name="City")
    police_station = models.ForeignKey(
        "cases.PoliceStation",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="case_requests",
        verbose_name="Police Station",
    )
    case = models.OneToOneField(
        "cases.Case",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="source_request",
        verbose_name="Resulting Case",
    )

    class Meta:
        verbose_name = "Case Request"
        verbose_name_plural = "Case Requests"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["lawyer", "status"], name="creq_lawyer_status_idx"),
            models.Index(fields=["client", "status"], name="creq_client_status_idx"),
        ]

    def __str__(self):
        return f"Request #{self.pk}: {self.title} [{self.get_status_display()}]"
