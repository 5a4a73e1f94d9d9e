"""
Cases app models.

Covers the case registry (drafts, police-station review, approval with
a PNR and hearing date, rejection) and the police station directory
cases are filed with.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class CaseStatus(models.TextChoices):
    """
    Case lifecycle.  ``approved`` and ``rejected`` are terminal; status
    never moves backwards.
    """

    DRAFT = "draft", "Draft"
    SUBMITTED = "submitted", "Submitted"
    UNDER_REVIEW = "under_review", "Under Review"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class CaseType(models.TextChoices):
    CRIMINAL = "criminal", "Criminal"
    CIVIL = "civil", "Civil"
    FAMILY = "family", "Family"
    PROPERTY = "property", "Property"
    CORPORATE = "corporate", "Corporate"
    CYBER = "cyber", "Cyber Crime"
    OTHER = "other", "Other"


# ────────────────────────────────────────────────────────────────────
# Police station directory
# ────────────────────────────────────────────────────────────────────

class PoliceStation(TimeStampedModel):
    """
    A station that receives and reviews cases.  Police users are tied to
    a station through ``User.police_station_code`` == ``code``.
    """

    name = models.CharField(max_length=255, verbose_name="Name")
    code = models.CharField(
        max_length=20,
        unique=True,
        verbose_name="Station Code",
        help_text="e.g. DEL-001",
    )
    city = models.CharField(max_length=100, verbose_name="City", db_index=True)
    address = models.TextField(blank=True, default="", verbose_name="Address")
    phone = models.CharField(max_length=20, blank=True, default="", verbose_name="Phone")
    email = models.EmailField(blank=True, default="", verbose_name="Email")

    class Meta:
        verbose_name = "Police Station"
        verbose_name_plural = "Police Stations"
        ordering = ["city", "name"]

    def __str__(self):
        return f"{self.name} ({self.code})"


# ────────────────────────────────────────────────────────────────────
# Case
# ────────────────────────────────────────────────────────────────────

class Case(TimeStampedModel):
    """
    The shared record between a client, their lawyer and the reviewing
    police station.

    ``victim`` is ``{"name", "phone", "email"?}`` and ``accused`` is
    ``{"name", "phone"?, "address"?}``.  ``documents`` is an ordered list
    of opaque upload references.

    ``police_station`` may be empty only while the case is a draft.
    ``pnr`` and ``hearing_date`` are set exactly when the case is
    approved; the check constraint below backs the workflow rule.
    """

    title = models.CharField(max_length=255, verbose_name="Title")
    description = models.TextField(blank=True, default="", verbose_name="Description")
    case_type = models.CharField(
        max_length=30,
        choices=CaseType.choices,
        blank=True,
        default="",
        verbose_name="Case Type",
    )
    victim = models.JSONField(default=dict, blank=True, verbose_name="Victim")
    accused = models.JSONField(default=dict, blank=True, verbose_name="Accused")

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="client_cases",
        verbose_name="Client",
    )
    lawyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="lawyer_cases",
        verbose_name="Lawyer",
    )
    police_station = models.ForeignKey(
        PoliceStation,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="cases",
        verbose_name="Police Station",
    )
    city = models.CharField(max_length=100, blank=True, default="", verbose_name="City")

    status = models.CharField(
        max_length=20,
        choices=CaseStatus.choices,
        default=CaseStatus.DRAFT,
        verbose_name="Status",
    )
    pnr = models.CharField(
        max_length=100,
        unique=True,
        null=True,
        blank=True,
        verbose_name="PNR",
        help_text="Police registration number assigned on approval.",
    )
    hearing_date = models.DateField(null=True, blank=True, verbose_name="Hearing Date")
    rejection_reason = models.TextField(blank=True, default="", verbose_name="Rejection Reason")
    documents = models.JSONField(default=list, blank=True, verbose_name="Documents")

    class Meta:
        verbose_name = "Case"
        verbose_name_plural = "Cases"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="cases_case_status_idx"),
            models.Index(fields=["client", "status"], name="cases_case_client_status"),
            models.Index(fields=["lawyer", "status"], name="cases_case_lawyer_status"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status="approved", pnr__isnull=False, hearing_date__isnull=False)
                    | (
                        ~Q(status="approved")
                        & Q(pnr__isnull=True, hearing_date__isnull=True)
                    )
                ),
                name="cases_case_approval_fields",
            ),
        ]

    def __str__(self):
        return f"Case #{self.pk}: {self.title} [{self.get_status_display()}]"

    @property
    def missing_filing_details(self) -> list[str]:
        """
        Details a case needs before it can leave ``draft``.  Empty list
        means the case is complete enough to be submitted.
        """
        missing = []
        if not self.case_type:
            missing.append("case_type")
        if not self.city:
            missing.append("city")
        if self.police_station_id is None:
            missing.append("police_station")
        if not (self.victim or {}).get("name"):
            missing.append("victim.name")
        if not (self.accused or {}).get("name"):
            missing.append("accused.name")
        return missing


class CaseStatusLog(TimeStampedModel):
    """
    Immutable audit trail of every status transition for a case.

    Stores the previous/new status, who made the change, and an optional
    message (e.g. the police reviewer's rejection reason).
    """

    case = models.ForeignKey(
        Case,
        on_delete=models.CASCADE,
        related_name="status_logs",
        verbose_name="Case",
    )
    from_status = models.CharField(
        max_length=20,
        choices=CaseStatus.choices,
        blank=True,
        default="",
        verbose_name="Previous Status",
    )
    to_status = models.CharField(
        max_length=20,
        choices=CaseStatus.choices,
        verbose_name="New Status",
    )
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="case_status_changes",
        verbose_name="Changed By",
    )
    message = models.TextField(
        blank=True,
        default="",
        verbose_name="Message / Rejection Reason",
    )

    class Meta:
        verbose_name = "Case Status Log"
        verbose_name_plural = "Case Status Logs"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return (
            f"Case #{self.case_id}: "
            f"{self.from_status or '-'} → {self.to_status}"
        )
