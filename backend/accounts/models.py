"""
Accounts app models.

Defines the custom ``User`` model used across the platform.  Every user
holds exactly one role from the closed ``UserRole`` set; lawyer profile
fields and the police station code are only meaningful for their
respective roles.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class UserRole(models.TextChoices):
    """The three parties that meet on a shared case record."""

    CLIENT = "client", "Client"
    LAWYER = "lawyer", "Lawyer"
    POLICE = "police", "Police"


class User(AbstractUser):
    """
    Custom user model for the case intake platform.

    Login is by ``email`` + password (see ``accounts.backends``);
    ``username`` is kept as Django's internal handle.

    Lawyers expose a public profile (``specialization``, ``experience``,
    ``rating``, ``description``) searchable by city and case type.
    Police reviewers carry the ``police_station_code`` of the station
    whose cases they may review.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        verbose_name="Full Name",
    )
    phone = models.CharField(
        max_length=20,
        blank=True,
        default="",
        verbose_name="Phone Number",
    )
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.CLIENT,
        verbose_name="Role",
        db_index=True,
    )
    city = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="City",
        db_index=True,
    )

    # ── Lawyer profile ───────────────────────────────────────────────
    specialization = models.JSONField(
        default=list,
        blank=True,
        verbose_name="Specialization",
        help_text="List of case types the lawyer handles.",
    )
    experience = models.PositiveSmallIntegerField(
        default=0,
        verbose_name="Years of Experience",
    )
    rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=0,
        verbose_name="Rating",
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Profile Description",
    )

    # ── Police reviewer ──────────────────────────────────────────────
    police_station_code = models.CharField(
        max_length=20,
        blank=True,
        default="",
        verbose_name="Police Station Code",
        help_text="Code of the station this reviewer belongs to.",
    )

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.name or self.username} <{self.email}> - {self.get_role_display()}"

    # ── Helper predicates for role checks ────────────────────────────

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    @property
    def is_lawyer(self) -> bool:
        return self.role == UserRole.LAWYER

    @property
    def is_police(self) -> bool:
        return self.role == UserRole.POLICE
