import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PoliceStation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("code", models.CharField(help_text="e.g. DEL-001", max_length=20, unique=True, verbose_name="Station Code")),
                ("city", models.CharField(db_index=True, max_length=100, verbose_name="City")),
                ("address", models.TextField(blank=True, default="", verbose_name="Address")),
                ("phone", models.CharField(blank=True, default="", max_length=20, verbose_name="Phone")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="Email")),
            ],
            options={
                "verbose_name": "Police Station",
                "verbose_name_plural": "Police Stations",
                "ordering": ["city", "name"],
            },
        ),
        migrations.CreateModel(
            name="Case",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                ("case_type", models.CharField(blank=True, choices=[("criminal", "Criminal"), ("civil", "Civil"), ("family", "Family"), ("property", "Property"), ("corporate", "Corporate"), ("cyber", "Cyber Crime"), ("other", "Other")], default="", max_length=30, verbose_name="Case Type")),
                ("victim", models.JSONField(blank=True, default=dict, verbose_name="Victim")),
                ("accused", models.JSONField(blank=True, default=dict, verbose_name="Accused")),
                ("city", models.CharField(blank=True, default="", max_length=100, verbose_name="City")),
                ("status", models.CharField(choices=[("draft", "Draft"), ("submitted", "Submitted"), ("under_review", "Under Review"), ("approved", "Approved"), ("rejected", "Rejected")], default="draft", max_length=20, verbose_name="Status")),
                ("pnr", models.CharField(blank=True, help_text="Police registration number assigned on approval.", max_length=100, null=True, unique=True, verbose_name="PNR")),
                ("hearing_date", models.DateField(blank=True, null=True, verbose_name="Hearing Date")),
                ("rejection_reason", models.TextField(blank=True, default="", verbose_name="Rejection Reason")),
                ("documents", models.JSONField(blank=True, default=list, verbose_name="Documents")),
                ("client", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="client_cases", to=settings.AUTH_USER_MODEL, verbose_name="Client")),
                ("lawyer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="lawyer_cases", to=settings.AUTH_USER_MODEL, verbose_name="Lawyer")),
                ("police_station", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="cases", to="cases.policestation", verbose_name="Police Station")),
            ],
            options={
                "verbose_name": "Case",
                "verbose_name_plural": "Cases",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["status"], name="cases_case_status_idx"),
                    models.Index(fields=["client", "status"], name="cases_case_client_status"),
                    models.Index(fields=["lawyer", "status"], name="cases_case_lawyer_status"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(("status", "approved"), ("pnr__isnull", False), ("hearing_date__isnull", False))
                            | (
                                ~models.Q(("status", "approved"))
                                & models.Q(("pnr__isnull", True), ("hearing_date__isnull", True))
                            )
                        ),
                        name="cases_case_approval_fields",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CaseStatusLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("from_status", models.CharField(blank=True, choices=[("draft", "Draft"), ("submitted", "Submitted"), ("under_review", "Under Review"), ("approved", "Approved"), ("rejected", "Rejected")], default="", max_length=20, verbose_name="Previous Status")),
                ("to_status", models.CharField(choices=[("draft", "Draft"), ("submitted", "Submitted"), ("under_review", "Under Review"), ("approved", "Approved"), ("rejected", "Rejected")], max_length=20, verbose_name="New Status")),
                ("message", models.TextField(blank=True, default="", verbose_name="Message / Rejection Reason")),
                ("case", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_logs", to="cases.case", verbose_name="Case")),
                ("changed_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="case_status_changes", to=settings.AUTH_USER_MODEL, verbose_name="Changed By")),
            ],
            options={
                "verbose_name": "Case Status Log",
                "verbose_name_plural": "Case Status Logs",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
