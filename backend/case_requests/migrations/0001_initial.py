import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("cases", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CaseRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("description", models.TextField(verbose_name="Description")),
                ("victim_name", models.CharField(max_length=255, verbose_name="Victim Name")),
                ("accused_name", models.CharField(max_length=255, verbose_name="Accused Name")),
                ("client_phone", models.CharField(blank=True, default="", max_length=20, verbose_name="Client Phone")),
                ("client_email", models.EmailField(blank=True, default="", max_length=254, verbose_name="Client Email")),
                ("documents", models.JSONField(blank=True, default=list, verbose_name="Documents")),
                ("status", models.CharField(choices=[("pending", "Pending"), ("accepted", "Accepted"), ("rejected", "Rejected")], default="pending", max_length=10, verbose_name="Status")),
                ("lawyer_response", models.TextField(blank=True, default="", verbose_name="Lawyer Response")),
                ("case_type", models.CharField(blank=True, default="", max_length=30, verbose_name="Case Type")),
                ("victim", models.JSONField(blank=True, default=dict, verbose_name="Victim Details")),
                ("accused", models.JSONField(blank=True, default=dict, verbose_name="Accused Details")),
                ("city", models.CharField(blank=True, default="", max_length=100, verbose_name="City")),
                ("case", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="source_request", to="cases.case", verbose_name="Resulting Case")),
                ("client", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sent_case_requests", to=settings.AUTH_USER_MODEL, verbose_name="Client")),
                ("lawyer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="received_case_requests", to=settings.AUTH_USER_MODEL, verbose_name="Lawyer")),
                ("police_station", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="case_requests", to="cases.policestation", verbose_name="Police Station")),
            ],
            options={
                "verbose_name": "Case Request",
                "verbose_name_plural": "Case Requests",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["lawyer", "status"], name="creq_lawyer_status_idx"),
                    models.Index(fields=["client", "status"], name="creq_client_status_idx"),
                ],
            },
        ),
    ]
