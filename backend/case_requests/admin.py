from django.contrib import admin

from .models import CaseRequest


@admin.register(CaseRequest)
class CaseRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "client", "lawyer", "status",
                    "case", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "victim_name", "accused_name")
    raw_id_fields = ("client", "lawyer", "case")
