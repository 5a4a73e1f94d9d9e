from django.contrib import admin

from .models import Case, CaseStatusLog, PoliceStation


class CaseStatusLogInline(admin.TabularInline):
    model = CaseStatusLog
    extra = 0
    readonly_fields = ("from_status", "to_status", "changed_by",
                       "message", "created_at")


@admin.register(PoliceStation)
class PoliceStationAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "city", "phone", "email")
    list_filter = ("city",)
    search_fields = ("code", "name", "city")


@admin.register(Case)
class CaseAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "status", "case_type", "city",
                    "police_station", "pnr", "hearing_date", "created_at")
    list_filter = ("status", "case_type", "city")
    search_fields = ("title", "description", "pnr")
    raw_id_fields = ("client", "lawyer")
    inlines = [CaseStatusLogInline]


@admin.register(CaseStatusLog)
class CaseStatusLogAdmin(admin.ModelAdmin):
    list_display = ("case", "from_status", "to_status",
                    "changed_by", "created_at")
    list_filter = ("to_status",)
