from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "name", "role", "city",
                    "police_station_code", "is_active")
    search_fields = ("username", "email", "name", "phone")
    list_filter = ("is_active", "is_staff", "role", "city")
    filter_horizontal = ("groups", "user_permissions")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Platform Profile", {"fields": ("name", "phone", "role", "city",
                                         "police_station_code")}),
        ("Lawyer Profile", {"fields": ("specialization", "experience",
                                       "rating", "description")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Platform Profile", {"fields": ("email", "name", "phone", "role",
                                         "city", "police_station_code")}),
    )
