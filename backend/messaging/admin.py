from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "sender", "receiver", "case", "timestamp", "read")
    list_filter = ("read",)
    search_fields = ("content",)
    raw_id_fields = ("sender", "receiver", "case")
