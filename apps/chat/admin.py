"""Admin registration for booking messages."""

from __future__ import annotations

from django.contrib import admin

from .models import BookingMessage


@admin.register(BookingMessage)
class BookingMessageAdmin(admin.ModelAdmin):
    list_display = ("booking", "sender", "sent_at")
    search_fields = ("sender__email", "body")
    readonly_fields = ("booking", "sender", "body", "sent_at")
