"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "service",
        "customer",
        "vendor",
        "status",
        "event_start",
        "event_end",
        "amount",
        "created_at",
    )
    list_filter = ("status", "event_start")
    search_fields = ("customer__email", "vendor__email", "vendor__business_name", "service__name", "location")
    readonly_fields = (
        "status",
        "responded_at",
        "cancelled_at",
        "cancelled_by",
        "completed_at",
        "created_at",
        "updated_at",
    )
