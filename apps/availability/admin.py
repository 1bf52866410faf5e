"""Admin registration for availability slots."""

from __future__ import annotations

from django.contrib import admin

from .models import AvailabilitySlot


@admin.register(AvailabilitySlot)
class AvailabilitySlotAdmin(admin.ModelAdmin):
    list_display = ("vendor", "date", "start_time", "end_time", "available", "is_overnight")
    list_filter = ("available", "date")
    search_fields = ("vendor__email", "vendor__business_name")
    date_hierarchy = "date"
