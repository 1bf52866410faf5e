"""Admin registration for catalog services."""

from __future__ import annotations

from django.contrib import admin

from .models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("name", "vendor", "base_price", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "vendor__email", "vendor__business_name")
