"""App configuration for booking message threads."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class ChatConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.chat"
    label = "chat"
