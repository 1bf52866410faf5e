"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()


class UserShortSerializer(serializers.ModelSerializer):
    """Party summary embedded in booking and message payloads."""

    name = serializers.ReadOnlyField(source="display_name")

    class Meta:
        model = User
        fields = ["id", "name", "email", "role"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Profile of the authenticated user."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "business_name",
            "role",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "email", "role", "created_at", "updated_at"]
