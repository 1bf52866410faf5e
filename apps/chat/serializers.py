"""Serializers for booking messages."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer

from .models import BookingMessage


class BookingMessageSerializer(serializers.ModelSerializer):
    sender = UserShortSerializer(read_only=True)

    class Meta:
        model = BookingMessage
        fields = ["id", "booking", "sender", "body", "sent_at"]
        read_only_fields = fields


class PostMessageSerializer(serializers.Serializer):
    body = serializers.CharField(allow_blank=True, trim_whitespace=False)
