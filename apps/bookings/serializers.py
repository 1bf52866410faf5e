"""Serializers for the booking domain.

Write serializers only parse request data; the command handlers own the
business rules and raise domain errors.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer

from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking representation."""

    customer = UserShortSerializer(read_only=True)
    vendor = UserShortSerializer(read_only=True)
    service_id = serializers.ReadOnlyField(source="service.id")
    service_name = serializers.ReadOnlyField(source="service.name")
    effective_end = serializers.DateTimeField(read_only=True)
    can_be_cancelled = serializers.SerializerMethodField()
    can_be_modified = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "customer",
            "vendor",
            "service_id",
            "service_name",
            "event_start",
            "event_end",
            "effective_end",
            "location",
            "amount",
            "status",
            "requirements",
            "vendor_notes",
            "can_be_cancelled",
            "can_be_modified",
            "responded_at",
            "cancelled_at",
            "cancelled_by",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_can_be_cancelled(self, obj: Booking) -> bool:
        return obj.can_be_cancelled()

    def get_can_be_modified(self, obj: Booking) -> bool:
        return obj.can_be_modified()


class BookingSummarySerializer(serializers.ModelSerializer):
    """Compact view used in calendar diagnostics."""

    effective_end = serializers.DateTimeField(read_only=True)

    class Meta:
        model = Booking
        fields = ["id", "status", "event_start", "event_end", "effective_end"]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    service = serializers.IntegerField()
    event_start = serializers.DateTimeField()
    event_end = serializers.DateTimeField(required=False, allow_null=True)
    location = serializers.CharField(max_length=500)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    requirements = serializers.CharField(required=False, allow_blank=True, default="")


class BookingModifySerializer(serializers.Serializer):
    event_start = serializers.DateTimeField(required=False)
    event_end = serializers.DateTimeField(required=False)
    location = serializers.CharField(required=False, max_length=500, allow_blank=True)
    requirements = serializers.CharField(required=False, allow_blank=True)


class BookingRespondSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=["accept", "decline", "counter_offer"])
    counter_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    counter_notes = serializers.CharField(required=False, allow_blank=True, default="")


class CounterOfferResponseSerializer(serializers.Serializer):
    accept = serializers.BooleanField()


class AvailabilityQuerySerializer(serializers.Serializer):
    service = serializers.IntegerField()
    event_start = serializers.DateTimeField()
    event_end = serializers.DateTimeField(required=False)


class SuggestAlternativesQuerySerializer(serializers.Serializer):
    service = serializers.IntegerField()
    date = serializers.DateField()
    duration_minutes = serializers.IntegerField(min_value=15, max_value=24 * 60, default=120)


class TimeWindowSerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
