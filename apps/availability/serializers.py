"""Serializers for the availability calendar."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import AvailabilitySlot


class AvailabilitySlotSerializer(serializers.ModelSerializer):
    vendor_id = serializers.ReadOnlyField(source="vendor.id")
    is_overnight = serializers.ReadOnlyField()
    duration_hours = serializers.ReadOnlyField()

    class Meta:
        model = AvailabilitySlot
        fields = [
            "id",
            "vendor_id",
            "date",
            "start_time",
            "end_time",
            "available",
            "is_overnight",
            "duration_hours",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AvailabilitySlotWriteSerializer(serializers.Serializer):
    """Field parsing only; calendar rules are applied by the services."""

    date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    available = serializers.BooleanField(default=True)


class BulkSlotSerializer(serializers.Serializer):
    slots = serializers.ListField(child=serializers.DictField(), allow_empty=False)


class ConflictQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    exclude_slot_id = serializers.IntegerField(required=False)


class SlotRangeQuerySerializer(serializers.Serializer):
    vendor = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
