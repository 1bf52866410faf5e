"""API views for vendor availability slots."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.serializers import BookingSummarySerializer

from . import services
from .models import AvailabilitySlot
from .serializers import (
    AvailabilitySlotSerializer,
    AvailabilitySlotWriteSerializer,
    BulkSlotSerializer,
    ConflictQuerySerializer,
    SlotRangeQuerySerializer,
)


class AvailabilitySlotViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Vendors manage their own slots; anyone signed in can read a vendor's calendar."""

    serializer_class = AvailabilitySlotSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = AvailabilitySlot.objects.select_related("vendor").all()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action != "list":
            return qs

        params = SlotRangeQuerySerializer(data=self.request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        vendor = self.request.user
        if data.get("vendor"):
            vendor = get_object_or_404(get_user_model(), pk=data["vendor"])

        start_date = data.get("start_date")
        if start_date is None:
            return services.list_upcoming_slots(vendor).select_related("vendor")
        return services.list_slots(vendor, start_date, data.get("end_date")).select_related("vendor")

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = AvailabilitySlotWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot = services.add_slot(request.user, **serializer.validated_data)
        return Response(AvailabilitySlotSerializer(slot).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        slot = self.get_object()
        serializer = AvailabilitySlotWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        updated = services.update_slot(slot, request.user, **serializer.validated_data)
        return Response(AvailabilitySlotSerializer(updated).data)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        slot = self.get_object()
        services.delete_slot(slot, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"], url_path="bulk")
    def bulk(self, request):  # type: ignore
        serializer = BulkSlotSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.bulk_add(request.user, serializer.validated_data["slots"])

        created = AvailabilitySlotSerializer(result.created, many=True).data
        errors = [{"index": failure.index, "errors": failure.errors} for failure in result.failed]
        if result.all_succeeded:
            return Response(
                {"created": created, "errors": [], "message": f"{len(created)} slots created successfully"},
                status=status.HTTP_201_CREATED,
            )
        response_status = status.HTTP_206_PARTIAL_CONTENT if created else status.HTTP_400_BAD_REQUEST
        return Response(
            {
                "created": created,
                "errors": errors,
                "message": f"{len(created)} slots created, {len(errors)} failed",
            },
            status=response_status,
        )

    @action(detail=False, methods=["get"], url_path="check-conflicts")
    def check_conflicts(self, request):  # type: ignore
        params = ConflictQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        result = services.check_conflicts(
            request.user,
            data["date"],
            data["start_time"],
            data["end_time"],
            exclude_slot_id=data.get("exclude_slot_id"),
        )
        return Response(
            {
                "has_conflicts": result.has_conflicts,
                "overlapping_slots": AvailabilitySlotSerializer(result.overlapping_slots, many=True).data,
                "overlapping_bookings": BookingSummarySerializer(result.overlapping_bookings, many=True).data,
            }
        )
