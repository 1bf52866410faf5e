"""API views for the booking domain."""

from __future__ import annotations

from datetime import timedelta

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.availability.services import detect_conflicts, suggest_alternatives
from apps.catalog.services import lookup_service
from apps.chat import services as chat
from apps.chat.serializers import BookingMessageSerializer, PostMessageSerializer
from shared.application.message_bus import message_bus
from shared.domain.value_objects import TimeWindow

from .application.command_handlers import (
    CancelBooking,
    CreateBooking,
    ModifyBooking,
    RespondToBooking,
    RespondToCounterOffer,
)
from .queries import bookings_for, get_booking_for
from .serializers import (
    AvailabilityQuerySerializer,
    BookingCreateSerializer,
    BookingModifySerializer,
    BookingRespondSerializer,
    BookingSerializer,
    CounterOfferResponseSerializer,
    SuggestAlternativesQuerySerializer,
    TimeWindowSerializer,
)


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Bookings of the signed-in customer or vendor; every change is a command."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status"]

    def get_queryset(self):  # type: ignore
        return bookings_for(self.request.user)

    def get_object(self):  # type: ignore
        return get_booking_for(self.request.user, self.kwargs[self.lookup_field])

    def _respond(self, booking, status_code=status.HTTP_200_OK):
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data, status=status_code)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            CreateBooking(
                customer_id=request.user.pk,
                service_id=data["service"],
                event_start=data["event_start"],
                event_end=data.get("event_end"),
                location=data["location"],
                amount=data["amount"],
                requirements=data.get("requirements", ""),
            )
        )
        return self._respond(booking, status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        booking = self.get_object()
        serializer = BookingModifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            ModifyBooking(booking_id=booking.pk, actor_id=request.user.pk, **serializer.validated_data)
        )
        return self._respond(booking)

    @action(detail=True, methods=["post"])
    def respond(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        serializer = BookingRespondSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            RespondToBooking(
                booking_id=booking.pk,
                actor_id=request.user.pk,
                action=data["action"],
                counter_amount=data.get("counter_amount"),
                counter_notes=data.get("counter_notes", ""),
            )
        )
        return self._respond(booking)

    @action(detail=True, methods=["post"], url_path="counter-offer-response")
    def counter_offer_response(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        serializer = CounterOfferResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            RespondToCounterOffer(
                booking_id=booking.pk,
                actor_id=request.user.pk,
                accept=serializer.validated_data["accept"],
            )
        )
        return self._respond(booking)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        booking = message_bus.handle_command(CancelBooking(booking_id=booking.pk, actor_id=request.user.pk))
        return self._respond(booking)

    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        if request.method == "POST":
            serializer = PostMessageSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            message = chat.post_message(booking, request.user, serializer.validated_data["body"])
            return Response(BookingMessageSerializer(message).data, status=status.HTTP_201_CREATED)

        messages = chat.list_messages(booking, request.user)
        return Response(BookingMessageSerializer(messages, many=True).data)

    @action(detail=False, methods=["get"], url_path="check-availability")
    def check_availability(self, request):  # type: ignore
        params = AvailabilityQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        service = lookup_service(data["service"])
        window = TimeWindow.for_event(data["event_start"], data.get("event_end"))
        report = detect_conflicts(service.vendor_id, window)
        return Response(
            {
                "available": not report.has_conflict,
                "event_start": window.start,
                "event_end": window.end,
                "reasons": list(report.reasons),
                "conflicting_booking_ids": report.booking_ids,
                "conflicting_slot_ids": report.slot_ids,
            }
        )

    @action(detail=False, methods=["get"], url_path="suggest-alternatives")
    def suggest_alternatives(self, request):  # type: ignore
        params = SuggestAlternativesQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        service = lookup_service(data["service"])
        windows = suggest_alternatives(
            service.vendor_id,
            data["date"],
            timedelta(minutes=data["duration_minutes"]),
        )
        return Response({"windows": TimeWindowSerializer(windows, many=True).data})
