"""Read-side helpers for bookings."""

from __future__ import annotations

from shared.domain.exceptions import AuthorizationError, NotFoundError

from .models import Booking


def bookings_for(user, status: str | None = None):
    """Bookings visible to ``user``: vendors see their calendar, customers their own requests."""

    qs = Booking.objects.select_related("customer", "vendor", "service")
    if user.is_vendor():
        qs = qs.filter(vendor=user)
    else:
        qs = qs.filter(customer=user)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-event_start")


def get_booking_for(actor, booking_id: int) -> Booking:
    """Load a booking for one of its two parties; nobody else may read it."""

    try:
        booking = Booking.objects.select_related("customer", "vendor", "service").get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError):
        raise NotFoundError.for_field("booking_id", f"Booking {booking_id} not found.") from None
    if not booking.is_party(actor):
        raise AuthorizationError(
            "You are not a party to this booking.",
            field_errors={"actor": [f"User {actor.pk} is not a party to booking {booking_id}."]},
        )
    return booking
