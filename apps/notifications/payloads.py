"""
Notification payloads

Event handlers enqueue only references (``booking_id``, ``message_id``)
plus the facts frozen at event time. The delivery task expands them here,
so database hiccups during the lookup are retried like channel failures.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from django.db import DatabaseError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.chat.models import BookingMessage
from shared.domain.exceptions import TransientDependencyError


def booking_payload(booking_id: int) -> Dict[str, Any]:
    booking = Booking.objects.select_related('customer', 'vendor', 'service').get(pk=booking_id)
    start = timezone.localtime(booking.event_start)
    return {
        'booking_id': booking.pk,
        'vendor_name': booking.vendor.display_name,
        'customer_name': booking.customer.display_name,
        'service_name': booking.service.name,
        'event_date': start.date().isoformat(),
        'event_start': start.isoformat(),
        'status': booking.status,
        'amount': str(booking.amount),
    }


def expand_payload(payload: Mapping[str, Any]) -> Dict[str, Any] | None:
    """
    Fill in booking and message details for a queued notification.

    Keys already present in ``payload`` win over the looked-up values.
    Returns None when the referenced booking or message no longer exists.
    """
    booking_id = payload.get('booking_id')
    if booking_id is None:
        return dict(payload)

    try:
        expanded = booking_payload(booking_id)
        message_id = payload.get('message_id')
        if message_id is not None:
            message = BookingMessage.objects.select_related('sender').get(pk=message_id)
            expanded['sender_name'] = message.sender.display_name
    except (Booking.DoesNotExist, BookingMessage.DoesNotExist):
        return None
    except DatabaseError as e:
        raise TransientDependencyError(f"Could not load booking {booking_id}: {e}") from e

    expanded.update(payload)
    return expanded
