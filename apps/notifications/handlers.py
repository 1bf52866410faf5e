"""
Notification event handlers

Subscribe to booking and message events on the message bus and enqueue
a ``deliver_notification`` task for the party who did not act. Handlers
only enqueue references; the task loads the booking details, so lookups
are covered by its retry policy. Enqueue failures are logged; they never
reach the command that raised the event.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from apps.bookings.domain.events import (
    BookingAccepted,
    BookingCancelled,
    BookingCounterOffered,
    BookingCreated,
    BookingDeclined,
    BookingModified,
    BookingReminderDue,
)
from apps.chat.events import MessagePosted

logger = logging.getLogger(__name__)


def _other_party(event, acting_role: str) -> int:
    return event.customer_id if acting_role == 'vendor' else event.vendor_id


def booking_reference(event) -> Dict[str, Any]:
    return {'booking_id': event.booking_id, 'status': event.status}


def enqueue(event_type: str, recipient_id: int, payload: Dict[str, Any]) -> None:
    from .tasks import deliver_notification

    try:
        deliver_notification.delay(event_type, recipient_id, payload)
    except Exception as e:
        logger.error(f"Failed to enqueue {event_type} notification for user {recipient_id}: {e}", exc_info=True)
        return
    logger.info(f"Enqueued {event_type} notification for user {recipient_id}")


def on_booking_created(event: BookingCreated) -> None:
    enqueue('booking_created', event.vendor_id, booking_reference(event))


def on_booking_accepted(event: BookingAccepted) -> None:
    enqueue('booking_approved', _other_party(event, event.accepted_by), booking_reference(event))


def on_booking_declined(event: BookingDeclined) -> None:
    enqueue('booking_rejected', _other_party(event, event.declined_by), booking_reference(event))


def on_booking_counter_offered(event: BookingCounterOffered) -> None:
    enqueue('booking_counter_offered', event.customer_id, booking_reference(event))


def on_booking_modified(event: BookingModified) -> None:
    enqueue('booking_modified', event.vendor_id, booking_reference(event))


def on_booking_cancelled(event: BookingCancelled) -> None:
    enqueue('booking_cancelled', _other_party(event, event.cancelled_by), booking_reference(event))


def on_booking_reminder_due(event: BookingReminderDue) -> None:
    enqueue('booking_reminder', event.customer_id, booking_reference(event))


def on_message_posted(event: MessagePosted) -> None:
    enqueue('new_message', event.recipient_id, {'booking_id': event.booking_id, 'message_id': event.message_id})


EVENT_HANDLERS = {
    BookingCreated: on_booking_created,
    BookingAccepted: on_booking_accepted,
    BookingDeclined: on_booking_declined,
    BookingCounterOffered: on_booking_counter_offered,
    BookingModified: on_booking_modified,
    BookingCancelled: on_booking_cancelled,
    BookingReminderDue: on_booking_reminder_due,
    MessagePosted: on_message_posted,
}


def register_handlers(bus) -> None:
    for event_type, handler in EVENT_HANDLERS.items():
        bus.register_event_handler(event_type, handler)
