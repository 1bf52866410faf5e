"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.message_bus import message_bus
from shared.domain.value_objects import DEFAULT_EVENT_DURATION

from .application.command_handlers import CompleteBooking, SendBookingReminder
from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Mark accepted bookings as completed once the engagement is over.

    A booking without an explicit end is over two hours after it starts.

    Runs every hour.

    Returns:
        dict: {"completed": number of bookings completed}
    """
    now = timezone.now()
    completed_count = 0

    finished = Booking.objects.filter(status=Booking.Status.ACCEPTED).filter(
        Q(event_end__lte=now)
        | Q(event_end__isnull=True, event_start__lte=now - DEFAULT_EVENT_DURATION)
    ).values_list("pk", flat=True)

    for booking_id in finished:
        try:
            message_bus.handle_command(CompleteBooking(booking_id=booking_id))
            completed_count += 1
        except Exception as e:
            logger.error(f"Error completing booking {booking_id}: {e}", exc_info=True)

    if completed_count > 0:
        logger.info(f"Completed {completed_count} bookings")

    return {"completed": completed_count}


@shared_task(name="bookings.send_upcoming_booking_reminders")
def send_upcoming_booking_reminders() -> dict[str, int]:
    """
    Remind customers of accepted bookings taking place tomorrow.

    Runs once a day.

    Returns:
        dict: {"sent": number of reminders queued}
    """
    tomorrow = timezone.localdate() + timedelta(days=1)
    sent_count = 0

    upcoming = Booking.objects.filter(
        status=Booking.Status.ACCEPTED,
        event_start__date=tomorrow,
    ).values_list("pk", flat=True)

    for booking_id in upcoming:
        try:
            message_bus.handle_command(SendBookingReminder(booking_id=booking_id))
            sent_count += 1
        except Exception as e:
            logger.error(f"Error sending reminder for booking {booking_id}: {e}", exc_info=True)

    if sent_count > 0:
        logger.info(f"Sent {sent_count} booking reminders")

    return {"sent": sent_count}
