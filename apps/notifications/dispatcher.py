"""
Notification Dispatcher

Delivers one ``(event_type, recipient_id, payload)`` triple through
every enabled channel. Unknown event types are ignored and a missing
recipient is discarded. Failures of the recipient lookup or of a channel
raise TransientDependencyError for the caller to retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.db import DatabaseError  # type: ignore

from shared.domain.exceptions import TransientDependencyError

from .services import create_in_app_notification, send_email_notification

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    DELIVERED = 'delivered'
    DISCARDED = 'discarded'
    IGNORED = 'ignored'
    FAILED = 'failed'


class _Blank(dict):
    def __missing__(self, key):
        return ''


@dataclass(frozen=True)
class NotificationTemplate:
    title: str
    subject: str
    message: str

    def render(self, payload: Mapping[str, Any]) -> tuple[str, str, str]:
        values = _Blank(payload)
        return (
            self.title.format_map(values),
            self.subject.format_map(values),
            self.message.format_map(values),
        )


TEMPLATES: dict[str, NotificationTemplate] = {
    'booking_created': NotificationTemplate(
        title='New Booking Request',
        subject='New Booking Request - {service_name}',
        message='You have a new booking request from {customer_name} for {service_name} on {event_date}.',
    ),
    'booking_approved': NotificationTemplate(
        title='Booking Confirmed',
        subject='Booking Confirmed - {service_name}',
        message='Your booking of {service_name} on {event_date} has been confirmed.',
    ),
    'booking_rejected': NotificationTemplate(
        title='Booking Declined',
        subject='Booking Declined - {service_name}',
        message='Your booking of {service_name} on {event_date} has been declined.',
    ),
    'booking_counter_offered': NotificationTemplate(
        title='Counter-offer Received',
        subject='Counter-offer - {service_name}',
        message='{vendor_name} proposed {amount} for {service_name} on {event_date}.',
    ),
    'booking_modified': NotificationTemplate(
        title='Booking Modified',
        subject='Booking Modified - {service_name}',
        message='{customer_name} changed their booking of {service_name}; it now starts {event_start}.',
    ),
    'booking_cancelled': NotificationTemplate(
        title='Booking Cancelled',
        subject='Booking Cancelled - {service_name}',
        message='The booking of {service_name} on {event_date} has been cancelled.',
    ),
    'booking_reminder': NotificationTemplate(
        title='Booking Reminder',
        subject='Booking Reminder - {service_name} Tomorrow',
        message='Your booking with {vendor_name} is tomorrow ({event_start}).',
    ),
    'new_message': NotificationTemplate(
        title='New Message',
        subject='New Message - {service_name}',
        message='{sender_name} sent you a message about your booking of {service_name}.',
    ),
}

EVENT_TYPES = frozenset(TEMPLATES)


class NotificationDispatcher:
    """Deliver notifications through the in-app inbox and e-mail."""

    def __init__(self, email_enabled: bool | None = None):
        if email_enabled is None:
            email_enabled = settings.NOTIFICATIONS_EMAIL_ENABLED
        self.email_enabled = email_enabled

    def dispatch(self, event_type: str, recipient_id: int, payload: Mapping[str, Any]) -> DeliveryStatus:
        template = TEMPLATES.get(event_type)
        if template is None:
            logger.warning("Unknown notification type: %s", event_type)
            return DeliveryStatus.IGNORED

        User = get_user_model()
        try:
            recipient = User.objects.get(pk=recipient_id, is_active=True)
        except User.DoesNotExist:
            logger.info("Discarding %s notification: recipient %s not found", event_type, recipient_id)
            return DeliveryStatus.DISCARDED
        except DatabaseError as e:
            raise TransientDependencyError(f"Could not load recipient {recipient_id}: {e}") from e

        title, subject, message = template.render(payload)
        create_in_app_notification(recipient, event_type, title, message, dict(payload))
        if self.email_enabled and recipient.email:
            send_email_notification(recipient.email, subject, message)

        logger.info("Delivered %s notification to user %s", event_type, recipient_id)
        return DeliveryStatus.DELIVERED
