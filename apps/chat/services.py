"""Message thread operations.

Both operations take the acting user explicitly; only the booking's
customer and vendor may read or write its thread.
"""

from __future__ import annotations

import logging
from datetime import datetime

from django.conf import settings
from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import AuthorizationError, ValidationError

from .events import MessagePosted
from .models import BookingMessage

logger = logging.getLogger(__name__)


def _require_party(booking, actor) -> None:
    if not booking.is_party(actor):
        raise AuthorizationError(
            "Only the booking's customer or vendor can access its messages.",
            field_errors={"actor": [f"User {actor.pk} is not a party to booking {booking.pk}."]},
        )


def post_message(booking, sender, body: str, sent_at: datetime | None = None) -> BookingMessage:
    """Append a message to the booking thread and notify the other party."""

    _require_party(booking, sender)

    max_length = settings.BOOKING_MESSAGE_MAX_LENGTH
    text = (body or "").strip()
    if not text:
        raise ValidationError.for_field("body", "Message cannot be empty.")
    if len(text) > max_length:
        raise ValidationError.for_field("body", f"Message cannot be longer than {max_length} characters.")

    with DjangoUnitOfWork() as uow:
        message = BookingMessage.objects.create(
            booking=booking,
            sender=sender,
            body=text,
            sent_at=sent_at or timezone.now(),
        )
        uow.add_event(
            MessagePosted(
                aggregate_id=booking.pk,
                message_id=message.pk,
                booking_id=booking.pk,
                sender_id=sender.pk,
                recipient_id=booking.other_party_id(sender),
            )
        )

    logger.info("User %s posted message %s on booking %s", sender.pk, message.pk, booking.pk)
    return message


def list_messages(booking, actor):
    """Return the booking thread, oldest first."""

    _require_party(booking, actor)
    return BookingMessage.objects.filter(booking=booking).select_related("sender").order_by("sent_at", "id")
