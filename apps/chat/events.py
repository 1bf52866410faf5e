"""Chat domain events."""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class MessagePosted(DomainEvent):
    """
    Event: A party posted a message on a booking thread

    Triggers:
    - Notify the other party (``recipient_id``)
    """
    message_id: int
    booking_id: int
    sender_id: int
    recipient_id: int
