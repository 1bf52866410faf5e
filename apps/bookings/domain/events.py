"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
They are collected by the unit of work and published after the
transaction commits; notification handlers subscribe to them.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingEvent(DomainEvent):
    """Common fields of every booking event"""
    booking_id: int
    customer_id: int
    vendor_id: int
    status: str


@dataclass(kw_only=True)
class BookingCreated(BookingEvent):
    """
    Event: A customer requested a booking (-> PENDING)

    Triggers:
    - Notify the vendor of the new request
    """
    event_start: datetime
    amount: Decimal


@dataclass(kw_only=True)
class BookingAccepted(BookingEvent):
    """
    Event: Booking accepted (PENDING/COUNTER_OFFERED -> ACCEPTED)

    ``accepted_by`` is the role that accepted: the vendor accepts a
    request, the customer accepts a counter-offer. The other party is
    notified.
    """
    accepted_by: str


@dataclass(kw_only=True)
class BookingDeclined(BookingEvent):
    """
    Event: Booking declined (PENDING/COUNTER_OFFERED -> DECLINED)

    ``declined_by`` is the role that declined; the other party is notified.
    """
    declined_by: str


@dataclass(kw_only=True)
class BookingCounterOffered(BookingEvent):
    """
    Event: Vendor proposed revised terms (PENDING -> COUNTER_OFFERED)

    Triggers:
    - Ask the customer to accept or decline the new amount
    """
    amount: Decimal
    vendor_notes: str


@dataclass(kw_only=True)
class BookingModified(BookingEvent):
    """
    Event: Customer changed a pending booking's window or details

    Triggers:
    - Notify the vendor of the changes
    """
    event_start: datetime
    event_end: datetime | None
    changed_fields: tuple


@dataclass(kw_only=True)
class BookingCancelled(BookingEvent):
    """
    Event: Booking cancelled by one of the parties

    Triggers:
    - Notify the other party
    """
    cancelled_by: str


@dataclass(kw_only=True)
class BookingCompleted(BookingEvent):
    """Event: The engagement took place (ACCEPTED -> COMPLETED)"""


@dataclass(kw_only=True)
class BookingReminderDue(BookingEvent):
    """
    Event: An accepted booking starts soon

    Triggers:
    - Remind the customer
    """
    event_start: datetime
