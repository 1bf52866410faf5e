"""
Booking Command Handlers

These are the use cases for the booking domain. Every booking mutation
goes through one of them via the message bus; each runs in a
DjangoUnitOfWork and publishes its domain event after commit.

Commands:
- CreateBooking: Customer requests a booking
- RespondToBooking: Vendor accepts, declines or counter-offers
- RespondToCounterOffer: Customer accepts or declines a counter-offer
- ModifyBooking: Customer changes a pending booking
- CancelBooking: Either party cancels
- CompleteBooking: System marks an accepted booking as completed
- SendBookingReminder: System reminds the customer of an upcoming booking
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List
import logging

from django.conf import settings
from django.utils import timezone

from apps.availability.services import ensure_window_available, lock_vendor
from apps.catalog.services import lookup_service
from apps.users.identity import require_customer, resolve_actor
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    AuthorizationError,
    CancellationWindowClosed,
    NotFoundError,
    StateError,
    ValidationError,
)
from shared.domain.value_objects import TimeWindow

from apps.bookings.domain.events import (
    BookingAccepted,
    BookingCancelled,
    BookingCompleted,
    BookingCounterOffered,
    BookingCreated,
    BookingDeclined,
    BookingModified,
    BookingReminderDue,
)
from apps.bookings.domain.state_machine import (
    INITIAL_STATUS,
    ActorRole,
    BookingAction,
    BookingStatus,
    transition,
)
from apps.bookings.models import Booking

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBooking:
    """
    Command to create a new booking

    This is the primary entry point for creating bookings.
    ``event_end`` defaults to two hours after ``event_start``.
    """
    customer_id: int
    service_id: int
    event_start: datetime
    location: str
    amount: Any
    event_end: datetime | None = None
    requirements: str = ''


@dataclass
class RespondToBooking:
    """Vendor answer to a pending booking"""
    booking_id: int
    actor_id: int
    action: str  # accept | decline | counter_offer
    counter_amount: Any = None
    counter_notes: str = ''


@dataclass
class RespondToCounterOffer:
    """Customer answer to a counter-offer"""
    booking_id: int
    actor_id: int
    accept: bool


@dataclass
class ModifyBooking:
    """
    Customer change to a pending booking

    Fields left as None keep their value. Moving ``event_start`` without
    giving ``event_end`` resets the booking to the default length.
    """
    booking_id: int
    actor_id: int
    event_start: datetime | None = None
    event_end: datetime | None = None
    location: str | None = None
    requirements: str | None = None


@dataclass
class CancelBooking:
    """Command to cancel a booking"""
    booking_id: int
    actor_id: int


@dataclass
class CompleteBooking:
    """Command to complete a booking after the engagement took place"""
    booking_id: int


@dataclass
class SendBookingReminder:
    """Command to remind the customer of an accepted booking"""
    booking_id: int


VENDOR_RESPONSES = {
    BookingAction.ACCEPT.value: BookingAction.ACCEPT,
    BookingAction.DECLINE.value: BookingAction.DECLINE,
    BookingAction.COUNTER_OFFER.value: BookingAction.COUNTER_OFFER,
}


# ===== Helpers =====

def _aware(value: datetime) -> datetime:
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


def _positive_amount(value: Any, field_name: str, errors: Dict[str, List[str]]) -> Decimal | None:
    if value is None or value == '':
        errors.setdefault(field_name, []).append("This field is required.")
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        errors.setdefault(field_name, []).append("A valid number is required.")
        return None
    if not amount.is_finite() or amount <= 0:
        errors.setdefault(field_name, []).append("Amount must be greater than zero.")
        return None
    return amount


def _window_errors(start: datetime | None, end: datetime | None, errors: Dict[str, List[str]]) -> None:
    if start is None:
        errors.setdefault('event_start', []).append("This field is required.")
        return
    if start <= timezone.now():
        errors.setdefault('event_start', []).append("Event start must be in the future.")
    if end is not None and end <= start:
        errors.setdefault('event_end', []).append("Event end must be after event start.")


def _load_booking(uow: DjangoUnitOfWork, booking_id: int, lock: bool = True) -> Booking:
    queryset = Booking.objects.filter(pk=booking_id)
    if lock:
        queryset = uow.lock(queryset)
    try:
        return queryset.get()
    except Booking.DoesNotExist:
        raise NotFoundError.for_field('booking_id', f"Booking {booking_id} not found.") from None


def _require_party(booking: Booking, actor) -> str:
    role = booking.role_of(actor)
    if role is None:
        raise AuthorizationError(
            "Only the booking's customer or vendor can do this.",
            field_errors={'actor': [f"User {actor.pk} is not a party to booking {booking.pk}."]},
        )
    return role


def _require_vendor_of(booking: Booking, actor) -> None:
    if actor.pk != booking.vendor_id:
        raise AuthorizationError(
            "Only the vendor can respond to this booking.",
            field_errors={'actor': [f"User {actor.pk} is not the vendor of booking {booking.pk}."]},
        )


def _require_customer_of(booking: Booking, actor) -> None:
    if actor.pk != booking.customer_id:
        raise AuthorizationError(
            "Only the customer can do this.",
            field_errors={'actor': [f"User {actor.pk} is not the customer of booking {booking.pk}."]},
        )


def _event(event_class, booking: Booking, **fields):
    return event_class(
        aggregate_id=booking.pk,
        booking_id=booking.pk,
        customer_id=booking.customer_id,
        vendor_id=booking.vendor_id,
        status=booking.status,
        **fields,
    )


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Double booking prevention:
    1. Validate input outside the transaction
    2. Start database transaction (atomic)
    3. Lock the vendor row (SELECT FOR UPDATE) to serialize calendar writes
    4. Run the conflict detector against the locked calendar
    5. Insert the pending booking and queue BookingCreated
    6. Commit; the event is published after commit
    """

    def handle(self, command: CreateBooking) -> Booking:
        logger.info(
            "Creating booking for service %s by customer %s at %s",
            command.service_id, command.customer_id, command.event_start,
        )

        customer = require_customer(resolve_actor(command.customer_id))
        service = lookup_service(command.service_id)

        errors: Dict[str, List[str]] = {}
        start = _aware(command.event_start) if command.event_start else None
        end = _aware(command.event_end) if command.event_end else None
        _window_errors(start, end, errors)
        amount = _positive_amount(command.amount, 'amount', errors)
        location = (command.location or '').strip()
        if not location:
            errors.setdefault('location', []).append("This field is required.")
        if errors:
            raise ValidationError.from_errors(errors)

        window = TimeWindow.for_event(start, end)

        with DjangoUnitOfWork() as uow:
            lock_vendor(uow, service.vendor_id)
            ensure_window_available(service.vendor_id, window)

            booking = Booking.objects.create(
                customer=customer,
                vendor_id=service.vendor_id,
                service_id=service.id,
                event_start=start,
                event_end=end,
                location=location,
                amount=amount,
                requirements=command.requirements or '',
                status=INITIAL_STATUS.value,
            )
            uow.add_event(_event(BookingCreated, booking, event_start=booking.event_start, amount=booking.amount))

        logger.info("Booking %s created for vendor %s (%s)", booking.pk, booking.vendor_id, window)
        return booking


class RespondToBookingHandler:
    """Handler for the vendor's accept / decline / counter-offer"""

    def handle(self, command: RespondToBooking) -> Booking:
        action = VENDOR_RESPONSES.get(command.action)
        if action is None:
            raise ValidationError.for_field(
                'action', f"Action must be one of: {', '.join(VENDOR_RESPONSES)}."
            )

        actor = resolve_actor(command.actor_id)
        counter_amount = None
        if action is BookingAction.COUNTER_OFFER:
            errors: Dict[str, List[str]] = {}
            counter_amount = _positive_amount(command.counter_amount, 'counter_amount', errors)
            if errors:
                raise ValidationError.from_errors(errors)

        with DjangoUnitOfWork() as uow:
            booking = _load_booking(uow, command.booking_id)
            _require_vendor_of(booking, actor)
            booking.status = transition(booking.status, action, ActorRole.VENDOR).value
            booking.responded_at = timezone.now()

            if action is BookingAction.ACCEPT:
                event = _event(BookingAccepted, booking, accepted_by=ActorRole.VENDOR.value)
            elif action is BookingAction.DECLINE:
                if command.counter_notes:
                    booking.vendor_notes = command.counter_notes
                event = _event(BookingDeclined, booking, declined_by=ActorRole.VENDOR.value)
            else:
                booking.amount = counter_amount
                booking.vendor_notes = command.counter_notes or ''
                event = _event(
                    BookingCounterOffered, booking,
                    amount=booking.amount, vendor_notes=booking.vendor_notes,
                )

            booking.save()
            uow.add_event(event)

        logger.info("Vendor %s responded '%s' to booking %s", actor.pk, action.value, booking.pk)
        return booking


class RespondToCounterOfferHandler:
    """
    Handler for the customer's answer to a counter-offer

    Counter-offered bookings do not hold the calendar, so acceptance runs
    the conflict detector again under the vendor lock.
    """

    def handle(self, command: RespondToCounterOffer) -> Booking:
        actor = resolve_actor(command.actor_id)
        action = BookingAction.ACCEPT_COUNTER_OFFER if command.accept else BookingAction.DECLINE_COUNTER_OFFER

        with DjangoUnitOfWork() as uow:
            booking = _load_booking(uow, command.booking_id, lock=False)
            _require_customer_of(booking, actor)
            if command.accept:
                lock_vendor(uow, booking.vendor_id)
            booking = _load_booking(uow, command.booking_id)

            new_status = transition(booking.status, action, ActorRole.CUSTOMER)
            if command.accept:
                ensure_window_available(booking.vendor_id, booking.window, exclude_booking_id=booking.pk)

            booking.status = new_status.value
            booking.responded_at = timezone.now()
            booking.save()

            if command.accept:
                uow.add_event(_event(BookingAccepted, booking, accepted_by=ActorRole.CUSTOMER.value))
            else:
                uow.add_event(_event(BookingDeclined, booking, declined_by=ActorRole.CUSTOMER.value))

        logger.info("Customer %s answered counter-offer on booking %s: %s", actor.pk, booking.pk, action.value)
        return booking


class ModifyBookingHandler:
    """Handler for customer changes to a pending booking"""

    def handle(self, command: ModifyBooking) -> Booking:
        actor = resolve_actor(command.actor_id)

        with DjangoUnitOfWork() as uow:
            booking = _load_booking(uow, command.booking_id, lock=False)
            _require_customer_of(booking, actor)
            lock_vendor(uow, booking.vendor_id)
            booking = _load_booking(uow, command.booking_id)

            if booking.status != Booking.Status.PENDING:
                raise StateError.for_field('status', f"Only pending bookings can be modified (booking is {booking.status}).")
            if not booking.can_be_modified():
                raise StateError.for_field(
                    'event_start',
                    f"Bookings cannot be modified within {settings.BOOKING_CANCELLATION_CUTOFF_HOURS} hours of the event.",
                )

            changed: List[str] = []
            errors: Dict[str, List[str]] = {}

            start = booking.event_start
            end = booking.event_end
            if command.event_start is not None:
                start = _aware(command.event_start)
                end = None
            if command.event_end is not None:
                end = _aware(command.event_end)
            if start != booking.event_start or end != booking.event_end:
                _window_errors(start, end, errors)

            location = booking.location
            if command.location is not None:
                location = command.location.strip()
                if not location:
                    errors.setdefault('location', []).append("This field may not be blank.")
            if errors:
                raise ValidationError.from_errors(errors)

            if start != booking.event_start or end != booking.event_end:
                ensure_window_available(
                    booking.vendor_id, TimeWindow.for_event(start, end), exclude_booking_id=booking.pk
                )

            for name, value in (
                ('event_start', start),
                ('event_end', end),
                ('location', location),
                ('requirements', command.requirements if command.requirements is not None else booking.requirements),
            ):
                if getattr(booking, name) != value:
                    setattr(booking, name, value)
                    changed.append(name)

            if changed:
                booking.save()
                uow.add_event(_event(
                    BookingModified, booking,
                    event_start=booking.event_start,
                    event_end=booking.event_end,
                    changed_fields=tuple(changed),
                ))

        logger.info("Customer %s modified booking %s: %s", actor.pk, booking.pk, changed or 'no changes')
        return booking


class CancelBookingHandler:
    """Handler for cancelling booking"""

    def handle(self, command: CancelBooking) -> Booking:
        actor = resolve_actor(command.actor_id)
        cutoff = settings.BOOKING_CANCELLATION_CUTOFF_HOURS

        with DjangoUnitOfWork() as uow:
            booking = _load_booking(uow, command.booking_id)
            role = _require_party(booking, actor)
            new_status = transition(booking.status, BookingAction.CANCEL, role)

            if not booking.is_more_than(cutoff):
                raise CancellationWindowClosed(
                    f"Bookings cannot be cancelled within {cutoff} hours of the event.",
                    field_errors={'event_start': [f"Event starts in less than {cutoff} hours."]},
                )

            booking.status = new_status.value
            booking.cancelled_at = timezone.now()
            booking.cancelled_by = role
            booking.save()
            uow.add_event(_event(BookingCancelled, booking, cancelled_by=role))

        logger.info("Booking %s cancelled by %s %s", booking.pk, role, actor.pk)
        return booking


class CompleteBookingHandler:
    """Handler for completing booking (system actor)"""

    def handle(self, command: CompleteBooking) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = _load_booking(uow, command.booking_id)
            booking.status = transition(booking.status, BookingAction.COMPLETE, ActorRole.SYSTEM).value
            booking.completed_at = timezone.now()
            booking.save()
            uow.add_event(_event(BookingCompleted, booking))

        logger.info("Booking %s completed", booking.pk)
        return booking


class SendBookingReminderHandler:
    """Queue a reminder for an accepted booking; no state change"""

    def handle(self, command: SendBookingReminder) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = _load_booking(uow, command.booking_id, lock=False)
            if booking.status != BookingStatus.ACCEPTED.value:
                raise StateError.for_field(
                    'status', f"Reminders are only sent for accepted bookings (booking is {booking.status})."
                )
            uow.add_event(_event(BookingReminderDue, booking, event_start=booking.event_start))

        logger.info("Reminder queued for booking %s", booking.pk)
        return booking


HANDLERS = {
    CreateBooking: CreateBookingHandler(),
    RespondToBooking: RespondToBookingHandler(),
    RespondToCounterOffer: RespondToCounterOfferHandler(),
    ModifyBooking: ModifyBookingHandler(),
    CancelBooking: CancelBookingHandler(),
    CompleteBooking: CompleteBookingHandler(),
    SendBookingReminder: SendBookingReminderHandler(),
}


def register_handlers(bus) -> None:
    for command_type, handler in HANDLERS.items():
        bus.register_command_handler(command_type, handler.handle)
