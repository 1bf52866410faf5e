"""Tests for the booking command handlers."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from apps.bookings.application.command_handlers import (
    CancelBooking,
    CompleteBooking,
    CreateBooking,
    ModifyBooking,
    RespondToBooking,
    RespondToCounterOffer,
    SendBookingReminder,
)
from apps.bookings.models import Booking
from shared.application.message_bus import message_bus
from shared.domain.exceptions import (
    AuthorizationError,
    CancellationWindowClosed,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)

from .helpers import at, future_day, make_customer, make_service, make_vendor, open_slot, place_booking


class BookingCommandTestCase(TestCase):
    def setUp(self) -> None:
        self.vendor = make_vendor()
        self.customer = make_customer()
        self.service = make_service(self.vendor)
        self.day = future_day()
        open_slot(self.vendor, self.day, 9, 17)

    def create(self, start_hour: int, end_hour: int | None, customer=None, **extra) -> Booking:
        extra.setdefault("location", "Riverside Hall")
        extra.setdefault("amount", Decimal("500.00"))
        return message_bus.handle_command(
            CreateBooking(
                customer_id=(customer or self.customer).pk,
                service_id=self.service.pk,
                event_start=at(self.day, start_hour),
                event_end=at(self.day, end_hour) if end_hour is not None else None,
                **extra,
            )
        )


class CreateBookingTests(BookingCommandTestCase):
    def test_mutual_exclusion_on_vendor_calendar(self) -> None:
        first = self.create(10, 12)
        self.assertEqual(first.status, Booking.Status.PENDING)

        with self.assertRaises(ConflictError) as ctx:
            self.create(11, 13, customer=make_customer("second@example.com"))
        self.assertEqual(ctx.exception.booking_ids, [first.pk])

        third = self.create(12, 14, customer=make_customer("third@example.com"))
        self.assertEqual(third.status, Booking.Status.PENDING)
        self.assertEqual(Booking.objects.count(), 2)

    def test_missing_end_defaults_to_two_hours(self) -> None:
        booking = self.create(10, None)

        self.assertIsNone(booking.event_end)
        self.assertEqual(booking.effective_end, at(self.day, 12))
        with self.assertRaises(ConflictError):
            self.create(11, 12, customer=make_customer("second@example.com"))

    def test_window_outside_declared_slots_is_refused(self) -> None:
        with self.assertRaises(ConflictError) as ctx:
            self.create(16, 18)
        self.assertIn("event_start", ctx.exception.field_errors)

    def test_declined_booking_frees_the_window(self) -> None:
        place_booking(self.customer, self.service, at(self.day, 10), at(self.day, 12), status=Booking.Status.DECLINED)

        booking = self.create(10, 12)

        self.assertEqual(booking.status, Booking.Status.PENDING)

    def test_invalid_input_is_reported_per_field(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.create(12, 11, amount=Decimal("0"), location="  ")

        self.assertEqual(set(ctx.exception.field_errors), {"event_end", "amount", "location"})

    def test_event_in_the_past_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            message_bus.handle_command(
                CreateBooking(
                    customer_id=self.customer.pk,
                    service_id=self.service.pk,
                    event_start=timezone.now() - timedelta(hours=1),
                    location="Riverside Hall",
                    amount=Decimal("100.00"),
                )
            )

    def test_vendor_cannot_book_as_customer(self) -> None:
        with self.assertRaises(AuthorizationError):
            self.create(10, 12, customer=self.vendor)

    def test_inactive_service_is_not_bookable(self) -> None:
        self.service.is_active = False
        self.service.save(update_fields=["is_active"])

        with self.assertRaises(NotFoundError):
            self.create(10, 12)


class RespondToBookingTests(BookingCommandTestCase):
    def test_vendor_accepts(self) -> None:
        booking = self.create(10, 12)

        booking = message_bus.handle_command(
            RespondToBooking(booking_id=booking.pk, actor_id=self.vendor.pk, action="accept")
        )

        self.assertEqual(booking.status, Booking.Status.ACCEPTED)
        self.assertIsNotNone(booking.responded_at)

    def test_customer_cannot_respond(self) -> None:
        booking = self.create(10, 12)

        with self.assertRaises(AuthorizationError):
            message_bus.handle_command(
                RespondToBooking(booking_id=booking.pk, actor_id=self.customer.pk, action="accept")
            )

    def test_second_response_is_a_state_error(self) -> None:
        booking = self.create(10, 12)
        message_bus.handle_command(RespondToBooking(booking_id=booking.pk, actor_id=self.vendor.pk, action="decline"))

        with self.assertRaises(StateError):
            message_bus.handle_command(
                RespondToBooking(booking_id=booking.pk, actor_id=self.vendor.pk, action="accept")
            )

    def test_unknown_action_is_rejected(self) -> None:
        booking = self.create(10, 12)

        with self.assertRaises(ValidationError):
            message_bus.handle_command(
                RespondToBooking(booking_id=booking.pk, actor_id=self.vendor.pk, action="maybe")
            )

    def test_counter_offer_requires_positive_amount(self) -> None:
        booking = self.create(10, 12)

        with self.assertRaises(ValidationError) as ctx:
            message_bus.handle_command(
                RespondToBooking(booking_id=booking.pk, actor_id=self.vendor.pk, action="counter_offer")
            )
        self.assertIn("counter_amount", ctx.exception.field_errors)

    def test_counter_offer_round_trip(self) -> None:
        booking = self.create(10, 12)

        booking = message_bus.handle_command(
            RespondToBooking(
                booking_id=booking.pk,
                actor_id=self.vendor.pk,
                action="counter_offer",
                counter_amount=Decimal("650.00"),
                counter_notes="Includes a second shooter.",
            )
        )
        self.assertEqual(booking.status, Booking.Status.COUNTER_OFFERED)
        self.assertEqual(booking.amount, Decimal("650.00"))
        self.assertEqual(booking.vendor_notes, "Includes a second shooter.")

        with self.assertRaises(AuthorizationError):
            message_bus.handle_command(
                RespondToCounterOffer(booking_id=booking.pk, actor_id=self.vendor.pk, accept=True)
            )

        booking = message_bus.handle_command(
            RespondToCounterOffer(booking_id=booking.pk, actor_id=self.customer.pk, accept=True)
        )
        self.assertEqual(booking.status, Booking.Status.ACCEPTED)

    def test_declining_counter_offer(self) -> None:
        booking = place_booking(
            self.customer, self.service, at(self.day, 10), at(self.day, 12), status=Booking.Status.COUNTER_OFFERED
        )

        booking = message_bus.handle_command(
            RespondToCounterOffer(booking_id=booking.pk, actor_id=self.customer.pk, accept=False)
        )

        self.assertEqual(booking.status, Booking.Status.DECLINED)

    def test_counter_offer_acceptance_rechecks_calendar(self) -> None:
        offered = place_booking(
            self.customer, self.service, at(self.day, 10), at(self.day, 12), status=Booking.Status.COUNTER_OFFERED
        )
        self.create(11, 13, customer=make_customer("second@example.com"))

        with self.assertRaises(ConflictError):
            message_bus.handle_command(
                RespondToCounterOffer(booking_id=offered.pk, actor_id=self.customer.pk, accept=True)
            )
        offered.refresh_from_db()
        self.assertEqual(offered.status, Booking.Status.COUNTER_OFFERED)


class CancelBookingTests(BookingCommandTestCase):
    def _booking_in(self, hours: int, status: str = Booking.Status.PENDING) -> Booking:
        start = timezone.now() + timedelta(hours=hours)
        return place_booking(self.customer, self.service, start, start + timedelta(hours=2), status=status)

    def test_cancel_outside_cutoff_succeeds(self) -> None:
        booking = self._booking_in(25)

        booking = message_bus.handle_command(CancelBooking(booking_id=booking.pk, actor_id=self.customer.pk))

        self.assertEqual(booking.status, Booking.Status.CANCELLED)
        self.assertEqual(booking.cancelled_by, "customer")
        self.assertIsNotNone(booking.cancelled_at)

    def test_cancel_inside_cutoff_is_refused(self) -> None:
        booking = self._booking_in(23)

        with self.assertRaises(CancellationWindowClosed):
            message_bus.handle_command(CancelBooking(booking_id=booking.pk, actor_id=self.customer.pk))
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PENDING)

    def test_vendor_can_cancel_accepted_booking(self) -> None:
        booking = self._booking_in(48, Booking.Status.ACCEPTED)

        booking = message_bus.handle_command(CancelBooking(booking_id=booking.pk, actor_id=self.vendor.pk))

        self.assertEqual(booking.cancelled_by, "vendor")

    def test_third_party_cannot_cancel(self) -> None:
        booking = self._booking_in(48)
        stranger = make_customer("stranger@example.com")

        with self.assertRaises(AuthorizationError):
            message_bus.handle_command(CancelBooking(booking_id=booking.pk, actor_id=stranger.pk))

    def test_terminal_booking_cannot_be_cancelled(self) -> None:
        booking = self._booking_in(48, Booking.Status.DECLINED)

        with self.assertRaises(StateError):
            message_bus.handle_command(CancelBooking(booking_id=booking.pk, actor_id=self.customer.pk))

    def test_missing_booking_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            message_bus.handle_command(CancelBooking(booking_id=999999, actor_id=self.customer.pk))


class ModifyBookingTests(BookingCommandTestCase):
    def test_moving_start_resets_length(self) -> None:
        booking = self.create(10, 13)

        booking = message_bus.handle_command(
            ModifyBooking(booking_id=booking.pk, actor_id=self.customer.pk, event_start=at(self.day, 14))
        )

        self.assertEqual(booking.event_start, at(self.day, 14))
        self.assertIsNone(booking.event_end)
        self.assertEqual(booking.effective_end, at(self.day, 16))

    def test_modification_rechecks_conflicts_excluding_itself(self) -> None:
        booking = self.create(10, 12)
        self.create(13, 15, customer=make_customer("second@example.com"))

        booking = message_bus.handle_command(
            ModifyBooking(
                booking_id=booking.pk,
                actor_id=self.customer.pk,
                event_start=at(self.day, 11),
                event_end=at(self.day, 13),
            )
        )
        self.assertEqual(booking.event_end, at(self.day, 13))

        with self.assertRaises(ConflictError):
            message_bus.handle_command(
                ModifyBooking(
                    booking_id=booking.pk,
                    actor_id=self.customer.pk,
                    event_start=at(self.day, 12),
                    event_end=at(self.day, 14),
                )
            )

    def test_vendor_cannot_modify(self) -> None:
        booking = self.create(10, 12)

        with self.assertRaises(AuthorizationError):
            message_bus.handle_command(ModifyBooking(booking_id=booking.pk, actor_id=self.vendor.pk, location="Elsewhere"))

    def test_accepted_booking_cannot_be_modified(self) -> None:
        booking = place_booking(self.customer, self.service, at(self.day, 10), at(self.day, 12), status=Booking.Status.ACCEPTED)

        with self.assertRaises(StateError):
            message_bus.handle_command(ModifyBooking(booking_id=booking.pk, actor_id=self.customer.pk, location="Elsewhere"))

    def test_location_and_requirements_update(self) -> None:
        booking = self.create(10, 12)

        booking = message_bus.handle_command(
            ModifyBooking(
                booking_id=booking.pk,
                actor_id=self.customer.pk,
                location="Old Mill Barn",
                requirements="Golden hour portraits",
            )
        )

        self.assertEqual(booking.location, "Old Mill Barn")
        self.assertEqual(booking.requirements, "Golden hour portraits")


class SystemCommandTests(BookingCommandTestCase):
    def test_complete_accepted_booking(self) -> None:
        booking = place_booking(self.customer, self.service, at(self.day, 10), at(self.day, 12), status=Booking.Status.ACCEPTED)

        booking = message_bus.handle_command(CompleteBooking(booking_id=booking.pk))

        self.assertEqual(booking.status, Booking.Status.COMPLETED)
        self.assertIsNotNone(booking.completed_at)

    def test_pending_booking_cannot_be_completed(self) -> None:
        booking = place_booking(self.customer, self.service, at(self.day, 10), at(self.day, 12))

        with self.assertRaises(StateError):
            message_bus.handle_command(CompleteBooking(booking_id=booking.pk))

    def test_reminder_only_for_accepted_bookings(self) -> None:
        pending = place_booking(self.customer, self.service, at(self.day, 10), at(self.day, 12))

        with self.assertRaises(StateError):
            message_bus.handle_command(SendBookingReminder(booking_id=pending.pk))
