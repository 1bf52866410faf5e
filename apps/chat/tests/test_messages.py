"""Tests for booking message threads."""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase, override_settings
from django.utils import timezone

from apps.bookings.tests.helpers import at, future_day, make_customer, make_service, make_vendor, place_booking
from apps.chat.models import BookingMessage
from apps.chat.services import list_messages, post_message
from apps.notifications.models import Notification
from shared.domain.exceptions import AuthorizationError, ValidationError


class MessageThreadTests(TestCase):
    def setUp(self) -> None:
        self.vendor = make_vendor()
        self.customer = make_customer()
        day = future_day()
        self.booking = place_booking(self.customer, make_service(self.vendor), at(day, 10), at(day, 12))

    def test_parties_share_one_ordered_thread(self) -> None:
        now = timezone.now()
        post_message(self.booking, self.vendor, "Confirmed, see you there.", sent_at=now)
        post_message(self.booking, self.customer, "Can we start at ten?", sent_at=now - timedelta(minutes=5))

        bodies = [message.body for message in list_messages(self.booking, self.vendor)]

        self.assertEqual(bodies, ["Can we start at ten?", "Confirmed, see you there."])

    def test_third_user_cannot_post_or_read(self) -> None:
        stranger = make_customer("stranger@example.com")

        with self.assertRaises(AuthorizationError):
            post_message(self.booking, stranger, "Hello")
        with self.assertRaises(AuthorizationError):
            list_messages(self.booking, stranger)
        self.assertFalse(BookingMessage.objects.exists())

    def test_body_is_stripped_and_bounded(self) -> None:
        message = post_message(self.booking, self.customer, "  hi  ")
        self.assertEqual(message.body, "hi")

        with self.assertRaises(ValidationError):
            post_message(self.booking, self.customer, "   ")
        with self.assertRaises(ValidationError):
            post_message(self.booking, self.customer, "x" * 1001)
        post_message(self.booking, self.customer, "x" * 1000)

    @override_settings(BOOKING_MESSAGE_MAX_LENGTH=10)
    def test_max_length_comes_from_settings(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            post_message(self.booking, self.customer, "x" * 11)
        self.assertIn("body", ctx.exception.field_errors)

    def test_other_party_is_notified_after_commit(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            message = post_message(self.booking, self.customer, "Is parking available?")

        notification = Notification.objects.get()
        self.assertEqual(notification.user, self.vendor)
        self.assertEqual(notification.event_type, "new_message")
        self.assertEqual(notification.payload["message_id"], message.pk)
        self.assertEqual(notification.payload["sender_name"], "Dana Customer")
