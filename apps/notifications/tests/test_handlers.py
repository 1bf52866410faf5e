"""Tests for turning domain events into notifications."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

from django.core import mail
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.application.command_handlers import CancelBooking, CreateBooking, RespondToBooking
from apps.bookings.domain.events import BookingCreated
from apps.bookings.models import Booking
from apps.bookings.tests.helpers import at, future_day, make_customer, make_service, make_vendor, open_slot
from apps.notifications.models import Notification
from shared.application.message_bus import message_bus
from shared.domain.exceptions import ConflictError


class NotificationHandlerTests(TestCase):
    def setUp(self) -> None:
        self.vendor = make_vendor()
        self.customer = make_customer()
        self.service = make_service(self.vendor)
        self.day = future_day()
        open_slot(self.vendor, self.day, 9, 17)

    def _create(self) -> Booking:
        with self.captureOnCommitCallbacks(execute=True):
            return message_bus.handle_command(
                CreateBooking(
                    customer_id=self.customer.pk,
                    service_id=self.service.pk,
                    event_start=at(self.day, 10),
                    location="Riverside Hall",
                    amount=Decimal("500.00"),
                )
            )

    def test_new_booking_notifies_vendor(self) -> None:
        booking = self._create()

        notification = Notification.objects.get()
        self.assertEqual(notification.user, self.vendor)
        self.assertEqual(notification.event_type, "booking_created")
        self.assertEqual(
            notification.payload,
            {
                "booking_id": booking.pk,
                "vendor_name": "Golden Hour Photo",
                "customer_name": "Dana Customer",
                "service_name": "Wedding photography",
                "event_date": str(self.day),
                "event_start": timezone.localtime(booking.event_start).isoformat(),
                "status": "pending",
                "amount": "500.00",
            },
        )
        self.assertEqual(mail.outbox[0].to, [self.vendor.email])

    def test_responses_and_cancellations_notify_the_other_party(self) -> None:
        booking = self._create()
        with self.captureOnCommitCallbacks(execute=True):
            message_bus.handle_command(RespondToBooking(booking_id=booking.pk, actor_id=self.vendor.pk, action="accept"))
        with self.captureOnCommitCallbacks(execute=True):
            message_bus.handle_command(CancelBooking(booking_id=booking.pk, actor_id=self.vendor.pk))

        received = list(
            Notification.objects.filter(user=self.customer).order_by("id").values_list("event_type", flat=True)
        )
        self.assertEqual(received, ["booking_approved", "booking_cancelled"])

    def test_rolled_back_command_sends_nothing(self) -> None:
        self._create()
        Notification.objects.all().delete()

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(ConflictError):
                message_bus.handle_command(
                    CreateBooking(
                        customer_id=self.customer.pk,
                        service_id=self.service.pk,
                        event_start=at(self.day, 11),
                        location="Riverside Hall",
                        amount=Decimal("500.00"),
                    )
                )

        self.assertEqual(callbacks, [])
        self.assertFalse(Notification.objects.exists())

    def test_deleted_recipient_does_not_reach_the_caller(self) -> None:
        event = BookingCreated(
            aggregate_id=999999,
            booking_id=999999,
            customer_id=self.customer.pk,
            vendor_id=999999,
            status="pending",
            event_start=at(self.day, 10),
            amount=Decimal("500.00"),
        )

        message_bus.publish_events([event])

        self.assertFalse(Notification.objects.exists())

    def test_enqueue_failure_is_swallowed(self) -> None:
        with patch("apps.notifications.tasks.deliver_notification.delay", side_effect=ConnectionError("broker down")):
            booking = self._create()

        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertFalse(Notification.objects.exists())


class NotificationAPITests(APITestCase):
    def setUp(self) -> None:
        self.customer = make_customer()
        self.own = Notification.objects.create(
            user=self.customer, event_type="booking_approved", title="Booking Confirmed", message="Confirmed"
        )
        Notification.objects.create(
            user=make_customer("other@example.com"), event_type="booking_created", title="New", message="New"
        )
        self.client.force_authenticate(self.customer)

    def test_list_only_own_notifications(self) -> None:
        response = self.client.get(reverse("notification-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [self.own.pk])

    def test_mark_read(self) -> None:
        response = self.client.post(reverse("notification-mark-read", args=[self.own.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.own.refresh_from_db()
        self.assertTrue(self.own.is_read)

    def test_cannot_mark_someone_elses_notification(self) -> None:
        other = Notification.objects.exclude(user=self.customer).get()

        response = self.client.post(reverse("notification-mark-read", args=[other.pk]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
