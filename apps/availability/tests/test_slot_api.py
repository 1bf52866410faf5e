"""Integration tests for the availability calendar API."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.availability.models import AvailabilitySlot
from apps.bookings.models import Booking
from apps.bookings.tests.helpers import (
    at,
    future_day,
    make_customer,
    make_service,
    make_vendor,
    open_slot,
    place_booking,
)


class AvailabilitySlotAPITests(APITestCase):
    """Covers slot creation, bulk import and the protection of booked slots."""

    def setUp(self) -> None:
        self.vendor = make_vendor()
        self.customer = make_customer()
        self.service = make_service(self.vendor)
        self.day = future_day()
        self.client.force_authenticate(self.vendor)
        self.list_url = reverse("availability-slot-list")
        self.bulk_url = reverse("availability-slot-bulk")

    def test_vendor_can_create_overnight_slot(self) -> None:
        payload = {"date": str(self.day), "start_time": "22:00", "end_time": "06:00"}

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["is_overnight"])
        self.assertEqual(response.data["duration_hours"], 8.0)

    def test_slot_in_the_past_is_rejected(self) -> None:
        payload = {"date": str(future_day(-1)), "start_time": "09:00", "end_time": "12:00"}

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("date", response.data["errors"])

    def test_customer_cannot_create_slots(self) -> None:
        self.client.force_authenticate(self.customer)
        payload = {"date": str(self.day), "start_time": "09:00", "end_time": "12:00"}

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertFalse(AvailabilitySlot.objects.exists())

    def test_bulk_reports_partial_success(self) -> None:
        payload = {
            "slots": [
                {"date": str(self.day), "start_time": "09:00", "end_time": "12:00"},
                {"date": str(self.day), "start_time": "10:00", "end_time": "10:00"},
                {"date": str(self.day + timedelta(days=1)), "start_time": "13:00", "end_time": "17:00"},
            ]
        }

        response = self.client.post(self.bulk_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_206_PARTIAL_CONTENT, response.data)
        self.assertEqual(len(response.data["created"]), 2)
        self.assertEqual(response.data["errors"][0]["index"], 1)
        self.assertEqual(response.data["message"], "2 slots created, 1 failed")
        self.assertEqual(AvailabilitySlot.objects.count(), 2)

    def test_bulk_all_valid_returns_created(self) -> None:
        payload = {"slots": [{"date": str(self.day), "start_time": "09:00", "end_time": "12:00"}]}

        response = self.client.post(self.bulk_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["message"], "1 slots created successfully")

    def test_bulk_all_invalid_returns_bad_request(self) -> None:
        payload = {"slots": [{"date": "not-a-date", "start_time": "09:00", "end_time": "12:00"}]}

        response = self.client.post(self.bulk_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["created"], [])
        self.assertIn("date", response.data["errors"][0]["errors"])

    def test_delete_refused_while_booking_is_active(self) -> None:
        slot = open_slot(self.vendor, self.day)
        booking = place_booking(self.customer, self.service, at(self.day, 14), at(self.day, 16))

        response = self.client.delete(reverse("availability-slot-detail", args=[slot.pk]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["conflicting_booking_ids"], [booking.pk])
        self.assertTrue(AvailabilitySlot.objects.filter(pk=slot.pk).exists())

    def test_delete_allowed_once_booking_is_cancelled(self) -> None:
        slot = open_slot(self.vendor, self.day)
        place_booking(
            self.customer, self.service, at(self.day, 14), at(self.day, 16), status=Booking.Status.CANCELLED
        )

        response = self.client.delete(reverse("availability-slot-detail", args=[slot.pk]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(AvailabilitySlot.objects.filter(pk=slot.pk).exists())

    def test_only_owner_can_delete_slot(self) -> None:
        slot = open_slot(self.vendor, self.day)
        self.client.force_authenticate(make_vendor("other@example.com"))

        response = self.client.delete(reverse("availability-slot-detail", args=[slot.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_update_refused_when_it_uncovers_booking(self) -> None:
        slot = open_slot(self.vendor, self.day)
        place_booking(self.customer, self.service, at(self.day, 14), at(self.day, 16), status=Booking.Status.ACCEPTED)

        response = self.client.patch(
            reverse("availability-slot-detail", args=[slot.pk]), {"end_time": "15:00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        slot.refresh_from_db()
        self.assertEqual(slot.end_time.hour, 21)

    def test_update_allowed_when_booking_stays_covered(self) -> None:
        slot = open_slot(self.vendor, self.day)
        place_booking(self.customer, self.service, at(self.day, 14), at(self.day, 16))

        response = self.client.patch(
            reverse("availability-slot-detail", args=[slot.pk]), {"end_time": "18:00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["end_time"], "18:00:00")

    def test_list_slots_for_vendor_and_range(self) -> None:
        open_slot(self.vendor, self.day)
        open_slot(self.vendor, self.day + timedelta(days=5))
        self.client.force_authenticate(self.customer)

        response = self.client.get(
            self.list_url, {"vendor": self.vendor.pk, "start_date": str(self.day), "end_date": str(self.day)}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_check_conflicts_reports_overlaps(self) -> None:
        slot = open_slot(self.vendor, self.day, 9, 12)
        booking = place_booking(self.customer, self.service, at(self.day, 10, 30), at(self.day, 11, 30))

        response = self.client.get(
            reverse("availability-slot-check-conflicts"),
            {"date": str(self.day), "start_time": "11:00", "end_time": "13:00"},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["has_conflicts"])
        self.assertEqual([item["id"] for item in response.data["overlapping_slots"]], [slot.pk])
        self.assertEqual([item["id"] for item in response.data["overlapping_bookings"]], [booking.pk])

    def test_check_conflicts_can_exclude_the_slot_being_edited(self) -> None:
        slot = open_slot(self.vendor, self.day, 9, 12)

        response = self.client.get(
            reverse("availability-slot-check-conflicts"),
            {"date": str(self.day), "start_time": "10:00", "end_time": "13:00", "exclude_slot_id": slot.pk},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(response.data["has_conflicts"])
        self.assertEqual(response.data["overlapping_slots"], [])

    def test_delete_overnight_slot_refused_for_booking_after_midnight(self) -> None:
        slot = open_slot(self.vendor, self.day, 22, 6)
        next_day = self.day + timedelta(days=1)
        booking = place_booking(
            self.customer, self.service, at(next_day, 1), at(next_day, 3), status=Booking.Status.ACCEPTED
        )

        response = self.client.delete(reverse("availability-slot-detail", args=[slot.pk]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["conflicting_booking_ids"], [booking.pk])
        self.assertTrue(AvailabilitySlot.objects.filter(pk=slot.pk).exists())

    def test_delete_allowed_when_booking_only_touches_slot_edge(self) -> None:
        slot = open_slot(self.vendor, self.day, 9, 12)
        place_booking(self.customer, self.service, at(self.day, 12), at(self.day, 14))

        response = self.client.delete(reverse("availability-slot-detail", args=[slot.pk]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(AvailabilitySlot.objects.filter(pk=slot.pk).exists())

    def test_update_allowed_despite_existing_unavailable_block(self) -> None:
        slot = open_slot(self.vendor, self.day)
        open_slot(self.vendor, self.day, 15, 17, available=False)
        place_booking(self.customer, self.service, at(self.day, 14), at(self.day, 16), status=Booking.Status.ACCEPTED)

        response = self.client.patch(
            reverse("availability-slot-detail", args=[slot.pk]), {"end_time": "20:00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["end_time"], "20:00:00")

    def test_update_refused_when_it_marks_booked_time_unavailable(self) -> None:
        slot = open_slot(self.vendor, self.day)
        place_booking(self.customer, self.service, at(self.day, 14), at(self.day, 16))

        response = self.client.patch(
            reverse("availability-slot-detail", args=[slot.pk]), {"available": False}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        slot.refresh_from_db()
        self.assertTrue(slot.available)
