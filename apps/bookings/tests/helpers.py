"""Shared setup for booking and calendar tests."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.utils import timezone

from apps.availability.models import AvailabilitySlot
from apps.bookings.models import Booking
from apps.catalog.models import Service
from apps.users.models import User


def make_vendor(email: str = "vendor@example.com", **extra) -> User:
    extra.setdefault("business_name", "Golden Hour Photo")
    return User.objects.create_vendor(email=email, password="VendorPass123", **extra)


def make_customer(email: str = "customer@example.com", **extra) -> User:
    extra.setdefault("first_name", "Dana")
    extra.setdefault("last_name", "Customer")
    return User.objects.create_user(email=email, password="CustomerPass123", **extra)


def make_service(vendor: User, name: str = "Wedding photography") -> Service:
    return Service.objects.create(vendor=vendor, name=name, base_price=Decimal("500.00"))


def future_day(days: int = 10) -> date:
    return timezone.localdate() + timedelta(days=days)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.get_current_timezone())


def open_slot(vendor: User, day: date, start: int = 9, end: int = 21, available: bool = True) -> AvailabilitySlot:
    return AvailabilitySlot.objects.create(
        vendor=vendor,
        date=day,
        start_time=time(start),
        end_time=time(end),
        available=available,
    )


def place_booking(
    customer: User,
    service: Service,
    start: datetime,
    end: datetime | None = None,
    status: str = Booking.Status.PENDING,
    amount: Decimal = Decimal("500.00"),
) -> Booking:
    """Insert a booking directly, bypassing the conflict check."""
    return Booking.objects.create(
        customer=customer,
        vendor=service.vendor,
        service=service,
        event_start=start,
        event_end=end,
        location="Riverside Hall",
        amount=amount,
        status=status,
    )
