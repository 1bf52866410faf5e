"""Booking domain models for the vendor marketplace."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.availability.domain.conflicts import BookingSnapshot
from shared.domain.value_objects import DEFAULT_EVENT_DURATION, TimeWindow

from .domain.state_machine import ACTIVE_STATUSES, BookingAction, allowed_actions


class BookingQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status__in=[status.value for status in ACTIVE_STATUSES])

    def overlapping(self, window: TimeWindow):
        """Bookings whose effective window overlaps ``window`` (half-open).

        A booking without ``event_end`` occupies ``DEFAULT_EVENT_DURATION``.
        """
        explicit_end = models.Q(event_end__isnull=False, event_end__gt=window.start)
        implied_end = models.Q(
            event_end__isnull=True,
            event_start__gt=window.start - DEFAULT_EVENT_DURATION,
        )
        return self.filter(event_start__lt=window.end).filter(explicit_end | implied_end)


class Booking(models.Model):
    """A customer's reservation of a vendor service for a time window."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACCEPTED = "accepted", _("Accepted")
        DECLINED = "declined", _("Declined")
        COUNTER_OFFERED = "counter_offered", _("Counter offered")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    class CancelledBy(models.TextChoices):
        CUSTOMER = "customer", _("Customer")
        VENDOR = "vendor", _("Vendor")

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="customer_bookings",
    )
    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="vendor_bookings",
    )
    service = models.ForeignKey(
        "catalog.Service",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    event_start = models.DateTimeField(_("Event start"))
    event_end = models.DateTimeField(
        _("Event end"),
        null=True,
        blank=True,
        help_text=_("Defaults to two hours after the start when omitted."),
    )
    location = models.CharField(_("Location"), max_length=500)
    amount = models.DecimalField(_("Amount"), max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    requirements = models.TextField(_("Requirements"), blank=True)
    vendor_notes = models.TextField(_("Vendor notes"), blank=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.CharField(max_length=20, choices=CancelledBy.choices, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        db_table = "bookings"
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0")),
                name="booking_amount_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(event_end__isnull=True) | models.Q(event_end__gt=models.F("event_start")),
                name="booking_valid_window",
            ),
        ]
        indexes = [
            models.Index(fields=["vendor", "status"], name="booking_vendor_status_idx"),
            models.Index(fields=["customer", "status"], name="booking_customer_status_idx"),
            models.Index(fields=["event_start"], name="booking_event_start_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} {self.event_start:%Y-%m-%d %H:%M} ({self.status})"

    @property
    def effective_end(self) -> datetime:
        return self.event_end or self.event_start + DEFAULT_EVENT_DURATION

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.event_start, self.effective_end)

    @property
    def event_date(self):
        return timezone.localtime(self.event_start).date()

    def snapshot(self) -> BookingSnapshot:
        return BookingSnapshot(id=self.pk, event_start=self.event_start, event_end=self.event_end)

    def is_party(self, user) -> bool:
        user_id = getattr(user, "pk", user)
        return user_id is not None and user_id in (self.customer_id, self.vendor_id)

    def role_of(self, user) -> str | None:
        user_id = getattr(user, "pk", user)
        if user_id == self.vendor_id:
            return self.CancelledBy.VENDOR
        if user_id == self.customer_id:
            return self.CancelledBy.CUSTOMER
        return None

    def other_party_id(self, user) -> int | None:
        user_id = getattr(user, "pk", user)
        if user_id == self.vendor_id:
            return self.customer_id
        if user_id == self.customer_id:
            return self.vendor_id
        return None

    def is_more_than(self, hours: int, now: datetime | None = None) -> bool:
        now = now or timezone.now()
        return self.event_start - now > timedelta(hours=hours)

    def can_be_cancelled(self, now: datetime | None = None) -> bool:
        return BookingAction.CANCEL in allowed_actions(self.status) and self.is_more_than(
            settings.BOOKING_CANCELLATION_CUTOFF_HOURS, now
        )

    def can_be_modified(self, now: datetime | None = None) -> bool:
        return self.status == self.Status.PENDING and self.is_more_than(
            settings.BOOKING_CANCELLATION_CUTOFF_HOURS, now
        )
