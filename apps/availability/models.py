"""Vendor availability calendar models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import TimeWindow

from .domain.slots import SlotSnapshot, slot_duration_hours, slot_span


class AvailabilitySlot(models.Model):
    """A vendor-declared window on one date during which bookings may be placed.

    ``end_time`` earlier than ``start_time`` marks an overnight slot that runs
    into the next day. Slots with ``available=False`` declare unavailability.
    """

    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="availability_slots",
    )
    date = models.DateField(_("Date"))
    start_time = models.TimeField(_("Start time"))
    end_time = models.TimeField(_("End time"))
    available = models.BooleanField(_("Available"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "availability_slots"
        verbose_name = _("Availability slot")
        verbose_name_plural = _("Availability slots")
        ordering = ["date", "start_time"]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(start_time=models.F("end_time")),
                name="availability_slot_non_empty",
            ),
        ]
        indexes = [
            models.Index(fields=["vendor", "date"], name="avail_slot_vendor_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.date} {self.start_time:%H:%M}-{self.end_time:%H:%M} ({self.vendor_id})"

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time

    @property
    def duration_hours(self) -> float:
        return slot_duration_hours(self)

    @property
    def span(self) -> TimeWindow:
        return slot_span(self, timezone.get_current_timezone())

    def snapshot(self) -> SlotSnapshot:
        return SlotSnapshot(
            id=self.pk,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            available=self.available,
        )
