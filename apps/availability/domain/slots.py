"""
Availability Slot Rules

Pure rules for vendor-declared availability windows. A slot is a
time-of-day window on one calendar date; when ``end_time`` is earlier
than ``start_time`` the slot runs overnight into the next date.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Dict, List

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import TimeWindow


@dataclass(frozen=True)
class SlotSnapshot(ValueObject):
    """Detached, read-only view of an availability slot"""
    id: int | None
    date: date
    start_time: time
    end_time: time
    available: bool = True

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time


def slot_span(slot, tz: tzinfo | None = None) -> TimeWindow:
    """
    Absolute [start, end) span of a slot

    Overnight slots end on the next calendar day. ``tz`` attaches the
    vendor's zone so spans compare with aware booking datetimes.
    """
    start = datetime.combine(slot.date, slot.start_time, tzinfo=tz)
    end = datetime.combine(slot.date, slot.end_time, tzinfo=tz)
    if slot.end_time <= slot.start_time:
        end += timedelta(days=1)
    return TimeWindow(start, end)


def slot_covers(slot, window: TimeWindow, tz: tzinfo | None = None) -> bool:
    """True when an available slot's span contains the whole window"""
    if not slot.available:
        return False
    return slot_span(slot, tz).contains(window)


def slot_duration_hours(slot) -> float:
    span = slot_span(slot)
    return round(span.duration.total_seconds() / 3600, 2)


def slot_errors(
    slot_date: date | None,
    start_time: time | None,
    end_time: time | None,
    *,
    today: date | None = None,
) -> Dict[str, List[str]]:
    """
    Field errors for a proposed slot

    ``today`` enables the past-date rule, which only applies when a slot
    is first created.
    """
    errors: Dict[str, List[str]] = {}
    if slot_date is None:
        errors.setdefault('date', []).append("This field is required.")
    if start_time is None:
        errors.setdefault('start_time', []).append("This field is required.")
    if end_time is None:
        errors.setdefault('end_time', []).append("This field is required.")

    if start_time is not None and end_time is not None and start_time == end_time:
        errors.setdefault('end_time', []).append("End time must differ from start time.")

    if today is not None and slot_date is not None and slot_date < today:
        errors.setdefault('date', []).append("Date cannot be in the past.")

    return errors


def validate_slot(
    slot_date: date | None,
    start_time: time | None,
    end_time: time | None,
    *,
    today: date | None = None,
) -> None:
    errors = slot_errors(slot_date, start_time, end_time, today=today)
    if errors:
        raise ValidationError.from_errors(errors)
