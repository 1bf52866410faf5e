"""
Conflict Detector

Decides whether a proposed booking window can be granted against a
vendor's calendar. Two checks must both pass:

1. Declared availability: an available slot covers the window and no
   slot marked unavailable overlaps it.
2. Existing bookings: no other active booking overlaps the window.

All overlap tests use half-open windows, so touching windows never
conflict. This module performs no I/O; callers pass in the slots and
bookings they loaded.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, List, Sequence, Tuple

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DEFAULT_EVENT_DURATION, TimeWindow

from .slots import SlotSnapshot, slot_covers, slot_span


@dataclass(frozen=True)
class BookingSnapshot(ValueObject):
    """Detached view of an active booking's reserved window"""
    id: int | None
    event_start: datetime
    event_end: datetime | None = None

    @property
    def window(self) -> TimeWindow:
        return TimeWindow.for_event(self.event_start, self.event_end)


@dataclass(frozen=True)
class ConflictReport(ValueObject):
    """Outcome of a conflict check, with the offending entities"""
    window: TimeWindow
    covering_slot: SlotSnapshot | None = None
    blocking_slots: Tuple[SlotSnapshot, ...] = ()
    overlapping_bookings: Tuple[BookingSnapshot, ...] = ()
    reasons: Tuple[str, ...] = field(default=())

    @property
    def has_conflict(self) -> bool:
        return bool(self.covering_slot is None or self.blocking_slots or self.overlapping_bookings)

    @property
    def booking_ids(self) -> List[int]:
        return [booking.id for booking in self.overlapping_bookings if booking.id is not None]

    @property
    def slot_ids(self) -> List[int]:
        return [slot.id for slot in self.blocking_slots if slot.id is not None]


def local_date(moment: datetime, tz: tzinfo | None = None) -> date:
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def candidate_dates(window: TimeWindow, tz: tzinfo | None = None) -> Tuple[date, date]:
    """
    Inclusive date range of slots that can touch the window

    Starts one day early so overnight slots from the previous date are
    considered.
    """
    return (
        local_date(window.start, tz) - timedelta(days=1),
        local_date(window.end, tz),
    )


def overlapping_bookings(
    window: TimeWindow,
    bookings: Iterable[BookingSnapshot],
    exclude_booking_id: int | None = None,
) -> List[BookingSnapshot]:
    return [
        booking
        for booking in bookings
        if exclude_booking_id is None or booking.id != exclude_booking_id
        if booking.window.overlaps_with(window)
    ]


def detect(
    window: TimeWindow,
    slots: Iterable[SlotSnapshot],
    bookings: Iterable[BookingSnapshot],
    exclude_booking_id: int | None = None,
    tz: tzinfo | None = None,
) -> ConflictReport:
    """
    Run both conflict checks for ``window``

    ``slots`` may contain slots from any date; only those whose span
    can reach the window matter. ``bookings`` must already be limited to
    active bookings of the vendor.
    """
    first_day, last_day = candidate_dates(window, tz)
    candidates = sorted(
        (slot for slot in slots if first_day <= slot.date <= last_day),
        key=lambda slot: (slot.date, slot.start_time),
    )

    covering = next((slot for slot in candidates if slot_covers(slot, window, tz)), None)
    blocking = tuple(
        slot
        for slot in candidates
        if not slot.available and slot_span(slot, tz).overlaps_with(window)
    )
    clashing = tuple(overlapping_bookings(window, bookings, exclude_booking_id))

    reasons: List[str] = []
    if covering is None:
        reasons.append(f"No availability slot covers {window}.")
    for slot in blocking:
        reasons.append(f"Vendor is unavailable {slot_span(slot, tz)}.")
    for booking in clashing:
        reasons.append(f"Overlaps booking #{booking.id} ({booking.window}).")

    return ConflictReport(
        window=window,
        covering_slot=covering,
        blocking_slots=blocking,
        overlapping_bookings=clashing,
        reasons=tuple(reasons),
    )


def conflicts(
    window: TimeWindow,
    slots: Iterable[SlotSnapshot],
    bookings: Iterable[BookingSnapshot],
    exclude_booking_id: int | None = None,
    tz: tzinfo | None = None,
) -> bool:
    return detect(window, slots, bookings, exclude_booking_id, tz).has_conflict


def suggest_free_windows(
    slots: Sequence[SlotSnapshot],
    bookings: Sequence[BookingSnapshot],
    duration: timedelta = DEFAULT_EVENT_DURATION,
    tz: tzinfo | None = None,
) -> List[TimeWindow]:
    """
    Free gaps inside available slots that fit ``duration``

    Active bookings and slots marked unavailable count as busy time.
    Results are ordered by start and de-duplicated.
    """
    if duration <= timedelta(0):
        raise ValidationError.for_field('duration', "Duration must be positive.")

    busy = [booking.window for booking in bookings]
    busy.extend(slot_span(slot, tz) for slot in slots if not slot.available)
    busy.sort(key=lambda item: item.start)

    found = {}
    for slot in slots:
        if not slot.available:
            continue
        span = slot_span(slot, tz)
        cursor = span.start
        for taken in busy:
            if not taken.overlaps_with(span):
                continue
            if taken.start - cursor >= duration:
                gap = TimeWindow(cursor, taken.start)
                found[(gap.start, gap.end)] = gap
            cursor = max(cursor, taken.end)
        if span.end - cursor >= duration:
            gap = TimeWindow(cursor, span.end)
            found[(gap.start, gap.end)] = gap

    return [found[key] for key in sorted(found)]
