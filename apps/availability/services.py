"""Calendar store and conflict checks for vendor availability."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Mapping, Sequence

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.users.identity import require_vendor
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from shared.domain.value_objects import DEFAULT_EVENT_DURATION, DateRange, TimeWindow

from .domain.conflicts import ConflictReport, candidate_dates, detect, suggest_free_windows
from .domain.slots import SlotSnapshot, slot_covers, slot_span, validate_slot
from .models import AvailabilitySlot

logger = logging.getLogger(__name__)

SLOT_FIELDS = ("date", "start_time", "end_time", "available")


@dataclass
class BulkFailure:
    index: int
    errors: Dict[str, List[str]]


@dataclass
class BulkResult:
    """Outcome of a bulk slot creation; failures never roll back successes."""

    created: List[AvailabilitySlot] = field(default_factory=list)
    failed: List[BulkFailure] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


@dataclass
class CalendarConflicts:
    overlapping_slots: List[AvailabilitySlot] = field(default_factory=list)
    overlapping_bookings: List[Any] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.overlapping_slots or self.overlapping_bookings)


def _booking_model():
    from apps.bookings.models import Booking  # local import to avoid circular dependency

    return Booking


def lock_vendor(uow: DjangoUnitOfWork, vendor_id: int):
    """Take the per-vendor row lock that serializes calendar writes."""

    User = get_user_model()
    try:
        return uow.lock(User.objects.filter(pk=vendor_id)).get()
    except User.DoesNotExist:
        raise NotFoundError.for_field("vendor", f"Vendor {vendor_id} not found.") from None


def _ensure_owner(slot: AvailabilitySlot, actor) -> None:
    if slot.vendor_id != actor.pk:
        raise AuthorizationError(
            "Only the owning vendor can change this slot.",
            field_errors={"actor": [f"User {actor.pk} does not own slot {slot.pk}."]},
        )


def active_bookings_overlapping(vendor_id: int, window: TimeWindow, exclude_booking_id: int | None = None):
    qs = _booking_model().objects.filter(vendor_id=vendor_id).active().overlapping(window)
    if exclude_booking_id is not None:
        qs = qs.exclude(pk=exclude_booking_id)
    return qs.order_by("event_start")


# ===== Calendar store =====

def add_slot(
    vendor,
    date: date,
    start_time: time,
    end_time: time,
    available: bool = True,
    *,
    today: date | None = None,
) -> AvailabilitySlot:
    """Declare a new availability window for ``vendor``."""

    require_vendor(vendor)
    validate_slot(date, start_time, end_time, today=today or timezone.localdate())

    slot = AvailabilitySlot.objects.create(
        vendor=vendor,
        date=date,
        start_time=start_time,
        end_time=end_time,
        available=available,
    )
    logger.info("Vendor %s added slot %s (%s)", vendor.pk, slot.pk, slot)
    return slot


def update_slot(slot: AvailabilitySlot, actor, **changes: Any) -> AvailabilitySlot:
    """
    Change a slot owned by ``actor``.

    The past-date rule does not apply. A change is refused when an active
    booking covered by the slot would no longer be covered, or when the
    change itself marks the booking's time unavailable. Unavailable slots
    that already overlapped the booking do not count.
    """

    unknown = sorted(set(changes) - set(SLOT_FIELDS))
    if unknown:
        raise ValidationError.from_errors({name: ["Unknown field."] for name in unknown})
    _ensure_owner(slot, actor)

    with DjangoUnitOfWork() as uow:
        lock_vendor(uow, slot.vendor_id)
        current = AvailabilitySlot.objects.get(pk=slot.pk)
        before = current.snapshot()
        after = replace(before, **changes)
        validate_slot(after.date, after.start_time, after.end_time)

        stranded = _bookings_losing_cover(current.vendor_id, before, after)
        if stranded:
            ids = [booking.pk for booking in stranded]
            logger.info("Refused update of slot %s: protects bookings %s", current.pk, ids)
            raise ConflictError(
                "This slot protects active bookings that the change would leave uncovered.",
                field_errors={"slot": [f"Bookings {ids} depend on this slot."]},
                booking_ids=ids,
                slot_ids=[current.pk],
            )

        for name, value in changes.items():
            setattr(current, name, value)
        current.save()

    logger.info("Vendor %s updated slot %s (%s)", actor.pk, current.pk, current)
    return current


def _bookings_losing_cover(vendor_id: int, before: SlotSnapshot, after: SlotSnapshot) -> list:
    tz = timezone.get_current_timezone()
    old_span = slot_span(before, tz)
    bookings = list(active_bookings_overlapping(vendor_id, old_span))
    if not bookings:
        return []

    first_day = min(before.date, after.date) - timedelta(days=1)
    last_day = max(before.date, after.date) + timedelta(days=1)
    others = [
        other.snapshot()
        for other in AvailabilitySlot.objects.filter(
            vendor_id=vendor_id, date__range=(first_day, last_day)
        ).exclude(pk=before.id)
    ]
    after_span = slot_span(after, tz)

    stranded = []
    for booking in bookings:
        window = booking.window
        was_covered = any(slot_covers(candidate, window, tz) for candidate in [before, *others])
        still_covered = any(slot_covers(candidate, window, tz) for candidate in [after, *others])
        blocked_before = not before.available and old_span.overlaps_with(window)
        blocked = not after.available and after_span.overlaps_with(window) and not blocked_before
        if was_covered and (not still_covered or blocked):
            stranded.append(booking)
    return stranded


def delete_slot(slot: AvailabilitySlot, actor) -> None:
    """Delete a slot unless an active booking overlaps its span."""

    _ensure_owner(slot, actor)

    with DjangoUnitOfWork() as uow:
        lock_vendor(uow, slot.vendor_id)
        blocking = list(active_bookings_overlapping(slot.vendor_id, slot.span))
        if blocking:
            ids = [booking.pk for booking in blocking]
            logger.info("Refused deletion of slot %s: overlaps bookings %s", slot.pk, ids)
            raise ConflictError(
                "Cannot delete a slot that has pending or accepted bookings.",
                field_errors={"slot": [f"Bookings {ids} overlap this slot."]},
                booking_ids=ids,
                slot_ids=[slot.pk],
            )
        slot_id = slot.pk
        slot.delete()

    logger.info("Vendor %s deleted slot %s", actor.pk, slot_id)


def list_slots(vendor, start_date: date, end_date: date | None = None):
    """Slots of ``vendor`` on one date or an inclusive date range."""

    period = DateRange(start_date, end_date if end_date is not None else start_date)
    return AvailabilitySlot.objects.filter(
        vendor=vendor,
        date__range=(period.start_date, period.end_date),
    ).order_by("date", "start_time")


def list_upcoming_slots(vendor, today: date | None = None):
    today = today or timezone.localdate()
    return AvailabilitySlot.objects.filter(vendor=vendor, date__gte=today).order_by("date", "start_time")


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(value)


def _parse_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        return time.fromisoformat(value)
    raise ValueError(value)


def parse_slot_item(item: Mapping[str, Any]) -> Dict[str, Any]:
    """Coerce one bulk item into ``add_slot`` keyword arguments."""

    if not isinstance(item, Mapping):
        raise ValidationError.for_field("non_field_errors", "Each slot must be an object.")

    errors: Dict[str, List[str]] = {}
    parsed: Dict[str, Any] = {}
    for name, parser in (("date", _parse_date), ("start_time", _parse_time), ("end_time", _parse_time)):
        raw = item.get(name)
        if raw in (None, ""):
            errors.setdefault(name, []).append("This field is required.")
            continue
        try:
            parsed[name] = parser(raw)
        except ValueError:
            errors.setdefault(name, []).append(f"Invalid value: {raw!r}.")

    available = item.get("available", True)
    if not isinstance(available, bool):
        errors.setdefault("available", []).append("Must be a boolean.")
    parsed["available"] = available

    if errors:
        raise ValidationError.from_errors(errors)
    return parsed


def bulk_add(vendor, items: Sequence[Mapping[str, Any]], *, today: date | None = None) -> BulkResult:
    """
    Create many slots, each validated and saved on its own.

    Failures are reported per index and do not roll back other items.
    """

    require_vendor(vendor)
    result = BulkResult()
    for index, item in enumerate(items):
        try:
            fields = parse_slot_item(item)
            with transaction.atomic():
                slot = add_slot(vendor, today=today, **fields)
        except ValidationError as exc:
            result.failed.append(BulkFailure(index=index, errors=exc.field_errors))
        else:
            result.created.append(slot)

    logger.info(
        "Bulk slot creation for vendor %s: %d created, %d failed",
        vendor.pk,
        len(result.created),
        len(result.failed),
    )
    return result


def check_conflicts(
    vendor,
    day: date,
    start_time: time,
    end_time: time,
    exclude_slot_id: int | None = None,
) -> CalendarConflicts:
    """Read-only diagnostic: slots and active bookings overlapping a proposed slot."""

    validate_slot(day, start_time, end_time)
    tz = timezone.get_current_timezone()
    span = slot_span(SlotSnapshot(None, day, start_time, end_time), tz)

    slots_qs = AvailabilitySlot.objects.filter(
        vendor=vendor,
        date__range=(day - timedelta(days=1), day + timedelta(days=1)),
    )
    if exclude_slot_id is not None:
        slots_qs = slots_qs.exclude(pk=exclude_slot_id)

    return CalendarConflicts(
        overlapping_slots=[slot for slot in slots_qs if slot_span(slot, tz).overlaps_with(span)],
        overlapping_bookings=list(active_bookings_overlapping(vendor.pk, span)),
    )


# ===== Conflict detector (database-backed) =====

def detect_conflicts(vendor_id: int, window: TimeWindow, exclude_booking_id: int | None = None) -> ConflictReport:
    """Load the vendor's candidate slots and active bookings and run both checks."""

    tz = timezone.get_current_timezone()
    first_day, last_day = candidate_dates(window, tz)
    slots = AvailabilitySlot.objects.filter(vendor_id=vendor_id, date__range=(first_day, last_day))
    bookings = active_bookings_overlapping(vendor_id, window, exclude_booking_id)
    return detect(
        window,
        [slot.snapshot() for slot in slots],
        [booking.snapshot() for booking in bookings],
        exclude_booking_id=exclude_booking_id,
        tz=tz,
    )


def ensure_window_available(vendor_id: int, window: TimeWindow, exclude_booking_id: int | None = None) -> ConflictReport:
    report = detect_conflicts(vendor_id, window, exclude_booking_id)
    if report.has_conflict:
        logger.info("Window %s rejected for vendor %s: %s", window, vendor_id, "; ".join(report.reasons))
        raise ConflictError(
            "The vendor is not available for the requested time.",
            field_errors={"event_start": list(report.reasons)},
            booking_ids=report.booking_ids,
            slot_ids=report.slot_ids,
        )
    return report


def suggest_alternatives(
    vendor_id: int,
    day: date,
    duration: timedelta = DEFAULT_EVENT_DURATION,
) -> List[TimeWindow]:
    """Free windows on ``day`` long enough for ``duration``."""

    tz = timezone.get_current_timezone()
    slots = [
        slot.snapshot()
        for slot in AvailabilitySlot.objects.filter(vendor_id=vendor_id, date=day)
    ]
    horizon = TimeWindow(
        datetime.combine(day, time.min, tzinfo=tz),
        datetime.combine(day + timedelta(days=2), time.min, tzinfo=tz),
    )
    bookings = [booking.snapshot() for booking in active_bookings_overlapping(vendor_id, horizon)]
    return suggest_free_windows(slots, bookings, duration, tz)
