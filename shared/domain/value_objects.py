"""
Common Value Objects

Value objects used across the calendar and booking contexts:
- TimeWindow: Half-open interval of absolute wall-clock datetimes
- DateRange: Inclusive range of calendar dates (calendar listings)
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError

# Length of an engagement whose end was not given.
DEFAULT_EVENT_DURATION = timedelta(hours=2)


def windows_overlap(start1, end1, start2, end2) -> bool:
    """
    Half-open overlap test: [start1, end1) and [start2, end2)

    Touching windows (end1 == start2) do not overlap.
    """
    return start1 < end2 and start2 < end1


@dataclass(frozen=True)
class TimeWindow(ValueObject):
    """
    Time window value object

    Represents [start, end) in vendor-local wall-clock time.
    Used for booking windows and absolute spans of availability slots.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValidationError.for_field(
                'event_end',
                f"End ({self.end.isoformat()}) must be after start ({self.start.isoformat()})",
            )

    @classmethod
    def for_event(
        cls,
        start: datetime,
        end: datetime | None = None,
        default_duration: timedelta = DEFAULT_EVENT_DURATION,
    ) -> 'TimeWindow':
        """Build a booking window, applying the default length when end is omitted"""
        return cls(start, end if end is not None else start + default_duration)

    def overlaps_with(self, other: 'TimeWindow') -> bool:
        """
        Check if this window overlaps with another

        Examples:
            - [10:00, 12:00) overlaps with [11:00, 13:00) -> True
            - [10:00, 12:00) overlaps with [12:00, 14:00) -> False (touching)
        """
        if not isinstance(other, TimeWindow):
            raise TypeError("Can only check overlap with another TimeWindow")
        return windows_overlap(self.start, self.end, other.start, other.end)

    def contains(self, other: 'TimeWindow') -> bool:
        """True when other lies entirely inside this window"""
        return self.start <= other.start and other.end <= self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def __str__(self):
        return f"{self.start.strftime('%Y-%m-%d %H:%M')} - {self.end.strftime('%Y-%m-%d %H:%M')}"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Both start_date and end_date are inclusive; a single day is
    DateRange(d, d).
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValidationError.for_field(
                'end_date',
                f"Start date ({self.start_date}) must not be after end date ({self.end_date})",
            )

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"
