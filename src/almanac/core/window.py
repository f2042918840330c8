"""Timeline window resolution - pure functions, no I/O."""

import calendar
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum


class TimelineScale(Enum):
    """Symbolic zoom level of the timeline."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


SCALE_ORDER = [TimelineScale.WEEK, TimelineScale.MONTH, TimelineScale.QUARTER, TimelineScale.YEAR]

MIN_DURATION = timedelta(days=3)
MAX_DURATION = timedelta(days=730)


@dataclass(frozen=True)
class Window:
    """Absolute time interval being rendered."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_ms(self) -> float:
        return self.duration.total_seconds() * 1000

    @property
    def center(self) -> datetime:
        return self.start + self.duration / 2

    def contains(self, dt: datetime) -> bool:
        """Check if a datetime falls within the window (both ends inclusive)."""
        return self.start <= dt <= self.end


def as_scale(scale: "TimelineScale | str") -> TimelineScale:
    """Coerce a scale name to TimelineScale. Raises ValueError for unknown names."""
    if isinstance(scale, TimelineScale):
        return scale
    return TimelineScale(scale.lower())


def scale_duration(scale: TimelineScale | str, reference: datetime) -> timedelta:
    """
    Duration of a fixed scale around a reference date.

    Month and year widths depend on the reference: February is 28 or 29
    days wide, a leap year 366.
    """
    match as_scale(scale):
        case TimelineScale.WEEK:
            return timedelta(days=7)
        case TimelineScale.MONTH:
            return timedelta(days=calendar.monthrange(reference.year, reference.month)[1])
        case TimelineScale.QUARTER:
            return timedelta(days=91.25)
        case TimelineScale.YEAR:
            return timedelta(days=366 if calendar.isleap(reference.year) else 365)


def _centered(duration: timedelta, reference: datetime) -> Window:
    half = duration / 2
    return Window(start=reference - half, end=reference + half)


def resolve_window(scale: TimelineScale | str, reference: datetime) -> Window:
    """Window of the given scale centered on the reference date."""
    return _centered(scale_duration(scale, reference), reference)


def clamp_duration(duration: timedelta) -> timedelta:
    """Clamp a free-form duration to [3 days, 730 days]."""
    return max(MIN_DURATION, min(MAX_DURATION, duration))


def resolve_free_window(duration: timedelta, reference: datetime) -> Window:
    """Window for a zoom/pan-derived duration, clamped and centered on the reference."""
    return _centered(clamp_duration(duration), reference)


def nearest_scale(duration: timedelta, reference: datetime) -> TimelineScale:
    """
    Map an arbitrary duration to the closest fixed scale.

    Closeness is measured on a log scale, so 45 days is nearer a month
    than a week. Ties go to the smaller scale.
    """
    seconds = max(duration.total_seconds(), 1.0)
    closest = SCALE_ORDER[0]
    closest_diff = math.inf
    for scale in SCALE_ORDER:
        base = scale_duration(scale, reference).total_seconds()
        diff = abs(math.log(seconds) - math.log(base))
        if diff < closest_diff:
            closest = scale
            closest_diff = diff
    return closest
