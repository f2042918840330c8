"""Day bucketing for the density grid view - pure functions, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import Enum

from .events import Event, Occurrence
from .recurrence import expand_recurring


class GridLayout(Enum):
    WEEK_ROW = "week-row"
    MONTH_ROW = "month-row"
    TRADITIONAL = "traditional"


class Density(Enum):
    """Busyness of a single day."""

    EMPTY = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @classmethod
    def classify(cls, count: int) -> "Density":
        if count <= 0:
            return cls.EMPTY
        if count == 1:
            return cls.LOW
        if count == 2:
            return cls.MEDIUM
        return cls.HIGH


@dataclass(frozen=True)
class DayBucket:
    """
    One calendar day of the grid.

    `panel` is the month ordinal for the traditional layout and 0 for the
    row layouts; `row`/`column` are relative to the panel.
    """

    day: date
    key: str
    occurrences: tuple[Occurrence, ...]
    density: Density
    panel: int
    row: int
    column: int
    is_today: bool = False

    @property
    def count(self) -> int:
        return len(self.occurrences)


@dataclass(frozen=True)
class MonthLabel:
    name: str
    panel: int
    start_row: int
    end_row: int


def day_key(d: date) -> str:
    """Map key for a day, 'YYYY-MM-DD'."""
    return d.isoformat()


def start_of_week(d: date) -> date:
    """Monday on or before `d`."""
    return d - timedelta(days=d.weekday())


def year_span_around(today: date, before: int = 2, after: int = 2) -> tuple[int, int]:
    """Inclusive (first_year, last_year) span around today."""
    return today.year - before, today.year + after


def as_layout(mode: "GridLayout | str") -> GridLayout:
    if isinstance(mode, GridLayout):
        return mode
    return GridLayout(mode.lower())


def index_by_day(
    occurrences: list[Occurrence],
    first_day: date,
    last_day: date,
    tz: tzinfo | None = None,
) -> dict[str, list[Occurrence]]:
    """
    Single pass over occurrences into one map keyed by 'YYYY-MM-DD'.

    Occurrences with an end populate every day they cover, clipped to
    [first_day, last_day]. With `tz`, days are read in that timezone
    instead of each occurrence's own.
    """
    by_day: dict[str, list[Occurrence]] = {}
    for occ in sorted(occurrences, key=lambda o: (o.start, o.event_id)):
        start, end = (occ.start, occ.end) if tz is None else (occ.start.astimezone(tz), occ.end.astimezone(tz))
        day = max(start.date(), first_day)
        last = min(end.date(), last_day)
        while day <= last:
            by_day.setdefault(day_key(day), []).append(occ)
            day += timedelta(days=1)
    return by_day


def _geometry(day: date, first_day: date, layout: GridLayout) -> tuple[int, int, int]:
    match layout:
        case GridLayout.WEEK_ROW:
            return 0, (day - start_of_week(first_day)).days // 7, day.weekday()
        case GridLayout.MONTH_ROW:
            return 0, (day.year - first_day.year) * 12 + day.month - 1, day.day - 1
        case GridLayout.TRADITIONAL:
            first_of_month = day.replace(day=1)
            panel = (day.year - first_day.year) * 12 + day.month - 1
            row = (day - start_of_week(first_of_month)).days // 7
            return panel, row, day.weekday()


def bucket_days(
    events: list[Event],
    year_span: tuple[int, int],
    mode: GridLayout | str,
    today: date | None = None,
) -> list[DayBucket]:
    """
    Bucket every day of a multi-year span with the occurrences covering it.

    Pure function - no I/O. Recurring events are expanded over the whole
    span first, starting early enough that periods running into Jan 1 of
    the first year are kept. Days are calendar dates in the timezone of
    the first scheduled event (UTC if none).

    Args:
        events: All events, recurring templates included
        year_span: Inclusive (first_year, last_year)
        mode: Grid layout deciding panel/row/column
        today: Day to flag with is_today

    Returns:
        One DayBucket per day, in calendar order
    """
    layout = as_layout(mode)
    first_year, last_year = year_span
    if last_year < first_year:
        return []
    first_day = date(first_year, 1, 1)
    last_day = date(last_year, 12, 31)

    # Span boundaries follow the events' timezone
    tz = next((e.when.timestamp.tzinfo for e in events if e.when), None) or timezone.utc
    span_start = datetime.combine(first_day, time(), tzinfo=tz)
    span_end = datetime.combine(last_day, time.max, tzinfo=tz)

    # Reach back far enough to catch periods already running on Jan 1
    lookback = max(
        (e.end_when.timestamp - e.when.timestamp for e in events if e.when and e.end_when),
        default=timedelta(0),
    )
    occurrences = expand_recurring(events, span_start - max(lookback, timedelta(0)), span_end)
    by_day = index_by_day(occurrences, first_day, last_day, tz)

    buckets = []
    day = first_day
    while day <= last_day:
        found = tuple(by_day.get(day_key(day), ()))
        panel, row, column = _geometry(day, first_day, layout)
        buckets.append(
            DayBucket(
                day=day,
                key=day_key(day),
                occurrences=found,
                density=Density.classify(len(found)),
                panel=panel,
                row=row,
                column=column,
                is_today=day == today,
            )
        )
        day += timedelta(days=1)
    return buckets


def month_labels(buckets: list[DayBucket]) -> list[MonthLabel]:
    """Row range covered by each month, for the grid's label columns."""
    labels: dict[tuple[int, int], MonthLabel] = {}
    for bucket in buckets:
        month = (bucket.day.year, bucket.day.month)
        label = labels.get(month)
        if label is None:
            labels[month] = MonthLabel(
                name=bucket.day.strftime("%B %Y"),
                panel=bucket.panel,
                start_row=bucket.row,
                end_row=bucket.row,
            )
        elif bucket.row > label.end_row:
            labels[month] = MonthLabel(label.name, label.panel, label.start_row, bucket.row)
    return list(labels.values())
