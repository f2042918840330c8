"""Recurring event expansion - pure functions, no I/O."""

from datetime import datetime, timedelta

from .events import (
    Event,
    Frequency,
    InvalidEventError,
    Occurrence,
    What,
    When,
    Who,
    format_display,
)


def add_month(dt: datetime) -> datetime:
    """
    Step one calendar month, letting the day overflow into the next month.

    Jan 31 becomes Mar 3 (or Mar 2 in a leap year), and later steps keep
    the shifted day.
    """
    year, month = (dt.year + 1, 1) if dt.month == 12 else (dt.year, dt.month + 1)
    return dt.replace(year=year, month=month, day=1) + timedelta(days=dt.day - 1)


def next_start(dt: datetime, frequency: Frequency) -> datetime:
    """Start of the occurrence following `dt`."""
    match frequency:
        case Frequency.DAILY:
            return dt + timedelta(days=1)
        case Frequency.WEEKLY:
            return dt + timedelta(days=7)
        case Frequency.MONTHLY:
            return add_month(dt)
    raise InvalidEventError(f"Unrecognized recurrence frequency: {frequency!r}")


def make_occurrence(event: Event, start: datetime, recurring: bool = False) -> Occurrence:
    """
    Build an occurrence of `event` starting at `start`.

    Every nested value is constructed anew, so mutating the result never
    touches the event or sibling occurrences. Recurring instances get
    regenerated display strings; single events keep theirs.
    """

    def _when(source: When, ts: datetime) -> When:
        return When(id=source.id, timestamp=ts, display=format_display(ts) if recurring else source.display)

    end_when = None
    if event.end_when:
        end_when = _when(event.end_when, start + (event.end_when.timestamp - event.when.timestamp))

    return Occurrence(
        event_id=event.id,
        project_id=event.project_id,
        what=What(
            id=event.what.id,
            name=event.what.name,
            type=event.what.type,
            description=event.what.description,
        ),
        when=_when(event.when, start),
        end_when=end_when,
        who=[Who(id=w.id, name=w.name) for w in event.who],
        where_id=event.where_id,
        recurring=recurring,
    )


def expand_event(event: Event, window_start: datetime, window_end: datetime) -> list[Occurrence]:
    """Occurrences of a single event inside [window_start, window_end]."""
    if event.when is None:
        return []
    event.validate()

    first = event.when.timestamp
    if event.recurrence is None:
        if window_start <= first <= window_end:
            return [make_occurrence(event, first)]
        return []

    rule_end = event.recurrence.end_date or window_end
    final_end = min(rule_end, window_end)
    if first > final_end:
        return []

    occurrences = []
    current = first
    # Walk from the template start; earlier steps are computed so month drift stays consistent.
    while current <= final_end:
        if current >= window_start:
            occurrences.append(make_occurrence(event, current, recurring=True))
        current = next_start(current, event.recurrence.frequency)
    return occurrences


def expand_recurring(
    events: list[Event],
    window_start: datetime,
    window_end: datetime,
) -> list[Occurrence]:
    """
    Expand events into concrete occurrences within a window.

    Pure function - no I/O.

    Args:
        events: All events, recurring templates included. Never mutated.
        window_start: Inclusive start of the window
        window_end: Inclusive end of the window

    Returns:
        Occurrences in input order, chronological per template

    Raises:
        InvalidEventError: An event ends before it starts or has an
            unrecognized recurrence frequency
    """
    occurrences = []
    for event in events:
        occurrences.extend(expand_event(event, window_start, window_end))
    return occurrences
