"""Shared fixtures for layout tests."""

from datetime import datetime, timedelta, timezone

import pytest

from almanac.core.events import Event, Frequency, Project, Recurrence, Tier, What, WhatType, When, Who


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def make_event():
    """Factory for creating events."""
    def _make(
        event_id: int,
        start: datetime | None,
        project_id: int = 1,
        name: str | None = None,
        what_type: WhatType = WhatType.APPOINTMENT,
        duration: timedelta | None = None,
        frequency: Frequency | None = None,
        until: datetime | None = None,
    ) -> Event:
        when = When(id=f"t{event_id}", timestamp=start, display="") if start else None
        end_when = None
        if start and duration is not None:
            end_when = When(id=f"e{event_id}", timestamp=start + duration, display="")
        return Event(
            id=event_id,
            project_id=project_id,
            what=What(id=f"w{event_id}", name=name or f"Event {event_id}", type=what_type),
            when=when,
            end_when=end_when,
            who=[Who(id="p1", name="Dr. Smith")],
            where_id="l1",
            recurrence=Recurrence(frequency=frequency, end_date=until) if frequency else None,
        )
    return _make


@pytest.fixture
def scenario_tiers():
    return [
        Tier(id="t1", name="Core", categories=["Health", "Finance"]),
        Tier(id="t2", name="Work", categories=["Work"]),
    ]


@pytest.fixture
def scenario_projects():
    return [
        Project(id=1, name="Dental Implant Treatment", category="Health"),
        Project(id=2, name="Q3 Taxation", category="Finance"),
        Project(id=3, name="Quarterly Planning", category="Work"),
    ]
