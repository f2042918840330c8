"""Pure event domain model - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

PROJECT_CATEGORIES = (
    "Education",
    "Finance",
    "Health",
    "Home",
    "Personal",
    "Social",
    "Travel",
    "Work",
)


class InvalidEventError(ValueError):
    """Raised for events that cannot be laid out deterministically."""


class WhatType(Enum):
    """Kind of thing an event is."""

    APPOINTMENT = "appointment"
    TASK = "task"
    PERIOD = "period"
    MILESTONE = "milestone"
    DEADLINE = "deadline"
    CHECKPOINT = "checkpoint"


class Frequency(Enum):
    """Recurrence step."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values and a trailing Z are read as UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_display(ts: datetime) -> str:
    """Display string for a timestamp, e.g. 'Jan 08 2025 10:00'."""
    return ts.strftime("%b %d %Y %H:%M")


@dataclass
class What:
    id: str
    name: str
    type: WhatType
    description: str = ""


@dataclass
class When:
    id: str
    timestamp: datetime
    display: str = ""


@dataclass
class Who:
    id: str
    name: str


@dataclass
class Recurrence:
    """Recurrence rule attached to a template event."""

    frequency: Frequency
    end_date: datetime | None = None


@dataclass
class Event:
    """
    A scheduled (or unscheduled) thing belonging to a project.

    With a recurrence rule the event is a template: `when`/`end_when`
    describe the first occurrence only.
    """

    id: int
    project_id: int
    what: What
    when: When | None = None
    end_when: When | None = None
    who: list[Who] = field(default_factory=list)
    where_id: str = ""
    recurrence: Recurrence | None = None

    @property
    def is_scheduled(self) -> bool:
        return self.when is not None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    def validate(self) -> None:
        """Raise InvalidEventError if the event is ill-formed."""
        if self.when and self.end_when and self.end_when.timestamp < self.when.timestamp:
            raise InvalidEventError(
                f"Event {self.id} ({self.what.name!r}) ends before it starts: "
                f"{self.end_when.timestamp.isoformat()} < {self.when.timestamp.isoformat()}"
            )
        if self.recurrence and not isinstance(self.recurrence.frequency, Frequency):
            raise InvalidEventError(
                f"Event {self.id} has unrecognized recurrence frequency: {self.recurrence.frequency!r}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create Event from a JSON snapshot entry."""
        what = data["what"]
        try:
            what_type = WhatType(what.get("whatType", "appointment"))
        except ValueError as e:
            raise InvalidEventError(f"Event {data.get('id')}: {e}") from e

        recurrence = None
        if data.get("recurrence"):
            rule = data["recurrence"]
            try:
                frequency = Frequency(rule["frequency"])
            except (KeyError, ValueError) as e:
                raise InvalidEventError(
                    f"Event {data.get('id')} has unrecognized recurrence frequency: {rule.get('frequency')!r}"
                ) from e
            end_date = parse_timestamp(rule["endDate"]) if rule.get("endDate") else None
            recurrence = Recurrence(frequency=frequency, end_date=end_date)

        return cls(
            id=int(data["id"]),
            project_id=int(data["projectId"]),
            what=What(
                id=str(what.get("id", "")),
                name=what.get("name", "Untitled"),
                type=what_type,
                description=what.get("description", "") or "",
            ),
            when=_when_from_dict(data.get("when")),
            end_when=_when_from_dict(data.get("endWhen")),
            who=[Who(id=str(w.get("id", "")), name=w.get("name", "")) for w in data.get("who", [])],
            where_id=str(data.get("whereId", "") or ""),
            recurrence=recurrence,
        )


def _when_from_dict(data: dict | None) -> When | None:
    if not data or not data.get("timestamp"):
        return None
    ts = parse_timestamp(data["timestamp"])
    return When(id=str(data.get("id", "")), timestamp=ts, display=data.get("display") or format_display(ts))


@dataclass
class Occurrence:
    """
    One concrete, time-bound materialization of an event.

    Built fresh for every window query and never shares nested values
    with the event it came from.
    """

    event_id: int
    project_id: int
    what: What
    when: When
    end_when: When | None = None
    who: list[Who] = field(default_factory=list)
    where_id: str = ""
    recurring: bool = False

    @property
    def start(self) -> datetime:
        return self.when.timestamp

    @property
    def end(self) -> datetime:
        """End timestamp, or the start for point occurrences."""
        return self.end_when.timestamp if self.end_when else self.when.timestamp

    @property
    def is_period(self) -> bool:
        return self.end_when is not None and self.what.type == WhatType.PERIOD


@dataclass
class Project:
    id: int
    name: str
    category: str
    color: str = "blue"
    description: str = ""
    status: str = "Active"

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        """Create Project from a JSON snapshot entry."""
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            category=data.get("category") or "Personal",
            color=data.get("color") or "blue",
            description=data.get("description", "") or "",
            status=data.get("status", "Active") or "Active",
        )


@dataclass(frozen=True)
class Holiday:
    """Fixed-date, category-tagged marker."""

    name: str
    day: date
    kind: str
    category: str

    @classmethod
    def from_dict(cls, data: dict) -> "Holiday":
        return cls(
            name=data["name"],
            day=date.fromisoformat(data["date"][:10]),
            kind=data.get("type", "civil"),
            category=data.get("category", "Holidays"),
        )


@dataclass
class Tier:
    """A named, ordered group of categories sharing one swimlane band."""

    id: str
    name: str
    categories: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Tier":
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            categories=list(data.get("categories", [])),
        )


@dataclass
class Snapshot:
    """In-memory copy of everything the layout engine reads."""

    projects: list[Project] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    holidays: list[Holiday] = field(default_factory=list)
    tier_config: list[Tier] = field(default_factory=list)

    def project(self, project_id: int) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)
