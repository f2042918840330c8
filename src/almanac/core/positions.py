"""Frame geometry for the swimlane timeline - pure functions, no I/O."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, time

from .events import Holiday, InvalidEventError, Occurrence
from .tiers import LayoutSettings, TierPacking
from .window import Window


@dataclass(frozen=True)
class AxisBar:
    """Horizontal axis bar between tiers; droplines end at its centre."""

    index: int
    top: float
    height: float

    @property
    def center(self) -> float:
        return self.top + self.height / 2


@dataclass(frozen=True)
class TierBand:
    index: int
    id: str
    name: str
    top: float
    height: float
    axis_index: int


@dataclass(frozen=True)
class Dropline:
    x: float
    y1: float
    y2: float


@dataclass(frozen=True)
class EventMarker:
    """Placement of one occurrence. Periods have `right`, points a dropline."""

    occurrence: Occurrence
    left: float
    right: float | None
    top: float
    tier_index: int
    lane_index: int
    dropline: Dropline | None = None

    @property
    def is_period(self) -> bool:
        return self.right is not None

    @property
    def width(self) -> float:
        return (self.right - self.left) if self.right is not None else 0.0


@dataclass(frozen=True)
class TodayMarker:
    axis_index: int
    left: float
    top: float


@dataclass(frozen=True)
class HolidayMarker:
    holiday: Holiday
    left: float
    lane: int
    top: float


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs to draw one timeline frame."""

    window: Window
    height: float
    tiers: tuple[TierBand, ...]
    axis_bars: tuple[AxisBar, ...]
    markers: tuple[EventMarker, ...]
    today: tuple[TodayMarker, ...] = ()
    holidays: tuple[HolidayMarker, ...] = ()
    holiday_strip_height: float = 0.0
    settings: LayoutSettings = field(default_factory=LayoutSettings)


def position(window: Window, dt: datetime) -> float:
    """Horizontal position of `dt` as a percentage of the window, clamped to [0, 100]."""
    total = window.duration.total_seconds()
    if total <= 0:
        return 0.0
    fraction = (dt - window.start).total_seconds() / total
    return min(1.0, max(0.0, fraction)) * 100


def stack_tiers(packing: TierPacking) -> tuple[tuple[TierBand, ...], tuple[AxisBar, ...]]:
    """
    Place tiers and axis bars top to bottom in one coordinate space.

    Tier i drops to axis bar min(i, bar_count - 1): with two tiers both
    face the single middle bar.
    """
    bar_count = packing.axis_bar_count
    bar_height = packing.settings.axis_bar_height
    bands = []
    bars = []
    y = packing.padding_top
    for tier in packing.tier_layouts:
        bands.append(
            TierBand(
                index=tier.index,
                id=tier.id,
                name=tier.name,
                top=y,
                height=tier.height,
                axis_index=min(tier.index, bar_count - 1),
            )
        )
        y += tier.height
        if len(bars) < bar_count:
            bars.append(AxisBar(index=len(bars), top=y, height=bar_height))
            y += bar_height
    return tuple(bands), tuple(bars)


def _holiday_markers(
    window: Window,
    holidays: Iterable[Holiday],
    categories: Iterable[str] | None,
    lane_height: float,
) -> list[HolidayMarker]:
    holidays = list(holidays)
    admitted = sorted(set(categories) if categories is not None else {h.category for h in holidays})
    lanes = {category: i for i, category in enumerate(admitted)}

    markers = []
    for holiday in holidays:
        if holiday.category not in lanes:
            continue
        at = datetime.combine(holiday.day, time(), tzinfo=window.start.tzinfo)
        if not window.contains(at):
            continue
        lane = lanes[holiday.category]
        markers.append(HolidayMarker(holiday=holiday, left=position(window, at), lane=lane, top=lane * lane_height))
    # No collision avoidance: neighbouring holidays may overlap.
    markers.sort(key=lambda m: (m.holiday.day, m.lane, m.holiday.name))
    return markers


def map_frame(
    window: Window,
    occurrences: Iterable[Occurrence],
    packing: TierPacking,
    holidays: Iterable[Holiday],
    today: datetime,
    *,
    holiday_categories: Iterable[str] | None = None,
) -> Frame:
    """
    Compute the renderable frame for a window.

    Pure function - no I/O. Timestamps outside the window clamp to 0 or
    100; callers filter out-of-window items upstream. Occurrences whose
    project has no lane (filtered out) are skipped.

    Raises:
        InvalidEventError: A period occurrence ends before it starts
    """
    settings = packing.settings
    bands, bars = stack_tiers(packing)

    markers = []
    for occ in occurrences:
        lane = packing.lane_info.get(occ.project_id)
        if lane is None:
            continue
        band = bands[lane.tier_index]
        top = band.top + lane.top_offset
        left = position(window, occ.start)

        if occ.is_period:
            if occ.end < occ.start:
                raise InvalidEventError(f"Period {occ.event_id} ({occ.what.name!r}) ends before it starts")
            markers.append(
                EventMarker(
                    occurrence=occ,
                    left=left,
                    right=position(window, occ.end),
                    top=top,
                    tier_index=lane.tier_index,
                    lane_index=lane.lane_index,
                )
            )
        else:
            markers.append(
                EventMarker(
                    occurrence=occ,
                    left=left,
                    right=None,
                    top=top,
                    tier_index=lane.tier_index,
                    lane_index=lane.lane_index,
                    dropline=Dropline(
                        x=left,
                        y1=top + settings.lane_height / 2,
                        y2=bars[band.axis_index].center,
                    ),
                )
            )
    markers.sort(key=lambda m: (m.tier_index, m.lane_index, m.occurrence.start, m.occurrence.event_id))

    today_markers = ()
    if window.contains(today):
        x = position(window, today)
        today_markers = tuple(TodayMarker(axis_index=bar.index, left=x, top=bar.top) for bar in bars)

    holiday_markers = _holiday_markers(window, holidays, holiday_categories, settings.holiday_lane_height)
    strip_lanes = 1 + max((m.lane for m in holiday_markers), default=-1)

    return Frame(
        window=window,
        height=packing.total_height,
        tiers=bands,
        axis_bars=bars,
        markers=tuple(markers),
        today=today_markers,
        holidays=tuple(holiday_markers),
        holiday_strip_height=strip_lanes * settings.holiday_lane_height,
        settings=settings,
    )
