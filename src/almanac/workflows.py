"""Shared workflow layer between the CLI and any embedding UI.

Each function wires a snapshot and the config through the core layout
pipeline: window -> occurrences -> packing -> frame.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from .adapters.frame_schedulers import AsyncioFrameScheduler, ManualFrameScheduler
from .adapters.json_snapshot import JsonSnapshotStore
from .config import Config
from .core.density import DayBucket, bucket_days
from .core.events import PROJECT_CATEGORIES, Holiday, Occurrence, Snapshot
from .core.holidays import fixed_holidays
from .core.positions import Frame, map_frame
from .core.recurrence import expand_recurring
from .core.tiers import TierPacking, group_projects_by_category, pack_tiers
from .core.window import TimelineScale, Window, as_scale, resolve_window
from .pan import PanController
from .ports.frame_scheduler import FrameScheduler

logger = logging.getLogger(__name__)


@dataclass
class Timeline:
    """One computed timeline view."""

    scale: TimelineScale
    reference: datetime
    window: Window
    occurrences: list[Occurrence]
    packing: TierPacking
    frame: Frame


def get_store(config: Config, path: Path | str | None = None) -> JsonSnapshotStore:
    """Resolve snapshot file from an explicit path or config."""
    if path:
        return JsonSnapshotStore(path)
    return JsonSnapshotStore(config.snapshot_path())


def compute_packing(snapshot: Snapshot, config: Config) -> TierPacking:
    """Pack the snapshot's visible projects using the configured tiers."""
    visible = config.visible_categories or None
    by_category = group_projects_by_category(snapshot.projects, visible)
    categories = set(PROJECT_CATEGORIES) | {p.category for p in snapshot.projects}
    tiers = snapshot.tier_config or config.tiers()
    return pack_tiers(tiers, categories, by_category, config.layout_settings())


def holidays_for(snapshot: Snapshot, window: Window) -> list[Holiday]:
    """
    Snapshot holidays plus the built-in fixed-date ones for the window's years.

    A built-in holiday the snapshot already lists (same day, name and
    category) is dropped.
    """
    builtin = fixed_holidays(window.start.year, window.end.year)
    seen = set()
    merged = []
    for holiday in [*snapshot.holidays, *builtin]:
        key = (holiday.day, holiday.name, holiday.category)
        if key in seen:
            continue
        seen.add(key)
        merged.append(holiday)
    return merged


def compute_timeline(
    snapshot: Snapshot,
    config: Config,
    scale: TimelineScale | str,
    reference: datetime,
    today: datetime,
    packing: TierPacking | None = None,
) -> Timeline:
    """
    Run the full layout pipeline for one reference date.

    Pass a previously computed packing to skip repacking when only the
    window moved.
    """
    window = resolve_window(scale, reference)
    occurrences = expand_recurring(snapshot.events, window.start, window.end)
    packing = packing or compute_packing(snapshot, config)
    frame = map_frame(
        window,
        occurrences,
        packing,
        holidays_for(snapshot, window),
        today,
        holiday_categories=config.holiday_categories or None,
    )
    logger.debug(
        f"{len(occurrences)} occurrences in {window.start.isoformat()} - {window.end.isoformat()}, "
        f"{len(frame.markers)} placed"
    )
    return Timeline(
        scale=as_scale(scale),
        reference=reference,
        window=window,
        occurrences=occurrences,
        packing=packing,
        frame=frame,
    )


def compute_grid(
    snapshot: Snapshot,
    year_span: tuple[int, int],
    mode: str,
    today: date | None = None,
) -> list[DayBucket]:
    """Day buckets of the density grid for the snapshot's events."""
    return bucket_days(snapshot.events, year_span, mode, today=today)


def pan_controller(
    config: Config,
    window: Window,
    on_pan: Callable[[datetime], None],
    scheduler: FrameScheduler | None = None,
) -> PanController:
    """
    Drag session for the current window.

    Without a scheduler, commits run on the running asyncio loop at the
    configured frame rate.
    """
    if scheduler is None:
        scheduler = AsyncioFrameScheduler(fps=config.frame_rate)
    return PanController(
        scheduler,
        on_pan,
        window_duration=window.duration,
        pixel_width=config.pixel_width,
    )


def simulate_pan(
    config: Config,
    scale: TimelineScale | str,
    reference: datetime,
    samples: list[float],
) -> list[datetime]:
    """
    Replay drag samples through a PanController, one frame per sample.

    The drag starts at x=0 and each sample is an absolute pointer x.
    Returns the reference date committed after each frame.
    """
    scheduler = ManualFrameScheduler()
    committed: list[datetime] = []
    controller = pan_controller(config, resolve_window(scale, reference), committed.append, scheduler)
    controller.begin(0.0, reference)
    for x in samples:
        controller.update(x)
        scheduler.tick()
    controller.end()
    return committed
