"""Functional core - pure layout logic with no I/O."""

from .events import (
    Event,
    Frequency,
    Holiday,
    InvalidEventError,
    Occurrence,
    Project,
    Recurrence,
    Snapshot,
    Tier,
    What,
    WhatType,
    When,
    Who,
)
from .window import TimelineScale, Window, resolve_window, resolve_free_window, nearest_scale
from .recurrence import expand_recurring
from .tiers import LayoutSettings, TierPacking, pack_tiers, resolve_tiers, group_projects_by_category
from .positions import Frame, map_frame, position
from .density import DayBucket, Density, GridLayout, bucket_days, month_labels
from .holidays import fixed_holidays

__all__ = [
    # Model
    "Event",
    "Frequency",
    "Holiday",
    "InvalidEventError",
    "Occurrence",
    "Project",
    "Recurrence",
    "Snapshot",
    "Tier",
    "What",
    "WhatType",
    "When",
    "Who",
    # Window
    "TimelineScale",
    "Window",
    "resolve_window",
    "resolve_free_window",
    "nearest_scale",
    # Recurrence
    "expand_recurring",
    # Tiers
    "LayoutSettings",
    "TierPacking",
    "pack_tiers",
    "resolve_tiers",
    "group_projects_by_category",
    # Positions
    "Frame",
    "map_frame",
    "position",
    # Density grid
    "DayBucket",
    "Density",
    "GridLayout",
    "bucket_days",
    "month_labels",
    # Holidays
    "fixed_holidays",
]
