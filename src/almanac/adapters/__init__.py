"""Adapters - I/O implementations of ports."""

from .json_snapshot import JsonSnapshotStore, SnapshotError
from .frame_schedulers import AsyncioFrameScheduler, ManualFrameScheduler

__all__ = [
    "JsonSnapshotStore",
    "SnapshotError",
    "AsyncioFrameScheduler",
    "ManualFrameScheduler",
]
