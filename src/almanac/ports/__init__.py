"""Ports - interfaces/protocols for external dependencies."""

from .frame_scheduler import FrameScheduler
from .snapshot_store import SnapshotStore

__all__ = [
    "FrameScheduler",
    "SnapshotStore",
]
