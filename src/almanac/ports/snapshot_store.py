"""Snapshot storage interface."""

from typing import Protocol

from almanac.core.events import Snapshot


class SnapshotStore(Protocol):
    """Interface for loading projects, events, holidays and tiers from any backend."""

    def load(self) -> Snapshot:
        """Load the full snapshot."""
        ...
