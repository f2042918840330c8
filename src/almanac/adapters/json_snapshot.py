"""JSON snapshot adapter - reads the backup/restore file."""

import json
import logging
from pathlib import Path

from almanac.core.events import Event, Holiday, InvalidEventError, Project, Snapshot, Tier

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot cannot be read."""

    pass


class JsonSnapshotStore:
    """
    JSON file snapshot storage.

    Implements SnapshotStore protocol. Uses the backup format's camelCase
    keys (projectId, endWhen, whereId, tierConfig). Locations and contacts
    are accepted but not loaded.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def read_raw(self) -> dict:
        """Read the snapshot file as a dict."""
        if not self.path.exists():
            raise SnapshotError(f"Snapshot not found: {self.path}")
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Invalid snapshot JSON in {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot {self.path} must be a JSON object")
        return data

    def load(self) -> Snapshot:
        """Load the full snapshot."""
        data = self.read_raw()
        try:
            snapshot = Snapshot(
                projects=[Project.from_dict(p) for p in data.get("projects", [])],
                events=[Event.from_dict(e) for e in data.get("events", [])],
                holidays=[Holiday.from_dict(h) for h in data.get("holidays", [])],
                tier_config=[Tier.from_dict(t) for t in data.get("tierConfig", [])],
            )
        except InvalidEventError as e:
            raise SnapshotError(f"Invalid event in {self.path}: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed snapshot {self.path}: {e!r}") from e

        unscheduled = sum(1 for e in snapshot.events if not e.is_scheduled)
        logger.debug(
            f"Loaded {len(snapshot.projects)} projects, {len(snapshot.events)} events "
            f"({unscheduled} unscheduled) from {self.path}"
        )
        return snapshot
