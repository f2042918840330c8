"""Configuration management for Almanac."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.events import Tier
from .core.tiers import LayoutSettings

logger = logging.getLogger(__name__)

ALMANAC_HOME = Path(os.environ.get("ALMANAC_HOME", Path.home() / "almanac"))
CONFIG_FILE = ALMANAC_HOME / "config" / "almanac.conf"
DATA_DIR = ALMANAC_HOME / "data"

_FLOAT_KEYS = {
    "lane_height",
    "lane_start_offset",
    "category_gap",
    "axis_bar_height",
    "min_height",
    "holiday_lane_height",
    "pixel_width",
    "frame_rate",
}


@dataclass
class Config:
    """Almanac configuration."""

    snapshot_file: str = ""
    default_scale: str = "month"
    grid_mode: str = "week-row"
    # Empty means every category is visible
    visible_categories: list[str] = field(default_factory=list)
    holiday_categories: list[str] = field(default_factory=list)
    tier_config: list[dict] = field(default_factory=list)
    pixel_width: float = 1200.0
    frame_rate: float = 60.0
    # Layout metrics
    lane_height: float = 28.0
    lane_start_offset: float = 12.0
    category_gap: float = 10.0
    axis_bar_height: float = 24.0
    min_height: float = 240.0
    holiday_lane_height: float = 18.0

    def snapshot_path(self) -> Path:
        """Configured snapshot file, or DATA_DIR/snapshot.json."""
        if self.snapshot_file:
            return Path(self.snapshot_file).expanduser()
        return DATA_DIR / "snapshot.json"

    def layout_settings(self) -> LayoutSettings:
        return LayoutSettings(
            lane_height=self.lane_height,
            lane_start_offset=self.lane_start_offset,
            category_gap=self.category_gap,
            axis_bar_height=self.axis_bar_height,
            min_height=self.min_height,
            holiday_lane_height=self.holiday_lane_height,
        )

    def tiers(self) -> list[Tier]:
        return [Tier.from_dict(t) for t in self.tier_config]


def _split_list(value: str) -> list[str]:
    return [c.strip() for c in value.split(",") if c.strip()]


def load_config(path: Path | None = None) -> Config:
    """Load configuration from almanac.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif not value.startswith("["):
            # Unquoted: strip inline comments
            if "#" in value:
                value = value.split("#")[0].strip()

        if key in _FLOAT_KEYS:
            try:
                setattr(config, key, float(value))
            except ValueError:
                logger.warning(f"Invalid number for {key.upper()}: {value!r}")
            continue

        match key:
            case "snapshot_file":
                config.snapshot_file = value
            case "default_scale":
                config.default_scale = value.lower()
            case "grid_mode":
                config.grid_mode = value.lower()
            case "visible_categories":
                config.visible_categories = _split_list(value)
            case "holiday_categories":
                config.holiday_categories = _split_list(value)
            case "tier_config":
                # JSON format: [{"id": "...", "name": "...", "categories": [...]}]
                try:
                    data = json.loads(value)
                    config.tier_config = [
                        {"id": str(item["id"]), "name": item.get("name", str(item["id"])), "categories": item.get("categories", [])}
                        for item in data
                    ]
                except (json.JSONDecodeError, KeyError, TypeError) as e:
                    logger.warning(f"Failed to parse TIER_CONFIG JSON: {e}")
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
