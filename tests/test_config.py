"""Tests for almanac.conf loading."""

import logging

import pytest

from almanac.config import DATA_DIR, Config, load_config
from almanac.core.tiers import LayoutSettings


@pytest.fixture
def write_conf(tmp_path):
    def _write(text: str):
        path = tmp_path / "almanac.conf"
        path.write_text(text)
        return path
    return _write


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.conf")
        assert config == Config()

    def test_reads_plain_and_quoted_values(self, write_conf):
        path = write_conf(
            "# Almanac settings\n"
            "\n"
            'SNAPSHOT_FILE="~/backups/calendar.json" # exported nightly\n'
            "DEFAULT_SCALE=Week\n"
            "GRID_MODE=traditional # three months per row\n"
            "VISIBLE_CATEGORIES=Work, Health,,Finance\n"
            "HOLIDAY_CATEGORIES='Civil'\n"
            "not a setting\n"
        )
        config = load_config(path)

        assert config.snapshot_file == "~/backups/calendar.json"
        assert config.default_scale == "week"
        assert config.grid_mode == "traditional"
        assert config.visible_categories == ["Work", "Health", "Finance"]
        assert config.holiday_categories == ["Civil"]

    def test_numeric_settings(self, write_conf):
        path = write_conf("LANE_HEIGHT=32\nCATEGORY_GAP=6.5\nPIXEL_WIDTH=1440\n")
        config = load_config(path)

        assert config.lane_height == 32.0
        assert config.category_gap == 6.5
        assert config.pixel_width == 1440.0
        assert config.layout_settings() == LayoutSettings(lane_height=32.0, category_gap=6.5)

    def test_invalid_number_keeps_default(self, write_conf, caplog):
        path = write_conf("MIN_HEIGHT=tall\n")
        with caplog.at_level(logging.WARNING, logger="almanac.config"):
            config = load_config(path)

        assert config.min_height == 240.0
        assert "MIN_HEIGHT" in caplog.text

    def test_tier_config_json(self, write_conf):
        path = write_conf(
            'TIER_CONFIG=[{"id": "core", "name": "Core", "categories": ["Health", "Finance"]}, {"id": 2}]\n'
        )
        config = load_config(path)
        tiers = config.tiers()

        assert [t.id for t in tiers] == ["core", "2"]
        assert tiers[0].categories == ["Health", "Finance"]
        assert tiers[1].name == "2"
        assert tiers[1].categories == []

    def test_bad_tier_config_is_ignored(self, write_conf, caplog):
        path = write_conf("TIER_CONFIG=[{oops}]\n")
        with caplog.at_level(logging.WARNING, logger="almanac.config"):
            config = load_config(path)

        assert config.tier_config == []
        assert "TIER_CONFIG" in caplog.text


class TestConfig:
    def test_snapshot_path_default(self):
        assert Config().snapshot_path() == DATA_DIR / "snapshot.json"

    def test_snapshot_path_expands_user(self, tmp_path):
        assert Config(snapshot_file="~/x.json").snapshot_path().name == "x.json"
        assert "~" not in str(Config(snapshot_file="~/x.json").snapshot_path())

    def test_default_layout_settings(self):
        assert Config().layout_settings() == LayoutSettings()
