"""Tests for the JSON snapshot adapter."""

import json
from datetime import date, timedelta

import pytest

from almanac.adapters.json_snapshot import JsonSnapshotStore, SnapshotError
from almanac.core.events import Frequency, WhatType
from conftest import utc


@pytest.fixture
def snapshot_data():
    return {
        "projects": [
            {"id": 1, "name": "Dental Implant Treatment", "category": "Health", "color": "red"},
            {"id": 2, "name": "Q3 Taxation", "category": "Finance"},
        ],
        "events": [
            {
                "id": 7,
                "projectId": 1,
                "what": {"id": "w7", "name": "Implant Surgery", "whatType": "appointment"},
                "when": {"id": "t7", "timestamp": "2025-01-08T10:00:00Z"},
                "who": [{"id": "p1", "name": "Dr. Smith"}],
                "whereId": "l1",
            },
            {
                "id": 8,
                "projectId": 1,
                "what": {"id": "w8", "name": "Recovery", "whatType": "period"},
                "when": {"id": "t8", "timestamp": "2025-01-08T12:00:00+00:00", "display": "After surgery"},
                "endWhen": {"id": "e8", "timestamp": "2025-01-15T12:00:00+00:00"},
            },
            {
                "id": 9,
                "projectId": 2,
                "what": {"id": "w9", "name": "Bookkeeping", "whatType": "task"},
                "when": {"id": "t9", "timestamp": "2025-01-31T09:00:00"},
                "recurrence": {"frequency": "monthly", "endDate": "2025-06-30T00:00:00Z"},
            },
            {
                "id": 10,
                "projectId": 2,
                "what": {"id": "w10", "name": "Find accountant"},
            },
        ],
        "holidays": [{"name": "New Year's Day", "date": "2025-01-01", "type": "civil", "category": "Civil"}],
        "tierConfig": [{"id": "core", "name": "Core", "categories": ["Health", "Finance"]}],
        "locations": [{"id": "l1", "name": "Clinic"}],
    }


@pytest.fixture
def store(tmp_path, snapshot_data):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_data))
    return JsonSnapshotStore(path)


class TestLoad:
    def test_loads_projects_and_tiers(self, store):
        snapshot = store.load()

        assert [p.name for p in snapshot.projects] == ["Dental Implant Treatment", "Q3 Taxation"]
        assert snapshot.projects[0].color == "red"
        assert snapshot.projects[1].color == "blue"
        assert snapshot.project(2).category == "Finance"
        assert snapshot.project(99) is None
        assert snapshot.tier_config[0].categories == ["Health", "Finance"]

    def test_loads_events(self, store):
        events = {e.id: e for e in store.load().events}

        surgery = events[7]
        assert surgery.when.timestamp == utc(2025, 1, 8, 10)
        assert surgery.when.display == "Jan 08 2025 10:00"
        assert surgery.who[0].name == "Dr. Smith"
        assert surgery.where_id == "l1"
        assert not surgery.is_recurring

        recovery = events[8]
        assert recovery.what.type == WhatType.PERIOD
        assert recovery.when.display == "After surgery"
        assert recovery.end_when.timestamp - recovery.when.timestamp == timedelta(days=7)

    def test_naive_timestamps_are_utc(self, store):
        bookkeeping = next(e for e in store.load().events if e.id == 9)
        assert bookkeeping.when.timestamp == utc(2025, 1, 31, 9)
        assert bookkeeping.recurrence.frequency == Frequency.MONTHLY
        assert bookkeeping.recurrence.end_date == utc(2025, 6, 30)

    def test_unscheduled_events_are_kept(self, store):
        unscheduled = next(e for e in store.load().events if e.id == 10)
        assert not unscheduled.is_scheduled
        assert unscheduled.what.type == WhatType.APPOINTMENT

    def test_holidays(self, store):
        holiday = store.load().holidays[0]
        assert holiday.day == date(2025, 1, 1)
        assert holiday.kind == "civil"


class TestErrors:
    def test_missing_file(self, tmp_path):
        store = JsonSnapshotStore(tmp_path / "missing.json")
        assert not store.exists()
        with pytest.raises(SnapshotError, match="not found"):
            store.load()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError, match="Invalid snapshot JSON"):
            JsonSnapshotStore(path).load()

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text("[]")
        with pytest.raises(SnapshotError):
            JsonSnapshotStore(path).load()

    def test_unknown_frequency(self, tmp_path, snapshot_data):
        snapshot_data["events"][2]["recurrence"]["frequency"] = "yearly"
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(snapshot_data))
        with pytest.raises(SnapshotError, match="yearly"):
            JsonSnapshotStore(path).load()

    def test_missing_required_key(self, tmp_path, snapshot_data):
        del snapshot_data["events"][0]["projectId"]
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(snapshot_data))
        with pytest.raises(SnapshotError, match="Malformed"):
            JsonSnapshotStore(path).load()

    def test_store_is_read_only(self, store):
        before = store.path.read_text()
        store.load()
        assert store.path.read_text() == before
        assert not hasattr(store, "save")
