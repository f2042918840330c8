"""Tests for the drag-to-pan controller."""

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from almanac.adapters.frame_schedulers import AsyncioFrameScheduler, ManualFrameScheduler
from almanac.pan import PanController, PanState
from conftest import utc


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def committed():
    return []


@pytest.fixture
def controller(scheduler, committed):
    # 700px for a 7 day window: 100px per day
    return PanController(
        scheduler,
        committed.append,
        window_duration=timedelta(days=7),
        pixel_width=700,
    )


@pytest.fixture
def reference():
    return utc(2025, 11, 15, 12)


class TestPanController:
    def test_starts_idle(self, controller):
        assert controller.state == PanState.IDLE
        assert not controller.is_dragging

    def test_commit_is_deferred_to_the_next_frame(self, controller, scheduler, committed, reference):
        controller.begin(100, reference)
        controller.update(170)
        assert committed == []
        assert scheduler.pending == 1

        scheduler.tick()
        assert committed == [reference - timedelta(hours=16, minutes=48)]

    def test_dragging_left_moves_later(self, controller, scheduler, committed, reference):
        controller.begin(300, reference)
        controller.update(200)
        scheduler.tick()
        assert committed == [reference + timedelta(days=1)]

    def test_one_commit_per_frame_with_latest_sample(self, controller, scheduler, committed, reference):
        controller.begin(0, reference)
        for x in (10, 50, 120, 200):
            controller.update(x)
        assert scheduler.pending == 1

        scheduler.tick()
        assert committed == [reference - timedelta(days=2)]

    def test_each_frame_commits_once(self, controller, scheduler, committed, reference):
        controller.begin(0, reference)
        controller.update(100)
        scheduler.tick()
        controller.update(200)
        controller.update(300)
        scheduler.tick()
        scheduler.tick()
        assert committed == [reference - timedelta(days=1), reference - timedelta(days=3)]

    def test_round_trip_returns_to_origin(self, controller, scheduler, committed, reference):
        controller.begin(250, reference)
        controller.update(250 + 137.5)
        scheduler.tick()
        controller.update(250)
        scheduler.tick()

        assert committed[0] != reference
        assert abs((committed[-1] - reference).total_seconds()) < 1e-3

    def test_end_cancels_pending_frame(self, controller, scheduler, committed, reference):
        controller.begin(0, reference)
        controller.update(100)
        controller.end()

        assert scheduler.pending == 0
        assert not controller.has_pending_frame
        scheduler.tick()
        assert committed == []

    def test_no_work_after_end(self, controller, scheduler, committed, reference):
        controller.begin(0, reference)
        controller.end()
        controller.update(100)
        assert scheduler.pending == 0
        assert committed == []

    def test_end_is_idempotent_and_safe_without_begin(self, controller):
        controller.end()
        controller.end()
        assert controller.state == PanState.IDLE

    def test_update_without_begin_is_noop(self, controller, scheduler):
        controller.update(100)
        assert scheduler.pending == 0

    def test_begin_restarts_and_drops_pending(self, controller, scheduler, committed, reference):
        controller.begin(0, reference)
        controller.update(100)
        controller.begin(500, reference + timedelta(days=10))
        assert scheduler.pending == 0
        controller.update(400)
        scheduler.tick()
        assert committed == [reference + timedelta(days=11)]

    def test_rejects_non_positive_width(self, scheduler):
        with pytest.raises(ValueError):
            PanController(scheduler, print, window_duration=timedelta(days=7), pixel_width=0)

    def test_uses_injected_scheduler(self, reference):
        scheduler = MagicMock()
        scheduler.request_frame.return_value = "handle"
        controller = PanController(
            scheduler, MagicMock(), window_duration=timedelta(days=7), pixel_width=700
        )
        controller.begin(0, reference)
        controller.update(10)
        controller.end()

        scheduler.request_frame.assert_called_once()
        scheduler.cancel_frame.assert_called_once_with("handle")


class TestAsyncioFrameScheduler:
    def test_commits_on_event_loop(self, reference):
        committed = []

        async def drag():
            scheduler = AsyncioFrameScheduler(fps=200)
            controller = PanController(
                scheduler, committed.append, window_duration=timedelta(days=7), pixel_width=700
            )
            controller.begin(0, reference)
            controller.update(50)
            controller.update(100)
            await asyncio.sleep(0.05)
            controller.end()

        asyncio.run(drag())
        assert committed == [reference - timedelta(days=1)]

    def test_cancelled_frame_never_runs(self, reference):
        committed = []

        async def drag():
            scheduler = AsyncioFrameScheduler(fps=200)
            controller = PanController(
                scheduler, committed.append, window_duration=timedelta(days=7), pixel_width=700
            )
            controller.begin(0, reference)
            controller.update(100)
            controller.end()
            await asyncio.sleep(0.05)

        asyncio.run(drag())
        assert committed == []

    def test_rejects_bad_fps(self):
        with pytest.raises(ValueError):
            AsyncioFrameScheduler(loop=MagicMock(), fps=0)
