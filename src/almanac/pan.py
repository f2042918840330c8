"""Drag-to-pan session for the timeline."""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable

from .ports.frame_scheduler import FrameScheduler

logger = logging.getLogger(__name__)


class PanState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class PanController:
    """
    Turns pointer-drag samples into reference-date updates.

    Only the latest sample is kept; the commit runs at most once per frame
    on the injected scheduler. Dragging right moves the window earlier, so
    content follows the pointer. One instance per drag interaction.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        on_pan: Callable[[datetime], None],
        *,
        window_duration: timedelta,
        pixel_width: float,
    ):
        if pixel_width <= 0:
            raise ValueError(f"pixel_width must be positive, got {pixel_width}")
        self.scheduler = scheduler
        self.on_pan = on_pan
        self.window_duration = window_duration
        self.pixel_width = pixel_width

        self.state = PanState.IDLE
        self._origin_x = 0.0
        self._origin_date: datetime | None = None
        self._latest_x: float | None = None
        self._pending: Any = None

    @property
    def is_dragging(self) -> bool:
        return self.state == PanState.DRAGGING

    @property
    def has_pending_frame(self) -> bool:
        return self._pending is not None

    def begin(self, pointer_x: float, reference_date: datetime) -> None:
        """Record the drag origin. Restarting a drag drops any pending frame."""
        self._cancel_pending()
        self.state = PanState.DRAGGING
        self._origin_x = pointer_x
        self._origin_date = reference_date
        self._latest_x = None
        logger.debug(f"Pan started at x={pointer_x} from {reference_date.isoformat()}")

    def update(self, pointer_x: float) -> None:
        """Supersede the previous sample; commit on the next frame."""
        if self.state != PanState.DRAGGING:
            return
        self._latest_x = pointer_x
        if self._pending is None:
            self._pending = self.scheduler.request_frame(self._commit)

    def end(self) -> None:
        """Cancel any pending frame and release drag state. Safe to repeat."""
        self._cancel_pending()
        if self.state == PanState.DRAGGING:
            logger.debug("Pan ended")
        self.state = PanState.IDLE
        self._origin_date = None
        self._latest_x = None

    def reference_for(self, pointer_x: float) -> datetime:
        """Reference date the session would commit for a pointer position."""
        delta_ms = (pointer_x - self._origin_x) / self.pixel_width * self.window_duration.total_seconds() * 1000
        return self._origin_date - timedelta(milliseconds=delta_ms)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self.scheduler.cancel_frame(self._pending)
            self._pending = None

    def _commit(self) -> None:
        self._pending = None
        if self.state != PanState.DRAGGING or self._latest_x is None:
            return
        self.on_pan(self.reference_for(self._latest_x))
