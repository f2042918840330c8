"""Frame scheduler adapters."""

import asyncio
import itertools
from typing import Callable


class ManualFrameScheduler:
    """
    Frame scheduler driven by explicit tick() calls.

    Implements FrameScheduler protocol. Used for headless drag simulation
    and tests.
    """

    def __init__(self):
        self._pending: dict[int, Callable[[], None]] = {}
        self._ids = itertools.count(1)
        self.frames = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def tick(self) -> int:
        """Run every callback requested before this frame. Returns how many ran."""
        due, self._pending = self._pending, {}
        self.frames += 1
        for handle in sorted(due):
            due[handle]()
        return len(due)


class AsyncioFrameScheduler:
    """
    Frame scheduler on an asyncio event loop.

    Implements FrameScheduler protocol. Callbacks run after one frame
    interval (1 / fps seconds).
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None, fps: float = 60.0):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.loop = loop or asyncio.get_running_loop()
        self.interval = 1.0 / fps

    def request_frame(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(self.interval, callback)

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
