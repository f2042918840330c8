"""Animation-frame scheduling interface."""

from typing import Any, Callable, Protocol


class FrameScheduler(Protocol):
    """Interface for deferring work to the next animation frame."""

    def request_frame(self, callback: Callable[[], None]) -> Any:
        """Run callback on the next frame. Returns a handle for cancel_frame."""
        ...

    def cancel_frame(self, handle: Any) -> None:
        """Cancel a pending callback. Unknown or already-run handles are ignored."""
        ...
