from __future__ import annotations

from typing import Callable


class FrameScheduler:
    """
    One-shot "next frame" callback queue.

    ``request_frame`` queues a callback for the next display refresh;
    ``run_pending`` is that refresh. Callbacks requested while the queue is
    being run wait for the following refresh.
    """

    def __init__(self) -> None:
        self._pending: list[Callable[[], None]] = []
        self.frames = 0

    def request_frame(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_pending(self) -> int:
        callbacks, self._pending = self._pending, []
        self.frames += 1
        for callback in callbacks:
            callback()
        return len(callbacks)
