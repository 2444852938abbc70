"""
Scheduler adapters for deferred callbacks (the session auto-advance).
"""

import asyncio
import heapq
import itertools
from collections.abc import Callable

from wordwise.domain.study.ports import ScheduledTask, Scheduler


class ManualTask(ScheduledTask):
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by its owner.

    Callbacks run only inside `advance()` or `run_pending()`, on the calling
    thread, in due order. Used by the CLI (which has no event loop) and by tests.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, ManualTask]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(self.now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (task.due, next(self._seq), task))
        return task

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every callback that became due."""
        self.now += seconds
        return self._run_until(self.now)

    def run_pending(self) -> int:
        """Run every scheduled callback regardless of its delay."""
        return self._run_until(float("inf"))

    def _run_until(self, deadline: float) -> int:
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            _, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            task.callback()
            ran += 1
        return ran


class AsyncioTask(ScheduledTask):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop's `call_later`.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> AsyncioTask:
        loop = self._loop or asyncio.get_running_loop()
        return AsyncioTask(loop.call_later(delay, callback))
