"""
Delayed, cancellable callbacks for driving playback.

The engine only needs ``call_later(delay, callback)`` returning a handle
with ``cancel()``, plus ``now()``.  :class:`AsyncioScheduler` runs on a
real event loop; :class:`VirtualScheduler` runs on a simulated clock,
for previews and tests.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def now(self) -> float: ...


class AsyncioScheduler:
    """
    Schedules callbacks on an asyncio event loop.

    If no loop is given, the running loop is looked up on first use, so
    the scheduler must then be used from inside a coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)

    def now(self) -> float:
        return self.loop.time()

    def __repr__(self) -> str:
        return f"AsyncioScheduler(loop={self._loop!r})"


class VirtualHandle:
    """Handle for a callback queued on a :class:`VirtualScheduler`."""

    __slots__ = ("due", "callback", "cancelled")

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """
    Deterministic simulated clock.

    Callbacks run only when the clock is moved with :meth:`advance` or
    :meth:`run_until_idle`, in due-time order (ties in scheduling order).
    Callbacks may schedule further callbacks.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, VirtualHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualHandle:
        handle = VirtualHandle(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of queued callbacks that have not been cancelled."""
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def next_due(self) -> Optional[float]:
        self._drop_cancelled()
        if not self._queue:
            return None
        return self._queue[0][0]

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)

    def _run_next(self) -> None:
        due, _, handle = heapq.heappop(self._queue)
        self._now = max(self._now, due)
        handle.callback()

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward by *seconds*, running everything that
        falls due on the way.

        Returns:
            Number of callbacks run.
        """
        target = self._now + seconds
        ran = 0
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0][0] > target:
                break
            self._run_next()
            ran += 1
        self._now = target
        return ran

    def run_until_idle(self, max_callbacks: Optional[int] = None) -> int:
        """
        Run queued callbacks until none remain (or *max_callbacks* ran).

        The clock jumps straight to each due time.
        """
        ran = 0
        while max_callbacks is None or ran < max_callbacks:
            self._drop_cancelled()
            if not self._queue:
                break
            self._run_next()
            ran += 1
        logger.debug("Virtual clock at %.3fs after %d callbacks", self._now, ran)
        return ran
