"""
Clocks that deliver scheduler ticks.

The scheduler only needs `call_later(delay, callback, *args)` returning a
handle with `cancel()`. A running asyncio event loop already provides this;
ManualClock is a virtual clock that only moves when told to.
"""

import heapq
import itertools
from typing import Any, Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class ManualHandle:
    """Handle for a callback scheduled on a ManualClock."""

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """
    Deterministic clock for tests and scripted runs.

    Usage:
        clock = ManualClock()
        scheduler = SequenceScheduler(clock, execute)
        scheduler.start(source, 1000)
        clock.advance(60)  # runs 60 ticks
    """

    # Times are rounded so repeated float delays (e.g. 0.2 s) land exactly
    PRECISION = 6

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, ManualHandle]] = []
        self._order = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        when = round(self._now + max(0.0, delay), self.PRECISION)
        handle = ManualHandle(when, callback, args)
        heapq.heappush(self._queue, (when, next(self._order), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """
        Move time forward, running every callback that falls due.

        Callbacks scheduled by other callbacks also run if they fall due
        within the window. Returns the number of callbacks run.
        """
        deadline = round(self._now + seconds, self.PRECISION)
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            handle.callback(*handle.args)
            ran += 1
        self._now = deadline
        return ran

    @property
    def pending(self) -> int:
        """Number of callbacks scheduled and not cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)
