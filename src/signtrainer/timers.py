"""
Cooperative one-shot timers.

There is no background thread: the host loop calls `run_due()` once per frame
and every timer whose deadline has passed fires on that call, in deadline
order. Each scheduled callback is represented by a `TimerHandle` the caller
owns and can cancel.
"""

from __future__ import annotations

import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple

from .logger import get_logger

logger = get_logger("timers")


class TimerHandle:
    """Cancellation token for one scheduled callback."""

    __slots__ = ("deadline", "_callback", "_cancelled", "_fired", "label")

    def __init__(self, deadline: float, callback: Callable[[], None], label: str = "") -> None:
        self.deadline = deadline
        self._callback = callback
        self._cancelled = False
        self._fired = False
        self.label = label

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._fired)

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        self._cancelled = True

    def _run(self) -> None:
        self._fired = True
        self._callback()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "fired" if self._fired else "pending"
        return f"TimerHandle({self.label or 'timer'} @ {self.deadline:.3f}, {state})"


class TimerScheduler:
    """
    One-shot timer queue driven by an injectable monotonic clock.

    Args:
        clock: Returns the current time in seconds (default `time.monotonic`).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self.clock()

    def call_later(self, delay_s: float, callback: Callable[[], None], *, label: str = "") -> TimerHandle:
        """Schedule `callback` to run `delay_s` seconds from now."""
        deadline = self.clock() + max(0.0, delay_s)
        handle = TimerHandle(deadline, callback, label)
        heapq.heappush(self._queue, (deadline, next(self._seq), handle))
        logger.debug("Scheduled %s in %.3fs", label or "timer", delay_s)
        return handle

    def run_due(self, now: Optional[float] = None) -> int:
        """
        Fire every pending timer whose deadline is <= `now`.

        Callbacks may schedule or cancel other timers; a timer scheduled by a
        callback fires on this call only if it is already due.

        Returns:
            Number of callbacks that ran.
        """
        if now is None:
            now = self.clock()
        fired = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, handle = heapq.heappop(self._queue)
            if not handle.pending:
                continue
            handle._run()
            fired += 1
        return fired

    def cancel_all(self) -> None:
        for _, _, handle in self._queue:
            handle.cancel()
        self._queue.clear()

    def pending_count(self) -> int:
        return sum(1 for _, _, handle in self._queue if handle.pending)
