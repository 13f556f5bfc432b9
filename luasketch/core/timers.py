"""
Host timers.

One-shot callbacks fired from the render loop once their delay has
elapsed. Timers never block: the loop polls them once per tick.
"""

import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Timer:
    """Handle for a scheduled callback."""

    __slots__ = ("deadline", "callback", "cancelled", "fired")

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback: Optional[Callable[[], None]] = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        """True until the timer fires or is cancelled."""
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        """Prevent the callback from firing. Safe to call repeatedly."""
        self.cancelled = True
        self.callback = None


class TimerQueue:
    """
    Deadline-ordered queue of one-shot timers.

    Usage:
        timers = TimerQueue()
        timer = timers.call_later(0.5, on_wake)

        # Once per frame
        timers.poll()
    """

    def __init__(self, time_source: Callable[[], float] = time.perf_counter):
        """
        Initialize the queue.

        Args:
            time_source: Monotonic clock returning seconds
        """
        self._time = time_source
        self._heap: List[Tuple[float, int, Timer]] = []
        self._sequence = itertools.count()

    def __len__(self) -> int:
        return sum(1 for _, _, timer in self._heap if timer.pending)

    @property
    def scheduled(self) -> int:
        """Heap entries, including cancelled timers not yet pruned."""
        return len(self._heap)

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        """
        Schedule a callback.

        Args:
            delay: Seconds from now; negative delays count as zero
            callback: Called with no arguments when the timer fires

        Returns:
            Timer handle that can be cancelled
        """
        timer = Timer(self._time() + max(0.0, delay), callback)
        heapq.heappush(self._heap, (timer.deadline, next(self._sequence), timer))
        return timer

    def poll(self) -> int:
        """
        Fire every timer whose deadline has passed.

        Timers scheduled by a callback during this poll wait for the
        next one, even with a zero delay.

        Returns:
            Number of callbacks fired
        """
        self._prune()
        now = self._time()
        due: List[Timer] = []
        while self._heap and self._heap[0][0] <= now:
            _, _, timer = heapq.heappop(self._heap)
            if timer.pending:
                due.append(timer)

        fired = 0
        for timer in due:
            if not timer.pending:
                continue
            callback, timer.callback = timer.callback, None
            timer.fired = True
            fired += 1
            try:
                callback()
            except Exception as e:
                logger.error(f"Timer callback error: {e}")
        return fired

    def _prune(self) -> None:
        """Drop cancelled timers, whatever their deadline."""
        live = [entry for entry in self._heap if entry[2].pending]
        if len(live) != len(self._heap):
            heapq.heapify(live)
            self._heap = live

    def cancel_all(self) -> None:
        """Cancel and drop every pending timer."""
        for _, _, timer in self._heap:
            timer.cancel()
        self._heap.clear()
