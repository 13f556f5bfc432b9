"""
Frame clock.

Delta-time and frame-rate bookkeeping for the render loop.
"""

import time
from typing import Callable, Optional


class FrameClock:
    """
    Wall-clock bookkeeping, advanced exactly once per render tick.

    The frame rate is aggregated over windows of FPS_WINDOW seconds
    rather than computed from a single delta, so it stays readable.
    """

    FPS_WINDOW = 1.0

    def __init__(self, time_source: Callable[[], float] = time.perf_counter):
        """
        Initialize the clock.

        Args:
            time_source: Monotonic clock returning seconds
        """
        self._time = time_source
        self.frame = 0
        self.delta_time = 0.0
        self.fps = 0.0

        self._last_time: Optional[float] = None
        self._window_start: Optional[float] = None
        self._window_frames = 0

    def now(self) -> float:
        """Current time of the underlying time source."""
        return self._time()

    def tick(self) -> float:
        """
        Advance to the next frame.

        Returns:
            Seconds elapsed since the previous tick (0 for the first)
        """
        now = self._time()

        if self._last_time is None:
            self.delta_time = 0.0
        else:
            self.delta_time = max(0.0, now - self._last_time)
        self._last_time = now
        self.frame += 1

        if self._window_start is None:
            self._window_start = now
            self._window_frames = 0
        else:
            self._window_frames += 1
            elapsed = now - self._window_start
            if elapsed >= self.FPS_WINDOW:
                self.fps = self._window_frames / elapsed
                self._window_start = now
                self._window_frames = 0

        return self.delta_time

    def reset_delta(self) -> None:
        """Make the next tick report a zero delta (used when a run starts)."""
        self._last_time = None
