"""
Core engine module.

Host-side building blocks of the render loop: the drawing surface,
frame clock, timers and diagnostics. The Application itself lives in
core.app.
"""

from .canvas import Canvas, RenderSurface
from .diagnostics import DiagnosticLog
from .frame_clock import FrameClock
from .timers import Timer, TimerQueue

__all__ = [
    "Canvas",
    "RenderSurface",
    "DiagnosticLog",
    "FrameClock",
    "Timer",
    "TimerQueue",
]
