"""
Input handling module.

Provides abstraction layer for the input sources the host reacts to:
- Keyboard (host actions such as re-running the script)
- Mouse and touch screen (pointer state queried by scripts)
"""

from .manager import InputManager, HostAction
from .touch import PointerTracker, PointerState

__all__ = [
    "InputManager",
    "HostAction",
    "PointerTracker",
    "PointerState",
]
