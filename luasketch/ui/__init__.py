"""
UI support module.

Colors and fonts shared by the canvas and the host overlay.
"""

from .colors import COLORS, Color
from .fonts import get_font
from .geometry import to_pixel, to_point

__all__ = [
    "COLORS",
    "Color",
    "get_font",
    "to_pixel",
    "to_point",
]
