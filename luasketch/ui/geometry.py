"""
Pixel coordinate helpers.
"""

import math

# pygame rects and blit positions are C ints
PIXEL_LIMIT = 1 << 20


def to_pixel(value: float) -> int:
    """
    Convert a coordinate to an int pygame accepts.

    Values are clamped to +/-PIXEL_LIMIT; NaN becomes 0.
    """
    if math.isnan(value):
        return 0
    return int(max(-PIXEL_LIMIT, min(PIXEL_LIMIT, value)))


def to_point(x: float, y: float) -> tuple[int, int]:
    return to_pixel(x), to_pixel(y)
