"""
Color handling.

Packed 0xRRGGBB colors as scripts pass them, the Color value the
drawing surface consumes, and the palette used by the host overlay.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

# Type aliases
RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]


# ─────────────────────────────────────────────────────────────────────────────
# Packed Colors
# ─────────────────────────────────────────────────────────────────────────────

def channel_to_byte(value: float) -> int:
    """
    Convert a [0, 1] channel to a 0-255 byte.

    Values outside the range are clamped; halves round up.
    """
    value = max(0.0, min(1.0, value))
    return int(value * 255 + 0.5)


def pack_rgb(r: float, g: float, b: float) -> int:
    """
    Pack [0, 1] channels into a 0xRRGGBB integer.

    Args:
        r: Red channel
        g: Green channel
        b: Blue channel

    Returns:
        Packed color
    """
    return channel_to_byte(r) << 16 | channel_to_byte(g) << 8 | channel_to_byte(b)


def unpack_rgb(packed: int) -> RGB:
    """Split a packed 0xRRGGBB integer into its byte channels."""
    return ((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF)


@dataclass(frozen=True)
class Color:
    """A packed RGB color with a separate [0, 1] alpha."""
    value: int
    alpha: float = 1.0

    @classmethod
    def from_channels(cls, r: float, g: float, b: float, a: float = 1.0) -> "Color":
        """Build a color from [0, 1] channels."""
        return cls(pack_rgb(r, g, b), max(0.0, min(1.0, a)))

    @property
    def rgb(self) -> RGB:
        return unpack_rgb(self.value)

    @property
    def rgba(self) -> RGBA:
        return (*self.rgb, channel_to_byte(self.alpha))


BLACK = Color(0x000000)
WHITE = Color(0xFFFFFF)


# ─────────────────────────────────────────────────────────────────────────────
# Overlay Palette
# ─────────────────────────────────────────────────────────────────────────────

COLORS: Dict[str, RGB] = {
    "text_primary": (240, 240, 240),
    "error": (255, 36, 36),
}

COLORS_ALPHA: Dict[str, RGBA] = {
    "overlay_dark": (0, 0, 0, 180),
}

