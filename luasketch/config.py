"""
Application configuration.

All configuration values are centralized here for easy management
and environment-specific overrides.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Main application configuration."""

    # ─────────────────────────────────────────────────────────────────────────
    # Display Settings
    # ─────────────────────────────────────────────────────────────────────────

    # Native resolution of the drawing surface (scripts see these sizes)
    native_width: int = 800
    native_height: int = 600

    # Display scaling (1 = native, 2 = double size window)
    scale_factor: int = 1

    # Fullscreen mode
    fullscreen: bool = False

    # Target frame rate (render tick cadence)
    target_fps: int = 60

    # ─────────────────────────────────────────────────────────────────────────
    # Canvas Settings
    # ─────────────────────────────────────────────────────────────────────────

    # Packed 0xRRGGBB background shown behind the script's drawings
    background_color: int = 0x1099BB

    # ─────────────────────────────────────────────────────────────────────────
    # Development Settings
    # ─────────────────────────────────────────────────────────────────────────

    # Development mode (verbose logging, debug overlay)
    dev_mode: bool = False

    # Show FPS counter
    show_fps: bool = False

    # ─────────────────────────────────────────────────────────────────────────
    # Scripting Settings
    # ─────────────────────────────────────────────────────────────────────────

    # Directory with images preloaded for loadImage() (None = no textures)
    assets_dir: Optional[str] = None

    # Fixed step multiplied with sprite velocity by updateSprites()
    sprite_step: float = 1.0

    # ─────────────────────────────────────────────────────────────────────────
    # Computed Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def window_width(self) -> int:
        """Get actual window width (native * scale)."""
        return self.native_width * self.scale_factor

    @property
    def window_height(self) -> int:
        """Get actual window height (native * scale)."""
        return self.native_height * self.scale_factor

    @property
    def native_size(self) -> tuple[int, int]:
        """Get native resolution as tuple."""
        return (self.native_width, self.native_height)

    @property
    def window_size(self) -> tuple[int, int]:
        """Get window size as tuple."""
        return (self.window_width, self.window_height)

    def __post_init__(self):
        """Apply dev mode defaults."""
        if self.dev_mode:
            self.show_fps = True


# Default configuration instances
DEFAULT_CONFIG = Config()
DEV_CONFIG = Config(dev_mode=True)
