"""
Rendering pipeline.

Owns the window and the native surface the frame is composed on, and
scales the native surface up to the window when presenting.
"""

import logging
import os
from typing import Optional

import pygame

from ..config import Config

logger = logging.getLogger(__name__)


class Renderer:
    """
    Manages the window and scaling.

    Everything renders to a native-resolution surface, which is then
    scaled up to the window size as the last step of each frame.
    """

    def __init__(self, config: Config):
        """
        Initialize the renderer.

        Args:
            config: Application configuration
        """
        self.config = config
        self.native_surface = pygame.Surface(config.native_size)

        try:
            flags = pygame.FULLSCREEN if config.fullscreen else 0
            self.window = pygame.display.set_mode(config.window_size, flags)
            logger.info(f"Using SDL video driver: {pygame.display.get_driver()}")
        except pygame.error as e:
            logger.warning(f"SDL video initialization failed: {e}")
            logger.info("Falling back to the dummy video driver (no visible window)")
            os.environ["SDL_VIDEODRIVER"] = "dummy"
            pygame.display.quit()
            pygame.display.init()
            self.window = pygame.display.set_mode(config.window_size)

        self.scaled_surface: Optional[pygame.Surface] = None
        if config.scale_factor > 1:
            self.scaled_surface = pygame.Surface(config.window_size)

    def get_surface(self) -> pygame.Surface:
        """
        Get the native surface to draw on.

        Returns:
            The native-resolution surface
        """
        return self.native_surface

    def set_title(self, title: str) -> None:
        pygame.display.set_caption(title)

    def present(self) -> None:
        """Present the frame to the display, scaling if needed."""
        if self.scaled_surface is None:
            self.window.blit(self.native_surface, (0, 0))
        else:
            # Nearest-neighbor for crisp pixels
            pygame.transform.scale(
                self.native_surface,
                self.config.window_size,
                self.scaled_surface,
            )
            self.window.blit(self.scaled_surface, (0, 0))
        pygame.display.flip()

    def cleanup(self) -> None:
        """Clean up renderer resources."""
        self.scaled_surface = None
