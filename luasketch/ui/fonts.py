"""
Font management.

Provides cached fonts for the script's debug text node and the
host overlay. Uses the pygame default font so no assets are needed.
"""

import logging
import pygame
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class FontManager:
    """
    Manages fonts for the application.

    Fonts are created lazily, the first time a size is requested,
    so importing this module does not initialize pygame.
    """

    SIZE_SMALL = 16
    SIZE_NORMAL = 20

    _instance: Optional["FontManager"] = None
    _fonts: Dict[int, pygame.font.Font] = {}

    def __new__(cls):
        """Singleton pattern - only one font manager instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_font(self, size: int) -> pygame.font.Font:
        """
        Get a font at the specified size.

        Args:
            size: Font size in pixels

        Returns:
            Pygame font object
        """
        if size in self._fonts:
            return self._fonts[size]

        if not pygame.font.get_init():
            pygame.font.init()
            logger.debug("Initialized pygame font module")

        font = pygame.font.Font(None, size)
        self._fonts[size] = font
        return font

    def clear(self) -> None:
        """Forget cached fonts (they are invalid after pygame.quit())."""
        self._fonts.clear()


# Global font manager instance
fonts = FontManager()


def get_font(size: int = FontManager.SIZE_NORMAL) -> pygame.font.Font:
    """Convenience function to get a font."""
    return fonts.get_font(size)
