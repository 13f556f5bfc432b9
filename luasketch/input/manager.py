"""
Input manager.

Maps keyboard input to host actions (re-run, stop, cycle examples,
quit). Pointer input goes to the PointerTracker instead.
"""

import pygame
from enum import Enum, auto
from typing import Optional

from ..config import Config


class HostAction(Enum):
    """
    Abstract host actions.

    These are the logical actions the application responds to,
    independent of the physical key that triggered them.
    """

    RUN = auto()           # Re-read the source and start a new session
    STOP = auto()          # Stop the current session
    NEXT_EXAMPLE = auto()  # Switch to the next bundled example and run it
    QUIT = auto()          # Exit the application


class InputManager:
    """Manages keyboard input for the host."""

    # Keyboard mapping
    KEY_MAP = {
        pygame.K_F5: HostAction.RUN,
        pygame.K_F6: HostAction.STOP,
        pygame.K_TAB: HostAction.NEXT_EXAMPLE,
        pygame.K_ESCAPE: HostAction.QUIT,
    }

    # Extra bindings only active in development mode
    DEV_KEY_MAP = {
        pygame.K_r: HostAction.RUN,
        pygame.K_s: HostAction.STOP,
    }

    def __init__(self, config: Config):
        """
        Initialize the input manager.

        Args:
            config: Application configuration
        """
        self.config = config
        self.dev_mode = config.dev_mode

    def process_event(self, event: pygame.event.Event) -> Optional[HostAction]:
        """
        Process a pygame event and return a host action.

        Args:
            event: Pygame event to process

        Returns:
            HostAction if event was recognized, None otherwise
        """
        if event.type == pygame.QUIT:
            return HostAction.QUIT
        if event.type == pygame.KEYDOWN:
            return self._handle_keydown(event)
        return None

    def _handle_keydown(self, event: pygame.event.Event) -> Optional[HostAction]:
        """
        Handle keyboard input.

        Args:
            event: Pygame KEYDOWN event

        Returns:
            Mapped HostAction or None
        """
        action = self.KEY_MAP.get(event.key)
        if action is None and self.dev_mode:
            action = self.DEV_KEY_MAP.get(event.key)
        return action
