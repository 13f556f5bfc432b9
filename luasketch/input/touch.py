"""
Pointer Tracker.

Follows mouse and touch events so scripts can query where the
pointer is and whether it is pressed. Positions are reported in
native canvas coordinates, independent of window scaling.
"""

import pygame
from dataclasses import dataclass
from typing import Tuple


@dataclass
class PointerState:
    """Current pointer position and button state."""
    x: float = 0.0
    y: float = 0.0
    pressed: bool = False


class PointerTracker:
    """
    Converts raw pygame events into the current PointerState.

    Mouse button 1 and touch fingers both count as "pressed".
    """

    def __init__(self, native_size: Tuple[int, int], scale_factor: int = 1):
        """
        Initialize pointer tracker.

        Args:
            native_size: Canvas size (width, height)
            scale_factor: Window pixels per canvas pixel
        """
        self.native_width, self.native_height = native_size
        self.scale_factor = max(1, scale_factor)
        self.state = PointerState()

    def handle_pygame_event(self, event: pygame.event.Event) -> bool:
        """
        Process pygame event.

        Args:
            event: Pygame event

        Returns:
            True if the event was a pointer event
        """
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._move_window(event.pos)
            self.state.pressed = True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._move_window(event.pos)
            self.state.pressed = False
        elif event.type == pygame.MOUSEMOTION:
            self._move_window(event.pos)
        elif event.type == pygame.FINGERDOWN:
            self._move_normalized(event.x, event.y)
            self.state.pressed = True
        elif event.type == pygame.FINGERUP:
            self._move_normalized(event.x, event.y)
            self.state.pressed = False
        elif event.type == pygame.FINGERMOTION:
            self._move_normalized(event.x, event.y)
        else:
            return False
        return True

    def _move_window(self, pos: Tuple[int, int]) -> None:
        """Move to a position given in window pixels."""
        self.state.x = pos[0] / self.scale_factor
        self.state.y = pos[1] / self.scale_factor

    def _move_normalized(self, x: float, y: float) -> None:
        """Move to a position given as 0..1 fractions of the display."""
        self.state.x = x * self.native_width
        self.state.y = y * self.native_height

    def snapshot(self) -> PointerState:
        """Copy of the current state."""
        return PointerState(self.state.x, self.state.y, self.state.pressed)
