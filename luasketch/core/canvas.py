"""
Drawing surface.

RenderSurface is the interface script bindings draw through; Canvas
is the pygame implementation used by the application. Primitives are
drawn onto a persistent layer that survives until clear() is called.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import pygame

from ..ui.colors import Color
from ..ui.fonts import get_font
from ..ui.geometry import to_pixel, to_point

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass
class TextNode:
    """The single on-screen debug text node scripts can write to."""
    x: float
    y: float
    text: str


def regular_polygon(x: float, y: float, radius: float, vertices: int) -> list[Point]:
    """
    Points of a regular polygon approximating a circle.

    Args:
        x: Center x
        y: Center y
        radius: Distance from center to each vertex
        vertices: Number of vertices (at least 3)

    Returns:
        Vertex list, first vertex pointing right
    """
    step = 2 * math.pi / vertices
    return [
        (x + radius * math.cos(i * step), y + radius * math.sin(i * step))
        for i in range(vertices)
    ]


class RenderSurface(ABC):
    """Drawing operations available to scripts."""

    @property
    @abstractmethod
    def width(self) -> int: ...

    @property
    @abstractmethod
    def height(self) -> int: ...

    @abstractmethod
    def draw_circle(self, x: float, y: float, radius: float, color: Color,
                    outline: bool = False) -> None: ...

    @abstractmethod
    def draw_rect(self, x: float, y: float, width: float, height: float,
                  color: Color, outline: bool = False) -> None: ...

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  color: Color, thickness: float = 1.0) -> None: ...

    @abstractmethod
    def draw_polygon(self, points: Sequence[Point], color: Color,
                     outline: bool = False) -> None: ...

    @abstractmethod
    def clear(self) -> None:
        """Erase everything drawn so far."""

    @abstractmethod
    def set_background(self, color: Color) -> None: ...

    @abstractmethod
    def set_text(self, x: float, y: float, text: str) -> None:
        """Create or move the debug text node."""

    @abstractmethod
    def clear_text(self) -> None: ...

    @abstractmethod
    def reset(self) -> None:
        """Drawings, text and background back to their initial state."""


class Canvas(RenderSurface):
    """
    Pygame drawing surface.

    Composited every frame as: background, primitives layer,
    sprites, debug text.
    """

    TEXT_SIZE = 20

    def __init__(self, size: Tuple[int, int], background: int = 0x1099BB):
        """
        Initialize the canvas.

        Args:
            size: Surface size (width, height)
            background: Initial packed background color
        """
        self._size = size
        self._initial_background = Color(background)
        self.background = self._initial_background
        self.layer = pygame.Surface(size, pygame.SRCALPHA)
        self.text_node: Optional[TextNode] = None

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]

    # ─────────────────────────────────────────────────────────────────────────
    # Primitives
    # ─────────────────────────────────────────────────────────────────────────

    def draw_circle(self, x, y, radius, color, outline=False):
        radius = to_pixel(radius)
        if radius <= 0:
            return
        pygame.draw.circle(self.layer, color.rgba, to_point(x, y), radius, 1 if outline else 0)

    def draw_rect(self, x, y, width, height, color, outline=False):
        rect = pygame.Rect(*to_point(x, y), *to_point(width, height))
        rect.normalize()
        pygame.draw.rect(self.layer, color.rgba, rect, 1 if outline else 0)

    def draw_line(self, x1, y1, x2, y2, color, thickness=1.0):
        width = max(1, to_pixel(thickness + 0.5))
        pygame.draw.line(self.layer, color.rgba, to_point(x1, y1), to_point(x2, y2), width)

    def draw_polygon(self, points, color, outline=False):
        if len(points) < 3:
            return
        pygame.draw.polygon(self.layer, color.rgba, [to_point(*p) for p in points], 1 if outline else 0)

    def clear(self):
        self.layer.fill((0, 0, 0, 0))

    def set_background(self, color):
        self.background = color

    def set_text(self, x, y, text):
        if self.text_node is None:
            self.text_node = TextNode(x, y, text)
        else:
            self.text_node.x = x
            self.text_node.y = y
            self.text_node.text = text

    def clear_text(self):
        self.text_node = None

    def reset(self):
        self.clear()
        self.clear_text()
        self.background = self._initial_background

    # ─────────────────────────────────────────────────────────────────────────
    # Compositing
    # ─────────────────────────────────────────────────────────────────────────

    def render_background(self, surface: pygame.Surface) -> None:
        """Fill the target with the background color."""
        surface.fill(self.background.rgb)

    def render_layer(self, surface: pygame.Surface) -> None:
        """Blit the primitives layer."""
        surface.blit(self.layer, (0, 0))

    def render_text(self, surface: pygame.Surface) -> None:
        """Draw the debug text node, if any."""
        node = self.text_node
        if node is None or not node.text:
            return
        font = get_font(self.TEXT_SIZE)
        text_surface = font.render(node.text, True, (255, 255, 255))
        surface.blit(text_surface, to_point(node.x, node.y))
