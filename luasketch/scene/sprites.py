"""
Sprite scene.

Sprites created by scripts live in the scene and are drawn by the
host every frame, above the primitives layer.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import pygame

from ..ui.geometry import to_point

logger = logging.getLogger(__name__)

Tint = Tuple[float, float, float, float]


@dataclass(eq=False)
class Sprite:
    """A movable, tintable image."""
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    tint: Tint = (1.0, 1.0, 1.0, 1.0)
    texture: Optional[pygame.Surface] = None

    @property
    def width(self) -> int:
        return self.texture.get_width() if self.texture else 0

    @property
    def height(self) -> int:
        return self.texture.get_height() if self.texture else 0

    def advance(self, step: float, bounds: Tuple[int, int]) -> None:
        """
        Move by velocity * step and bounce off the bounds.

        Args:
            step: Fixed step multiplied with the velocity
            bounds: Screen size (width, height)
        """
        self.x += self.vx * step
        self.y += self.vy * step

        max_x = max(0, bounds[0] - self.width)
        max_y = max(0, bounds[1] - self.height)

        if self.x < 0:
            self.x = 0.0
            self.vx = abs(self.vx)
        elif self.x > max_x:
            self.x = float(max_x)
            self.vx = -abs(self.vx)

        if self.y < 0:
            self.y = 0.0
            self.vy = abs(self.vy)
        elif self.y > max_y:
            self.y = float(max_y)
            self.vy = -abs(self.vy)

    def tinted_texture(self) -> Optional[pygame.Surface]:
        """The texture multiplied by the tint, or None without a texture."""
        if self.texture is None:
            return None
        if self.tint == (1.0, 1.0, 1.0, 1.0):
            return self.texture
        tinted = self.texture.copy()
        multiplier = tuple(int(max(0.0, min(1.0, c)) * 255 + 0.5) for c in self.tint)
        tinted.fill(multiplier, special_flags=pygame.BLEND_RGBA_MULT)
        return tinted


class SpriteScene:
    """
    Ordered collection of sprites rendered by the host.

    Sprites render in creation order; untextured sprites are not drawn.
    """

    def __init__(self):
        self._sprites: List[Sprite] = []

    def __len__(self) -> int:
        return len(self._sprites)

    def __iter__(self) -> Iterator[Sprite]:
        return iter(list(self._sprites))

    def __contains__(self, sprite: Sprite) -> bool:
        return sprite in self._sprites

    def add(self, sprite: Sprite) -> None:
        self._sprites.append(sprite)

    def remove(self, sprite: Sprite) -> None:
        if sprite in self._sprites:
            self._sprites.remove(sprite)

    def clear(self) -> None:
        self._sprites.clear()

    def render(self, surface: pygame.Surface) -> None:
        """Draw every textured sprite at its position."""
        for sprite in self._sprites:
            image = sprite.tinted_texture()
            if image is None:
                continue
            surface.blit(image, to_point(sprite.x, sprite.y))
