"""
Native API exposed to scripts.

ScriptAPI holds the host side of every guest-callable function;
build_bindings() pairs each method with its guest name and argument
contract. Unknown sprite or texture handles are ignored.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.canvas import RenderSurface, regular_polygon
from ..core.frame_clock import FrameClock
from ..input.touch import PointerTracker
from ..ui.colors import BLACK, Color
from . import marshal
from .registrar import ArgSpec, NativeBinding

logger = logging.getLogger(__name__)

MAX_POLYGON_VERTICES = 360


class ScriptAPI:
    """Host implementations of the script API for one session."""

    def __init__(
        self,
        context: Any,
        surface: RenderSurface,
        pointer: PointerTracker,
        clock: FrameClock,
        rng: Callable[[], float],
        sprite_step: float = 1.0,
    ):
        """
        Initialize the API.

        Args:
            context: SessionContext of the session the API belongs to
            surface: Drawing surface
            pointer: Pointer state for touch()
            clock: Frame clock for getFPS()
            rng: Uniform random source in [0, 1)
            sprite_step: Step multiplied with sprite velocities
        """
        self.context = context
        self.surface = surface
        self.pointer = pointer
        self.clock = clock
        self.rng = rng
        self.sprite_step = sprite_step

    # ─────────────────────────────────────────────────────────────────────────
    # Drawing
    # ─────────────────────────────────────────────────────────────────────────

    def draw_circle(self, x: float, y: float, radius: float, color: Color) -> None:
        self.surface.draw_circle(x, y, radius, color)

    def draw_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        self.surface.draw_rect(x, y, width, height, color)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  color: Color, thickness: float) -> None:
        self.surface.draw_line(x1, y1, x2, y2, color, thickness)

    def box(self, x: float, y: float, width: float, height: float,
            color: Color, outline: bool) -> None:
        self.surface.draw_rect(x, y, width, height, color, outline=outline)

    def circle(self, x: float, y: float, radius: float, vertices: float,
               color: Color, outline: bool) -> None:
        """A regular polygon with `vertices` sides (capped); a true circle below 3."""
        sides = min(int(vertices), MAX_POLYGON_VERTICES)
        if sides >= 3:
            points = regular_polygon(x, y, radius, sides)
            self.surface.draw_polygon(points, color, outline=outline)
        else:
            self.surface.draw_circle(x, y, radius, color, outline=outline)

    def clear(self) -> None:
        self.surface.clear()

    def set_background_color(self, color: Color) -> None:
        self.surface.set_background(color)

    def print_at(self, x: float, y: float, text: str) -> None:
        self.surface.set_text(x, y, text)

    # ─────────────────────────────────────────────────────────────────────────
    # Sprites
    # ─────────────────────────────────────────────────────────────────────────

    def load_image(self, path: str) -> Optional[int]:
        return self.context.load_image(path)

    def create_sprite(self) -> int:
        return self.context.create_sprite()

    def set_sprite_image(self, sprite_handle: Optional[int], image_handle: Optional[int]) -> None:
        sprite = self.context.sprite(sprite_handle)
        texture = self.context.image(image_handle)
        if sprite is None or texture is None:
            logger.debug(f"setSpriteImage: unknown handle ({sprite_handle}, {image_handle})")
            return
        sprite.texture = texture

    def set_sprite_position(self, handle: Optional[int], x: float, y: float) -> None:
        sprite = self.context.sprite(handle)
        if sprite is None:
            return
        sprite.x = x
        sprite.y = y

    def set_sprite_color(self, handle: Optional[int], r: float, g: float, b: float, a: float) -> None:
        sprite = self.context.sprite(handle)
        if sprite is None:
            return
        sprite.tint = (r, g, b, a)

    def set_sprite_speed(self, handle: Optional[int], speed: Tuple[float, float]) -> None:
        sprite = self.context.sprite(handle)
        if sprite is None:
            return
        sprite.vx, sprite.vy = speed

    def update_sprites(self) -> None:
        self.context.advance_sprites(self.sprite_step)

    def draw_sprites(self) -> None:
        """Nothing to do: the scene renders sprites every frame."""

    # ─────────────────────────────────────────────────────────────────────────
    # Queries and Control
    # ─────────────────────────────────────────────────────────────────────────

    def touch(self) -> Dict[str, Any]:
        state = self.pointer.snapshot()
        return {"x": state.x, "y": state.y, "pressed": state.pressed}

    def random(self, maximum: float) -> int:
        return math.floor(self.rng() * maximum)

    def width(self) -> int:
        return self.surface.width

    def height(self) -> int:
        return self.surface.height

    def fps(self) -> float:
        return self.clock.fps

    def stop(self) -> None:
        if not self.context.stop_requested:
            logger.info("Script requested stop")
        self.context.stop_requested = True


# ─────────────────────────────────────────────────────────────────────────────
# Binding Table
# ─────────────────────────────────────────────────────────────────────────────

def _coords(*names: str) -> Tuple[ArgSpec, ...]:
    return tuple(ArgSpec(name, marshal.number, 0.0) for name in names)


def build_bindings(api: ScriptAPI) -> List[NativeBinding]:
    """
    Every native function with its guest name and argument contract.

    update() and sleep() are not listed here; they yield and therefore
    live in the guest prelude.
    """
    color = ArgSpec("color", marshal.color, BLACK)
    outline = ArgSpec("outline", marshal.flag, False)
    sprite = ArgSpec("sprite", marshal.handle, None)

    return [
        NativeBinding("drawCircle", api.draw_circle, _coords("x", "y", "radius") + (color,)),
        NativeBinding("drawRect", api.draw_rect, _coords("x", "y", "width", "height") + (color,)),
        NativeBinding(
            "drawLine", api.draw_line,
            _coords("x1", "y1", "x2", "y2") + (color, ArgSpec("thickness", marshal.number, 1.0)),
        ),
        NativeBinding("box", api.box, _coords("x", "y", "width", "height") + (color, outline)),
        NativeBinding(
            "circle", api.circle,
            _coords("x", "y", "radius") + (ArgSpec("vertices", marshal.number, 0.0), color, outline),
        ),
        NativeBinding("clear", api.clear),
        NativeBinding("setBackgroundColor", api.set_background_color, (color,)),
        NativeBinding(
            "printAt", api.print_at,
            _coords("x", "y") + (ArgSpec("text", marshal.text, ""),),
        ),

        NativeBinding("loadImage", api.load_image, (ArgSpec("path", marshal.text, ""),)),
        NativeBinding("createSprite", api.create_sprite),
        NativeBinding(
            "setSpriteImage", api.set_sprite_image,
            (sprite, ArgSpec("image", marshal.handle, None)),
        ),
        NativeBinding("setSpritePosition", api.set_sprite_position, (sprite,) + _coords("x", "y")),
        NativeBinding(
            "setSpriteColor", api.set_sprite_color,
            (sprite,) + tuple(ArgSpec(name, marshal.number, 1.0) for name in ("r", "g", "b", "a")),
        ),
        NativeBinding(
            "setSpriteSpeed", api.set_sprite_speed,
            (sprite, ArgSpec("speed", marshal.velocity, (0.0, 0.0))),
        ),
        NativeBinding("updateSprites", api.update_sprites),
        NativeBinding("drawSprites", api.draw_sprites),

        NativeBinding("touch", api.touch),
        NativeBinding(
            "random", api.random, (ArgSpec("max", marshal.number, 1.0),), aliases=("rnd",),
        ),
        NativeBinding("gWidth", api.width),
        NativeBinding("gHeight", api.height),
        NativeBinding("getFPS", api.fps),
        NativeBinding("stop", api.stop),
    ]
