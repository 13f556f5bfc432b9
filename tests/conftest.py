import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from luasketch.core.canvas import RenderSurface
from luasketch.core.diagnostics import DiagnosticLog
from luasketch.core.frame_clock import FrameClock
from luasketch.core.timers import TimerQueue
from luasketch.input.touch import PointerTracker
from luasketch.scene.sprites import SpriteScene
from luasketch.scene.textures import TextureLibrary
from luasketch.scripting.session import SessionManager


class ManualClock:
    """Time source the tests advance by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSurface(RenderSurface):
    """RenderSurface that records every call instead of drawing."""

    def __init__(self, size=(800, 600)):
        self._size = size
        self.calls = []
        self.background = None
        self.text = None
        self.clears = 0
        self.resets = 0

    @property
    def width(self):
        return self._size[0]

    @property
    def height(self):
        return self._size[1]

    def draw_circle(self, x, y, radius, color, outline=False):
        self.calls.append(("circle", x, y, radius, color, outline))

    def draw_rect(self, x, y, width, height, color, outline=False):
        self.calls.append(("rect", x, y, width, height, color, outline))

    def draw_line(self, x1, y1, x2, y2, color, thickness=1.0):
        self.calls.append(("line", x1, y1, x2, y2, color, thickness))

    def draw_polygon(self, points, color, outline=False):
        self.calls.append(("polygon", list(points), color, outline))

    def clear(self):
        self.clears += 1
        self.calls.append(("clear",))

    def set_background(self, color):
        self.background = color

    def set_text(self, x, y, text):
        self.text = (x, y, text)

    def clear_text(self):
        self.text = None

    def reset(self):
        self.resets += 1
        self.calls.clear()
        self.background = None
        self.text = None

    def drawn(self, kind):
        return [call for call in self.calls if call[0] == kind]


class Sketch:
    """A SessionManager wired to fakes, plus the fakes themselves."""

    def __init__(self):
        self.time = ManualClock()
        self.surface = RecordingSurface()
        self.scene = SpriteScene()
        self.textures = TextureLibrary()
        self.pointer = PointerTracker((800, 600))
        self.timers = TimerQueue(self.time)
        self.clock = FrameClock(self.time)
        self.diagnostics = DiagnosticLog()
        self.random_value = 0.5
        self.manager = SessionManager(
            self.surface,
            self.scene,
            self.textures,
            self.pointer,
            self.timers,
            self.clock,
            report=self.diagnostics,
            rng=lambda: self.random_value,
        )

    def run(self, source):
        return self.manager.run(source)

    def tick(self, times=1, advance=1 / 60):
        for _ in range(times):
            self.time.advance(advance)
            self.manager.tick()

    def lua_global(self, name):
        return self.manager.current.runtime.globals()[name]

    @property
    def status(self):
        return self.manager.status

    @property
    def errors(self):
        return self.diagnostics.entries


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def sketch():
    return Sketch()
