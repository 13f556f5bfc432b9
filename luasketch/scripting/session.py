"""
Interpreter session manager.

Owns one Lua runtime per run. Starting a run always retires the
previous session first: its coroutine is marked terminal, its sleep
timer cancelled, its sprites leave the scene, and only then is the
new session made current.

Usage:
    manager = SessionManager(canvas, scene, textures, pointer, timers, clock,
                             report=diagnostics)
    manager.run(source)        # compile + first resume
    manager.tick()             # once per render tick
    manager.stop_session()
"""

import itertools
import logging
import random
from enum import Enum
from typing import Any, Callable, List, Optional

from lupa.lua54 import LuaError, LuaRuntime

from ..core.canvas import RenderSurface
from ..core.frame_clock import FrameClock
from ..core.timers import TimerQueue
from ..input.touch import PointerTracker
from ..scene.arena import HandleArena
from ..scene.sprites import Sprite, SpriteScene
from ..scene.textures import TextureLibrary, normalize_path
from .bindings import ScriptAPI, build_bindings
from .errors import CompileError, ScriptError
from .registrar import FunctionRegistrar
from .scheduler import (
    GUEST_PRELUDE,
    CoroutineScheduler,
    CoroutineStatus,
    ExecutionCoroutine,
    request_after,
    request_next_tick,
)

logger = logging.getLogger(__name__)

CHUNK_NAME = "=script"


def _deny_private(obj: Any, name: Any, is_setting: bool) -> Any:
    """lupa attribute filter: scripts never see underscore attributes."""
    if isinstance(name, str) and not name.startswith("_"):
        return name
    raise AttributeError(f"access to {name!r} is not allowed")


# ─────────────────────────────────────────────────────────────────────────────
# Per-run State
# ─────────────────────────────────────────────────────────────────────────────

class SessionContext:
    """
    Mutable state belonging to one run.

    Attributes:
        sprites: Sprite handles
        images: Texture handles
        stop_requested: Set by the guest's stop()
    """

    def __init__(self, surface: RenderSurface, scene: SpriteScene, textures: TextureLibrary):
        self.surface = surface
        self.scene = scene
        self.textures = textures
        self.sprites: HandleArena[Sprite] = HandleArena()
        self.images: HandleArena[Any] = HandleArena()
        self._image_handles = {}
        self.stop_requested = False
        self.torn_down = False

    def create_sprite(self) -> int:
        sprite = Sprite()
        self.scene.add(sprite)
        return self.sprites.allocate(sprite)

    def sprite(self, handle: Any) -> Optional[Sprite]:
        return self.sprites.get(handle)

    def load_image(self, path: str) -> Optional[int]:
        """
        Resolve a preloaded texture to a handle.

        Loading the same path twice returns the same handle.

        Returns:
            Texture handle, or None when the library has no such path
        """
        key = normalize_path(path)
        if key in self._image_handles:
            return self._image_handles[key]

        texture = self.textures.get(key)
        if texture is None:
            logger.debug(f"loadImage: no preloaded texture for {path!r}")
            return None

        handle = self.images.allocate(texture)
        self._image_handles[key] = handle
        return handle

    def image(self, handle: Any) -> Any:
        return self.images.get(handle)

    def advance_sprites(self, step: float) -> None:
        bounds = (self.surface.width, self.surface.height)
        for sprite in self.sprites:
            sprite.advance(step, bounds)

    def teardown(self) -> None:
        """Remove this run's sprites from the scene and forget all handles."""
        if self.torn_down:
            return
        for sprite in self.sprites.clear():
            self.scene.remove(sprite)
        self.images.clear()
        self._image_handles.clear()
        self.surface.clear_text()
        self.torn_down = True


# ─────────────────────────────────────────────────────────────────────────────
# Session
# ─────────────────────────────────────────────────────────────────────────────

class SessionState(Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class InterpreterSession:
    """
    One live guest environment.

    Attributes:
        generation: Increasing number identifying the run
        runtime: The lupa LuaRuntime (None once closed)
        context: Per-run SessionContext
        bindings: Guest names of the installed native functions
        coroutine: The script's ExecutionCoroutine
        scheduler: Scheduler driving the coroutine
    """

    def __init__(
        self,
        generation: int,
        runtime: LuaRuntime,
        host: Any,
        context: SessionContext,
        surface: RenderSurface,
        bindings: List[str],
    ):
        self.generation = generation
        self.runtime = runtime
        self.host = host
        self.context = context
        self.surface = surface
        self.bindings = bindings
        self.state = SessionState.ACTIVE
        self.coroutine: Optional[ExecutionCoroutine] = None
        self.scheduler: Optional[CoroutineScheduler] = None

    def __repr__(self) -> str:
        return f"<InterpreterSession #{self.generation} {self.state.value}>"

    @property
    def active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def close(self) -> None:
        """Retire the session. Safe to call more than once."""
        if not self.active:
            return
        self.state = SessionState.CLOSED
        if self.scheduler is not None:
            self.scheduler.cancel()
        self.context.teardown()
        self.host = None
        self.runtime = None
        logger.info(f"Session #{self.generation} closed")


# ─────────────────────────────────────────────────────────────────────────────
# Manager
# ─────────────────────────────────────────────────────────────────────────────

class SessionManager:
    """Creates, drives and retires interpreter sessions; at most one is current."""

    def __init__(
        self,
        surface: RenderSurface,
        scene: SpriteScene,
        textures: TextureLibrary,
        pointer: PointerTracker,
        timers: TimerQueue,
        clock: FrameClock,
        report: Optional[Callable[[ScriptError], None]] = None,
        sprite_step: float = 1.0,
        rng: Callable[[], float] = random.random,
    ):
        """
        Initialize the manager.

        Args:
            surface: Drawing surface scripts draw on
            scene: Scene receiving script sprites
            textures: Preloaded textures for loadImage()
            pointer: Pointer state for touch()
            timers: Host timer queue, polled in tick()
            clock: Frame clock, advanced in tick()
            report: Diagnostic sink for script errors
            sprite_step: Fixed step used by updateSprites()
            rng: Source of random() in [0, 1)
        """
        self.surface = surface
        self.scene = scene
        self.textures = textures
        self.pointer = pointer
        self.timers = timers
        self.clock = clock
        self.report = report or (lambda error: logger.error(error.format()))
        self.sprite_step = sprite_step
        self.rng = rng

        self._generations = itertools.count(1)
        self._current: Optional[InterpreterSession] = None

    @property
    def current(self) -> Optional[InterpreterSession]:
        return self._current

    @property
    def status(self) -> Optional[CoroutineStatus]:
        """Status of the current session's coroutine, if any."""
        if self._current is None or self._current.coroutine is None:
            return None
        return self._current.coroutine.status

    def owns(self, session: Optional[InterpreterSession]) -> bool:
        """True only for the current, active session."""
        return session is not None and session is self._current and session.active

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def start_session(self, source: str) -> InterpreterSession:
        """
        Retire the current session and prepare a new one for `source`.

        The returned session's coroutine is NOT_STARTED.

        Raises:
            CompileError: The source does not compile (already reported)
        """
        self.stop_session()
        self.surface.reset()

        generation = next(self._generations)
        runtime = LuaRuntime(
            unpack_returned_tuples=True,
            register_eval=False,
            register_builtins=False,
            attribute_filter=_deny_private,
        )
        # Scripts only see the native API, not the python helper module
        runtime.globals()["python"] = None
        host = runtime.eval(GUEST_PRELUDE)(request_next_tick, request_after)

        context = SessionContext(self.surface, self.scene, self.textures)
        api = ScriptAPI(
            context=context,
            surface=self.surface,
            pointer=self.pointer,
            clock=self.clock,
            rng=self.rng,
            sprite_step=self.sprite_step,
        )
        registrar = FunctionRegistrar(runtime)
        registrar.register_all(build_bindings(api))

        try:
            entry = runtime.compile(source, name=CHUNK_NAME)
        except LuaError as e:
            error = CompileError(str(e))
            self.report(error)
            context.teardown()
            raise error from e

        session = InterpreterSession(
            generation, runtime, host, context, self.surface, sorted(registrar.installed),
        )
        session.coroutine = ExecutionCoroutine(entry, host["spawn"](entry))
        session.scheduler = CoroutineScheduler(
            session.coroutine,
            host,
            context,
            self.surface,
            self.timers,
            self.clock,
            guard=lambda: self.owns(session),
            report=self.report,
        )

        self._current = session
        self.clock.reset_delta()
        logger.info(f"Session #{generation} started ({len(session.bindings)} native functions)")
        return session

    def run(self, source: str) -> Optional[InterpreterSession]:
        """
        Start a session and perform its first resume.

        Never raises for script faults.

        Returns:
            The new session, or None if the source failed to compile
        """
        try:
            session = self.start_session(source)
        except CompileError:
            return None
        session.scheduler.run()
        return session

    def stop_session(self) -> None:
        """Retire the current session, if any. Idempotent."""
        session = self._current
        if session is None:
            return
        self._current = None
        session.close()

    def tick(self) -> None:
        """
        Host render-tick entry point.

        Advances the clock, fires due timers (delayed resumes), then
        resumes a coroutine waiting for the next tick.
        """
        self.clock.tick()
        self.timers.poll()
        session = self._current
        if session is not None and session.scheduler is not None:
            session.scheduler.tick()
