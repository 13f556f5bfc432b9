"""
Main application class.

Handles the main loop, event processing, running scripts and
composing each frame.
"""

import logging
from pathlib import Path
from typing import Optional

import pygame

from ..config import Config
from ..input.manager import HostAction, InputManager
from ..input.touch import PointerTracker
from ..scene.sprites import SpriteScene
from ..scene.textures import TextureLibrary
from ..scripting.session import SessionManager
from ..source import ScriptSource, list_examples
from ..ui.colors import COLORS, COLORS_ALPHA
from ..ui.fonts import FontManager, fonts
from .canvas import Canvas
from .diagnostics import DiagnosticLog
from .frame_clock import FrameClock
from .renderer import Renderer
from .timers import TimerQueue

logger = logging.getLogger(__name__)

WINDOW_TITLE = "luasketch"


class Application:
    """
    Main application controller.

    Owns the render loop and wires the scripting session manager to
    the canvas, sprite scene, pointer and timers. Each frame: limit the
    frame rate, process events, tick the session, render.
    """

    def __init__(self, config: Config, source: Optional[ScriptSource] = None):
        """
        Initialize the application.

        Args:
            config: Application configuration
            source: Script to run at startup (None = start idle)
        """
        self.config = config
        self.source = source
        self.running = False

        # Initialize Pygame
        pygame.init()

        # Create renderer (handles display and scaling)
        self.renderer = Renderer(config)
        self.renderer.set_title(self._title())

        # Input
        self.input_manager = InputManager(config)
        self.pointer = PointerTracker(config.native_size, config.scale_factor)

        # Drawing surface and sprites
        self.canvas = Canvas(config.native_size, config.background_color)
        self.scene = SpriteScene()
        self.textures = TextureLibrary()
        if config.assets_dir:
            self.textures.preload(Path(config.assets_dir))

        # Timing
        self.clock = pygame.time.Clock()
        self.frame_clock = FrameClock()
        self.timers = TimerQueue()

        # Scripting
        self.diagnostics = DiagnosticLog()
        self.sessions = SessionManager(
            self.canvas,
            self.scene,
            self.textures,
            self.pointer,
            self.timers,
            self.frame_clock,
            report=self.diagnostics,
            sprite_step=config.sprite_step,
        )

    def _title(self) -> str:
        if self.source is None:
            return WINDOW_TITLE
        return f"{WINDOW_TITLE} - {self.source.label}"

    # ─────────────────────────────────────────────────────────────────────────
    # Script Control
    # ─────────────────────────────────────────────────────────────────────────

    def run_script(self) -> None:
        """(Re)read the current source and start a new session with it."""
        if self.source is None:
            logger.warning("No script to run")
            return
        try:
            text = self.source.read()
        except OSError as e:
            logger.error(f"Could not read script {self.source.path}: {e}")
            return

        logger.info(f"Running {self.source.label}")
        self.diagnostics.clear()
        self.sessions.run(text)

    def stop_script(self) -> None:
        if self.sessions.current is not None:
            logger.info("Stopping script")
        self.sessions.stop_session()

    def next_example(self) -> None:
        """Switch to the next bundled example and run it."""
        if self.source is not None:
            self.source = self.source.next_example()
        else:
            names = list_examples()
            if not names:
                logger.warning("No bundled examples found")
                return
            self.source = ScriptSource.from_example(names[0])
        self.renderer.set_title(self._title())
        self.run_script()

    # ─────────────────────────────────────────────────────────────────────────
    # Main Loop
    # ─────────────────────────────────────────────────────────────────────────

    def run(self) -> None:
        """Main application loop."""
        self.running = True

        if self.source is not None:
            self.run_script()

        while self.running:
            self.clock.tick(self.config.target_fps)

            # Process events
            self._process_events()
            if not self.running:
                break

            # Resume the script (draws land before this frame is presented)
            self.sessions.tick()

            # Render
            self._render()

    def _process_events(self) -> None:
        """Process pygame events: pointer first, then host actions."""
        for event in pygame.event.get():
            if self.pointer.handle_pygame_event(event):
                continue

            action = self.input_manager.process_event(event)
            if action:
                self._handle_action(action)

    def _handle_action(self, action: HostAction) -> None:
        """
        Handle a host action.

        Args:
            action: Action to handle
        """
        if action == HostAction.QUIT:
            self.running = False
        elif action == HostAction.RUN:
            self.run_script()
        elif action == HostAction.STOP:
            self.stop_script()
        elif action == HostAction.NEXT_EXAMPLE:
            self.next_example()

    # ─────────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────────

    def _render(self) -> None:
        """Compose the frame: background, drawings, sprites, text, overlay."""
        surface = self.renderer.get_surface()

        self.canvas.render_background(surface)
        self.canvas.render_layer(surface)
        self.scene.render(surface)
        self.canvas.render_text(surface)

        if self.config.show_fps:
            self._render_fps(surface)
        self._render_diagnostic(surface)

        # Present the frame (handles scaling)
        self.renderer.present()

    def _render_fps(self, surface: pygame.Surface) -> None:
        """Render FPS counter in the top-right corner."""
        font = fonts.get_font(FontManager.SIZE_SMALL)
        fps_text = font.render(f"FPS: {self.frame_clock.fps:.1f}", True, COLORS["text_primary"])
        surface.blit(fps_text, (surface.get_width() - fps_text.get_width() - 5, 5))

    def _render_diagnostic(self, surface: pygame.Surface) -> None:
        """Render the latest script error along the bottom edge."""
        error = self.diagnostics.latest
        if error is None:
            return

        font = fonts.get_font(FontManager.SIZE_SMALL)
        text = font.render(f"{error.kind}: {error.message}", True, COLORS["error"])

        height = text.get_height() + 8
        band = pygame.Surface((surface.get_width(), height), pygame.SRCALPHA)
        band.fill(COLORS_ALPHA["overlay_dark"])
        y = surface.get_height() - height
        surface.blit(band, (0, y))
        surface.blit(text, (5, y + 4))

    def cleanup(self) -> None:
        """Clean up resources."""
        self.sessions.stop_session()
        self.timers.cancel_all()

        # Cleanup renderer
        self.renderer.cleanup()

        # Cached fonts die with pygame
        fonts.clear()
        pygame.quit()
