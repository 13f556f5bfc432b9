import pygame
import pytest

from luasketch.config import Config
from luasketch.core.app import Application
from luasketch.input.manager import HostAction
from luasketch.scripting.scheduler import CoroutineStatus
from luasketch.source import ScriptSource


@pytest.fixture
def app(tmp_path):
    script = tmp_path / "sketch.lua"
    script.write_text("""
    setBackgroundColor(0x000000)
    while true do
      clear()
      drawRect(0, 0, 10, 10, 0xFF0000)
      printAt(20, 20, "hello")
      update()
    end
    """)
    application = Application(Config(native_width=64, native_height=48), ScriptSource(script))
    yield application
    application.cleanup()


def frame(app):
    app.sessions.tick()
    app._render()


def test_frame_composes_script_drawing(app):
    app.run_script()
    frame(app)

    surface = app.renderer.get_surface()
    assert surface.get_at((5, 5))[:3] == (255, 0, 0)
    assert surface.get_at((60, 5))[:3] == (0, 0, 0)
    assert app.sessions.status is CoroutineStatus.SUSPENDED


def test_stop_and_rerun_actions(app):
    app.run_script()
    first = app.sessions.current

    app._handle_action(HostAction.STOP)
    assert app.sessions.current is None
    assert not first.active

    app._handle_action(HostAction.RUN)
    assert app.sessions.current is not None
    assert app.sessions.current is not first


def test_script_error_is_shown_not_raised(app, tmp_path):
    broken = tmp_path / "broken.lua"
    broken.write_text("update()\nerror('kaput')")
    app.source = ScriptSource(broken)
    app.run_script()
    frame(app)
    frame(app)

    assert app.sessions.status is CoroutineStatus.FAILED
    assert "kaput" in app.diagnostics.latest.message


def test_quit_action_stops_loop(app):
    app.running = True
    app._handle_action(HostAction.QUIT)
    assert not app.running


def test_next_example_switches_source(app):
    app._handle_action(HostAction.NEXT_EXAMPLE)
    assert app.source.example is not None
    assert app.sessions.current is not None
    assert "luasketch" in pygame.display.get_caption()[0]
