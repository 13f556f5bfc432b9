import pytest

from luasketch.__main__ import build_config, main, parse_args, resolve_source
from luasketch.config import DEFAULT_CONFIG, DEV_CONFIG
from luasketch.source import ScriptSource, example_path, list_examples


def test_defaults():
    args = parse_args([])
    config = build_config(args)
    assert args.script is None
    assert config.target_fps == 60
    assert config.scale_factor == 1
    assert not config.dev_mode
    assert resolve_source(args) is None


def test_flags_reach_config():
    args = parse_args(["sketch.lua", "--dev", "--scale", "2", "--fps", "30", "--assets", "img"])
    config = build_config(args)
    assert config.dev_mode and config.show_fps
    assert config.scale_factor == 2
    assert config.window_size == (1600, 1200)
    assert config.target_fps == 30
    assert config.assets_dir == "img"
    assert resolve_source(args).path.name == "sketch.lua"


def test_config_presets():
    assert DEV_CONFIG.show_fps
    assert not DEFAULT_CONFIG.show_fps
    assert DEFAULT_CONFIG.native_size == (800, 600)


def test_script_and_example_are_exclusive():
    with pytest.raises(SystemExit):
        parse_args(["a.lua", "--example", "particles"])


def test_invalid_scale_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--scale", "3"])


def test_list_examples_prints_names(capsys):
    assert main(["--list-examples"]) == 0
    printed = capsys.readouterr().out.split()
    assert printed == list_examples()
    assert "particles" in printed


def test_unknown_example_exits_with_error():
    assert main(["--example", "no-such-example"]) == 2


def test_missing_script_exits_with_error(tmp_path):
    assert main([str(tmp_path / "missing.lua")]) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Script sources
# ─────────────────────────────────────────────────────────────────────────────

def test_bundled_examples_exist():
    names = list_examples()
    assert {"particles", "bounce", "countdown", "callbacks", "stop"} <= set(names)
    assert example_path("particles").suffix == ".lua"


def test_example_lookup_error():
    with pytest.raises(KeyError):
        example_path("nope")


def test_source_rereads_file(tmp_path):
    path = tmp_path / "sketch.lua"
    path.write_text("x = 1")
    source = ScriptSource(path)
    assert source.read() == "x = 1"
    path.write_text("x = 2")
    assert source.read() == "x = 2"
    assert source.label == "sketch.lua"


def test_next_example_wraps_around():
    names = list_examples()
    source = ScriptSource.from_example(names[-1])
    assert source.next_example().example == names[0]
    assert ScriptSource.from_example(names[0]).next_example().example == names[1]


def test_file_source_next_example_starts_at_first(tmp_path):
    source = ScriptSource(tmp_path / "a.lua")
    assert source.next_example().example == list_examples()[0]


@pytest.mark.parametrize("name", list_examples())
def test_bundled_examples_compile_and_start(sketch, name):
    session = sketch.run(ScriptSource.from_example(name).read())
    assert session is not None
    sketch.tick(3)
    assert sketch.errors == []
