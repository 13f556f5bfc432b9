import logging

import pytest
from lupa.lua54 import LuaRuntime

from luasketch.scripting import marshal
from luasketch.scripting.registrar import ArgSpec, FunctionRegistrar, NativeBinding


@pytest.fixture
def lua():
    return LuaRuntime(unpack_returned_tuples=True)


@pytest.fixture
def registrar(lua):
    return FunctionRegistrar(lua)


def test_arguments_arrive_in_order(lua, registrar):
    calls = []
    registrar.register_function(
        "record",
        lambda a, b, c: calls.append((a, b, c)),
        args=(
            ArgSpec("a", marshal.number, 0.0),
            ArgSpec("b", marshal.text, ""),
            ArgSpec("c", marshal.flag, False),
        ),
    )
    lua.execute("record(1, 'two', 1)")
    assert calls == [(1.0, "two", True)]


def test_missing_trailing_arguments_use_defaults(lua, registrar):
    calls = []
    registrar.register_function(
        "line",
        lambda x, thickness: calls.append((x, thickness)),
        args=(ArgSpec("x", marshal.number, 0.0), ArgSpec("thickness", marshal.number, 1.0)),
    )
    lua.execute("line(4)")
    assert calls == [(4.0, 1.0)]


def test_extra_arguments_are_ignored(lua, registrar):
    calls = []
    registrar.register_function("one", calls.append, args=(ArgSpec("x", marshal.number, 0.0),))
    lua.execute("one(1, 2, 3)")
    assert calls == [1.0]


def test_mismatch_uses_default_and_logs_debug(lua, registrar, caplog):
    calls = []
    registrar.register_function("one", calls.append, args=(ArgSpec("x", marshal.number, -1.0),))
    with caplog.at_level(logging.DEBUG, logger="luasketch.scripting.registrar"):
        lua.execute("one({})")
    assert calls == [-1.0]
    assert registrar.mismatch_count == 1
    assert "expected number, got table" in caplog.text


def test_tuple_result_becomes_multiple_values(lua, registrar):
    registrar.register_function("pair", lambda: (1, "b"))
    assert lua.eval("select('#', pair())") == 2
    lua.execute("first, second = pair()")
    assert lua.globals().first == 1
    assert lua.globals().second == "b"


def test_dict_result_becomes_table(lua, registrar):
    registrar.register_function("point", lambda: {"x": 1, "y": [1, 2, 3]})
    lua.execute("p = point(); n = #p.y")
    assert lua.globals().p.x == 1
    assert lua.globals().n == 3


def test_none_result_is_nil(lua, registrar):
    registrar.register_function("nothing", lambda: None)
    assert lua.eval("nothing() == nil") is True


def test_aliases_share_one_binding(lua, registrar):
    binding = NativeBinding("random", lambda: 4, aliases=("rnd",))
    registrar.register(binding)
    assert lua.eval("random() + rnd()") == 8
    assert registrar.installed["rnd"] is binding


def test_replacing_a_binding_warns(registrar, caplog):
    registrar.register_function("f", lambda: 1)
    with caplog.at_level(logging.WARNING):
        registrar.register_function("f", lambda: 2)
    assert "Replacing native binding: f" in caplog.text
