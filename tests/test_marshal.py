import math

import pytest
from lupa.lua54 import LuaRuntime

from luasketch.scripting import marshal
from luasketch.scripting.marshal import Converted, Mismatch
from luasketch.ui.colors import Color


@pytest.fixture
def lua():
    return LuaRuntime(unpack_returned_tuples=True)


def test_number_accepts_numbers_and_numeric_strings():
    assert marshal.number(3) == Converted(3.0)
    assert marshal.number(2.5) == Converted(2.5)
    assert marshal.number(" 7 ") == Converted(7.0)


def test_number_rejects_other_values():
    for value in ("seven", None, True, object()):
        assert isinstance(marshal.number(value), Mismatch)


def test_text_stringifies_scalars():
    assert marshal.text("hi") == Converted("hi")
    assert marshal.text(12) == Converted("12")
    assert marshal.text(0.5) == Converted("0.5")
    assert marshal.text(False) == Converted("false")
    assert isinstance(marshal.text(None), Mismatch)


def test_flag_treats_zero_as_off():
    assert marshal.flag(0) == Converted(False)
    assert marshal.flag(1) == Converted(True)
    assert marshal.flag(True) == Converted(True)
    assert isinstance(marshal.flag("yes"), Mismatch)


def test_handle_requires_integral_number():
    assert marshal.handle(3) == Converted(3)
    assert marshal.handle(3.0) == Converted(3)
    assert isinstance(marshal.handle(3.5), Mismatch)
    assert isinstance(marshal.handle(None), Mismatch)


def test_color_from_packed_number():
    assert marshal.color(0x1099BB) == Converted(Color(0x1099BB))
    assert marshal.color(0x1FF0000) == Converted(Color(0xFF0000))


def test_color_from_positional_table(lua):
    table = lua.eval("{0.2, 0.4, 0.6}")
    assert marshal.color(table) == Converted(Color((51 << 16) | (102 << 8) | 153, 1.0))


def test_color_table_clamps_channels(lua):
    table = lua.eval("{2, -1, 0.5, 7}")
    assert marshal.color(table) == Converted(Color(0xFF0080, 1.0))


def test_color_table_missing_channel_is_mismatch(lua):
    outcome = marshal.color(lua.eval("{1, 0}"))
    assert isinstance(outcome, Mismatch)
    assert "color table" in outcome.describe()
    assert outcome.describe().endswith("got table")


def test_velocity_accepts_positional_and_named(lua):
    assert marshal.velocity(lua.eval("{1, -2}")) == Converted((1.0, -2.0))
    assert marshal.velocity(lua.eval("{vx = 3, vy = 4}")) == Converted((3.0, 4.0))
    assert marshal.velocity(lua.eval("{x = 5, y = 6}")) == Converted((5.0, 6.0))
    assert isinstance(marshal.velocity(lua.eval("{1}")), Mismatch)
    assert isinstance(marshal.velocity(5), Mismatch)


def test_guest_type_names(lua):
    assert marshal.guest_type_name(None) == "nil"
    assert marshal.guest_type_name(1) == "number"
    assert marshal.guest_type_name("s") == "string"
    assert marshal.guest_type_name(True) == "boolean"
    assert marshal.guest_type_name(lua.eval("{}")) == "table"
    assert marshal.guest_type_name(lua.eval("function() end")) == "function"


def test_non_finite_numbers_are_mismatches():
    for value in (math.inf, -math.inf, math.nan, "inf", "nan"):
        assert isinstance(marshal.number(value), Mismatch)
        assert isinstance(marshal.color(value), Mismatch)
        assert isinstance(marshal.handle(value), Mismatch)
