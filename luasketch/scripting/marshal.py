"""
Marshalling adapters.

Each adapter converts one guest value, as lupa hands it to Python,
into the host value a binding expects. Adapters never raise: they
return Converted on success or Mismatch when the value has the wrong
shape, and the registrar substitutes the documented default for a
mismatch.

Guest values arrive as:
- nil -> None, booleans -> bool, strings -> str
- integers -> int, floats -> float (NaN and infinities are mismatches)
- tables -> lupa table objects (indexable, 1-based)
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

from lupa.lua54 import lua_type

from ..ui.colors import Color


@dataclass(frozen=True)
class Converted:
    """Successful conversion."""
    value: Any


@dataclass(frozen=True)
class Mismatch:
    """The guest passed a value of the wrong shape."""
    expected: str
    got: Any

    def describe(self) -> str:
        return f"expected {self.expected}, got {guest_type_name(self.got)}"


Adapted = Union[Converted, Mismatch]
Adapter = Callable[[Any], Adapted]


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def is_table(value: Any) -> bool:
    """True for Lua tables handed over by lupa."""
    return lua_type(value) == "table"


def guest_type_name(value: Any) -> str:
    """Lua-style type name of a value, for diagnostics."""
    lua_kind = lua_type(value)
    if lua_kind is not None:
        return lua_kind
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, (str, bytes)):
        return "string"
    return "userdata"


def table_get(table: Any, key: Union[int, str]) -> Any:
    """Read a table field; missing fields read as None."""
    try:
        return table[key]
    except (KeyError, IndexError, TypeError):
        return None


def _as_float(value: Any) -> Optional[float]:
    """Lua's number coercion: numbers and numeric strings, finite only."""
    if isinstance(value, bool):
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", "replace")
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(result):
        return None
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Adapters
# ─────────────────────────────────────────────────────────────────────────────

def number(value: Any) -> Adapted:
    """Any guest number (or numeric string) as a host float."""
    result = _as_float(value)
    if result is None:
        return Mismatch("number", value)
    return Converted(result)


def text(value: Any) -> Adapted:
    """Strings pass through; numbers and booleans are stringified."""
    if isinstance(value, str):
        return Converted(value)
    if isinstance(value, bytes):
        return Converted(value.decode("utf-8", "replace"))
    if isinstance(value, bool):
        return Converted("true" if value else "false")
    if isinstance(value, int):
        return Converted(str(value))
    if isinstance(value, float):
        return Converted(f"{value:.14g}")
    return Mismatch("string", value)


def flag(value: Any) -> Adapted:
    """Outline-style switches: booleans, or numbers where 0 means off."""
    if isinstance(value, bool):
        return Converted(value)
    result = _as_float(value)
    if result is None:
        return Mismatch("boolean or number", value)
    return Converted(result != 0)


def handle(value: Any) -> Adapted:
    """Arena handle: an integral number."""
    result = _as_float(value)
    if result is None or not result.is_integer():
        return Mismatch("handle", value)
    return Converted(int(result))


def _channels(table: Any) -> Optional[Tuple[float, float, float, float]]:
    """Read {r, g, b, a?} either positionally or by name."""
    keys = ((1, "r"), (2, "g"), (3, "b"), (4, "a"))
    channels = []
    for position, name in keys:
        raw = table_get(table, position)
        if raw is None:
            raw = table_get(table, name)
        if raw is None:
            if name == "a":
                channels.append(1.0)
                continue
            return None
        converted = _as_float(raw)
        if converted is None:
            return None
        channels.append(converted)
    return tuple(channels)


def color(value: Any) -> Adapted:
    """
    A packed 0xRRGGBB number, or a table of [0, 1] channels.

    Tables pack as round(r*255)<<16 | round(g*255)<<8 | round(b*255)
    with alpha defaulting to 1.0 when the fourth channel is absent.
    """
    if is_table(value):
        channels = _channels(value)
        if channels is None:
            return Mismatch("color table {r, g, b, a?}", value)
        return Converted(Color.from_channels(*channels))

    packed = _as_float(value)
    if packed is None:
        return Mismatch("color", value)
    return Converted(Color(int(packed) & 0xFFFFFF))


def velocity(value: Any) -> Adapted:
    """A {vx, vy} table, positional or named (vx/vy or x/y)."""
    if not is_table(value):
        return Mismatch("velocity table {vx, vy}", value)

    result = []
    for position, names in ((1, ("vx", "x")), (2, ("vy", "y"))):
        raw = table_get(value, position)
        for name in names:
            if raw is not None:
                break
            raw = table_get(value, name)
        converted = _as_float(raw)
        if converted is None:
            return Mismatch("velocity table {vx, vy}", value)
        result.append(converted)
    return Converted((result[0], result[1]))

