"""
Lua scripting bridge.

Embeds a Lua interpreter per run, exposes the native drawing API to
the script, and resumes the script's coroutine at render cadence.
"""

from .errors import (
    CallbackError,
    CompileError,
    GuestRuntimeError,
    InvocationError,
    ScriptError,
)
from .scheduler import CoroutineScheduler, CoroutineStatus, ExecutionCoroutine
from .session import InterpreterSession, SessionContext, SessionManager

__all__ = [
    "CallbackError",
    "CompileError",
    "GuestRuntimeError",
    "InvocationError",
    "ScriptError",
    "CoroutineScheduler",
    "CoroutineStatus",
    "ExecutionCoroutine",
    "InterpreterSession",
    "SessionContext",
    "SessionManager",
]
