"""
Script errors.

Guest failures are caught where the host crosses into Lua and turned
into one of these. They are reported to the diagnostic sink; the
host loop never sees them raised.
"""

from typing import Optional


class ScriptError(Exception):
    """Base class for guest failures caught at the host boundary."""

    kind = "ScriptError"

    def __init__(self, message: str, traceback: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.traceback = traceback

    def format(self) -> str:
        """Message with the guest traceback appended when known."""
        text = f"{self.kind}: {self.message}"
        if self.traceback and self.traceback != self.message:
            text = f"{text}\n{self.traceback}"
        return text


class CompileError(ScriptError):
    """Source text failed to compile. No session was created."""

    kind = "CompileError"


class InvocationError(ScriptError):
    """The first resume failed before the script yielded once."""

    kind = "InvocationError"


class GuestRuntimeError(ScriptError):
    """A resume failed after at least one successful yield."""

    kind = "RuntimeError"


class CallbackError(ScriptError):
    """A setup/update/draw frame callback failed."""

    kind = "CallbackError"
