"""
Coroutine scheduler.

A script runs as one Lua coroutine. The host resumes it at most once
per render tick; the script hands control back by calling update()
(resume me next tick) or sleep(seconds) (resume me when a host timer
fires). Both are defined in Lua by the guest prelude below, because a
Python function cannot yield a Lua coroutine.

State machine:

    NOT_STARTED -> RUNNING -> SUSPENDED -> RUNNING -> ...
                           -> COMPLETED   (returned, or stop() honoured)
                           -> FAILED      (error, never retried)
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Union

from lupa.lua54 import LuaError

from ..core.frame_clock import FrameClock
from ..core.timers import Timer, TimerQueue
from .errors import CallbackError, GuestRuntimeError, InvocationError, ScriptError
from .marshal import Mismatch, number

logger = logging.getLogger(__name__)


class CoroutineStatus(Enum):
    """Lifecycle of an ExecutionCoroutine."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (CoroutineStatus.COMPLETED, CoroutineStatus.FAILED)


# ─────────────────────────────────────────────────────────────────────────────
# Suspension Requests
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NextTick:
    """Resume at the next render tick."""


@dataclass(frozen=True)
class After:
    """Resume once a host timer of `seconds` has fired."""
    seconds: float


SuspensionRequest = Union[NextTick, After]

NEXT_TICK = NextTick()


def request_next_tick() -> NextTick:
    """Called by the prelude's update() to build its yield value."""
    return NEXT_TICK


def request_after(seconds: Any = None) -> After:
    """
    Called by the prelude's sleep() to build its yield value.

    math.huge sleeps until the session ends; other bad durations are 0.
    """
    if isinstance(seconds, float) and seconds == math.inf:
        return After(math.inf)
    outcome = number(seconds)
    if isinstance(outcome, Mismatch):
        return After(0.0)
    return After(max(0.0, outcome.value))


# The prelude runs once per session, before the script is compiled.
# It receives the two request constructors above and returns the
# helper table the scheduler drives the coroutine through.
GUEST_PRELUDE = """
function(request_next_tick, request_after)
  local yield, create, resume, status = coroutine.yield, coroutine.create, coroutine.resume, coroutine.status
  local isyieldable, traceback, xpcall = coroutine.isyieldable, debug.traceback, xpcall
  local rawget, rawset, type, tostring = rawget, rawset, type, tostring
  local pack, unpack = table.pack, table.unpack

  local primitives = {}
  local overrides = {}
  local defined = {}

  function primitives.update()
    return yield(request_next_tick())
  end

  function primitives.sleep(seconds)
    return yield(request_after(seconds))
  end

  -- A script may define its own update(). Inside the main coroutine
  -- calling it still suspends until the next tick.
  local function suspending(fn)
    return function(...)
      local results = pack(fn(...))
      if isyieldable() then
        yield(request_next_tick())
      end
      return unpack(results, 1, results.n)
    end
  end

  setmetatable(_G, {
    __index = function(_, key)
      local value = overrides[key]
      if value == nil then
        value = primitives[key]
      end
      return value
    end,
    __newindex = function(t, key, value)
      if primitives[key] == nil then
        rawset(t, key, value)
        return
      end
      defined[key] = value
      if key == "update" and type(value) == "function" then
        value = suspending(value)
      end
      overrides[key] = value
    end,
  })

  local host = {}

  -- Threads never cross into Python bare; the box table does.
  function host.spawn(entry)
    return {create(entry)}
  end

  function host.resume(box)
    local co = box[1]
    local ok, request = resume(co)
    if not ok then
      return false, tostring(request), traceback(co)
    end
    return true, status(co), request
  end

  function host.call(fn, ...)
    local message
    local ok = xpcall(fn, function(err)
      message = tostring(err)
      return message
    end, ...)
    if ok then
      return true, nil, nil
    end
    return false, message, traceback(message, 2)
  end

  function host.callback(name)
    local value = defined[name]
    if value == nil then
      value = rawget(_G, name)
    end
    if type(value) ~= "function" then
      return nil
    end
    return value
  end

  return host
end
"""


# ─────────────────────────────────────────────────────────────────────────────
# Execution Coroutine
# ─────────────────────────────────────────────────────────────────────────────

class ExecutionCoroutine:
    """
    The script's entry point wrapped in a resumable Lua thread.

    Attributes:
        entry: Compiled main chunk
        thread: Table boxing the Lua coroutine created from the chunk
        status: Current CoroutineStatus
        history: Every status the coroutine has entered, in order
        resume_count: Number of resumes performed
        suspension: Reason for the current suspension
        error: Captured failure once FAILED
        stopped: True when ended by stop() rather than by returning
    """

    def __init__(self, entry: Any, thread: Any):
        self.entry = entry
        self.thread = thread
        self.status = CoroutineStatus.NOT_STARTED
        self.history: List[CoroutineStatus] = []
        self.resume_count = 0
        self.suspension: Optional[SuspensionRequest] = None
        self.error: Optional[ScriptError] = None
        self.stopped = False

    def transition(self, status: CoroutineStatus) -> None:
        logger.debug(f"Coroutine {self.status.value} -> {status.value}")
        self.status = status
        self.history.append(status)

    @property
    def terminal(self) -> bool:
        return self.status.terminal


@dataclass
class FrameCallbacks:
    """Global setup/update/draw functions a finished script left behind."""
    setup: Any = None
    update: Any = None
    draw: Any = None
    setup_called: bool = False


# ─────────────────────────────────────────────────────────────────────────────
# Scheduler
# ─────────────────────────────────────────────────────────────────────────────

class CoroutineScheduler:
    """
    Drives one ExecutionCoroutine from the host's render ticks and timers.

    Never resumes twice in the same frame, never resumes re-entrantly,
    and never resumes once `guard` says the session has been retired.
    """

    def __init__(
        self,
        coroutine: ExecutionCoroutine,
        host: Any,
        context: Any,
        surface: Any,
        timers: TimerQueue,
        clock: FrameClock,
        guard: Callable[[], bool],
        report: Callable[[ScriptError], None],
    ):
        """
        Initialize the scheduler.

        Args:
            coroutine: Coroutine to drive
            host: Helper table returned by the guest prelude
            context: SessionContext holding the stop flag
            surface: Drawing surface, cleared before frame callbacks
            timers: Host timer queue for sleep()
            clock: Frame clock; its frame counter is the tick identity
            guard: Returns False once the owning session is retired
            report: Diagnostic sink
        """
        self.coroutine = coroutine
        self._host = host
        self._context = context
        self._surface = surface
        self._timers = timers
        self._clock = clock
        self._guard = guard
        self._report = report

        self._pending_timer: Optional[Timer] = None
        self._last_entry_frame: Optional[int] = None
        self.callbacks: Optional[FrameCallbacks] = None
        self.callback_error: Optional[ScriptError] = None

    @property
    def status(self) -> CoroutineStatus:
        return self.coroutine.status

    @property
    def waiting_on_timer(self) -> bool:
        return self._pending_timer is not None and self._pending_timer.pending

    # ─────────────────────────────────────────────────────────────────────────
    # Entry Points
    # ─────────────────────────────────────────────────────────────────────────

    def run(self) -> CoroutineStatus:
        """First resume, with no arguments."""
        if self.coroutine.status is not CoroutineStatus.NOT_STARTED:
            logger.warning(f"run() on a coroutine that is already {self.status.value}")
            return self.status
        self.resume()
        return self.status

    def tick(self) -> None:
        """
        Called once per render tick.

        Resumes a coroutine suspended for the next tick, or runs the
        frame callbacks once the coroutine has completed.
        """
        if not self._guard():
            return
        co = self.coroutine
        if co.status is CoroutineStatus.SUSPENDED and isinstance(co.suspension, NextTick):
            self.resume()
        elif self.callbacks is not None:
            self._run_callbacks()

    def resume(self) -> bool:
        """
        Resume the coroutine if that is allowed right now.

        Returns:
            True if a resume was performed
        """
        co = self.coroutine
        if co.terminal or co.status is CoroutineStatus.RUNNING:
            return False
        if not self._guard():
            logger.debug("Resume suppressed: session no longer current")
            return False
        if self._last_entry_frame == self._clock.frame:
            logger.debug(f"Resume deferred: already entered the guest in frame {self._clock.frame}")
            return False

        self._resume()
        return True

    def cancel(self) -> None:
        """
        End scheduling for good (session stopped or replaced).

        Cancels a pending sleep timer and marks a live coroutine as
        stopped so nothing can resume it.
        """
        self._cancel_timer()
        self.callbacks = None
        self._host = None
        co = self.coroutine
        if not co.terminal:
            co.stopped = True
            co.suspension = None
            co.transition(CoroutineStatus.COMPLETED)

    # ─────────────────────────────────────────────────────────────────────────
    # Resume
    # ─────────────────────────────────────────────────────────────────────────

    def _resume(self) -> None:
        co = self.coroutine
        first = co.status is CoroutineStatus.NOT_STARTED

        co.transition(CoroutineStatus.RUNNING)
        co.resume_count += 1
        co.suspension = None
        self._last_entry_frame = self._clock.frame

        try:
            ok, state, payload = self._host["resume"](co.thread)
        except LuaError as e:
            ok, state, payload = False, str(e), None

        if not ok:
            error_type = InvocationError if first else GuestRuntimeError
            self._fail(error_type(state, traceback=payload))
            return

        if state == "dead":
            co.transition(CoroutineStatus.COMPLETED)
            if self._context.stop_requested:
                co.stopped = True
                logger.info("Script stopped")
            else:
                logger.info(f"Script completed after {co.resume_count} resume(s)")
                self._detect_callbacks()
            return

        if self._context.stop_requested:
            co.stopped = True
            co.transition(CoroutineStatus.COMPLETED)
            logger.info("Script stopped")
            return

        if not isinstance(payload, (NextTick, After)):
            # A bare coroutine.yield() in script code
            payload = NEXT_TICK

        co.suspension = payload
        co.transition(CoroutineStatus.SUSPENDED)
        if isinstance(payload, After):
            self._pending_timer = self._timers.call_later(payload.seconds, self._on_timer)

    def _on_timer(self) -> None:
        """Timer callback for sleep(); triggers exactly one resume."""
        self._pending_timer = None
        if not self._guard():
            logger.debug("Dropping timer resume for a retired session")
            return
        if self.coroutine.status is not CoroutineStatus.SUSPENDED:
            return
        if not self.resume() and not self.coroutine.terminal:
            # Entered the guest already this frame; fire on the next poll
            self._pending_timer = self._timers.call_later(0.0, self._on_timer)

    def _fail(self, error: ScriptError) -> None:
        co = self.coroutine
        co.error = error
        co.transition(CoroutineStatus.FAILED)
        self._cancel_timer()
        self._report(error)

    def _cancel_timer(self) -> None:
        if self._pending_timer is not None:
            self._pending_timer.cancel()
            self._pending_timer = None

    # ─────────────────────────────────────────────────────────────────────────
    # Frame Callbacks
    # ─────────────────────────────────────────────────────────────────────────

    def _detect_callbacks(self) -> None:
        """Switch to callback mode if the script defined draw or update."""
        lookup = self._host["callback"]
        draw = lookup("draw")
        update = lookup("update")
        if draw is None and update is None:
            return
        self.callbacks = FrameCallbacks(setup=lookup("setup"), update=update, draw=draw)
        logger.info("Script defined frame callbacks; calling them every tick")

    def _run_callbacks(self) -> None:
        callbacks = self.callbacks
        if self._context.stop_requested:
            logger.info("Frame callbacks stopped")
            self.callbacks = None
            return
        if self._last_entry_frame == self._clock.frame:
            return
        self._last_entry_frame = self._clock.frame

        if not callbacks.setup_called:
            callbacks.setup_called = True
            if callbacks.setup is not None and not self._call(callbacks.setup):
                return

        self._surface.clear()
        if callbacks.update is not None and not self._call(callbacks.update, self._clock.delta_time):
            return
        if callbacks.draw is not None:
            self._call(callbacks.draw)

    def _call(self, function: Any, *args: Any) -> bool:
        """Protected call of a frame callback; the first error disables them."""
        try:
            ok, message, trace = self._host["call"](function, *args)
        except LuaError as e:
            ok, message, trace = False, str(e), None

        if ok:
            return True

        error = CallbackError(message, traceback=trace)
        self.callback_error = error
        self.callbacks = None
        self._report(error)
        return False
