"""
Diagnostic log.

Sink for script errors: logs them and keeps the most recent ones for
the on-screen overlay.
"""

import logging
from collections import deque
from typing import Deque, List, Optional

from ..scripting.errors import ScriptError

logger = logging.getLogger(__name__)


class DiagnosticLog:
    """
    Collects script errors reported by the session manager.

    Instances are callable so they can be passed anywhere a
    diagnostic sink is expected.
    """

    def __init__(self, capacity: int = 20):
        """
        Initialize the log.

        Args:
            capacity: Number of errors kept for display
        """
        self._entries: Deque[ScriptError] = deque(maxlen=capacity)

    def __call__(self, error: ScriptError) -> None:
        self.report(error)

    def report(self, error: ScriptError) -> None:
        """Record and log a script error."""
        self._entries.append(error)
        logger.error(error.format())

    @property
    def latest(self) -> Optional[ScriptError]:
        """Most recent error, if any."""
        return self._entries[-1] if self._entries else None

    @property
    def entries(self) -> List[ScriptError]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
