"""
Script source provider.

A run reads its source text from a file on disk or from one of the
examples bundled with the package. Re-running re-reads the file, so
edits made in an external editor show up on the next run.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

EXAMPLES_DIR = Path(__file__).parent / "examples"
SCRIPT_SUFFIX = ".lua"


def list_examples() -> List[str]:
    """Names of the bundled example scripts, sorted."""
    if not EXAMPLES_DIR.is_dir():
        return []
    return sorted(path.stem for path in EXAMPLES_DIR.glob(f"*{SCRIPT_SUFFIX}"))


def example_path(name: str) -> Path:
    """
    Path of a bundled example.

    Raises:
        KeyError: No example has that name
    """
    path = EXAMPLES_DIR / f"{name}{SCRIPT_SUFFIX}"
    if not path.is_file():
        raise KeyError(f"Unknown example: {name} (available: {', '.join(list_examples())})")
    return path


class ScriptSource:
    """
    Where the current script comes from.

    Usage:
        source = ScriptSource.from_example("particles")
        text = source.read()
    """

    def __init__(self, path: Union[str, Path], example: Optional[str] = None):
        """
        Args:
            path: Script file
            example: Example name when the file is a bundled example
        """
        self.path = Path(path)
        self.example = example

    @classmethod
    def from_example(cls, name: str) -> "ScriptSource":
        return cls(example_path(name), example=name)

    @property
    def label(self) -> str:
        """Short name shown in the window title and logs."""
        return self.example or self.path.name

    def read(self) -> str:
        """
        Read the script text.

        Raises:
            OSError: The file cannot be read
        """
        text = self.path.read_text(encoding="utf-8")
        logger.debug(f"Read {len(text)} characters from {self.path}")
        return text

    def next_example(self) -> "ScriptSource":
        """The bundled example after this one, wrapping around."""
        names = list_examples()
        if not names:
            return self
        if self.example in names:
            index = (names.index(self.example) + 1) % len(names)
        else:
            index = 0
        return ScriptSource.from_example(names[index])
