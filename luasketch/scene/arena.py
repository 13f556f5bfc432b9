"""
Handle arenas.

Scripts never hold host objects directly; they hold integer handles
that an arena resolves. A released handle resolves to nothing, and
handles are not reused, so a stale handle can never reach a newer
object.
"""

from typing import Any, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class HandleArena(Generic[T]):
    """Integer handle to host object map."""

    def __init__(self, first_handle: int = 1):
        self._objects: Dict[int, T] = {}
        self._next_handle = first_handle

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._objects.values()))

    def __contains__(self, handle: Any) -> bool:
        return self.get(handle) is not None

    def allocate(self, obj: T) -> int:
        """
        Store an object.

        Args:
            obj: Host object

        Returns:
            New handle for the object
        """
        handle = self._next_handle
        self._next_handle += 1
        self._objects[handle] = obj
        return handle

    def get(self, handle: Any) -> Optional[T]:
        """Resolve a handle; unknown or malformed handles give None."""
        if not isinstance(handle, int) or isinstance(handle, bool):
            return None
        return self._objects.get(handle)

    def release(self, handle: int) -> Optional[T]:
        """Forget a handle and return its object."""
        return self._objects.pop(handle, None)

    def items(self) -> List[Tuple[int, T]]:
        return list(self._objects.items())

    def clear(self) -> List[T]:
        """Release every handle. Numbering continues where it was."""
        released = list(self._objects.values())
        self._objects.clear()
        return released
