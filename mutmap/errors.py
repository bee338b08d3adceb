"""Errors raised by maps, their views and their entries.

Absence is not an error: lookups report it with None (or ``Absent()`` from
``MMap.lookup``). Everything else derives from ``MapError`` and from the
closest builtin exception, so ``except KeyError``-style code keeps working
next to ``except MapError``.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "EntryInvalidated",
    "InvalidArgument",
    "InvalidState",
    "MapError",
    "ModificationConflict",
    "UnsupportedOperation",
]


class MapError(Exception):
    """Base class for every error raised by mutmap."""

    pass


class InvalidArgument(MapError, ValueError):
    """A required function or value was missing or not allowed by the map."""

    def __init__(self, name: str, reason: str = "must not be None") -> None:
        super().__init__(f"Invalid argument {name}: {reason}")
        self.name = name


class ModificationConflict(MapError, RuntimeError):
    """The backing map changed structurally while a view or entry was in use."""

    def __init__(self, detail: str = "map modified during iteration") -> None:
        super().__init__(f"Concurrent modification: {detail}")


class UnsupportedOperation(MapError, TypeError):
    """The operation is not supported by this map or view."""

    def __init__(self, operation: str, owner: Any) -> None:
        super().__init__(
            f"Unsupported operation {operation} on {type(owner).__name__}"
        )
        self.operation = operation


class EntryInvalidated(MapError, RuntimeError):
    """An entry handle was used after its mapping was removed."""

    def __init__(self, key: Any) -> None:
        super().__init__(f"Entry for key {key!r} is no longer in the map")
        self.key = key


class InvalidState(MapError, RuntimeError):
    """An iterator method was called at the wrong time."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
