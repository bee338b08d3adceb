"""Common utility types and functions for the mutmap container library.

This module provides the size protocol, comparison utilities and value
equality shared by the map core, its views and its storage strategies.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from enum import Enum
from typing import Any

__all__ = [
    "Impossible",
    "Ordering",
    "Sized",
    "compare",
    "equals",
    "hash_or_zero",
]


class Impossible(Exception):
    """Exception raised when encountering theoretically impossible states.

    Used to indicate internal consistency violations in storage operations.
    """

    pass


class Sized(metaclass=ABCMeta):
    @abstractmethod
    def size(self) -> int: ...

    def is_empty(self) -> bool:
        return self.size() == 0

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __len__(self) -> int:
        return self.size()


class Ordering(Enum):
    """Enumeration representing the result of a comparison operation."""

    Lt = -1
    Eq = 0
    Gt = 1


def compare[T](a: T, b: T) -> Ordering:
    """Compare two values and return their ordering relationship.

    Uses the objects' __eq__ and __lt__ methods to determine the comparison result.

    Args:
        a: First value to compare.
        b: Second value to compare.

    Returns:
        Ordering indicating the relationship between a and b.
    """
    if a == b:
        return Ordering.Eq
    elif a < b:  # type: ignore[operator]
        return Ordering.Lt
    else:
        return Ordering.Gt


def equals(a: Any, b: Any) -> bool:
    """Null-safe equality used for stored values.

    Two values are equal when they are the same object, or when neither is
    None and they compare equal.
    """
    if a is b:
        return True
    elif a is None or b is None:
        return False
    else:
        return bool(a == b)


def hash_or_zero(value: Any) -> int:
    """Hash a key or value, treating None as 0."""
    return 0 if value is None else hash(value)
