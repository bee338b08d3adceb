"""Lookup results that keep "no mapping" apart from "mapped to None"."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

__all__ = ["Absent", "Lookup", "Present"]


@dataclass(frozen=True)
class Present[V]:
    """The key is mapped; ``value`` may legitimately be None."""

    value: V

    def get_or(self, _fallback: V) -> V:
        return self.value

    def map[W](self, fn: Callable[[V], W]) -> Present[W]:
        return Present(fn(self.value))

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Absent:
    """The key has no mapping."""

    @staticmethod
    def instance() -> Absent:
        return _ABSENT

    def get_or[V](self, fallback: V) -> V:
        return fallback

    def map[V, W](self, _fn: Callable[[V], W]) -> Absent:
        return self

    def __bool__(self) -> bool:
        return False


_ABSENT = Absent()


type Lookup[V] = Union[Present[V], Absent]
