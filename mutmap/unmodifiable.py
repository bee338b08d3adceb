"""Read-only wrapper around another map.

Reads go straight to the wrapped map, so the wrapper (and its views) keeps
reflecting later changes made to the wrapped map. Every mutation, whether
through the wrapper, one of its views, an iterator or an entry, raises
UnsupportedOperation before any state changes and without calling any
caller-supplied function.
"""

from __future__ import annotations

from typing import Any, Iterator, NoReturn, Optional, override

from mutmap.base import MMap
from mutmap.config import Capabilities
from mutmap.entry import Slot
from mutmap.errors import UnsupportedOperation

__all__ = ["UnmodifiableMMap", "unmodifiable"]


class UnmodifiableMMap[K, V](MMap[K, V]):
    def __init__(self, inner: MMap[K, V]) -> None:
        super().__init__()
        self._inner = inner

    def _refuse(self, operation: str) -> NoReturn:
        raise UnsupportedOperation(operation, self)

    @override
    def capabilities(self) -> Capabilities:
        return self._inner.capabilities().as_read_only()

    @override
    def modification_count(self) -> int:
        return self._inner.modification_count()

    @override
    def size(self) -> int:
        return self._inner.size()

    @override
    def contains_key(self, key: K) -> bool:
        return self._inner.contains_key(key)

    @override
    def get(self, key: K) -> Optional[V]:
        return self._inner.get(key)

    @override
    def _slots(self) -> Iterator[Slot[K, V]]:
        return self._inner._slots()

    @override
    def copy(self) -> UnmodifiableMMap[K, V]:
        return UnmodifiableMMap(self._inner.copy())

    @override
    def put(self, key: K, value: V) -> Optional[V]:
        self._refuse("put")

    @override
    def remove(self, key: K) -> Optional[V]:
        self._refuse("remove")

    @override
    def clear(self) -> None:
        self._refuse("clear")

    @override
    def put_all(self, source: Any) -> None:
        self._refuse("put_all")

    @override
    def replace_all(self, function: Any) -> None:
        self._refuse("replace_all")

    @override
    def put_if_absent(self, key: K, value: V) -> Optional[V]:
        self._refuse("put_if_absent")

    @override
    def remove_if_equal(self, key: K, value: V) -> bool:
        self._refuse("remove_if_equal")

    @override
    def replace_if_equal(self, key: K, old_value: V, new_value: V) -> bool:
        self._refuse("replace_if_equal")

    @override
    def replace(self, key: K, value: V) -> Optional[V]:
        self._refuse("replace")

    @override
    def compute_if_absent(self, key: K, mapping_function: Any) -> Optional[V]:
        self._refuse("compute_if_absent")

    @override
    def compute_if_present(self, key: K, remapping_function: Any) -> Optional[V]:
        self._refuse("compute_if_present")

    @override
    def compute(self, key: K, remapping_function: Any) -> Optional[V]:
        self._refuse("compute")

    @override
    def merge(self, key: K, value: V, remapping_function: Any) -> Optional[V]:
        self._refuse("merge")


def unmodifiable[K, V](inner: MMap[K, V]) -> UnmodifiableMMap[K, V]:
    """Wrap inner in a read-only view, unless it already is one."""
    if isinstance(inner, UnmodifiableMMap):
        return inner
    return UnmodifiableMMap(inner)
