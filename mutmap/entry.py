"""Map entries: key-value pairs exposed through the entry set.

A ``SlotEntry`` is a handle onto a live storage slot of a map. It does not own
anything; writing its value writes through to the map, and once the mapping
is removed every access raises ``EntryInvalidated``. A ``SimpleEntry`` is a
detached pair with the same equality and hash, useful for membership tests
and snapshots.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, override

from mutmap.common import Ordering, compare, equals, hash_or_zero
from mutmap.errors import EntryInvalidated

if TYPE_CHECKING:
    from mutmap.base import MMap

__all__ = [
    "Entry",
    "SimpleEntry",
    "Slot",
    "SlotEntry",
    "as_sort_key",
    "comparing_by_key",
    "comparing_by_value",
]


class Entry[K, V](metaclass=ABCMeta):
    """A key-value pair with structural equality.

    Two entries are equal when their keys are equal and their values are
    equal, whatever their concrete classes. The hash is the exclusive-or of
    the key hash and the value hash (None hashing to 0), so that it agrees
    with equality across implementations.
    """

    @property
    @abstractmethod
    def key(self) -> K: ...

    @property
    @abstractmethod
    def value(self) -> V: ...

    @abstractmethod
    def set_value(self, value: V) -> V:
        """Replace the value, returning the previous one."""
        ...

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Entry):
            return equals(self.key, other.key) and equals(self.value, other.value)
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash_or_zero(self.key) ^ hash_or_zero(self.value)

    def __iter__(self) -> Iterator[Any]:
        """Unpack as ``key, value = entry``."""
        yield self.key
        yield self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r}, {self.value!r})"


class SimpleEntry[K, V](Entry[K, V]):
    """A detached entry not backed by any map."""

    def __init__(self, key: K, value: V) -> None:
        self._key = key
        self._value = value

    @property
    @override
    def key(self) -> K:
        return self._key

    @property
    @override
    def value(self) -> V:
        return self._value

    @override
    def set_value(self, value: V) -> V:
        old = self._value
        self._value = value
        return old


class Slot[K, V]:
    """Storage cell for one mapping.

    Strategies update ``value`` in place on overwrite and clear ``live`` when
    the mapping is removed.
    """

    __slots__ = ("key", "value", "live")

    def __init__(self, key: K, value: V) -> None:
        self.key = key
        self.value = value
        self.live = True

    def kill(self) -> None:
        self.live = False

    def __repr__(self) -> str:
        state = "live" if self.live else "dead"
        return f"Slot({self.key!r}, {self.value!r}, {state})"


class SlotEntry[K, V](Entry[K, V]):
    """A live handle onto a slot of a map."""

    def __init__(self, owner: MMap[K, V], slot: Slot[K, V]) -> None:
        self._owner = owner
        self._slot = slot

    def _live_slot(self) -> Slot[K, V]:
        if not self._slot.live:
            raise EntryInvalidated(self._slot.key)
        return self._slot

    @property
    @override
    def key(self) -> K:
        return self._live_slot().key

    @property
    @override
    def value(self) -> V:
        return self._live_slot().value

    @override
    def set_value(self, value: V) -> V:
        """Write a new value through to the map.

        This is a value-only update and does not disturb iteration.

        Raises:
            EntryInvalidated: If the mapping was removed from the map.
            UnsupportedOperation: If the map is read-only.
            InvalidArgument: If the map does not store None values.
        """
        slot = self._live_slot()
        self._owner._check_writable("set_value")
        self._owner._check_value(value)
        old = slot.value
        slot.value = value
        return old


def comparing_by_key[K, V](
    cmp: Optional[Callable[[K, K], Ordering]] = None,
) -> Callable[[Entry[K, V], Entry[K, V]], Ordering]:
    """Build a comparator that orders entries by key.

    Args:
        cmp: Comparison for keys. Defaults to the keys' natural ordering.

    Returns:
        A function comparing two entries by their keys.
    """
    key_cmp = compare if cmp is None else cmp

    def comparator(a: Entry[K, V], b: Entry[K, V]) -> Ordering:
        return key_cmp(a.key, b.key)

    return comparator


def comparing_by_value[K, V](
    cmp: Optional[Callable[[V, V], Ordering]] = None,
) -> Callable[[Entry[K, V], Entry[K, V]], Ordering]:
    """Build a comparator that orders entries by value.

    Args:
        cmp: Comparison for values. Defaults to the values' natural ordering.

    Returns:
        A function comparing two entries by their values.
    """
    value_cmp = compare if cmp is None else cmp

    def comparator(a: Entry[K, V], b: Entry[K, V]) -> Ordering:
        return value_cmp(a.value, b.value)

    return comparator


def as_sort_key[T](comparator: Callable[[T, T], Ordering]) -> Callable[[T], Any]:
    """Adapt an Ordering comparator for ``sorted(..., key=...)``."""
    return cmp_to_key(lambda a, b: comparator(a, b).value)
