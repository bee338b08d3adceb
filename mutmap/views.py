"""Live views over a map: key set, value collection and entry set.

Views are projections of their map, never copies. Structural changes to the
map show through every view, and removal through a view (or through one of
its iterators) is applied to the map. Views never insert.

Iterators are fail-fast: each captures the map's structural modification
count when created and rechecks it on every step. A change made through any
channel other than the iterator's own ``remove()`` raises
``ModificationConflict`` on the next step. This is best-effort detection for
single-threaded misuse, not a concurrency-safety mechanism.

The check also runs before reporting exhaustion, so a structural change made
while the last element is being processed raises at the end of the loop
instead of letting it finish quietly.
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from collections.abc import Set
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Optional,
    override,
)

from mutmap.common import Sized, equals, hash_or_zero
from mutmap.entry import Entry, SimpleEntry, Slot, SlotEntry
from mutmap.errors import InvalidState, ModificationConflict, UnsupportedOperation

if TYPE_CHECKING:
    from mutmap.base import MMap

__all__ = ["EntrySetView", "KeySetView", "MapView", "ValuesView", "ViewIterator"]

logger = logging.getLogger(__name__)


class ViewIterator[K, V, T](Iterator[T]):
    """Fail-fast iterator over the slots of a map."""

    def __init__(self, owner: MMap[K, V], project: Callable[[Slot[K, V]], T]) -> None:
        self._owner = owner
        self._project = project
        self._slots = owner._slots()
        self._expected = owner.modification_count()
        self._last: Optional[Slot[K, V]] = None

    def _check_unmodified(self) -> None:
        actual = self._owner.modification_count()
        if actual != self._expected:
            logger.debug(
                "Structural modification detected (expected %d, found %d)",
                self._expected,
                actual,
            )
            raise ModificationConflict()

    @override
    def __next__(self) -> T:
        self._check_unmodified()
        slot = next(self._slots)
        self._last = slot
        return self._project(slot)

    @override
    def __iter__(self) -> ViewIterator[K, V, T]:
        return self

    def remove(self) -> None:
        """Remove the mapping behind the element most recently returned.

        Raises:
            InvalidState: If next() has not been called since the last remove().
            ModificationConflict: If the map changed behind this iterator.
            UnsupportedOperation: If the map is read-only.
        """
        if self._last is None:
            raise InvalidState("remove() requires a preceding call to next()")
        self._check_unmodified()
        self._owner._check_writable("remove")
        self._owner.remove(self._last.key)
        self._last = None
        self._expected = self._owner.modification_count()


class MapView[K, V, T](Sized, metaclass=ABCMeta):
    """Common behavior of the three views."""

    def __init__(self, owner: MMap[K, V]) -> None:
        self._owner = owner

    @abstractmethod
    def _project(self, slot: Slot[K, V]) -> T: ...

    @abstractmethod
    def __contains__(self, item: Any) -> bool: ...

    @abstractmethod
    def remove(self, item: Any) -> bool:
        """Remove the mapping matching item, returning whether one was removed."""
        ...

    def _coerce(self, item: Any) -> Any:
        return item

    @override
    def size(self) -> int:
        return self._owner.size()

    def __iter__(self) -> ViewIterator[K, V, T]:
        return ViewIterator(self._owner, self._project)

    def iterator(self) -> ViewIterator[K, V, T]:
        """Return a fail-fast iterator that supports remove()."""
        return iter(self)

    def to_list(self) -> List[T]:
        return list(self)

    def add(self, _item: T) -> bool:
        raise UnsupportedOperation("add", self)

    def add_all(self, _items: Iterable[T]) -> bool:
        raise UnsupportedOperation("add_all", self)

    def clear(self) -> None:
        self._owner.clear()

    def remove_if(self, predicate: Callable[[T], bool]) -> bool:
        """Remove every mapping whose element satisfies predicate.

        Returns:
            True if at least one mapping was removed.
        """
        self._owner._check_writable("remove_if")
        changed = False
        it = iter(self)
        for item in it:
            if predicate(item):
                it.remove()
                changed = True
        return changed

    def remove_all(self, items: Iterable[Any]) -> bool:
        pool = [self._coerce(item) for item in items]
        return self.remove_if(lambda item: item in pool)

    def retain_all(self, items: Iterable[Any]) -> bool:
        pool = [self._coerce(item) for item in items]
        return self.remove_if(lambda item: item not in pool)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_list()!r})"


class _SetLike:
    """Set equality and hash code for the key and entry views."""

    def __eq__(self, other: Any) -> bool:
        if other is self:
            return True
        if not isinstance(other, (_SetLike, Set)):
            return NotImplemented
        if len(other) != len(self):  # type: ignore[arg-type]
            return False
        return all(item in self for item in other)

    __hash__ = None  # type: ignore[assignment]

    def hash_code(self) -> int:
        """Sum of the element hashes, independent of iteration order."""
        return sum(hash_or_zero(item) for item in self)  # type: ignore[attr-defined]


class KeySetView[K, V](_SetLike, MapView[K, V, K]):
    @override
    def _project(self, slot: Slot[K, V]) -> K:
        return slot.key

    @override
    def __contains__(self, item: Any) -> bool:
        return self._owner.contains_key(item)

    @override
    def remove(self, item: Any) -> bool:
        self._owner._check_writable("remove")
        if self._owner.contains_key(item):
            self._owner.remove(item)
            return True
        return False


class ValuesView[K, V](MapView[K, V, V]):
    @override
    def _project(self, slot: Slot[K, V]) -> V:
        return slot.value

    @override
    def __contains__(self, item: Any) -> bool:
        return self._owner.contains_value(item)

    @override
    def remove(self, item: Any) -> bool:
        """Remove the first mapping whose value equals item."""
        self._owner._check_writable("remove")
        it = iter(self)
        for value in it:
            if equals(value, item):
                it.remove()
                return True
        return False

    @override
    def remove_all(self, items: Iterable[Any]) -> bool:
        pool = list(items)
        return self.remove_if(lambda v: any(equals(v, p) for p in pool))

    @override
    def retain_all(self, items: Iterable[Any]) -> bool:
        pool = list(items)
        return self.remove_if(lambda v: not any(equals(v, p) for p in pool))


class EntrySetView[K, V](_SetLike, MapView[K, V, Entry[K, V]]):
    """Entry set; membership and removal accept entries or (key, value) tuples."""

    @override
    def _project(self, slot: Slot[K, V]) -> Entry[K, V]:
        return SlotEntry(self._owner, slot)

    @override
    def _coerce(self, item: Any) -> Any:
        if isinstance(item, tuple) and len(item) == 2:
            return SimpleEntry(item[0], item[1])
        return item

    @override
    def __contains__(self, item: Any) -> bool:
        entry = self._coerce(item)
        if not isinstance(entry, Entry):
            return False
        key = entry.key
        if not self._owner.contains_key(key):
            return False
        return equals(self._owner.get(key), entry.value)

    @override
    def remove(self, item: Any) -> bool:
        self._owner._check_writable("remove")
        entry = self._coerce(item)
        if entry in self:
            self._owner.remove(entry.key)
            return True
        return False
