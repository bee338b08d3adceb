"""Mutable map core: the primitive contract and the derived operations.

A storage strategy subclasses ``MMap`` and supplies the primitive layer
(``size``, ``contains_key``, ``get``, ``put``, ``remove``, ``clear`` and the
slot traversal ``_slots``), bumping ``_mod_count`` on every structural change.
Everything else is derived here, purely from those primitives plus the
caller-supplied functions, and is shared by every strategy.

Derived operations are plain sequences of primitive calls. None of them is
atomic with respect to other threads; a strategy that wants atomic compound
operations overrides them wholesale (see ``mutmap.locked.LockedMMap``) and
must still satisfy the same observable laws.

None is the absence marker. Strategies may allow None as a stored value, in
which case ``contains_key`` (or ``lookup``) tells a stored None apart from a
missing key. Every derived operation treats "mapped to None" exactly like
"absent" for its presence checks, consulting ``contains_key`` only where a
stored None must be distinguished.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    Optional,
    Self,
    Tuple,
    Union,
)

from mutmap.common import Sized, equals
from mutmap.config import Capabilities
from mutmap.entry import Slot
from mutmap.errors import (
    EntryInvalidated,
    InvalidArgument,
    ModificationConflict,
    UnsupportedOperation,
)
from mutmap.lookup import Absent, Lookup, Present
from mutmap.views import EntrySetView, KeySetView, ValuesView, ViewIterator

__all__ = ["MMap", "Source"]


type Source[K, V] = Union[MMap[K, V], Mapping[K, V], Iterable[Tuple[K, V]]]


def _require(fn: Any, name: str) -> None:
    if fn is None:
        raise InvalidArgument(name)


class MMap[K, V](Sized):
    """Abstract mutable map.

    Subclasses implement the primitive layer; this class derives the rest.
    """

    def __init__(self) -> None:
        self._mod_count = 0

    # Primitive layer

    @abstractmethod
    def capabilities(self) -> Capabilities:
        """Declare what this map supports."""
        ...

    @abstractmethod
    def contains_key(self, key: K) -> bool: ...

    @abstractmethod
    def get(self, key: K) -> Optional[V]:
        """Return the value mapped to key, or None if there is none."""
        ...

    @abstractmethod
    def put(self, key: K, value: V) -> Optional[V]:
        """Associate key with value, returning the previous value or None."""
        ...

    @abstractmethod
    def remove(self, key: K) -> Optional[V]:
        """Remove the mapping for key, returning its value or None."""
        ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def _slots(self) -> Iterator[Slot[K, V]]:
        """Traverse the live slots in this map's order.

        The traversal must tolerate removal of the slot it most recently
        yielded, which is how iterator removal is carried out.
        """
        ...

    def modification_count(self) -> int:
        """Number of structural modifications so far."""
        return self._mod_count

    # Capability checks used by strategies and views

    def _check_writable(self, operation: str) -> None:
        if self.capabilities().read_only:
            raise UnsupportedOperation(operation, self)

    def _check_key(self, key: K) -> None:
        if key is None and not self.capabilities().none_keys:
            raise InvalidArgument(
                "key", f"{type(self).__name__} does not allow None keys"
            )

    def _check_value(self, value: V) -> None:
        if value is None and not self.capabilities().none_values:
            raise InvalidArgument(
                "value", f"{type(self).__name__} does not allow None values"
            )

    # Views

    def keys(self) -> KeySetView[K, V]:
        """Live set view of the keys."""
        return KeySetView(self)

    def values(self) -> ValuesView[K, V]:
        """Live collection view of the values."""
        return ValuesView(self)

    def entries(self) -> EntrySetView[K, V]:
        """Live set view of the entries."""
        return EntrySetView(self)

    def items(self) -> Iterator[Tuple[K, V]]:
        """Iterate over (key, value) tuples, fail-fast."""
        return ViewIterator(self, lambda slot: (slot.key, slot.value))

    # Queries

    def contains_value(self, value: V) -> bool:
        for candidate in self.values():
            if equals(candidate, value):
                return True
        return False

    def lookup(self, key: K) -> Lookup[V]:
        """Look up key, distinguishing a missing key from a stored None.

        Returns:
            Present(value) if key is mapped (value may be None), else Absent().
        """
        if self.contains_key(key):
            return Present(self.get(key))
        else:
            return Absent.instance()

    def get_or_default(self, key: K, fallback: V) -> V:
        """Return the value for key, or fallback if key has no mapping.

        A key mapped to None yields None, not fallback.
        """
        value = self.get(key)
        if value is not None or self.contains_key(key):
            return value  # type: ignore[return-value]
        else:
            return fallback

    # Bulk operations

    def for_each(self, action: Callable[[K, V], Any]) -> None:
        """Call action(key, value) for every entry, in iteration order.

        Errors raised by action stop the traversal and propagate.

        Raises:
            InvalidArgument: If action is None.
            ModificationConflict: If the map changes structurally underneath.
        """
        _require(action, "action")
        for entry in self.entries():
            try:
                key = entry.key
                value = entry.value
            except EntryInvalidated as e:
                raise ModificationConflict(str(e)) from e
            action(key, value)

    def replace_all(self, function: Callable[[K, V], V]) -> None:
        """Replace every value with function(key, value), in one pass.

        Raises:
            InvalidArgument: If function is None, or returns None for a map
                that does not store None values.
            ModificationConflict: If an entry is removed underneath the traversal.
        """
        _require(function, "function")
        self._check_writable("replace_all")
        for entry in self.entries():
            try:
                key = entry.key
                value = entry.value
            except EntryInvalidated as e:
                raise ModificationConflict(str(e)) from e
            new_value = function(key, value)
            try:
                entry.set_value(new_value)
            except EntryInvalidated as e:
                raise ModificationConflict(str(e)) from e

    def put_all(self, source: Source[K, V]) -> None:
        """Copy every mapping of source into this map."""
        _require(source, "source")
        self._check_writable("put_all")
        if isinstance(source, MMap):
            pairs: Iterable[Tuple[K, V]] = source.items()
        elif isinstance(source, Mapping):
            pairs = source.items()
        else:
            pairs = source
        for key, value in pairs:
            self.put(key, value)

    # Conditional compound operations

    def put_if_absent(self, key: K, value: V) -> Optional[V]:
        """Map key to value unless it already has a non-None value.

        Returns:
            The existing non-None value, or the previous value (None) after
            writing.
        """
        current = self.get(key)
        if current is None:
            current = self.put(key, value)
        return current

    def remove_if_equal(self, key: K, value: V) -> bool:
        """Remove key only if it is currently mapped to value.

        Returns:
            True if the mapping was removed.
        """
        current = self.get(key)
        if not equals(current, value) or (
            current is None and not self.contains_key(key)
        ):
            return False
        self.remove(key)
        return True

    def replace_if_equal(self, key: K, old_value: V, new_value: V) -> bool:
        """Map key to new_value only if it is currently mapped to old_value.

        Returns:
            True if the value was replaced.
        """
        current = self.get(key)
        if not equals(current, old_value) or (
            current is None and not self.contains_key(key)
        ):
            return False
        self.put(key, new_value)
        return True

    def replace(self, key: K, value: V) -> Optional[V]:
        """Map key to value only if key is present (possibly mapped to None).

        Returns:
            The previous value, or None if key was absent and nothing was written.
        """
        current = self.get(key)
        if current is not None or self.contains_key(key):
            current = self.put(key, value)
        return current

    def compute_if_absent(
        self, key: K, mapping_function: Callable[[K], Optional[V]]
    ) -> Optional[V]:
        """Compute a value for key if it is absent or mapped to None.

        The function is not called when key already has a non-None value. A
        None result writes nothing.

        Returns:
            The current (existing or newly computed) value, or None.
        """
        _require(mapping_function, "mapping_function")
        current = self.get(key)
        if current is None:
            new_value = mapping_function(key)
            if new_value is not None:
                self.put(key, new_value)
                return new_value
        return current

    def compute_if_present(
        self, key: K, remapping_function: Callable[[K, V], Optional[V]]
    ) -> Optional[V]:
        """Recompute the value for key if it has a non-None value.

        A None result removes the mapping. The function is not called when
        key is absent or mapped to None.

        Returns:
            The new value, or None.
        """
        _require(remapping_function, "remapping_function")
        old_value = self.get(key)
        if old_value is None:
            return None
        new_value = remapping_function(key, old_value)
        if new_value is not None:
            self.put(key, new_value)
            return new_value
        else:
            self.remove(key)
            return None

    def compute(
        self, key: K, remapping_function: Callable[[K, Optional[V]], Optional[V]]
    ) -> Optional[V]:
        """Compute a new value for key from its current value (or None).

        A None result removes the mapping if there was one and otherwise
        leaves the map untouched.

        Returns:
            The new value, or None.
        """
        _require(remapping_function, "remapping_function")
        old_value = self.get(key)
        new_value = remapping_function(key, old_value)
        if new_value is None:
            if old_value is not None or self.contains_key(key):
                self.remove(key)
            return None
        else:
            self.put(key, new_value)
            return new_value

    def merge(
        self, key: K, value: V, remapping_function: Callable[[V, V], Optional[V]]
    ) -> Optional[V]:
        """Combine value with the current value for key.

        If key is absent or mapped to None, value is stored as is and the
        function is not called. Otherwise the function's result is stored,
        and a None result removes the mapping.

        Returns:
            The value now stored, or None if the mapping was removed.

        Raises:
            InvalidArgument: If value or remapping_function is None.
        """
        _require(remapping_function, "remapping_function")
        _require(value, "value")
        old_value = self.get(key)
        if old_value is None:
            new_value: Optional[V] = value
        else:
            new_value = remapping_function(old_value, value)
        if new_value is None:
            self.remove(key)
        else:
            self.put(key, new_value)
        return new_value

    # Copying, equality and hashing

    @abstractmethod
    def copy(self) -> Self:
        """Return a new map of the same kind holding the same mappings."""
        ...

    def hash_code(self) -> int:
        """Sum of the entry hashes, so equal maps hash equally."""
        return sum(hash(entry) for entry in self.entries())

    def __eq__(self, other: Any) -> bool:
        if other is self:
            return True
        if isinstance(other, MMap):
            pairs: Iterable[Tuple[Any, Any]] = other.items()
        elif isinstance(other, Mapping):
            pairs = other.items()
        else:
            return NotImplemented
        if len(other) != self.size():
            return False
        for key, value in pairs:
            if not self.contains_key(key) or not equals(self.get(key), value):
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    # Python mapping protocol

    def __contains__(self, key: Any) -> bool:
        return self.contains_key(key)

    def __getitem__(self, key: K) -> V:
        if not self.contains_key(key):
            raise KeyError(key)
        return self.get(key)  # type: ignore[return-value]

    def __setitem__(self, key: K, value: V) -> None:
        self.put(key, value)

    def __delitem__(self, key: K) -> None:
        if not self.contains_key(key):
            raise KeyError(key)
        self.remove(key)

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self.items())
        return f"{type(self).__name__}({{{body}}})"
