"""Ordered storage strategy backed by a persistent weight-balanced tree.

The map holds the root of an immutable tree whose nodes point at mutable
slots. Structural changes (insert, remove, clear) build a new root by path
copying; value updates write into the existing slot. Because a traversal walks
the root it started from, removing the slot it just yielded never disturbs
it, and structural changes made elsewhere are caught by the fail-fast check.

Iteration follows key order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Tuple, override

from mutmap.base import MMap, Source
from mutmap.common import Impossible, Ordering, compare
from mutmap.config import Capabilities
from mutmap.entry import Slot

__all__ = ["TreeMMap"]


_CAPABILITIES = Capabilities(none_keys=False, none_values=True, ordered=True)

# Neither subtree may outweigh its sibling by more than _DELTA; a heavy side
# is fixed with a single rotation when its inner subtree is lighter than
# _RATIO times its outer subtree, otherwise with a double rotation
_DELTA = 3
_RATIO = 2


# sealed
class _Tree[K, V]:
    pass


@dataclass(frozen=True, eq=False)
class _Empty[K, V](_Tree[K, V]):
    pass


_EMPTY: _Tree[Any, Any] = _Empty()


@dataclass(frozen=True, eq=False)
class _Branch[K, V](_Tree[K, V]):
    size: int
    left: _Tree[K, V]
    slot: Slot[K, V]
    right: _Tree[K, V]


type Comparator[K] = Callable[[K, K], Ordering]


class TreeMMap[K, V](MMap[K, V]):
    """Mutable sorted map. Keys must be mutually comparable and not None."""

    def __init__(
        self, source: Optional[Source[K, V]] = None, cmp: Optional[Comparator[K]] = None
    ) -> None:
        """Create a map, optionally copying the mappings of source.

        Args:
            source: A map, Python mapping or iterable of pairs to copy from.
            cmp: Key comparison. Defaults to the keys' natural ordering.
        """
        super().__init__()
        self._cmp: Comparator[K] = compare if cmp is None else cmp
        self._root: _Tree[K, V] = _EMPTY
        if source is not None:
            self.put_all(source)

    @staticmethod
    def empty(cmp: Optional[Comparator[K]] = None) -> TreeMMap[K, V]:
        return TreeMMap(cmp=cmp)

    @staticmethod
    def mk(pairs: Source[K, V]) -> TreeMMap[K, V]:
        """Create a map from pairs; later pairs overwrite earlier ones."""
        return TreeMMap(pairs)

    @override
    def capabilities(self) -> Capabilities:
        return _CAPABILITIES

    @override
    def size(self) -> int:
        return _tree_size(self._root)

    @override
    def contains_key(self, key: K) -> bool:
        if key is None:
            return False
        return _tree_find(self._root, key, self._cmp) is not None

    @override
    def get(self, key: K) -> Optional[V]:
        if key is None:
            return None
        slot = _tree_find(self._root, key, self._cmp)
        return None if slot is None else slot.value

    @override
    def put(self, key: K, value: V) -> Optional[V]:
        self._check_key(key)
        self._check_value(value)
        slot = _tree_find(self._root, key, self._cmp)
        if slot is not None:
            old = slot.value
            slot.value = value
            return old
        self._root = _tree_insert(self._root, Slot(key, value), self._cmp)
        self._mod_count += 1
        return None

    @override
    def remove(self, key: K) -> Optional[V]:
        if key is None:
            return None
        slot = _tree_find(self._root, key, self._cmp)
        if slot is None:
            return None
        self._root = _tree_delete(self._root, key, self._cmp)
        slot.kill()
        self._mod_count += 1
        return slot.value

    @override
    def clear(self) -> None:
        if _tree_size(self._root) == 0:
            return
        for slot in _tree_iter(self._root):
            slot.kill()
        self._root = _EMPTY
        self._mod_count += 1

    @override
    def _slots(self) -> Iterator[Slot[K, V]]:
        for slot in _tree_iter(self._root):
            if slot.live:
                yield slot

    @override
    def copy(self) -> TreeMMap[K, V]:
        return TreeMMap(self, self._cmp)

    def first_key(self) -> Optional[K]:
        """Smallest key, or None if the map is empty."""
        node = self._root
        first: Optional[K] = None
        while isinstance(node, _Branch):
            first = node.slot.key
            node = node.left
        return first

    def last_key(self) -> Optional[K]:
        """Largest key, or None if the map is empty."""
        node = self._root
        last: Optional[K] = None
        while isinstance(node, _Branch):
            last = node.slot.key
            node = node.right
        return last


def _tree_size[K, V](tree: _Tree[K, V]) -> int:
    match tree:
        case _Empty():
            return 0
        case _Branch(size, _, _, _):
            return size
        case _:
            raise Impossible


def _node[K, V](left: _Tree[K, V], slot: Slot[K, V], right: _Tree[K, V]) -> _Tree[K, V]:
    return _Branch(_tree_size(left) + 1 + _tree_size(right), left, slot, right)


def _tree_iter[K, V](tree: _Tree[K, V]) -> Iterator[Slot[K, V]]:
    match tree:
        case _Empty():
            return
        case _Branch(_, left, slot, right):
            yield from _tree_iter(left)
            yield slot
            yield from _tree_iter(right)
        case _:
            raise Impossible


def _tree_find[K, V](
    tree: _Tree[K, V], key: K, cmp: Comparator[K]
) -> Optional[Slot[K, V]]:
    while True:
        match tree:
            case _Empty():
                return None
            case _Branch(_, left, slot, right):
                order = cmp(key, slot.key)
                if order == Ordering.Eq:
                    return slot
                tree = left if order == Ordering.Lt else right
            case _:
                raise Impossible


def _tree_insert[K, V](
    tree: _Tree[K, V], new_slot: Slot[K, V], cmp: Comparator[K]
) -> _Tree[K, V]:
    match tree:
        case _Empty():
            return _Branch(1, _EMPTY, new_slot, _EMPTY)
        case _Branch(_, left, slot, right):
            order = cmp(new_slot.key, slot.key)
            if order == Ordering.Lt:
                return _tree_balance(_tree_insert(left, new_slot, cmp), slot, right)
            elif order == Ordering.Gt:
                return _tree_balance(left, slot, _tree_insert(right, new_slot, cmp))
            else:
                # Callers only insert missing keys
                raise Impossible
        case _:
            raise Impossible


def _tree_delete[K, V](tree: _Tree[K, V], key: K, cmp: Comparator[K]) -> _Tree[K, V]:
    match tree:
        case _Empty():
            return tree
        case _Branch(_, left, slot, right):
            order = cmp(key, slot.key)
            if order == Ordering.Lt:
                return _tree_balance(_tree_delete(left, key, cmp), slot, right)
            elif order == Ordering.Gt:
                return _tree_balance(left, slot, _tree_delete(right, key, cmp))
            else:
                return _tree_join(left, right)
        case _:
            raise Impossible


def _tree_pop_min[K, V](
    tree: _Tree[K, V],
) -> Optional[Tuple[Slot[K, V], _Tree[K, V]]]:
    match tree:
        case _Empty():
            return None
        case _Branch(_, left, slot, right):
            result = _tree_pop_min(left)
            if result is None:
                return (slot, right)
            min_slot, new_left = result
            return (min_slot, _tree_balance(new_left, slot, right))
        case _:
            raise Impossible


def _tree_join[K, V](left: _Tree[K, V], right: _Tree[K, V]) -> _Tree[K, V]:
    """Join two trees where every key in left is smaller than every key in right."""
    result = _tree_pop_min(right)
    if result is None:
        return left
    min_slot, new_right = result
    return _tree_balance(left, min_slot, new_right)


def _tree_balance[K, V](
    left: _Tree[K, V], slot: Slot[K, V], right: _Tree[K, V]
) -> _Tree[K, V]:
    left_size = _tree_size(left)
    right_size = _tree_size(right)
    if left_size + right_size <= 1:
        return _node(left, slot, right)
    elif right_size > _DELTA * left_size:
        return _rotate_left(left, slot, right)
    elif left_size > _DELTA * right_size:
        return _rotate_right(left, slot, right)
    else:
        return _node(left, slot, right)


def _rotate_left[K, V](
    left: _Tree[K, V], slot: Slot[K, V], right: _Tree[K, V]
) -> _Tree[K, V]:
    match right:
        case _Branch(_, inner, right_slot, outer):
            if _tree_size(inner) < _RATIO * _tree_size(outer):
                return _node(_node(left, slot, inner), right_slot, outer)
            match inner:
                case _Branch(_, inner_left, inner_slot, inner_right):
                    return _node(
                        _node(left, slot, inner_left),
                        inner_slot,
                        _node(inner_right, right_slot, outer),
                    )
                case _:
                    raise Impossible
        case _:
            raise Impossible


def _rotate_right[K, V](
    left: _Tree[K, V], slot: Slot[K, V], right: _Tree[K, V]
) -> _Tree[K, V]:
    match left:
        case _Branch(_, outer, left_slot, inner):
            if _tree_size(inner) < _RATIO * _tree_size(outer):
                return _node(outer, left_slot, _node(inner, slot, right))
            match inner:
                case _Branch(_, inner_left, inner_slot, inner_right):
                    return _node(
                        _node(outer, left_slot, inner_left),
                        inner_slot,
                        _node(inner_right, slot, right),
                    )
                case _:
                    raise Impossible
        case _:
            raise Impossible
