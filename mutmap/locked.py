"""Lock-guarded wrapper that makes compound operations atomic.

Every primitive and every derived operation of the wrapped map runs while
holding a reentrant lock, so ``compute_if_absent``, ``merge`` and friends are
atomic with respect to other calls made through the same wrapper. This is a
stronger guarantee than the default derived operations give.

Iteration over views is not locked. Hold the lock for the whole traversal
when other threads may write::

    with locked as inner:
        for key, value in inner.items():
            ...

Entry ``set_value`` writes go straight to the wrapped map's storage.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Callable, Iterator, Optional, override

from mutmap.base import MMap, Source
from mutmap.config import Capabilities
from mutmap.entry import Slot
from mutmap.lookup import Lookup

__all__ = ["LockedMMap"]

logger = logging.getLogger(__name__)


class LockedMMap[K, V](MMap[K, V]):
    def __init__(self, inner: MMap[K, V]) -> None:
        """Wrap inner; callers must stop using inner directly.

        Args:
            inner: The map to guard.
        """
        super().__init__()
        self._lock = RLock()
        self._inner = inner
        logger.debug("Guarding %s with a lock", type(inner).__name__)

    def __enter__(self) -> MMap[K, V]:
        """Acquire the lock and return the wrapped map."""
        self._lock.acquire()
        return self._inner

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._lock.release()

    @override
    def capabilities(self) -> Capabilities:
        return self._inner.capabilities()

    @override
    def modification_count(self) -> int:
        return self._inner.modification_count()

    @override
    def _slots(self) -> Iterator[Slot[K, V]]:
        return self._inner._slots()

    @override
    def copy(self) -> LockedMMap[K, V]:
        with self._lock:
            return LockedMMap(self._inner.copy())

    @override
    def size(self) -> int:
        with self._lock:
            return self._inner.size()

    @override
    def contains_key(self, key: K) -> bool:
        with self._lock:
            return self._inner.contains_key(key)

    @override
    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._inner.get(key)

    @override
    def put(self, key: K, value: V) -> Optional[V]:
        with self._lock:
            return self._inner.put(key, value)

    @override
    def remove(self, key: K) -> Optional[V]:
        with self._lock:
            return self._inner.remove(key)

    @override
    def clear(self) -> None:
        with self._lock:
            self._inner.clear()

    @override
    def contains_value(self, value: V) -> bool:
        with self._lock:
            return self._inner.contains_value(value)

    @override
    def lookup(self, key: K) -> Lookup[V]:
        with self._lock:
            return self._inner.lookup(key)

    @override
    def get_or_default(self, key: K, fallback: V) -> V:
        with self._lock:
            return self._inner.get_or_default(key, fallback)

    @override
    def for_each(self, action: Callable[[K, V], Any]) -> None:
        with self._lock:
            self._inner.for_each(action)

    @override
    def replace_all(self, function: Callable[[K, V], V]) -> None:
        with self._lock:
            self._inner.replace_all(function)

    @override
    def put_all(self, source: Source[K, V]) -> None:
        with self._lock:
            self._inner.put_all(source)

    @override
    def put_if_absent(self, key: K, value: V) -> Optional[V]:
        with self._lock:
            return self._inner.put_if_absent(key, value)

    @override
    def remove_if_equal(self, key: K, value: V) -> bool:
        with self._lock:
            return self._inner.remove_if_equal(key, value)

    @override
    def replace_if_equal(self, key: K, old_value: V, new_value: V) -> bool:
        with self._lock:
            return self._inner.replace_if_equal(key, old_value, new_value)

    @override
    def replace(self, key: K, value: V) -> Optional[V]:
        with self._lock:
            return self._inner.replace(key, value)

    @override
    def compute_if_absent(
        self, key: K, mapping_function: Callable[[K], Optional[V]]
    ) -> Optional[V]:
        with self._lock:
            return self._inner.compute_if_absent(key, mapping_function)

    @override
    def compute_if_present(
        self, key: K, remapping_function: Callable[[K, V], Optional[V]]
    ) -> Optional[V]:
        with self._lock:
            return self._inner.compute_if_present(key, remapping_function)

    @override
    def compute(
        self, key: K, remapping_function: Callable[[K, Optional[V]], Optional[V]]
    ) -> Optional[V]:
        with self._lock:
            return self._inner.compute(key, remapping_function)

    @override
    def merge(
        self, key: K, value: V, remapping_function: Callable[[V, V], Optional[V]]
    ) -> Optional[V]:
        with self._lock:
            return self._inner.merge(key, value, remapping_function)

    @override
    def hash_code(self) -> int:
        with self._lock:
            return self._inner.hash_code()

    @override
    def __eq__(self, other: Any) -> bool:
        if other is self:
            return True
        with self._lock:
            return self._inner.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    @override
    def __getitem__(self, key: K) -> V:
        with self._lock:
            return self._inner[key]

    @override
    def __delitem__(self, key: K) -> None:
        with self._lock:
            del self._inner[key]
