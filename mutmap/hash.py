"""Hash table storage strategy using separate chaining.

Keys are hashed into a list of buckets; each bucket is a list of slots. The
table doubles its bucket count when the number of mappings exceeds the load
factor times the capacity. Resizing moves slot objects rather than copying
them, so entry handles stay valid across a resize.

Iteration order is bucket order and is not documented as stable.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple, override

from mutmap import constants
from mutmap.base import MMap, Source
from mutmap.common import equals, hash_or_zero
from mutmap.config import Capabilities, HashConfig
from mutmap.entry import Slot

__all__ = ["HashMMap"]

logger = logging.getLogger(__name__)


class HashMMap[K, V](MMap[K, V]):
    """Mutable hash map. Allows None keys and values unless configured otherwise."""

    def __init__(
        self, source: Optional[Source[K, V]] = None, config: Optional[HashConfig] = None
    ) -> None:
        """Create a map, optionally copying the mappings of source.

        Args:
            source: A map, Python mapping or iterable of pairs to copy from.
            config: Sizing policy and capabilities. Defaults to HashConfig().
        """
        super().__init__()
        self._config = HashConfig() if config is None else config
        self._capacity = self._config.capacity
        self._size = 0
        self._buckets: List[List[Slot[K, V]]] = self._new_buckets(self._capacity)
        if source is not None:
            self.put_all(source)

    @staticmethod
    def empty(config: Optional[HashConfig] = None) -> HashMMap[K, V]:
        return HashMMap(config=config)

    @staticmethod
    def mk(pairs: Source[K, V]) -> HashMMap[K, V]:
        """Create a map from pairs; later pairs overwrite earlier ones."""
        return HashMMap(pairs)

    @staticmethod
    def _new_buckets(capacity: int) -> List[List[Slot[K, V]]]:
        return [[] for _ in range(capacity)]

    def _bucket(self, key: K) -> List[Slot[K, V]]:
        return self._buckets[hash_or_zero(key) % self._capacity]

    def _find(self, key: K) -> Optional[Slot[K, V]]:
        for slot in self._bucket(key):
            if equals(slot.key, key):
                return slot
        return None

    def _resize(self) -> None:
        old_buckets = self._buckets
        new_capacity = self._capacity * constants.GROWTH_FACTOR
        logger.debug(
            "Resizing hash map from %d to %d buckets", self._capacity, new_capacity
        )
        self._capacity = new_capacity
        self._buckets = self._new_buckets(new_capacity)
        for bucket in old_buckets:
            for slot in bucket:
                self._bucket(slot.key).append(slot)

    def capacity(self) -> int:
        """Current number of buckets."""
        return self._capacity

    @override
    def capabilities(self) -> Capabilities:
        return self._config.capabilities

    @override
    def size(self) -> int:
        return self._size

    @override
    def contains_key(self, key: K) -> bool:
        return self._find(key) is not None

    @override
    def get(self, key: K) -> Optional[V]:
        slot = self._find(key)
        return None if slot is None else slot.value

    @override
    def put(self, key: K, value: V) -> Optional[V]:
        self._check_key(key)
        self._check_value(value)
        slot = self._find(key)
        if slot is not None:
            old = slot.value
            slot.value = value
            return old
        self._bucket(key).append(Slot(key, value))
        self._size += 1
        self._mod_count += 1
        if self._size > self._capacity * self._config.load_factor:
            self._resize()
        return None

    @override
    def remove(self, key: K) -> Optional[V]:
        bucket = self._bucket(key)
        for i, slot in enumerate(bucket):
            if equals(slot.key, key):
                bucket.pop(i)
                slot.kill()
                self._size -= 1
                self._mod_count += 1
                return slot.value
        return None

    @override
    def clear(self) -> None:
        if self._size == 0:
            return
        for bucket in self._buckets:
            for slot in bucket:
                slot.kill()
        self._buckets = self._new_buckets(self._capacity)
        self._size = 0
        self._mod_count += 1

    @override
    def _slots(self) -> Iterator[Slot[K, V]]:
        # Snapshot each bucket so removing the current slot is safe
        buckets = self._buckets
        for bucket in buckets:
            snapshot: Tuple[Slot[K, V], ...] = tuple(bucket)
            for slot in snapshot:
                if slot.live:
                    yield slot

    @override
    def copy(self) -> HashMMap[K, V]:
        return HashMMap(self, self._config)
