from mutmap.base import MMap
from mutmap.common import Ordering
from mutmap.config import Capabilities, HashConfig
from mutmap.entry import (
    Entry,
    SimpleEntry,
    as_sort_key,
    comparing_by_key,
    comparing_by_value,
)
from mutmap.errors import (
    EntryInvalidated,
    InvalidArgument,
    InvalidState,
    MapError,
    ModificationConflict,
    UnsupportedOperation,
)
from mutmap.hash import HashMMap
from mutmap.locked import LockedMMap
from mutmap.lookup import Absent, Lookup, Present
from mutmap.tree import TreeMMap
from mutmap.unmodifiable import UnmodifiableMMap, unmodifiable

__all__ = [
    "Absent",
    "Capabilities",
    "Entry",
    "EntryInvalidated",
    "HashConfig",
    "HashMMap",
    "InvalidArgument",
    "InvalidState",
    "LockedMMap",
    "Lookup",
    "MMap",
    "MapError",
    "ModificationConflict",
    "Ordering",
    "Present",
    "SimpleEntry",
    "TreeMMap",
    "UnmodifiableMMap",
    "UnsupportedOperation",
    "as_sort_key",
    "comparing_by_key",
    "comparing_by_value",
    "unmodifiable",
]
