"""Configuration for mutmap storage strategies.

Capabilities are declared by each strategy rather than fixed by the core:
whether None may be stored as a key or value, whether the map rejects
mutation, and whether iteration follows a documented order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from mutmap import constants
from mutmap.errors import InvalidArgument

__all__ = ["Capabilities", "HashConfig"]


@dataclass(frozen=True)
class Capabilities:
    """Capabilities a map declares to its callers."""

    none_keys: bool = True  # None is a legal key
    none_values: bool = True  # None is a legal stored value
    read_only: bool = False  # Every mutation raises UnsupportedOperation
    ordered: bool = False  # Iteration follows key order

    def as_read_only(self) -> Capabilities:
        """Return the same capabilities with mutation switched off.

        Returns:
            A copy of these capabilities with read_only set.
        """
        return replace(self, read_only=True)


@dataclass(frozen=True)
class HashConfig:
    """Sizing policy and capabilities for a HashMMap.

    Hash maps are always writable and unordered; wrap one in an
    UnmodifiableMMap for a read-only map.
    """

    capacity: int = constants.DEFAULT_CAPACITY
    load_factor: float = constants.DEFAULT_LOAD_FACTOR
    capabilities: Capabilities = field(default_factory=Capabilities)

    def __post_init__(self) -> None:
        if self.capacity < constants.MIN_CAPACITY:
            raise InvalidArgument(
                "capacity", f"must be at least {constants.MIN_CAPACITY}"
            )
        if not self.load_factor > 0:
            raise InvalidArgument("load_factor", "must be positive")
        if self.capabilities.read_only or self.capabilities.ordered:
            raise InvalidArgument(
                "capabilities", "hash maps are writable and unordered"
            )
