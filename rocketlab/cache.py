"""A small two-level memoisation cache with usage statistics."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Generic, Hashable, NamedTuple, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_L2_CAPACITY = 16


@dataclass
class CacheStats:
    """Counters describing how a two-level cache has been used."""

    l2_capacity: int = 0
    l2_valid_entries: int = 0
    l1_hits: int = 0
    l2_hits: int = 0
    misses: int = 0
    writes: int = 0

    def hit_rate_percent(self) -> float:
        """Share of lookups served from either level, in percent."""
        requests = self.l1_hits + self.l2_hits + self.misses
        if requests <= 0:
            return 0.0
        return (self.l1_hits + self.l2_hits) / requests * 100.0


class _Entry(NamedTuple):
    key: object
    value: object


class TwoLevelCache(Generic[K, V]):
    """A one-entry L1 in front of a fixed-size round-robin L2.

    Misses are computed, stored in L1 and written to the next L2 slot;
    L2 hits are promoted to L1.
    """

    def __init__(self, capacity: int = DEFAULT_L2_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("cache capacity must be at least 1")
        self._capacity = capacity
        self.clear()

    def lookup(self, key: K, compute: Callable[[], V]) -> V:
        """Return the cached value for key, computing and storing it on a miss."""
        if self._l1 is not None and self._l1.key == key:
            self._stats.l1_hits += 1
            return self._l1.value  # type: ignore[return-value]

        for entry in self._l2:
            if entry is not None and entry.key == key:
                self._l1 = entry
                self._stats.l2_hits += 1
                return entry.value  # type: ignore[return-value]

        entry = _Entry(key, compute())
        self._l1 = entry
        self._l2[self._next_slot] = entry
        self._next_slot = (self._next_slot + 1) % self._capacity
        self._stats.misses += 1
        self._stats.writes += 1
        return entry.value  # type: ignore[return-value]

    def stats(self) -> CacheStats:
        """A snapshot of the usage counters."""
        valid = sum(1 for entry in self._l2 if entry is not None)
        return replace(self._stats, l2_valid_entries=valid)

    def clear(self) -> None:
        """Drop every entry and reset the counters."""
        self._l1: Optional[_Entry] = None
        self._l2: list[Optional[_Entry]] = [None] * self._capacity
        self._next_slot = 0
        self._stats = CacheStats(l2_capacity=self._capacity)