"""
Bounded in-memory caches.

The context analyzer and the agent catalog each take an ``LRUCache`` instead
of relying on module-level dictionaries, so a cache's lifetime and capacity
belong to whoever constructs it.

Eviction policy: least-recently-used. Both ``get`` hits and ``put`` calls
count as a use. When a ``put`` would exceed ``capacity``, the entry that has
gone longest without use is dropped.

Values are treated as immutable. Two concurrent misses for the same key may
both compute and store a value; the last writer wins, which is harmless
because the computation is idempotent. The lock only protects the ordering
structure.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_CAPACITY = 64


class LRUCache(Generic[K, V]):
    """Fixed-capacity key/value cache with least-recently-used eviction."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Cache capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._items: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: K) -> V | None:
        """Return the cached value for ``key`` (marking it used), or None."""
        with self._lock:
            if key not in self._items:
                self.misses += 1
                return None
            self._items.move_to_end(key)
            self.hits += 1
            return self._items[key]

    def put(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, evicting the oldest entry if full."""
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            while len(self._items) > self.capacity:
                self._items.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self.hits = 0
            self.misses = 0

    def keys(self) -> list[K]:
        """Keys ordered from least to most recently used."""
        with self._lock:
            return list(self._items.keys())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
