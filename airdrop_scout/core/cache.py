"""
Bounded-lifetime key/value cache.

Entries expire ttl_seconds after their last set(); expired entries are
evicted lazily on get(). No background thread and no locking: get() is a
single read-or-evict and set() a plain overwrite, so last writer wins.
"""

from __future__ import annotations

import time
from typing import Callable, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class TtlCache(Generic[K, V]):
    """Map key -> (value, absolute expiry)."""

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._store: dict[K, tuple[V, float]] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: K) -> V | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() > expires_at:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: K, value: V) -> None:
        self._store[key] = (value, self._clock() + self._ttl)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
