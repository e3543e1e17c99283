from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
import time
from typing import Callable, Generic, Hashable, TypeVar


V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    payload: V
    timestamp: float


@dataclass(frozen=True)
class CacheStats:
    size: int
    ttl_seconds: float
    fresh: int
    stale: int


class TtlCache(Generic[V]):
    """Process-wide map of timestamped entries.

    An entry is served while ``now - timestamp < ttl_seconds``. Reading an
    expired entry drops it, so the caller refetches. A non-positive TTL turns
    the cache off.
    """

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry[V]] = {}
        self._lock = Lock()

    def _is_fresh(self, entry: CacheEntry[V], now: float) -> bool:
        return (now - entry.timestamp) < self.ttl_seconds

    def get_entry(self, key: Hashable) -> CacheEntry[V] | None:
        if self.ttl_seconds <= 0:
            return None
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_fresh(entry, now):
                self._entries.pop(key, None)
                return None
            return entry

    def get(self, key: Hashable) -> V | None:
        entry = self.get_entry(key)
        return entry.payload if entry is not None else None

    def set(self, key: Hashable, value: V) -> None:
        if self.ttl_seconds <= 0:
            return
        with self._lock:
            self._entries[key] = CacheEntry(payload=value, timestamp=self._clock())

    def get_or_load(self, key: Hashable, loader: Callable[[], V]) -> tuple[V, bool]:
        entry = self.get_entry(key)
        if entry is not None:
            return entry.payload, True
        value = loader()
        self.set(key, value)
        return value, False

    def clear(self, match: Callable[[Hashable], bool] | None = None) -> int:
        """Drops every entry, or only those whose key satisfies ``match``."""
        with self._lock:
            if match is None:
                size = len(self._entries)
                self._entries.clear()
                return size
            keys = [key for key in self._entries if match(key)]
            for key in keys:
                del self._entries[key]
        return len(keys)

    def prune(self) -> int:
        now = self._clock()
        with self._lock:
            stale = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            entries = list(self._entries.values())
        fresh = sum(1 for entry in entries if self._is_fresh(entry, now))
        return CacheStats(
            size=len(entries),
            ttl_seconds=self.ttl_seconds,
            fresh=fresh,
            stale=len(entries) - fresh,
        )
