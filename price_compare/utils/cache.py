from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Iterable, Optional, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_TTL = 30 * 60


def cache_key(query: str) -> str:
    return f"compare:{query.lower()}"


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: Tuple[T, ...]
    expires_at: float


class ResultCache(Generic[T]):
    """
    In-memory TTL cache for comparison results.

    Values are frozen into tuples on write so readers can never mutate a stored
    snapshot. Expired entries are dropped when read and swept on every write;
    nothing runs in the background.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, *, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be > 0")
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Tuple[T, ...]]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Iterable[T]) -> Tuple[T, ...]:
        snapshot = tuple(value)
        now = self._clock()
        entry = CacheEntry(value=snapshot, expires_at=now + self.ttl)
        with self._lock:
            # Writes sweep expired entries so the map stays bounded by live keys.
            self._sweep(now)
            self._entries[key] = entry
        return snapshot

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            return self._sweep(now)

    def _sweep(self, now: float) -> int:
        stale = [k for k, e in self._entries.items() if now >= e.expires_at]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
