"""Bounded in-memory cache for fetched resources.

Entries are keyed by resource identifier and overwritten on every
successful fetch. Capacity is enforced with LRU eviction; an optional
TTL expires entries lazily on lookup.
"""
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Last successfully fetched payload for one identifier."""
    payload: Any
    fetched_at: float


class ResourceCache:
    """LRU cache of resource payloads with optional expiry."""

    def __init__(
        self,
        max_entries: int = 1024,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        # Guards the OrderedDict only; fetches are never serialised on it
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: Hashable) -> Optional[CacheEntry]:
        """Return the live entry for key, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self._is_expired(entry):
                del self._entries[key]
                self._misses += 1
                logger.debug(f"ResourceCache: entry for {key!r} expired")
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            return entry

    def peek(self, key: Hashable) -> Optional[CacheEntry]:
        """Return the live entry for key without touching LRU order or stats."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._is_expired(entry):
                return None
            return entry

    def set(self, key: Hashable, payload: Any) -> CacheEntry:
        """Store payload under key, overwriting any previous entry."""
        entry = CacheEntry(payload=payload, fetched_at=self._clock())
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"ResourceCache: evicted {evicted!r} (capacity {self.max_entries})")
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _is_expired(self, entry: CacheEntry) -> bool:
        if self.ttl_seconds is None:
            return False
        return self._clock() - entry.fetched_at >= self.ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not self._is_expired(entry)

    @property
    def stats(self) -> Dict[str, int]:
        """Counters for hits, misses, evictions and current size."""
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "size": len(self._entries),
            }
