"""Thread-safe LRU result cache with per-entry TTL.

Entries live in an ``OrderedDict`` kept in access order: a hit moves the
entry to the end, and insertion past ``max_size`` pops from the front.
Expired entries are dropped lazily when looked up and eagerly by
:meth:`ResultCache.sweep`.

Thread-Safety:
    One ``threading.Lock`` per instance guards the dict and the counters.
    The lock is never held while a caller computes a value.

"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from stencil.environment.options import DEFAULT_CACHE_SIZE, DEFAULT_TTL

logger = logging.getLogger(__name__)


class _Miss:
    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISS"


MISS = _Miss()


@dataclass(slots=True)
class CacheEntry:
    """A cached value with its bookkeeping.

    Attributes:
        value: The cached result
        inserted_at: Clock reading at insertion
        ttl: Seconds the entry stays visible
        access_count: Number of hits served
        last_accessed_at: Clock reading at the last hit (or insertion)
    """

    value: Any
    inserted_at: float
    ttl: float
    access_count: int = 0
    last_accessed_at: float = 0.0

    def is_expired(self, now: float) -> bool:
        return now - self.inserted_at >= self.ttl


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Point-in-time cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0
    max_size: int = 0

    @property
    def hit_rate(self) -> float:
        """``hits / (hits + misses)``, or 0.0 before any request."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def __add__(self, other: CacheStats) -> CacheStats:
        return CacheStats(
            hits=self.hits + other.hits,
            misses=self.misses + other.misses,
            evictions=self.evictions + other.evictions,
            size=self.size + other.size,
            max_size=self.max_size + other.max_size,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "size": self.size,
            "max_size": self.max_size,
            "hit_rate": self.hit_rate,
        }


class ResultCache:
    """Bounded key/value cache with LRU eviction and lazy TTL expiry.

    Args:
        max_size: Entries kept before the least-recently accessed is evicted
        default_ttl: Seconds an entry stays visible when ``set`` gets no ttl
        clock: Monotonic time source; tests inject a fake one
        name: Label used in log messages

    Example:
        >>> cache = ResultCache(max_size=2)
        >>> cache.set("a", 1)
        >>> cache.get("a")
        1
        >>> cache.get("b") is MISS
        True

    """

    def __init__(
        self,
        max_size: int = DEFAULT_CACHE_SIZE,
        default_ttl: float = DEFAULT_TTL,
        *,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.name = name
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> Any:
        """Return the cached value, or ``MISS`` if absent or expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return MISS
            if entry.is_expired(now):
                del self._entries[key]
                self._misses += 1
                logger.debug("%s: expired %s", self.name, key)
                return MISS
            self._entries.move_to_end(key)
            entry.access_count += 1
            entry.last_accessed_at = now
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Insert or replace ``key``, evicting the LRU entry when full."""
        now = self._clock()
        entry = CacheEntry(
            value=value,
            inserted_at=now,
            ttl=self.default_ttl if ttl is None else ttl,
            last_accessed_at=now,
        )
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("%s: evicted %s", self.name, evicted)
            self._entries[key] = entry

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``."""
        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Drop every expired entry now. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("%s: swept %d expired entries", self.name, len(expired))
        return len(expired)

    def reset_stats(self) -> None:
        with self._lock:
            self._hits = self._misses = self._evictions = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._entries),
                max_size=self.max_size,
            )

    def peek(self, key: str) -> CacheEntry | None:
        """Return the raw entry without touching LRU order or counters."""
        with self._lock:
            return self._entries.get(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """True if ``key`` is present and not expired. Does not count as a hit."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not entry.is_expired(now)

    def __repr__(self) -> str:
        return f"<ResultCache {self.name} {len(self)}/{self.max_size}>"
