"""
Cache Service

Process-local key/value store with time-based expiry and literal prefix
invalidation. Sits in front of expensive paginated reads; a miss is never
an error, callers always fall back to the record store.

Entries expire lazily: a stale entry is removed when a get() touches it or
when a bulk operation (invalidate_by_prefix, clear) sweeps it. There is no
background timer and no size bound.
"""

import threading
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

import structlog

from ...domain.cache import CacheEntry, CacheStats
from ...monitoring import metrics

logger = structlog.get_logger()

DEFAULT_TTL_MS = 5 * 60 * 1000


def monotonic_ms() -> float:
    """Default cache clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000


class CacheService:
    """
    In-memory TTL cache.

    One instance is created per process and injected where needed. Every
    public operation runs under a single re-entrant lock and reads the clock
    once, so prefix scans and statistics see a consistent snapshot even
    when handlers run in worker threads.
    """

    def __init__(
        self,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        """
        Initialize cache service.

        Args:
            default_ttl_ms: TTL applied when set() gets no explicit ttl_ms
            clock: Zero-argument callable returning the current time in ms
        """
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    @staticmethod
    def generate_key(prefix: str, params: Mapping[str, Any]) -> str:
        """
        Build a deterministic key from a prefix and a parameter mapping.

        Parameter names are sorted, so construction order does not matter:
        generate_key("prefix", {"b": 2, "a": 1}) == "prefix:a:1|b:2"
        """
        rendered = "|".join(f"{name}:{params[name]}" for name in sorted(params))
        return f"{prefix}:{rendered}"

    def set(self, key: str, value: Any, ttl_ms: Optional[float] = None) -> None:
        """
        Store value under key, replacing any previous entry.

        Args:
            key: Cache key
            value: Opaque payload, stored as-is
            ttl_ms: Time to live in milliseconds (default TTL if None).
                Zero or negative values are accepted and expire immediately.
        """
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms

        with self._lock:
            self._entries[key] = CacheEntry.create(value, self._clock(), ttl)

        logger.debug("Cache entry stored", key=key, ttl_ms=ttl)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Return the stored value, or default when absent or expired.

        An expired entry is removed on the way out. A read at exactly the
        expiry instant is still a hit.
        """
        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                metrics.cache_misses_total.labels(reason="absent").inc()
                logger.debug("Cache miss", key=key)
                return default

            if entry.is_expired(self._clock()):
                del self._entries[key]
                metrics.cache_misses_total.labels(reason="expired").inc()
                logger.debug("Cache entry expired", key=key)
                return default

        metrics.cache_hits_total.inc()
        logger.debug("Cache hit", key=key)
        return entry.value

    def invalidate_by_prefix(self, prefix: str) -> int:
        """
        Remove every entry whose key starts with prefix (literal match).

        Matching keys are collected first and deleted afterwards.

        Returns:
            Number of entries removed
        """
        with self._lock:
            keys_to_delete: List[str] = [
                key for key in self._entries if key.startswith(prefix)
            ]
            for key in keys_to_delete:
                del self._entries[key]

        if keys_to_delete:
            metrics.cache_invalidations_total.inc(len(keys_to_delete))
        logger.debug(
            "Cache invalidated by prefix", prefix=prefix, removed=len(keys_to_delete)
        )
        return len(keys_to_delete)

    def delete(self, key: str) -> bool:
        """Remove one entry. Returns True only if an entry was removed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()
        logger.debug("Cache cleared")

    def get_stats(self) -> CacheStats:
        """
        Count valid and expired entries without removing anything.

        Unlike get(), this never evicts, so repeated calls at the same
        instant return identical counts.
        """
        with self._lock:
            now = self._clock()
            expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
            total = len(self._entries)

        return CacheStats(
            total_entries=total,
            valid_entries=total - expired,
            expired_entries=expired,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
