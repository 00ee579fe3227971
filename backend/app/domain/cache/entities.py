"""
Cache Domain Entities

Core domain entities for the in-process cache. An entry pairs an opaque
payload with its absolute expiry instant on the cache clock.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    """
    Single stored cache record.

    The value is returned exactly as stored (no copy), so callers must not
    mutate it if they expect coherent reads.
    """

    value: Any
    expires_at: float

    @classmethod
    def create(cls, value: Any, now: float, ttl_ms: float) -> "CacheEntry":
        """Create an entry expiring ttl_ms milliseconds after now."""
        return cls(value=value, expires_at=now + ttl_ms)

    def is_expired(self, now: float) -> bool:
        """Check if entry is stale. The expiry instant itself is still valid."""
        return now > self.expires_at
