"""
Cache Value Objects

Immutable value objects for the cache domain.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class CacheStats:
    """
    Snapshot of cache occupancy.

    total_entries always equals valid_entries + expired_entries.
    """

    total_entries: int = 0
    valid_entries: int = 0
    expired_entries: int = 0

    def __post_init__(self) -> None:
        if self.total_entries != self.valid_entries + self.expired_entries:
            raise ValueError("total_entries must equal valid + expired entries")

    def to_dict(self) -> Dict[str, int]:
        """Wire representation used by the diagnostics endpoint."""
        return {
            "totalEntries": self.total_entries,
            "validEntries": self.valid_entries,
            "expiredEntries": self.expired_entries,
        }
