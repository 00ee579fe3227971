"""
Cache Domain Module

Entities and value objects for the in-process TTL cache.
"""

from .entities import CacheEntry
from .value_objects import CacheStats

__all__ = ["CacheEntry", "CacheStats"]
