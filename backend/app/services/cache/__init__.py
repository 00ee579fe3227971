"""
Cache Services

In-process TTL cache used by the noticias read path.
"""

from .cache_service import CacheService, DEFAULT_TTL_MS

__all__ = ["CacheService", "DEFAULT_TTL_MS"]
