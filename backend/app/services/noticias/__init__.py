"""
Noticias Services

Read/write path for noticias with cache-aside listings.
"""

from .noticias_service import NoticiasService, CACHE_PREFIX

__all__ = ["NoticiasService", "CACHE_PREFIX"]
