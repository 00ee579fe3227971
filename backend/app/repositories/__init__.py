"""
Repository Pattern Implementation

All data access goes through repositories.
"""

from .base import BaseRepository
from .noticia import NoticiaRepository

__all__ = [
    "BaseRepository",
    "NoticiaRepository",
]
