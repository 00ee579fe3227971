"""
Noticias Domain Module

Request and response schemas for the noticia resource.
"""

from .schemas import (
    NoticiaCreate,
    NoticiaUpdate,
    NoticiaRead,
    NoticiaPage,
    PaginationQuery,
)

__all__ = [
    "NoticiaCreate",
    "NoticiaUpdate",
    "NoticiaRead",
    "NoticiaPage",
    "PaginationQuery",
]
