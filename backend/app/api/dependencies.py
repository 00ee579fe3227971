"""
API Dependencies

FastAPI dependency providers. The cache instance is created once by the
application and read from app.state; repositories and services are built
per request around the request's database session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_database_session
from ..repositories import NoticiaRepository
from ..services.cache import CacheService
from ..services.noticias import NoticiasService


def get_cache_service(request: Request) -> CacheService:
    """Return the process-wide cache owned by the application."""
    return request.app.state.cache_service


def get_noticias_service(
    session: AsyncSession = Depends(get_database_session),
    cache_service: CacheService = Depends(get_cache_service),
) -> NoticiasService:
    """Build the noticias service for the current request."""
    return NoticiasService(NoticiaRepository(session), cache_service)
