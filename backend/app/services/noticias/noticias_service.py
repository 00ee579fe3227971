"""
Noticias Service

Orchestrates the record store and the cache for the noticia resource.

Read path: listings are cache-aside. The key is derived from
(page, limit, search) and a hit is returned verbatim without touching the
store.

Write path: every successful create, update or delete commits first and
then drops the whole "noticias" namespace, so no listing can outlive a
mutation. A failed write leaves the cache untouched; a failed read never
populates it.
"""

import time
from contextlib import contextmanager
from typing import Iterator

import structlog
from opentelemetry import trace

from ...core.exceptions import NoticiaNotFoundError, NoticiaPersistenceError
from ...domain.noticias import (
    NoticiaCreate,
    NoticiaUpdate,
    NoticiaRead,
    NoticiaPage,
    PaginationQuery,
)
from ...models import Noticia
from ...monitoring import metrics
from ...repositories import NoticiaRepository
from ..cache import CacheService

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

CACHE_PREFIX = "noticias"


@contextmanager
def _timed(operation: str) -> Iterator[None]:
    start_time = time.perf_counter()
    try:
        yield
    finally:
        metrics.noticias_query_duration_seconds.labels(operation=operation).observe(
            time.perf_counter() - start_time
        )


class NoticiasService:
    """CRUD operations for noticias with cached listings."""

    def __init__(self, repository: NoticiaRepository, cache_service: CacheService):
        self.repository = repository
        self.cache_service = cache_service

    async def create(self, data: NoticiaCreate) -> Noticia:
        """Create a noticia and invalidate cached listings."""
        with tracer.start_as_current_span("noticias_service.create"):
            try:
                with _timed("create"):
                    noticia = self.repository.create(data.model_dump())
                    result = await self.repository.save(noticia)
                    await self.repository.commit()
            except Exception as e:
                logger.error("Failed to create noticia", error=str(e))
                raise NoticiaPersistenceError("Erro ao criar notícia", e) from e

            self.cache_service.invalidate_by_prefix(CACHE_PREFIX)
            logger.info("Noticia created", noticia_id=result.id)
            return result

    async def find_all(self, query: PaginationQuery) -> NoticiaPage:
        """
        List noticias, newest first, with optional search.

        Args:
            query: page, limit and optional search text

        Returns:
            NoticiaPage, possibly served from cache
        """
        with tracer.start_as_current_span("noticias_service.find_all") as span:
            cache_key = self.cache_service.generate_key(
                CACHE_PREFIX,
                {
                    "page": query.page,
                    "limit": query.limit,
                    "search": query.search or "all",
                },
            )
            span.set_attribute("cache_key", cache_key)

            cached = self.cache_service.get(cache_key)
            if cached is not None:
                span.set_attribute("cache_hit", True)
                return cached

            span.set_attribute("cache_hit", False)

            try:
                with _timed("find_page"):
                    noticias, total = await self.repository.find_page(
                        query.search or None, query.offset, query.limit
                    )
            except Exception as e:
                logger.error("Failed to list noticias", error=str(e))
                raise NoticiaPersistenceError("Erro ao buscar notícias", e) from e

            result = NoticiaPage.build(
                data=[NoticiaRead.model_validate(n) for n in noticias],
                total=total,
                page=query.page,
                limit=query.limit,
            )

            self.cache_service.set(cache_key, result)
            return result

    async def find_one(self, noticia_id: int) -> Noticia:
        """
        Get a single noticia.

        Raises:
            NoticiaNotFoundError: If no noticia has this id
            NoticiaPersistenceError: On any unexpected store failure
        """
        try:
            with _timed("find_by_id"):
                noticia = await self.repository.find_by_id(noticia_id)
        except Exception as e:
            logger.error("Failed to get noticia", noticia_id=noticia_id, error=str(e))
            raise NoticiaPersistenceError("Erro ao buscar notícia", e) from e

        if noticia is None:
            raise NoticiaNotFoundError(noticia_id)

        return noticia

    async def update(self, noticia_id: int, data: NoticiaUpdate) -> Noticia:
        """Apply the provided fields to a noticia and invalidate cached listings."""
        with tracer.start_as_current_span("noticias_service.update"):
            noticia = await self.find_one(noticia_id)
            changes = data.changes()

            try:
                with _timed("update"):
                    for field, value in changes.items():
                        setattr(noticia, field, value)
                    result = await self.repository.save(noticia)
                    await self.repository.commit()
            except Exception as e:
                logger.error(
                    "Failed to update noticia", noticia_id=noticia_id, error=str(e)
                )
                raise NoticiaPersistenceError("Erro ao atualizar notícia", e) from e

            self.cache_service.invalidate_by_prefix(CACHE_PREFIX)
            logger.info(
                "Noticia updated",
                noticia_id=noticia_id,
                updated_fields=list(changes.keys()),
            )
            return result

    async def remove(self, noticia_id: int) -> None:
        """Delete a noticia and invalidate cached listings."""
        with tracer.start_as_current_span("noticias_service.remove"):
            noticia = await self.find_one(noticia_id)

            try:
                with _timed("remove"):
                    await self.repository.remove(noticia)
                    await self.repository.commit()
            except Exception as e:
                logger.error(
                    "Failed to remove noticia", noticia_id=noticia_id, error=str(e)
                )
                raise NoticiaPersistenceError("Erro ao remover notícia", e) from e

            self.cache_service.invalidate_by_prefix(CACHE_PREFIX)
            logger.info("Noticia removed", noticia_id=noticia_id)
