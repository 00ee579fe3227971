"""
Noticia Repository

Record store for news items: point lookups and a paginated, searchable
listing ordered newest first.
"""

from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
import structlog

from app.models import Noticia
from .base import BaseRepository

logger = structlog.get_logger()


class NoticiaRepository(BaseRepository):
    """Noticia-specific repository."""

    def __init__(self, session: AsyncSession):
        """Initialize noticia repository."""
        super().__init__(session, Noticia)

    def create(self, fields: Mapping[str, Any]) -> Noticia:
        """Build a transient Noticia from field values. Nothing is persisted."""
        return Noticia(**fields)

    async def find_by_id(self, noticia_id: int) -> Optional[Noticia]:
        """Get a noticia by id, or None."""
        return await self.get(noticia_id)

    async def find_page(
        self, search: Optional[str], offset: int, limit: int
    ) -> tuple[list[Noticia], int]:
        """
        Get one page of noticias, most recently created first.

        Args:
            search: Case-insensitive substring matched against titulo or
                descricao; no filter when empty
            offset: Number of records to skip
            limit: Maximum records to return

        Returns:
            Tuple of (page records, total matching records)
        """
        if offset < 0:
            raise ValueError("offset must be non-negative")
        if limit < 1:
            raise ValueError("limit must be positive")

        try:
            query = select(Noticia)

            if search:
                pattern = f"%{search}%"
                query = query.where(
                    or_(Noticia.titulo.ilike(pattern), Noticia.descricao.ilike(pattern))
                )

            count_query = select(func.count()).select_from(query.subquery())
            total_result = await self.session.execute(count_query)
            total = total_result.scalar_one()

            query = (
                query.order_by(Noticia.created_at.desc(), Noticia.id.desc())
                .offset(offset)
                .limit(limit)
            )

            result = await self.session.execute(query)
            noticias = list(result.scalars().all())

            logger.debug(
                "NoticiaRepository: Page retrieved",
                search=search,
                offset=offset,
                limit=limit,
                count=len(noticias),
                total=total,
            )

            return noticias, total

        except Exception as e:
            logger.error(
                "NoticiaRepository: Failed to list noticias",
                search=search,
                offset=offset,
                limit=limit,
                error=str(e),
                exc_info=True,
            )
            raise
