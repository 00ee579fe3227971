"""
Base Repository

Base repository pattern over an AsyncSession. Repositories log failures
with full context and re-raise them unchanged; translating errors for the
API is the service layer's job.
"""

from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import structlog

from app.models import Base

logger = structlog.get_logger()


class BaseRepository:
    """
    Base repository with common persistence operations.

    NOTE: No generics for simplicity. Each repository subclass specifies
    its model type directly.
    """

    def __init__(self, session: AsyncSession, model: Type[Base]):
        """
        Initialize repository with strict input validation.

        Args:
            session: AsyncSession for database operations
            model: SQLAlchemy model class

        Raises:
            TypeError: If session is not AsyncSession or model is invalid
        """
        if not isinstance(session, AsyncSession):
            raise TypeError(
                f"session must be AsyncSession instance, got {type(session).__name__}"
            )

        if not model or not hasattr(model, "__tablename__"):
            raise TypeError(
                f"model must be valid SQLAlchemy model with __tablename__, got {type(model).__name__}"
            )

        self.session = session
        self.model = model

    async def get(self, id: int) -> Optional[Base]:
        """
        Get entity by primary key.

        Returns:
            Entity if found, None otherwise
        """
        try:
            stmt = select(self.model).where(self.model.id == id)
            result = await self.session.execute(stmt)
            entity = result.scalar_one_or_none()

            if entity:
                logger.debug(
                    "Repository: Entity retrieved",
                    model=self.model.__name__,
                    entity_id=id,
                )

            return entity

        except Exception as e:
            logger.error(
                "Repository: Failed to get entity",
                model=self.model.__name__,
                entity_id=id,
                error=str(e),
                exc_info=True,
            )
            raise

    async def save(self, obj: Base) -> Base:
        """
        Insert or update an entity.

        New instances are added to the session; attached instances are just
        flushed. The entity is refreshed so server-side defaults are loaded.
        """
        if obj is None:
            raise ValueError("Entity object is required (cannot be None)")

        try:
            self.session.add(obj)
            await self.session.flush()
            await self.session.refresh(obj)

            logger.info(
                "Repository: Entity saved",
                model=self.model.__name__,
                entity_id=obj.id,
            )

            return obj

        except Exception as e:
            logger.error(
                "Repository: Failed to save entity",
                model=self.model.__name__,
                error=str(e),
                exc_info=True,
            )
            raise

    async def remove(self, obj: Base) -> None:
        """Hard delete an entity."""
        if obj is None:
            raise ValueError("Entity object is required (cannot be None)")

        entity_id = obj.id
        try:
            await self.session.delete(obj)
            await self.session.flush()

            logger.info(
                "Repository: Entity deleted",
                model=self.model.__name__,
                entity_id=entity_id,
            )

        except Exception as e:
            logger.error(
                "Repository: Failed to delete entity",
                model=self.model.__name__,
                entity_id=entity_id,
                error=str(e),
                exc_info=True,
            )
            raise

    async def commit(self) -> None:
        """Commit the current transaction so changes are durable."""
        await self.session.commit()
