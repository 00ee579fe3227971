"""
Noticias API Database Configuration

Database connection management with:
- Async engine and session factory lifecycle
- Connection retry logic with exponential backoff
- Optional schema creation at startup
- Per-request sessions with rollback on failure
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
import structlog

from .config import Settings, get_settings
from ..models import Base

logger = structlog.get_logger()


class DatabaseManager:
    """
    Database connection manager.

    Owns the AsyncEngine and session factory for the lifetime of the
    application. initialize() must run before sessions are requested.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    def _create_engine(self) -> AsyncEngine:
        """Create the async engine; pool tuning applies to PostgreSQL only."""
        options = {"echo": self.settings.DATABASE_ECHO}

        if not self.settings.is_sqlite:
            options.update(
                pool_size=self.settings.DATABASE_POOL_SIZE,
                max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
                pool_pre_ping=True,
                pool_recycle=3600,
                connect_args={
                    "server_settings": {"application_name": "noticias_api"},
                },
            )

        return create_async_engine(self.settings.DATABASE_URL, **options)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((OperationalError, ConnectionError, OSError)),
        before_sleep=lambda retry_state: logger.warning(
            "Database connection retry",
            attempt=retry_state.attempt_number,
            wait_time=retry_state.next_action.sleep,
        ),
        reraise=True,
    )
    async def _verify_connection(self) -> None:
        """Run a trivial query to prove the database is reachable."""
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            if result.scalar() != 1:
                raise RuntimeError("Database connectivity check returned unexpected result")

    async def initialize(self) -> None:
        """Create engine and session factory, verify connectivity, create tables."""
        start_time = time.time()

        try:
            self.engine = self._create_engine()
            self.session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            await self._verify_connection()

            if self.settings.auto_create_tables:
                await self.create_tables()

            logger.info(
                "Database initialized successfully",
                duration_seconds=time.time() - start_time,
                auto_create_tables=self.settings.auto_create_tables,
            )

        except Exception as e:
            logger.error(
                "Database initialization failed",
                error=str(e),
                exc_info=True,
            )
            raise

    async def create_tables(self) -> None:
        """Create all mapped tables that do not exist yet."""
        if not self.engine:
            raise RuntimeError("Database engine not initialized")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables ensured", tables=sorted(Base.metadata.tables))

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get database session with transaction management.

        Yields:
            AsyncSession: committed on clean exit, rolled back on error
        """
        if not self.session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()

            except Exception as e:
                await session.rollback()

                logger.error(
                    "Database transaction failed",
                    error=str(e),
                    exc_info=True,
                )
                raise

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database engine disposed")


# Global database manager instance
database_manager = DatabaseManager()


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with database_manager.get_session() as session:
        yield session
