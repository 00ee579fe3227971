"""
Noticias API Database Entry Points

Backward-compatible API that delegates to the DatabaseManager in
core.database.
"""

import logging

from ..core.database import database_manager, get_database_session

# Re-export the canonical Base from models to maintain backward compatibility
from ..models import Base

logger = logging.getLogger(__name__)


async def init_database() -> None:
    """
    Initialize database connection and create tables when configured.

    Delegates to DatabaseManager.initialize() for retry logic and schema setup.
    """
    try:
        await database_manager.initialize()
        logger.info("Database initialized successfully")
    except Exception:
        logger.exception("Failed to initialize database")
        raise


async def close_database() -> None:
    """Close database connections and cleanup resources."""
    try:
        await database_manager.close()
        logger.info("Database connections closed")
    except Exception:
        logger.exception("Failed to close database connections")
        raise


__all__ = ["Base", "init_database", "get_database_session", "close_database"]
