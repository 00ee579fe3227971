"""
Health check endpoints for the Noticias API.

Liveness, database readiness and cache diagnostics.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from typing import Dict, Any
import time
from datetime import datetime, timezone

import structlog

from ...constants import APP_VERSION
from ...core.config import get_settings
from ...db import get_database_session
from ...services.cache import CacheService
from ..dependencies import get_cache_service

# Track process start time for uptime calculation
PROCESS_START_TIME = time.time()

logger = structlog.get_logger()
router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns a simple health status for load balancers and monitoring systems.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "uptime_seconds": round(time.time() - PROCESS_START_TIME, 3),
    }


@router.get("/ready")
async def readiness_check(
    db: AsyncSession = Depends(get_database_session),
) -> Dict[str, Any]:
    """
    Readiness check endpoint.

    Verifies database connectivity before the instance receives traffic.
    """
    try:
        result = await db.execute(text("SELECT 1"))
        if result.scalar() != 1:
            raise RuntimeError("Database probe returned unexpected result")
    except Exception as e:
        logger.error("Database readiness check failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )

    return {
        "status": "ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {"database": "healthy"},
    }


@router.get("/cache")
async def cache_stats(
    cache_service: CacheService = Depends(get_cache_service),
) -> Dict[str, int]:
    """Cache occupancy for debugging. Never evicts expired entries."""
    return cache_service.get_stats().to_dict()
