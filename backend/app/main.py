"""
Noticias API - Main FastAPI Application

CRUD backend for noticias with:
- Async PostgreSQL access through SQLAlchemy
- In-process TTL cache in front of paginated listings
- Structured logging with request correlation IDs
- Prometheus metrics
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .constants import APP_NAME, APP_VERSION, TOTAL_COUNT_HEADER
from .core.config import get_settings
from .core.correlation import CorrelationIdMiddleware, get_request_correlation_id
from .core.exceptions import NoticiaException
from .core.logging import configure_logging
from .db import init_database, close_database
from .services.cache import CacheService
from .api.endpoints.health import router as health_router
from .api.endpoints.metrics import router as metrics_router
from .api.endpoints.noticias import router as noticias_router

settings = get_settings()
configure_logging(settings)
logger = structlog.get_logger()


# Application lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager: database up on start, down on stop."""
    logger.info("Starting Noticias API", environment=settings.ENVIRONMENT)

    try:
        await init_database()
        logger.info(
            "Noticias API started successfully",
            version=APP_VERSION,
            environment=settings.ENVIRONMENT,
            cache_default_ttl_ms=app.state.cache_service.default_ttl_ms,
        )
    except Exception:
        logger.exception("Failed to initialize application")
        raise

    yield

    logger.info("Shutting down Noticias API")
    try:
        await close_database()
        logger.info("Application shutdown completed")
    except Exception as e:
        logger.error("Error during application shutdown", error=str(e))


# Create FastAPI application
app = FastAPI(
    title=APP_NAME,
    description="News management backend with cached paginated listings",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Process-wide cache, injected into handlers through get_cache_service
app.state.cache_service = CacheService(default_ttl_ms=settings.CACHE_DEFAULT_TTL_MS)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=[TOTAL_COUNT_HEADER],
)

# Add correlation ID middleware for request tracking
app.add_middleware(CorrelationIdMiddleware)

# Include API routers
app.include_router(health_router)
app.include_router(metrics_router)
app.include_router(noticias_router)


def _error_body(request: Request, status_code: int, message, error: str) -> dict:
    body = {"statusCode": status_code, "message": message, "error": error}
    correlation_id = get_request_correlation_id(request)
    if correlation_id:
        body["correlation_id"] = correlation_id
    return body


def _validation_messages(exc: RequestValidationError) -> list:
    """Flatten pydantic errors into one readable message per problem."""
    messages = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = loc[-1] if loc else "body"
        if error["type"] == "value_error":
            messages.append(error["msg"].removeprefix("Value error, "))
        elif error["type"] == "missing":
            messages.append(f"O campo {field} é obrigatório")
        elif error["type"] == "extra_forbidden":
            messages.append(f"A propriedade {field} não é permitida")
        else:
            messages.append(f"{field}: {error['msg']}")
    return messages


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject invalid input with 400 and a list of messages."""
    messages = _validation_messages(exc)
    logger.warning("Request validation failed", path=request.url.path, errors=messages)
    return JSONResponse(
        status_code=400,
        content=_error_body(request, 400, messages, "Bad Request"),
    )


@app.exception_handler(NoticiaException)
async def noticia_exception_handler(request: Request, exc: NoticiaException):
    """Map domain exceptions to their HTTP status."""
    error = "Not Found" if exc.status_code == 404 else "Internal Server Error"
    if exc.status_code >= 500:
        logger.error(
            "Noticia operation failed",
            path=request.url.path,
            error_code=exc.error_code,
            details=exc.details,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.message, error),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for anything not mapped above."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )

    body = _error_body(
        request, 500, "An unexpected error occurred", "Internal Server Error"
    )
    body["timestamp"] = datetime.now(timezone.utc).isoformat()
    return JSONResponse(status_code=500, content=body)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
