"""
Noticias API Correlation ID Middleware

Implements correlation ID management for request tracking.

Features:
- Automatic UUID v4 correlation ID generation for new requests
- Respects existing correlation ID from request headers
- Binds the ID into structlog context so every log line carries it
- Adds correlation ID to response headers
"""

import re
import uuid
from typing import Optional, Callable, Awaitable

import structlog
from fastapi import Request
from starlette.types import ASGIApp
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response as StarletteResponse

logger = structlog.get_logger()

CORRELATION_ID_PATTERN = re.compile(r"^[a-zA-Z0-9\-_\.]{8,255}$")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware for managing correlation IDs in HTTP requests.

    Generates or extracts a correlation ID, exposes it on request.state and
    in structlog context, and echoes it in the response headers.
    """

    def __init__(self, app: ASGIApp, header_name: str = "x-correlation-id"):
        """
        Initialize correlation ID middleware.

        Args:
            app: ASGI application
            header_name: Header name for correlation ID
        """
        super().__init__(app)
        self.header_name = header_name.lower()

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[StarletteResponse]],
    ) -> StarletteResponse:
        """Process request and manage correlation ID."""
        correlation_id = self._extract_or_generate_correlation_id(request)
        request.state.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
            response.headers[self.header_name] = correlation_id

            logger.info("Request completed", status_code=response.status_code)
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    def _extract_or_generate_correlation_id(self, request: Request) -> str:
        """Extract a well-formed correlation ID from headers or generate one."""
        correlation_id = request.headers.get(self.header_name, "").strip()

        if correlation_id and CORRELATION_ID_PATTERN.match(correlation_id):
            return correlation_id

        if correlation_id:
            logger.warning(
                "Invalid correlation ID format in request header, generating new one",
                received_correlation_id=correlation_id[:64],
            )

        return str(uuid.uuid4())


def get_request_correlation_id(request: Request) -> Optional[str]:
    """Correlation ID assigned to the request, if the middleware ran."""
    return getattr(request.state, "correlation_id", None)
