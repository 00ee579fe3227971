"""
Prometheus metrics endpoint.
"""

from fastapi import APIRouter, Response

from ...monitoring.metrics import render_latest

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def prometheus_metrics() -> Response:
    """Expose application metrics in the Prometheus text format."""
    payload, content_type = render_latest()
    return Response(content=payload, media_type=content_type)
