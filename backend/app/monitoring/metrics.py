"""
Noticias API Prometheus Metrics

Metrics live in a dedicated registry so the /metrics endpoint only exposes
application series. Instruments are module-level; CacheService instances
share them.
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    CONTENT_TYPE_LATEST,
    generate_latest,
)

registry = CollectorRegistry()

cache_hits_total = Counter(
    "noticias_cache_hits_total",
    "Total number of cache lookups that returned a stored value",
    registry=registry,
)
cache_misses_total = Counter(
    "noticias_cache_misses_total",
    "Total number of cache lookups that found no valid entry",
    ["reason"],
    registry=registry,
)
cache_invalidations_total = Counter(
    "noticias_cache_invalidations_total",
    "Total number of entries removed by prefix invalidation",
    registry=registry,
)
noticias_query_duration_seconds = Histogram(
    "noticias_query_duration_seconds",
    "Time spent in record store operations",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
    registry=registry,
)


def render_latest() -> tuple[bytes, str]:
    """Render the registry in the Prometheus text format."""
    return generate_latest(registry), CONTENT_TYPE_LATEST
