"""OpenTelemetry metrics for the cache layer.

Metrics:
    - readthrough.cache.lookups: Counter of lookups by namespace and outcome
      (hit, miss, error)
    - readthrough.cache.writes: Counter of background writes by namespace and
      outcome (ok, error)
"""

from opentelemetry import metrics

from readthrough.core.config import settings

# Global meter instance
_meter: metrics.Meter | None = None

# Metric instruments (created on first access)
_cache_lookups_counter: metrics.Counter | None = None
_cache_writes_counter: metrics.Counter | None = None


def get_meter(name: str = "readthrough") -> metrics.Meter:
    """Get OpenTelemetry meter instance (no-op if telemetry disabled)."""
    global _meter
    if _meter is None:
        _meter = metrics.get_meter(name)
    return _meter


def _enabled() -> bool:
    return settings.otel_enabled and settings.otel_metrics_enabled


def _ensure_instruments() -> None:
    """Lazy initialization of metric instruments."""
    global _cache_lookups_counter
    global _cache_writes_counter

    meter = get_meter()

    if _cache_lookups_counter is None:
        _cache_lookups_counter = meter.create_counter(
            name="readthrough.cache.lookups",
            description="Number of cache lookups by outcome",
            unit="1",
        )

    if _cache_writes_counter is None:
        _cache_writes_counter = meter.create_counter(
            name="readthrough.cache.writes",
            description="Number of cache writes by outcome",
            unit="1",
        )


def record_cache_lookup(namespace: str, outcome: str) -> None:
    """Record a cache lookup.

    Args:
        namespace: Key namespace of the cache stage
        outcome: "hit", "miss", or "error"
    """
    if not _enabled():
        return

    _ensure_instruments()

    if _cache_lookups_counter:
        _cache_lookups_counter.add(1, {"namespace": namespace, "outcome": outcome})


def record_cache_write(namespace: str, outcome: str) -> None:
    """Record a background cache write ("ok" or "error")."""
    if not _enabled():
        return

    _ensure_instruments()

    if _cache_writes_counter:
        _cache_writes_counter.add(1, {"namespace": namespace, "outcome": outcome})
