"""Observability for Readthrough.

Structured logging (structlog) plus optional OpenTelemetry traces and
metrics exported over OTLP.

Instrumented Components:
    - FastAPI requests (auto-instrumentation)
    - Redis operations (auto-instrumentation)
    - Cache lookups and writes per namespace
"""

from readthrough.observability.logging import (
    LogEvents,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from readthrough.observability.metrics import (
    get_meter,
    record_cache_lookup,
    record_cache_write,
)
from readthrough.observability.setup import setup_telemetry, shutdown_telemetry
from readthrough.observability.tracing import get_tracer

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "LogEvents",
    "setup_telemetry",
    "shutdown_telemetry",
    "get_tracer",
    "get_meter",
    "record_cache_lookup",
    "record_cache_write",
]
