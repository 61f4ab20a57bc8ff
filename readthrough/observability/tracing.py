"""OpenTelemetry tracing utilities for Readthrough."""

from opentelemetry import trace


def get_tracer(name: str = "readthrough") -> trace.Tracer:
    """Get OpenTelemetry tracer instance.

    Args:
        name: Tracer name (usually module name)

    Returns:
        Tracer instance (no-op if telemetry disabled)
    """
    return trace.get_tracer(name)
