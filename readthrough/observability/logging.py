"""Structured logging configuration for Readthrough.

This module provides structured logging using structlog. Logs are output
as JSON in production for easy parsing by log aggregators, and as colored
console lines in development.

Configuration:
    Set via environment variables:
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - LOG_FORMAT: json, console (default: json in production, console in dev)
    - ENVIRONMENT: development, production (affects format default)

Usage:
    >>> from readthrough.observability.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("cache_hit", key="data:/api/v1/users?amount=3")

Standard Events:
    Cache:
        - cache_hit: Response served from the store
        - cache_miss: No entry, delegating to the handler
        - cache_lookup_failed: Store lookup failed, treated as a miss
        - cache_written: Captured response stored with TTL
        - cache_write_failed: Background write failed
        - cache_serialization_failed: Payload could not be encoded/decoded

    Store:
        - store_connected / store_connection_failed / store_closed
        - circuit_breaker_opened / circuit_breaker_half_open / circuit_breaker_closed
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

# Module-level flag to track initialization
_configured = False


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
    is_production: bool | None = None,
) -> None:
    """Configure structured logging for the application.

    Should be called once at application startup. Safe to call multiple times
    (subsequent calls are no-ops).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Default from LOG_LEVEL env.
        log_format: Output format (json, console). Default based on environment.
        is_production: Override production detection. Default from ENVIRONMENT env.
    """
    global _configured
    if _configured:
        return

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()

    if is_production is None:
        is_production = os.getenv("ENVIRONMENT", "development").lower() == "production"

    if log_format is None:
        log_format = os.getenv("LOG_FORMAT", "json" if is_production else "console")

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    The returned logger is a lazy proxy, so module-level loggers created at
    import time pick up whatever configure_logging() installs at startup.

    Args:
        name: Logger name (typically __name__). If None, returns root logger.

    Returns:
        structlog BoundLogger proxy.
    """
    logger: structlog.stdlib.BoundLogger = structlog.stdlib.get_logger(name)
    return logger


def bind_context(**kwargs: Any) -> None:
    """Bind context variables to all subsequent log calls in this context.

    Used by the request logging middleware to attach method and path to
    every cache event emitted while the request is handled.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


class LogEvents:
    """Standard event names for structured logging.

    Example:
        >>> logger.info(LogEvents.CACHE_HIT, key=key)
    """

    # Cache events
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    CACHE_LOOKUP_FAILED = "cache_lookup_failed"
    CACHE_WRITTEN = "cache_written"
    CACHE_WRITE_FAILED = "cache_write_failed"
    CACHE_SERIALIZATION_FAILED = "cache_serialization_failed"
    DUPLICATE_EMISSION = "duplicate_emission_ignored"

    # Store events
    STORE_CONNECTED = "store_connected"
    STORE_CONNECTION_FAILED = "store_connection_failed"
    STORE_CLOSED = "store_closed"
    CIRCUIT_BREAKER_OPENED = "circuit_breaker_opened"
    CIRCUIT_BREAKER_CLOSED = "circuit_breaker_closed"
    CIRCUIT_BREAKER_HALF_OPEN = "circuit_breaker_half_open"

    # API events
    REQUEST_RECEIVED = "request_received"
    REQUEST_COMPLETED = "request_completed"
    UPSTREAM_FAILED = "upstream_failed"

    # Lifecycle events
    SERVER_STARTED = "server_started"
    SERVER_SHUTDOWN = "server_shutdown"
