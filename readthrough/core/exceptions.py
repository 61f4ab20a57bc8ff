"""Exception hierarchy for Readthrough.

This module defines custom exceptions for the failure modes of the
cache layer and its collaborators.
"""

from typing import Any


class ReadthroughError(Exception):
    """Base exception for all Readthrough errors."""

    code: str = "READTHROUGH_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StoreUnavailableError(ReadthroughError):
    """Key-value store unreachable (connection refused, timeout, server error)."""

    code: str = "STORE_UNAVAILABLE"


class SerializationError(ReadthroughError):
    """Cached payload could not be encoded or decoded."""

    code: str = "SERIALIZATION_ERROR"


class UpstreamError(ReadthroughError):
    """Upstream data provider failed (HTTP status, transport, malformed body)."""

    code: str = "UPSTREAM_FAILED"


class ConfigurationError(ReadthroughError):
    """Configuration error (invalid namespace, TTL, or settings)."""

    code: str = "CONFIGURATION_ERROR"
