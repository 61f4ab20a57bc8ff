"""Core infrastructure for Readthrough."""

from readthrough.core.config import Settings, settings
from readthrough.core.exceptions import (
    ConfigurationError,
    ReadthroughError,
    SerializationError,
    StoreUnavailableError,
    UpstreamError,
)

__all__ = [
    # Configuration
    "Settings",
    "settings",
    # Exceptions
    "ReadthroughError",
    "StoreUnavailableError",
    "SerializationError",
    "UpstreamError",
    "ConfigurationError",
]
