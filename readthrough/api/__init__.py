"""FastAPI application for the Readthrough API."""

from readthrough.api.app import create_app
from readthrough.api.validation import (
    CacheStatsResponse,
    ErrorResponse,
    HealthResponse,
    UsersResponse,
)

__all__ = [
    "create_app",
    "UsersResponse",
    "ErrorResponse",
    "HealthResponse",
    "CacheStatsResponse",
]
