"""Request and response schemas for the Readthrough API."""

from typing import Any

from pydantic import BaseModel, Field


class UsersResponse(BaseModel):
    """Response schema for GET /api/v1/users."""

    amount: int = Field(..., description="Number of users requested", ge=1)
    users: list[dict[str, Any]] = Field(..., description="User records")


class ErrorResponse(BaseModel):
    """Error body shared by all endpoints."""

    success: bool = Field(default=False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")


class CacheStatsResponse(BaseModel):
    """Cache statistics block of the readiness probe."""

    namespace: str = Field(..., description="Key namespace")
    ttl_seconds: int = Field(..., description="Entry TTL in seconds")
    hits: int = Field(..., description="Cache hits")
    misses: int = Field(..., description="Cache misses")
    errors: int = Field(..., description="Lookup errors")
    writes: int = Field(..., description="Successful writes")
    write_errors: int = Field(..., description="Failed writes")
    hit_rate: float = Field(..., description="Hit rate percentage")
    circuit_state: str = Field(..., description="Store circuit breaker state")


class HealthResponse(BaseModel):
    """Response schema for health endpoints."""

    status: str = Field(..., description="healthy or degraded")
    store_reachable: bool | None = Field(
        None, description="Whether the store answered PING (readiness only)"
    )
    cache: CacheStatsResponse | None = Field(
        None, description="Cache statistics (readiness only)"
    )
