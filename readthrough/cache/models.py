"""Store configuration and cache statistics models."""

from pydantic import BaseModel, Field

from readthrough.core.config import Settings


class StoreConfig(BaseModel):
    """Connection settings for the Redis store.

    Attributes:
        host: Redis host
        port: Redis port
        db: Redis database index
        timeout: Bound on every store operation in seconds
        circuit_breaker_threshold: Consecutive failures before bypassing the store
        circuit_breaker_timeout: Seconds before a bypassed store is retried
    """

    host: str = Field(default="localhost", description="Redis host")
    port: int = Field(default=6379, description="Redis port", ge=1, le=65535)
    db: int = Field(default=0, description="Redis database index", ge=0)
    timeout: float = Field(
        default=2.0, description="Operation timeout (seconds)", gt=0.0
    )
    circuit_breaker_threshold: int = Field(
        default=5, description="Failures before opening circuit", ge=1
    )
    circuit_breaker_timeout: float = Field(
        default=30.0, description="Circuit breaker timeout (seconds)", gt=0.0
    )

    @property
    def url(self) -> str:
        """Redis connection URL."""
        return f"redis://{self.host}:{self.port}/{self.db}"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreConfig":
        """Build store configuration from application settings."""
        return cls(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            timeout=settings.redis_timeout,
            circuit_breaker_threshold=settings.redis_circuit_breaker_threshold,
            circuit_breaker_timeout=settings.redis_circuit_breaker_timeout,
        )


class CacheStats(BaseModel):
    """Cache performance statistics for one cache stage.

    Attributes:
        hits: Requests served from the store
        misses: Requests delegated to the handler (including lookup errors)
        errors: Lookup failures treated as misses
        writes: Captured responses stored successfully
        write_errors: Background writes that failed
        hit_rate: Hit rate percentage (hits / lookups)
        circuit_state: Current circuit breaker state of the store
    """

    hits: int = Field(default=0, description="Cache hits")
    misses: int = Field(default=0, description="Cache misses")
    errors: int = Field(default=0, description="Lookup errors")
    writes: int = Field(default=0, description="Successful writes")
    write_errors: int = Field(default=0, description="Failed writes")
    hit_rate: float = Field(default=0.0, description="Hit rate percentage")
    circuit_state: str = Field(
        default="closed", description="Circuit breaker state (closed/open/half_open)"
    )

    def update_hit_rate(self) -> None:
        """Recalculate hit rate based on current stats."""
        total = self.hits + self.misses
        self.hit_rate = (self.hits / total * 100) if total > 0 else 0.0
