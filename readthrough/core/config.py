"""Configuration management for Readthrough.

This module provides centralized configuration loading from environment
variables with validation and type safety.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Redis Store
    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port", ge=1, le=65535)
    redis_db: int = Field(default=0, description="Redis database index", ge=0)
    redis_timeout: float = Field(
        default=2.0, description="Redis operation timeout seconds", gt=0.0, le=30.0
    )
    redis_circuit_breaker_threshold: int = Field(
        default=5, description="Failures before bypassing the store", ge=1, le=20
    )
    redis_circuit_breaker_timeout: int = Field(
        default=30, description="Seconds before retrying a bypassed store", ge=1, le=3600
    )

    # Users endpoint cache
    users_cache_namespace: str = Field(
        default="data", description="Key namespace for cached user listings", min_length=1
    )
    users_cache_ttl: int = Field(
        default=30, description="Cache TTL in seconds for user listings", ge=1
    )

    # Upstream provider
    randomuser_api_url: str = Field(
        default="https://randomuser.me/api/", description="Random user API endpoint"
    )
    upstream_timeout: float = Field(
        default=10.0, description="Upstream call timeout seconds", gt=0.0, le=120.0
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(
        default=3000,
        description="API port",
        ge=1,
        le=65535,
        validation_alias=AliasChoices("api_port", "port"),
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str | None = Field(
        default=None, description="Log output format (json, console)"
    )
    environment: str = Field(
        default="development", description="Environment (development, production)"
    )

    # OpenTelemetry Configuration
    otel_enabled: bool = Field(
        default=False, description="Enable OpenTelemetry instrumentation"
    )
    otel_service_name: str = Field(
        default="readthrough", description="Service name for telemetry"
    )
    otel_exporter_otlp_endpoint: str = Field(
        default="http://localhost:4317", description="OTLP gRPC endpoint"
    )
    otel_exporter_otlp_headers: str = Field(
        default="", description="OTLP headers (e.g., 'api-key=xxx')"
    )
    otel_traces_enabled: bool = Field(
        default=True, description="Enable trace collection"
    )
    otel_metrics_enabled: bool = Field(
        default=True, description="Enable metrics collection"
    )

    @property
    def redis_url(self) -> str:
        """Redis connection URL assembled from host, port and database."""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


# Global settings instance
settings = Settings()
