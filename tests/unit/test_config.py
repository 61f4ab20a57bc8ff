"""Unit tests for configuration management."""

import pytest
from pydantic import ValidationError

from readthrough.core.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("PORT", "API_PORT", "REDIS_HOST", "USERS_CACHE_TTL"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=None)

        assert settings.redis_host == "localhost"
        assert settings.redis_port == 6379
        assert settings.users_cache_namespace == "data"
        assert settings.users_cache_ttl == 30
        assert settings.api_port == 3000
        assert settings.redis_url == "redis://localhost:6379/0"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("REDIS_HOST", "cache.internal")
        monkeypatch.setenv("REDIS_PORT", "6380")
        monkeypatch.setenv("USERS_CACHE_TTL", "120")

        settings = Settings(_env_file=None)

        assert settings.redis_url == "redis://cache.internal:6380/0"
        assert settings.users_cache_ttl == 120

    def test_port_env(self, monkeypatch):
        monkeypatch.delenv("API_PORT", raising=False)
        monkeypatch.setenv("PORT", "8080")

        assert Settings(_env_file=None).api_port == 8080

    def test_ttl_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("USERS_CACHE_TTL", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_timeout_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("REDIS_TIMEOUT", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_is_production(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "Production")

        assert Settings(_env_file=None).is_production
