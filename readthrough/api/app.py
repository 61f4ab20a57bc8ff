"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from readthrough import __version__
from readthrough.api.middleware import setup_middleware
from readthrough.api.routes import create_routes
from readthrough.cache.interceptor import CacheAside
from readthrough.cache.models import StoreConfig
from readthrough.cache.store import CacheStore
from readthrough.core.config import settings
from readthrough.observability import (
    configure_logging,
    setup_telemetry,
    shutdown_telemetry,
)
from readthrough.upstream.randomuser import RandomUserClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan (startup/shutdown).

    Startup sequence:
        1. Create the shared store client and connect once
        2. Create the upstream provider
        3. Create cache stages and register API routes

    Shutdown sequence:
        1. Wait for in-flight background cache writes
        2. Close the store connection pool
        3. Shutdown telemetry

    The store being unreachable at startup is logged, not fatal.
    """
    logger.info("Starting Readthrough API server...")

    store = CacheStore(StoreConfig.from_settings(settings))
    await store.connect()

    provider = RandomUserClient(
        api_url=settings.randomuser_api_url,
        timeout=settings.upstream_timeout,
    )

    users_cache = CacheAside(
        store,
        namespace=settings.users_cache_namespace,
        ttl_seconds=settings.users_cache_ttl,
    )

    app.state.store = store
    app.state.users_cache = users_cache
    app.include_router(create_routes(users_cache, provider))

    logger.info(f"Readthrough API server started (store: {store.config.url})")

    yield

    logger.info("Shutting down Readthrough API server...")
    await users_cache.drain()
    await store.close()
    shutdown_telemetry()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app
    """
    configure_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        is_production=settings.is_production,
    )

    app = FastAPI(
        title="Readthrough",
        description="Cache-aside caching for expensive JSON endpoints",
        version=__version__,
        lifespan=lifespan,
    )

    setup_telemetry(app)
    setup_middleware(app)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unhandled exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    return app
