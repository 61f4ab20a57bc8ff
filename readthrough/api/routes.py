"""FastAPI route handlers for the Readthrough API."""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from readthrough.api.handlers import make_users_handler
from readthrough.api.validation import (
    CacheStatsResponse,
    ErrorResponse,
    HealthResponse,
    UsersResponse,
)
from readthrough.cache.interceptor import CacheAside
from readthrough.upstream.randomuser import RandomUserClient

logger = logging.getLogger(__name__)


def create_routes(users_cache: CacheAside, provider: RandomUserClient) -> APIRouter:
    """Create and configure API routes.

    Args:
        users_cache: Cache stage for the users listing
        provider: Upstream user provider

    Returns:
        Configured APIRouter
    """
    api_router = APIRouter()
    users_handler = make_users_handler(provider)

    @api_router.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        """Liveness banner."""
        return "Hello world"

    # GET /api/v1/users - Random users, cached per URL
    @api_router.get(
        "/api/v1/users",
        response_model=UsersResponse,
        status_code=status.HTTP_200_OK,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def list_users(request: Request) -> JSONResponse:
        """List ``amount`` random users (default 1)."""
        return await users_cache.respond(request, users_handler)

    @api_router.get("/health/live", response_model=HealthResponse)
    async def health_live() -> HealthResponse:
        """Liveness probe."""
        return HealthResponse(status="healthy")

    @api_router.get("/health/ready", response_model=HealthResponse)
    async def health_ready() -> HealthResponse:
        """Readiness probe.

        Always 200: the store is optional, so an unreachable store only
        degrades the service.
        """
        reachable = await users_cache.store.ping()
        stats = users_cache.get_stats()
        return HealthResponse(
            status="healthy" if reachable else "degraded",
            store_reachable=reachable,
            cache=CacheStatsResponse(
                namespace=users_cache.namespace,
                ttl_seconds=users_cache.ttl_seconds,
                **stats.model_dump(),
            ),
        )

    return api_router
