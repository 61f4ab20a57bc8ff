"""Middleware for FastAPI application."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from readthrough.observability.logging import bind_context, clear_context

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests and responses.

    Also binds method and path to the structlog context so cache events
    logged while handling the request carry them.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Log request and response details."""
        start_time = time.perf_counter()
        bind_context(method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        finally:
            clear_context()

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{latency_ms:.3f} ms"
        )

        return response


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware."""
    app.add_middleware(LoggingMiddleware)
    logger.info("All middleware configured successfully")
