"""Command-line interface for Readthrough."""

import asyncio
import logging
import sys

import click
import uvicorn

from readthrough import __version__
from readthrough.cache.models import StoreConfig
from readthrough.cache.store import CacheStore
from readthrough.core.config import settings
from readthrough.observability.logging import configure_logging

logger = logging.getLogger(__name__)


@click.group()
def cli() -> None:
    """Readthrough - cache-aside caching for expensive JSON endpoints."""
    pass


@cli.command()
@click.option(
    "--host",
    default=settings.api_host,
    help="Host to bind to",
    show_default=True,
)
@click.option(
    "--port",
    default=settings.api_port,
    type=int,
    help="Port to bind to",
    show_default=True,
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload for development",
)
@click.option(
    "--log-level",
    default=settings.log_level.lower(),
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level",
    show_default=True,
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the Readthrough API server."""
    configure_logging(
        level=log_level,
        log_format=settings.log_format,
        is_production=settings.is_production,
    )

    logger.info(f"Starting Readthrough API server on {host}:{port}")

    uvicorn.run(
        "readthrough.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


@cli.command()
def ping() -> None:
    """Check that the configured Redis store is reachable."""
    config = StoreConfig.from_settings(settings)

    async def check() -> bool:
        store = CacheStore(config)
        try:
            return await store.ping()
        finally:
            await store.close()

    if asyncio.run(check()):
        click.echo(f"Store reachable at {config.url}")
    else:
        click.echo(f"Store unreachable at {config.url}", err=True)
        sys.exit(1)


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"Readthrough v{__version__}")


if __name__ == "__main__":
    cli()
