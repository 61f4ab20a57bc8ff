"""Cache-aside interceptor for JSON request handlers.

A CacheAside stage wraps a downstream handler so its output is cached per
request without the handler knowing. Handlers are written against an
explicit emission callback; the stage hands them a callback it controls,
which captures the first emitted output before forwarding it.

Per-request flow:
    START -> LOOKUP -> HIT -> RESPOND_FROM_CACHE
                    -> MISS -> DELEGATE -> CAPTURE -> RESPOND
                    -> LOOKUP_ERROR -> DELEGATE -> CAPTURE -> RESPOND

Key scheme:
    "<namespace>:<identifier>" where identifier is the ``id`` path parameter
    when present, else the raw path plus raw query string. The query string
    is never parsed, so requests whose parameters differ only in order get
    different keys, and requests keyed by path parameter ignore the query
    string entirely.

Failure policy:
    Every cache-layer failure (store down, timeout, undecodable payload,
    unencodable output) is logged and handled as a miss. Exceptions raised
    by the handler propagate unchanged.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.requests import Request

from readthrough.cache.models import CacheStats
from readthrough.cache.store import CacheStore, is_positive_int
from readthrough.core.exceptions import (
    ConfigurationError,
    SerializationError,
    StoreUnavailableError,
)
from readthrough.observability.logging import LogEvents, get_logger
from readthrough.observability.metrics import record_cache_lookup, record_cache_write
from readthrough.observability.tracing import get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)

# Distinguishes a miss from a cached JSON null
_MISS = object()


@dataclass(frozen=True)
class RequestDescriptor:
    """The parts of an HTTP request the cache layer and handlers read."""

    method: str
    path: str
    query_string: str = ""
    query_params: Mapping[str, str] = field(default_factory=dict)
    path_params: Mapping[str, str] = field(default_factory=dict)

    @property
    def original_url(self) -> str:
        """Path plus raw query string, as received."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @classmethod
    def from_request(cls, request: Request) -> "RequestDescriptor":
        return cls(
            method=request.method,
            path=request.url.path,
            query_string=request.url.query,
            query_params=dict(request.query_params),
            path_params={k: str(v) for k, v in request.path_params.items()},
        )


@dataclass(frozen=True)
class Emission:
    """A handler's final output."""

    status_code: int
    body: Any


Emit = Callable[[int, Any], Awaitable[None]]
Handler = Callable[[RequestDescriptor, Emit], Awaitable[None]]


def encode_payload(body: Any) -> str:
    """Serialize a handler output to the text stored in the cache.

    Raises:
        SerializationError: Output is not JSON-encodable
    """
    try:
        return json.dumps(
            jsonable_encoder(body),
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Cannot encode payload: {e}") from e


def decode_payload(raw: str) -> Any:
    """Deserialize a cached payload.

    Raises:
        SerializationError: Payload is not valid JSON
    """
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot decode payload: {e}") from e


class CacheAside:
    """Read-through cache stage for one endpoint.

    Example:
        >>> users_cache = CacheAside(store, namespace="data", ttl_seconds=30)
        >>>
        >>> @router.get("/api/v1/users")
        ... async def list_users(request: Request) -> JSONResponse:
        ...     return await users_cache.respond(request, users_handler)
    """

    def __init__(
        self,
        store: CacheStore,
        namespace: str,
        ttl_seconds: int,
        identifier_param: str = "id",
    ):
        """Initialize cache stage.

        Args:
            store: Shared store client
            namespace: Key prefix for this stage
            ttl_seconds: Expiry of written entries, positive whole seconds
            identifier_param: Path parameter used as the key identifier

        Raises:
            ConfigurationError: Empty namespace or non-positive TTL
        """
        if not namespace:
            raise ConfigurationError("Cache namespace must be a non-empty string")
        if not is_positive_int(ttl_seconds):
            raise ConfigurationError(
                f"Cache TTL must be a positive integer, got {ttl_seconds!r}",
                {"namespace": namespace},
            )

        self.store = store
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds
        self.identifier_param = identifier_param
        self.stats = CacheStats()
        self._pending: set[asyncio.Task[None]] = set()

    def key_for(self, request: RequestDescriptor) -> str:
        """Derive the cache key for a request."""
        identifier = (
            request.path_params.get(self.identifier_param) or request.original_url
        )
        return f"{self.namespace}:{identifier}"

    async def __call__(
        self, request: RequestDescriptor, handler: Handler, emit: Emit
    ) -> None:
        """Serve a request from the cache or delegate to the handler.

        Args:
            request: Request descriptor
            handler: Downstream handler, called at most once and never on a hit
            emit: Caller's emission callback
        """
        key = self.key_for(request)
        cached = await self._lookup(key)

        if cached is not _MISS:
            await emit(200, cached)
            return

        await handler(request, self._capture(key, emit))

    async def respond(self, request: Request, handler: Handler) -> JSONResponse:
        """Run the stage for a Starlette request and render the emission.

        Raises:
            RuntimeError: Handler returned without emitting
        """
        emissions: list[Emission] = []

        async def emit(status_code: int, body: Any) -> None:
            if emissions:
                logger.warning(
                    LogEvents.DUPLICATE_EMISSION,
                    path=request.url.path,
                    status_code=status_code,
                )
                return
            emissions.append(Emission(status_code, body))

        await self(RequestDescriptor.from_request(request), handler, emit)

        if not emissions:
            raise RuntimeError(
                f"Handler for {request.url.path} returned without emitting a response"
            )

        emission = emissions[0]
        return JSONResponse(
            status_code=emission.status_code, content=jsonable_encoder(emission.body)
        )

    async def drain(self) -> None:
        """Wait for background cache writes scheduled so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending_writes(self) -> int:
        """Number of background writes not yet finished."""
        return len(self._pending)

    def get_stats(self) -> CacheStats:
        """Current statistics, including the store's circuit state."""
        self.stats.circuit_state = self.store.circuit_state
        return self.stats

    async def _lookup(self, key: str) -> Any:
        """Return the decoded cached payload, or _MISS.

        Never raises: store and decoding failures count as misses.
        """
        with tracer.start_as_current_span("cache.lookup") as span:
            span.set_attribute("cache.namespace", self.namespace)
            span.set_attribute("cache.key", key)

            try:
                raw = await self.store.get(key)
                if raw is None:
                    outcome = "miss"
                    payload = _MISS
                else:
                    outcome = "hit"
                    payload = decode_payload(raw)
            except StoreUnavailableError as e:
                logger.warning(LogEvents.CACHE_LOOKUP_FAILED, key=key, error=e.message)
                outcome = "error"
                payload = _MISS
            except SerializationError as e:
                logger.warning(
                    LogEvents.CACHE_SERIALIZATION_FAILED, key=key, error=e.message
                )
                outcome = "error"
                payload = _MISS
            except Exception as e:
                # Anything else from the store client still must not fail the request
                logger.error(LogEvents.CACHE_LOOKUP_FAILED, key=key, error=repr(e))
                outcome = "error"
                payload = _MISS

            span.set_attribute("cache.outcome", outcome)

        if outcome == "hit":
            self.stats.hits += 1
            logger.info(LogEvents.CACHE_HIT, key=key)
        else:
            self.stats.misses += 1
            if outcome == "error":
                self.stats.errors += 1
            logger.info(LogEvents.CACHE_MISS, key=key)

        self.stats.update_hit_rate()
        record_cache_lookup(self.namespace, outcome)
        return payload

    def _capture(self, key: str, emit: Emit) -> Emit:
        """Wrap ``emit`` so the first successful output is written to the store."""
        captured = False

        async def capture(status_code: int, body: Any) -> None:
            nonlocal captured
            if not captured:
                captured = True
                if 200 <= status_code < 300:
                    self._schedule_write(key, body)
            await emit(status_code, body)

        return capture

    def _schedule_write(self, key: str, body: Any) -> None:
        """Encode the output and dispatch the write without awaiting it."""
        try:
            payload = encode_payload(body)
        except SerializationError as e:
            logger.warning(LogEvents.CACHE_SERIALIZATION_FAILED, key=key, error=e.message)
            self.stats.write_errors += 1
            record_cache_write(self.namespace, "error")
            return

        task = asyncio.create_task(self._write(key, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, key: str, payload: str) -> None:
        try:
            await self.store.set_with_expiry(key, payload, self.ttl_seconds)
        except StoreUnavailableError as e:
            logger.warning(LogEvents.CACHE_WRITE_FAILED, key=key, error=e.message)
            self.stats.write_errors += 1
            record_cache_write(self.namespace, "error")
            return
        except Exception as e:
            # Nothing awaits this task
            logger.error(LogEvents.CACHE_WRITE_FAILED, key=key, error=repr(e))
            self.stats.write_errors += 1
            record_cache_write(self.namespace, "error")
            return

        self.stats.writes += 1
        record_cache_write(self.namespace, "ok")
        logger.debug(LogEvents.CACHE_WRITTEN, key=key, ttl=self.ttl_seconds)
