"""Cache-aside layer for JSON endpoints.

This module provides a Redis-backed read-through cache for request
handlers. The cache is designed to fail open: when Redis is unavailable
every request is simply served by the handler, with added latency but
identical results.

Key Features:
    - One shared store client with bounded timeouts
    - Circuit breaker that bypasses a failing store
    - Per-endpoint namespace and TTL
    - Background (fire-and-forget) writes of captured responses

Usage:
    >>> from readthrough.cache import CacheAside, CacheStore, StoreConfig
    >>>
    >>> store = CacheStore(StoreConfig(host="localhost", port=6379))
    >>> await store.connect()
    >>> users_cache = CacheAside(store, namespace="data", ttl_seconds=30)
    >>> response = await users_cache.respond(request, users_handler)
"""

from readthrough.cache.interceptor import (
    CacheAside,
    Emission,
    Emit,
    Handler,
    RequestDescriptor,
    decode_payload,
    encode_payload,
)
from readthrough.cache.models import CacheStats, StoreConfig
from readthrough.cache.store import CacheCircuitBreaker, CacheStore

__all__ = [
    "CacheAside",
    "CacheStore",
    "StoreConfig",
    "CacheStats",
    "CacheCircuitBreaker",
    "RequestDescriptor",
    "Emission",
    "Emit",
    "Handler",
    "encode_payload",
    "decode_payload",
]
