"""Readthrough - cache-aside caching for expensive JSON endpoints.

Readthrough serves a JSON endpoint backed by a slow upstream call and
caches each response in Redis under a per-URL key with a TTL. When Redis
is unavailable requests are served uncached.

Basic usage:
    >>> from readthrough import CacheAside, CacheStore, StoreConfig
    >>> store = CacheStore(StoreConfig(host="localhost", port=6379))
    >>> await store.connect()
    >>> users_cache = CacheAside(store, namespace="data", ttl_seconds=30)
"""

__version__ = "0.1.0"

from dotenv import load_dotenv

load_dotenv()

from readthrough.cache import (  # noqa: E402
    CacheAside,
    CacheStats,
    CacheStore,
    RequestDescriptor,
    StoreConfig,
)
from readthrough.core import (  # noqa: E402
    ConfigurationError,
    ReadthroughError,
    SerializationError,
    StoreUnavailableError,
    UpstreamError,
    settings,
)

__all__ = [
    # Cache
    "CacheAside",
    "CacheStore",
    "StoreConfig",
    "CacheStats",
    "RequestDescriptor",
    # Configuration
    "settings",
    # Exceptions
    "ReadthroughError",
    "StoreUnavailableError",
    "SerializationError",
    "UpstreamError",
    "ConfigurationError",
    # Version
    "__version__",
]
