"""Redis store client with bounded timeouts and a circuit breaker.

The client is constructed once at process start, connected in the
application lifespan, and passed by reference to every cache stage.
All operations are safe for concurrent use: redis-py's asyncio client
hands each command its own pooled connection.
"""

import asyncio
import time

from redis.asyncio import Redis
from redis.exceptions import RedisError

from readthrough.cache.models import StoreConfig
from readthrough.core.exceptions import StoreUnavailableError
from readthrough.observability.logging import LogEvents, get_logger

logger = get_logger(__name__)


def is_positive_int(value: object) -> bool:
    """True for ints greater than zero (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class CacheCircuitBreaker:
    """Circuit breaker for store failures with automatic recovery.

    States:
        closed: Normal operation, store calls allowed
        open: Circuit tripped, store bypassed entirely
        half_open: Testing recovery, calls allowed until one succeeds or fails

    Pattern:
        closed -> (failures >= threshold) -> open
        open -> (timeout expired) -> half_open
        half_open -> (success) -> closed
        half_open -> (failure) -> open
    """

    def __init__(self, failure_threshold: int = 5, timeout: float = 30.0):
        """Initialize circuit breaker.

        Args:
            failure_threshold: Consecutive failures before opening circuit
            timeout: Seconds before attempting recovery from open state
        """
        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.failure_count = 0
        self.state = "closed"  # closed, open, half_open
        self.last_failure_time: float | None = None

    def on_success(self) -> None:
        """Record successful operation."""
        if self.state == "half_open":
            logger.info(LogEvents.CIRCUIT_BREAKER_CLOSED)
            self.state = "closed"
        self.failure_count = 0

    def on_failure(self) -> None:
        """Record failed operation and potentially open circuit."""
        self.failure_count += 1
        self.last_failure_time = time.monotonic()

        if self.state == "half_open" or (
            self.state == "closed" and self.failure_count >= self.failure_threshold
        ):
            logger.warning(
                LogEvents.CIRCUIT_BREAKER_OPENED, failures=self.failure_count
            )
            self.state = "open"

    def can_attempt(self) -> bool:
        """Check if a store operation should be attempted.

        Returns:
            True if operation should proceed, False if circuit open
        """
        if self.state == "closed":
            return True

        if self.state == "open":
            if (
                self.last_failure_time is not None
                and time.monotonic() - self.last_failure_time > self.timeout
            ):
                logger.info(LogEvents.CIRCUIT_BREAKER_HALF_OPEN)
                self.state = "half_open"
                return True
            return False

        return True

    def reset(self) -> None:
        """Manually reset circuit breaker to closed state."""
        self.state = "closed"
        self.failure_count = 0
        self.last_failure_time = None


class CacheStore:
    """Process-wide client for the Redis key-value store.

    Exposes exactly the two commands the cache layer needs, GET and
    SET ... EX, each bounded by ``config.timeout``. Failures surface as
    StoreUnavailableError; an absent key is not a failure.

    Example:
        >>> store = CacheStore(StoreConfig(host="localhost", port=6379))
        >>> await store.connect()
        >>> await store.set_with_expiry("data:/api/v1/users", "{}", 30)
        >>> await store.get("data:/api/v1/users")
        '{}'
    """

    def __init__(self, config: StoreConfig, redis: Redis | None = None):
        """Initialize store client.

        Args:
            config: Store connection configuration
            redis: Pre-built client (tests); built from config when omitted

        Note:
            No network I/O happens here. The connection pool connects on
            first use, see connect().
        """
        self.config = config
        self.redis: Redis = redis or Redis(
            host=config.host,
            port=config.port,
            db=config.db,
            socket_timeout=config.timeout,
            socket_connect_timeout=config.timeout,
            retry_on_timeout=False,
            max_connections=50,
            decode_responses=True,
        )
        self.circuit_breaker = CacheCircuitBreaker(
            failure_threshold=config.circuit_breaker_threshold,
            timeout=config.circuit_breaker_timeout,
        )
        self.connected = False

    async def connect(self) -> bool:
        """Establish the connection once at startup.

        Returns:
            True if the store answered PING, False otherwise

        Note:
            Never raises. A store that is down at startup is logged and
            retried transparently by the pool on later operations.
        """
        self.connected = await self.ping()
        if self.connected:
            logger.info(LogEvents.STORE_CONNECTED, url=self.config.url)
        else:
            logger.error(LogEvents.STORE_CONNECTION_FAILED, url=self.config.url)
        return self.connected

    async def ping(self) -> bool:
        """Check store reachability without raising."""
        try:
            return bool(
                await asyncio.wait_for(self.redis.ping(), timeout=self.config.timeout)
            )
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            logger.warning(LogEvents.STORE_CONNECTION_FAILED, error=str(e))
            return False

    async def get(self, key: str) -> str | None:
        """Read a value.

        Args:
            key: Cache key

        Returns:
            Stored string if present and unexpired, None if absent

        Raises:
            StoreUnavailableError: Connection down, store error, timeout, or
                circuit open
        """
        if not self.circuit_breaker.can_attempt():
            raise StoreUnavailableError(
                "Store bypassed: circuit breaker open", {"key": key}
            )

        try:
            value = await asyncio.wait_for(
                self.redis.get(key), timeout=self.config.timeout
            )
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            self.circuit_breaker.on_failure()
            raise StoreUnavailableError(
                f"GET failed: {e!r}", {"key": key}
            ) from e

        self.circuit_breaker.on_success()
        return value

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        """Write a value that expires ``ttl_seconds`` after this call.

        Args:
            key: Cache key
            value: Serialized payload
            ttl_seconds: Positive expiry in whole seconds

        Raises:
            ValueError: ttl_seconds is not a positive integer
            StoreUnavailableError: Connection down, store error, timeout, or
                circuit open
        """
        if not is_positive_int(ttl_seconds):
            raise ValueError(
                f"ttl_seconds must be a positive integer, got {ttl_seconds!r}"
            )

        if not self.circuit_breaker.can_attempt():
            raise StoreUnavailableError(
                "Store bypassed: circuit breaker open", {"key": key}
            )

        try:
            await asyncio.wait_for(
                self.redis.set(key, value, ex=ttl_seconds),
                timeout=self.config.timeout,
            )
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            self.circuit_breaker.on_failure()
            raise StoreUnavailableError(
                f"SET failed: {e!r}", {"key": key}
            ) from e

        self.circuit_breaker.on_success()

    async def close(self) -> None:
        """Close Redis connection pool gracefully."""
        await self.redis.aclose()
        self.connected = False
        logger.info(LogEvents.STORE_CLOSED)

    @property
    def circuit_state(self) -> str:
        """Current circuit breaker state."""
        return self.circuit_breaker.state
