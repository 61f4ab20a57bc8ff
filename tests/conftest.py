"""Pytest configuration and fixtures for Readthrough tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from readthrough.core.exceptions import StoreUnavailableError
from readthrough.upstream.randomuser import RandomUserClient


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryStore:
    """Store double with the CacheStore interface.

    Honors TTLs against a FakeClock, records every call, and can be switched
    to raise StoreUnavailableError like an unreachable Redis.
    """

    def __init__(self, clock: FakeClock | None = None):
        self.clock = clock or FakeClock()
        self.data: dict[str, tuple[str, float]] = {}
        self.get_calls: list[str] = []
        self.set_calls: list[tuple[str, str, int]] = []
        self.available = True
        self.circuit_state = "closed"

    async def get(self, key: str) -> str | None:
        self.get_calls.append(key)
        if not self.available:
            raise StoreUnavailableError("store down", {"key": key})

        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock.now >= expires_at:
            del self.data[key]
            return None
        return value

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self.set_calls.append((key, value, ttl_seconds))
        if not self.available:
            raise StoreUnavailableError("store down", {"key": key})
        self.data[key] = (value, self.clock.now + ttl_seconds)

    async def ping(self) -> bool:
        return self.available

    async def close(self) -> None:
        pass


def make_user(index: int) -> dict[str, Any]:
    """A user record shaped like randomuser.me output."""
    return {
        "gender": "female" if index % 2 else "male",
        "name": {"title": "Ms", "first": f"First{index}", "last": f"Last{index}"},
        "email": f"user{index}@example.com",
        "login": {"uuid": f"00000000-0000-0000-0000-{index:012d}"},
        "nat": "NZ",
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryStore:
    return InMemoryStore(clock)


@pytest.fixture
def provider() -> AsyncMock:
    """RandomUserClient mock returning ``n`` deterministic users."""

    async def fetch_users(n: int = 1) -> list[dict[str, Any]]:
        return [make_user(i) for i in range(n)]

    mock = AsyncMock(spec=RandomUserClient)
    mock.fetch_users = AsyncMock(side_effect=fetch_users)
    return mock


@pytest.fixture
def store_factory(clock: FakeClock):
    """Build extra InMemoryStore instances sharing the test clock."""

    def factory(available: bool = True) -> InMemoryStore:
        extra = InMemoryStore(clock)
        extra.available = available
        return extra

    return factory
