"""End-to-end tests of the cached users endpoint through FastAPI."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from readthrough.api.middleware import setup_middleware
from readthrough.api.routes import create_routes
from readthrough.cache import CacheAside

USERS_KEY = "data:/api/v1/users?amount=3"


@pytest.fixture
def users_cache(store):
    return CacheAside(store, namespace="data", ttl_seconds=30)


def build_app(users_cache, provider) -> FastAPI:
    app = FastAPI(title="Readthrough Test", version="test")
    setup_middleware(app)
    app.include_router(create_routes(users_cache, provider))
    return app


@pytest.fixture
def client(users_cache, provider):
    with TestClient(build_app(users_cache, provider)) as test_client:
        yield test_client
        test_client.portal.call(users_cache.drain)


def settle(client: TestClient, users_cache: CacheAside) -> None:
    """Let background cache writes finish on the app's event loop."""
    client.portal.call(users_cache.drain)


class TestScenarios:
    def test_cold_request_populates_cache(self, client, users_cache, store, provider):
        """GET ?amount=3 on an empty cache calls upstream once and stores the body."""
        response = client.get("/api/v1/users?amount=3")
        settle(client, users_cache)

        assert response.status_code == 200
        body = response.json()
        assert body["amount"] == 3
        assert len(body["users"]) == 3
        provider.fetch_users.assert_awaited_once_with(3)
        assert USERS_KEY in store.data
        assert store.set_calls[0][2] == 30

    def test_repeat_within_ttl_is_served_from_cache(
        self, client, users_cache, store, provider
    ):
        first = client.get("/api/v1/users?amount=3")
        settle(client, users_cache)
        second = client.get("/api/v1/users?amount=3")

        assert second.status_code == 200
        assert second.content == first.content
        assert provider.fetch_users.await_count == 1

    def test_default_amount(self, client, provider):
        response = client.get("/api/v1/users")

        assert response.status_code == 200
        assert response.json()["amount"] == 1
        assert len(response.json()["users"]) == 1
        provider.fetch_users.assert_awaited_once_with(1)

    def test_non_numeric_amount(self, client, users_cache, store, provider):
        response = client.get("/api/v1/users?amount=abc")
        settle(client, users_cache)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Bad request"}
        provider.fetch_users.assert_not_called()
        assert store.set_calls == []
        assert store.data == {}


class TestCacheBehavior:
    def test_expired_entry_refetched(self, client, users_cache, clock, provider):
        client.get("/api/v1/users?amount=3")
        settle(client, users_cache)
        clock.advance(31)
        client.get("/api/v1/users?amount=3")

        assert provider.fetch_users.await_count == 2

    def test_different_query_is_a_different_entry(self, client, users_cache, provider):
        client.get("/api/v1/users?amount=3")
        settle(client, users_cache)
        client.get("/api/v1/users?amount=2")

        assert provider.fetch_users.await_count == 2

    def test_store_down_response_matches_cold_cache(
        self, users_cache, provider, store_factory
    ):
        """An unreachable store changes nothing the caller can see."""
        down_cache = CacheAside(store_factory(available=False), "data", 30)

        with TestClient(build_app(users_cache, provider)) as up:
            cold = up.get("/api/v1/users?amount=3")
            up.portal.call(users_cache.drain)
        with TestClient(build_app(down_cache, provider)) as down:
            degraded = down.get("/api/v1/users?amount=3")

        assert degraded.status_code == cold.status_code
        assert degraded.content == cold.content

    def test_upstream_failure_not_cached(self, client, users_cache, store, provider):
        from readthrough.core.exceptions import UpstreamError

        provider.fetch_users.side_effect = UpstreamError("randomuser down")

        response = client.get("/api/v1/users?amount=3")
        settle(client, users_cache)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Something is wrong!"}
        assert store.data == {}


class TestOtherRoutes:
    def test_index(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "Hello world"

    def test_health_live(self, client):
        assert client.get("/health/live").json()["status"] == "healthy"

    def test_health_ready_reports_cache_stats(self, client, users_cache):
        client.get("/api/v1/users?amount=3")
        settle(client, users_cache)
        client.get("/api/v1/users?amount=3")

        body = client.get("/health/ready").json()

        assert body["status"] == "healthy"
        assert body["store_reachable"] is True
        assert body["cache"]["namespace"] == "data"
        assert body["cache"]["hits"] == 1
        assert body["cache"]["misses"] == 1
        assert body["cache"]["writes"] == 1

    def test_health_ready_degraded_when_store_down(self, client, store):
        store.available = False

        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["store_reachable"] is False
