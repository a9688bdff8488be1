"""Fixed-window rate limiting backed by redis."""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from storefront.api.deps import RateLimit, get_redis
from storefront.api.errors import register_exception_handlers
from storefront.domain.errors import RateLimitError
from storefront.services.rate_limiter import RateLimiter


@pytest.fixture()
def limiter():
    return RateLimiter(scope="test", max_requests=3, window_seconds=60, message="Slow down")


class TestRateLimiter:
    def test_counts_within_window(self, limiter, fake_redis):
        assert [limiter.hit(fake_redis, "1.2.3.4") for _ in range(3)] == [1, 2, 3]

    def test_rejects_over_limit(self, limiter, fake_redis):
        for _ in range(3):
            limiter.hit(fake_redis, "1.2.3.4")

        with pytest.raises(RateLimitError, match="Slow down"):
            limiter.hit(fake_redis, "1.2.3.4")

    def test_counters_are_per_client(self, limiter, fake_redis):
        for _ in range(3):
            limiter.hit(fake_redis, "1.2.3.4")

        assert limiter.hit(fake_redis, "5.6.7.8") == 1

    def test_window_expires(self, limiter, fake_redis):
        limiter.hit(fake_redis, "1.2.3.4")

        ttl = fake_redis.ttl(limiter.key_for("1.2.3.4"))
        assert 0 < ttl <= 60

        fake_redis.delete(limiter.key_for("1.2.3.4"))
        assert limiter.hit(fake_redis, "1.2.3.4") == 1


class TestRateLimitDependency:
    def _app(self, fake_redis, enabled=True):
        app = FastAPI()
        register_exception_handlers(app)
        guard = RateLimit(
            RateLimiter(scope="auth", max_requests=2, window_seconds=3600, message="Too many login attempts"),
            enabled=enabled,
        )

        @app.get("/limited", dependencies=[Depends(guard)])
        def limited():
            return {"ok": True}

        app.dependency_overrides[get_redis] = lambda: fake_redis
        return TestClient(app)

    def test_third_request_is_429(self, fake_redis):
        client = self._app(fake_redis)

        assert client.get("/limited").status_code == 200
        assert client.get("/limited").status_code == 200

        response = client.get("/limited")
        assert response.status_code == 429
        assert response.json() == {"success": False, "message": "Too many login attempts"}

    def test_disabled_limiter_lets_everything_through(self, fake_redis):
        client = self._app(fake_redis, enabled=False)

        assert all(client.get("/limited").status_code == 200 for _ in range(5))


def test_api_routes_are_counted(client, fake_redis):
    client.get("/api/products")
    client.get("/api/products")

    assert fake_redis.get("ratelimit:api:testclient") == "2"
    assert fake_redis.get("ratelimit:auth:testclient") is None


def test_auth_routes_count_against_both_limits(client, fake_redis):
    client.post("/api/auth/login", json={"email": "x@example.com", "password": "whatever1A"})

    assert fake_redis.get("ratelimit:api:testclient") == "1"
    assert fake_redis.get("ratelimit:auth:testclient") == "1"


def test_unreachable_redis_fails_closed_but_health_stays_up(app):
    import fakeredis

    server = fakeredis.FakeServer()
    server.connected = False
    app.dependency_overrides[get_redis] = lambda: fakeredis.FakeRedis(server=server, decode_responses=True)

    with TestClient(app, raise_server_exceptions=False) as client:
        api = client.get("/api/products")
        health = client.get("/health")

    assert api.status_code == 500
    assert api.json() == {"success": False, "message": "Something went wrong"}
    assert health.status_code == 200
