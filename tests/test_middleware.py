"""Tests for rate limiting, security headers and CORS."""
from fastapi import status

from timesaver.api.middleware import CONTENT_SECURITY_POLICY, RATE_LIMIT_MESSAGE
from timesaver.infrastructure.rate_limiter import SlidingWindowRateLimiter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestSlidingWindowRateLimiter:
    """Test the limiter on its own."""

    def test_allows_up_to_limit(self):
        limiter = SlidingWindowRateLimiter(max_requests=3, window_seconds=60, clock=FakeClock())

        assert [limiter.hit("1.2.3.4") for _ in range(3)] == [None, None, None]
        assert limiter.hit("1.2.3.4") is not None

    def test_clients_are_independent(self):
        limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())

        assert limiter.hit("1.1.1.1") is None
        assert limiter.hit("2.2.2.2") is None
        assert limiter.hit("1.1.1.1") is not None

    def test_window_slides(self):
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)

        limiter.hit("ip")
        clock.now += 30
        limiter.hit("ip")
        assert limiter.hit("ip") == 31

        clock.now += 31
        assert limiter.hit("ip") is None
        assert limiter.remaining("ip") == 0

    def test_remaining_and_reset(self):
        limiter = SlidingWindowRateLimiter(max_requests=5, window_seconds=60, clock=FakeClock())
        limiter.hit("ip")
        limiter.hit("ip")

        assert limiter.remaining("ip") == 3
        assert limiter.remaining("other") == 5

        limiter.reset()
        assert limiter.remaining("ip") == 5

    def test_expired_identifiers_are_dropped(self):
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(max_requests=5, window_seconds=60, clock=clock)
        for i in range(1000):
            limiter.hit(f"10.0.{i // 256}.{i % 256}")
        assert limiter.tracked_identifiers == 1000

        clock.now += 61
        limiter.hit("fresh")

        assert limiter.tracked_identifiers == 1
        assert limiter.remaining("fresh") == 4

    def test_active_identifiers_survive_sweep(self):
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(max_requests=5, window_seconds=60, clock=clock)
        limiter.hit("old")
        clock.now += 30
        limiter.hit("recent")

        clock.now += 31
        limiter.hit("new")

        assert limiter.tracked_identifiers == 2
        assert limiter.remaining("recent") == 4


class TestRateLimitMiddleware:
    """Test rate limiting through the app."""

    def test_requests_over_limit_get_429(self, app, test_client, valid_usage):
        app.state.rate_limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=900)

        for _ in range(2):
            assert test_client.post("/api/calculate", json=valid_usage).status_code == 200

        response = test_client.post("/api/calculate", json=valid_usage)
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json() == {"error": RATE_LIMIT_MESSAGE}
        assert int(response.headers["Retry-After"]) > 0

    def test_health_is_exempt(self, app, test_client):
        app.state.rate_limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=900)

        for _ in range(3):
            assert test_client.get("/health").status_code == 200

    def test_rate_limit_headers(self, app, test_client):
        app.state.rate_limiter = SlidingWindowRateLimiter(max_requests=10, window_seconds=900)

        response = test_client.get("/")
        assert response.headers["X-RateLimit-Limit"] == "10"
        assert response.headers["X-RateLimit-Remaining"] == "9"

    def test_disabled_limiter(self, app, test_client):
        app.state.rate_limiter = None

        response = test_client.get("/")
        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers


class TestSecurityHeaders:
    """Test security headers on responses."""

    def test_headers_on_page(self, test_client):
        response = test_client.get("/")

        assert response.headers["Content-Security-Policy"] == CONTENT_SECURITY_POLICY
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"

    def test_headers_on_api_errors(self, test_client):
        response = test_client.post("/api/lead", json={})

        assert response.status_code == 400
        assert "Content-Security-Policy" in response.headers

    def test_docs_skip_csp(self, test_client):
        response = test_client.get("/docs")

        assert response.status_code == 200
        assert "Content-Security-Policy" not in response.headers


class TestCors:
    """Test CORS origin handling outside production."""

    def test_dev_origin_allowed(self, test_client):
        response = test_client.options(
            "/api/calculate",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_unknown_origin_not_allowed(self, test_client):
        response = test_client.get("/health", headers={"Origin": "https://evil.example"})

        assert "access-control-allow-origin" not in response.headers
