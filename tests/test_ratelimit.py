import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.errors import RateLimited
from storefront.main import create_app
from storefront.ratelimit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_limiter_window_slides():
    clock = FakeClock()
    limiter = RateLimiter(limit=2, window_seconds=60, clock=clock)

    limiter.hit("1.2.3.4")
    limiter.hit("1.2.3.4")
    with pytest.raises(RateLimited):
        limiter.hit("1.2.3.4")
    # other clients have their own budget
    limiter.hit("5.6.7.8")

    clock.now += 61
    limiter.hit("1.2.3.4")


@pytest.fixture
def limited_client():
    settings = Settings(
        store_backend="memory",
        log_level="WARNING",
        auth_rate_limit=3,
        contact_rate_limit=2,
    )
    with TestClient(create_app(settings)) as c:
        yield c


def test_auth_routes_are_limited(limited_client: TestClient):
    creds = {"email": "x@example.com", "password": "whatever1"}
    for _ in range(3):
        assert limited_client.post("/api/auth/login", json=creds).status_code == 401

    r = limited_client.post("/api/auth/login", json=creds)
    assert r.status_code == 429
    assert r.json() == {"error": "Too many attempts, please try again later", "code": "rate_limited"}

    # signup shares the auth budget
    r = limited_client.post("/api/auth/signup", json={"email": "y@example.com", "password": "secret123", "name": "Y"})
    assert r.status_code == 429


def test_contact_route_is_limited(limited_client: TestClient):
    payload = {"name": "Spam", "email": "spam@example.com", "message": "buy now"}
    assert limited_client.post("/api/contact", json=payload).status_code == 200
    assert limited_client.post("/api/contact", json=payload).status_code == 200

    r = limited_client.post("/api/contact", json=payload)
    assert r.status_code == 429
    assert r.json()["error"] == "Too many contact submissions, please try again later"

    # other routes are unaffected
    assert limited_client.get("/api/products/1").status_code == 200
