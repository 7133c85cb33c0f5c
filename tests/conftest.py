import asyncio

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.main import create_app
from storefront.stores import build_backend


def make_settings(backend: str, tmp_path, **overrides) -> Settings:
    return Settings(
        store_backend=backend,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront-test.db'}",
        rate_limit_enabled=False,
        log_level="WARNING",
    ).with_overrides(**overrides)


@pytest_asyncio.fixture(params=["memory", "sql"])
async def stores(request, tmp_path):
    """Stores for one unit of work on each backend, tables created and empty."""
    backend = build_backend(make_settings(request.param, tmp_path))
    await backend.startup()
    try:
        async with backend.open() as opened:
            yield opened
    finally:
        await backend.shutdown()


@pytest_asyncio.fixture
async def users(stores):
    u1 = await stores.users.create(email="u1@example.com", password_hash="x", name="User One")
    u2 = await stores.users.create(email="u2@example.com", password_hash="x", name="User Two")
    return u1, u2


@pytest_asyncio.fixture
async def product(stores):
    return await stores.catalog.add(name="Tropical T-Shirt", price=88900, stock_qty=10, category="T-Shirts")


@pytest.fixture
def client():
    app = create_app(Settings(store_backend="memory", rate_limit_enabled=False, log_level="WARNING"))
    with TestClient(app) as c:
        yield c


def add_product(client: TestClient, **fields):
    """Put a product straight into the in-memory catalog of ``client``'s app."""
    fields.setdefault("name", "Test product")
    fields.setdefault("price", 1000)
    catalog = client.app.state.backend.stores.catalog
    return asyncio.run(catalog.add(**fields))


def signup(client: TestClient, email: str, password: str = "secret123", name: str = "Tester") -> dict:
    """Register a user and return auth headers for them."""
    r = client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}
