from fastapi.testclient import TestClient


def test_list_products_newest_first(client: TestClient):
    r = client.get("/api/products")
    assert r.status_code == 200
    products = r.json()
    assert len(products) == 16
    assert [p["id"] for p in products] == list(range(16, 0, -1))
    assert set(products[0]) >= {"id", "name", "description", "price", "stock_qty", "image_url", "category", "is_featured"}


def test_featured_products(client: TestClient):
    featured = client.get("/api/products/featured").json()
    assert len(featured) == 8
    assert all(p["is_featured"] for p in featured)
    assert {p["category"] for p in featured} == {"T-Shirts"}


def test_get_product(client: TestClient):
    r = client.get("/api/products/9")
    assert r.status_code == 200
    assert r.json()["name"] == "New Arrival Shirt White"
    assert r.json()["stock_qty"] == 30


def test_unknown_product(client: TestClient):
    r = client.get("/api/products/999")
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found", "code": "not_found"}


def test_non_numeric_id_is_invalid_input(client: TestClient):
    r = client.get("/api/products/abc")
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_input"


def test_health_and_response_headers(client: TestClient):
    r = client.get("/health")
    assert r.json() == {"status": "ok", "backend": "memory"}
    assert r.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert r.headers["x-content-type-options"] == "nosniff"


def test_oversized_product_id(client: TestClient):
    r = client.get(f"/api/products/{2**70}")
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_input"


def test_unhandled_error_is_server_error_with_headers(client: TestClient, monkeypatch):
    async def broken():
        raise RuntimeError("catalog offline")

    monkeypatch.setattr(client.app.state.backend.stores.catalog, "list_all", broken)
    r = client.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"error": "Server error", "code": "server_error"}
    assert r.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert r.headers["x-frame-options"] == "SAMEORIGIN"
