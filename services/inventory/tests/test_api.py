"""Integration tests for the FastAPI endpoints (main.py)."""
from decimal import Decimal

from helpers import MISSING_ID, store_data


def create_store(client, name="Main Street"):
    response = client.post("/stores", json=store_data(name))
    assert response.status_code == 201
    return response.json()


def create_product(client, store_id, sku="SKU-1", **overrides):
    body = {
        "name": "Widget",
        "sku": sku,
        "category": "Tools",
        "price": 19.99,
        "quantity": 10,
        "store_id": store_id,
    }
    body.update(overrides)
    return client.post("/products", json=body)


class TestHealth:
    def test_healthz(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "timestamp" in response.json()


class TestStoreEndpoints:
    def test_store_lifecycle(self, client):
        store = create_store(client)
        assert store["product_count"] == 0

        response = client.patch(f"/stores/{store['id']}", json={"name": "Renamed"})
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"

        assert [s["id"] for s in client.get("/stores").json()] == [store["id"]]

        response = client.delete(f"/stores/{store['id']}")
        assert response.status_code == 200
        assert client.get(f"/stores/{store['id']}").status_code == 404

    def test_delete_store_with_products_conflicts(self, client):
        store = create_store(client)
        create_product(client, store["id"])

        response = client.delete(f"/stores/{store['id']}")

        assert response.status_code == 409
        assert client.get(f"/stores/{store['id']}").json()["product_count"] == 1

    def test_missing_required_field_is_unprocessable(self, client):
        response = client.post("/stores", json={"name": "No address"})

        assert response.status_code == 422


class TestProductEndpoints:
    def test_create_and_fetch(self, client):
        store = create_store(client)

        response = create_product(client, store["id"], description="A widget")

        assert response.status_code == 201
        product = response.json()
        assert product["version"] == 0
        assert product["min_stock"] == 10
        assert Decimal(product["price"]) == Decimal("19.99")
        assert product["store"]["id"] == store["id"]

        fetched = client.get(f"/products/{product['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["sku"] == "SKU-1"

    def test_create_for_unknown_store_is_404(self, client):
        response = create_product(client, MISSING_ID)

        assert response.status_code == 404
        assert response.json()["detail"] == f"Store with ID {MISSING_ID} not found"

    def test_duplicate_sku_is_409(self, client):
        first = create_store(client, "First")
        second = create_store(client, "Second")
        create_product(client, first["id"], sku="DUP")

        response = create_product(client, second["id"], sku="DUP")

        assert response.status_code == 409
        assert response.json()["detail"] == "Product with SKU DUP already exists"

    def test_negative_price_is_unprocessable(self, client):
        store = create_store(client)

        assert create_product(client, store["id"], price=-1).status_code == 422

    def test_versioned_update_flow(self, client):
        store = create_store(client)
        product = create_product(client, store["id"]).json()

        response = client.patch(f"/products/{product['id']}", json={"version": 0, "name": "Gadget"})
        assert response.status_code == 200
        assert response.json()["version"] == 1

        stale = client.patch(f"/products/{product['id']}", json={"version": 0, "name": "Gizmo"})
        assert stale.status_code == 409
        assert "modified by another user" in stale.json()["detail"]

        assert client.get(f"/products/{product['id']}").json()["name"] == "Gadget"

    def test_update_requires_version(self, client):
        store = create_store(client)
        product = create_product(client, store["id"]).json()

        response = client.patch(f"/products/{product['id']}", json={"name": "No version"})

        assert response.status_code == 422

    def test_update_unknown_product_is_404(self, client):
        response = client.patch(f"/products/{MISSING_ID}", json={"version": 0, "name": "x"})

        assert response.status_code == 404

    def test_adjust_quantity(self, client):
        store = create_store(client)
        product = create_product(client, store["id"], quantity=5).json()
        url = f"/products/{product['id']}/adjust-quantity"

        response = client.post(url, json={"adjustment": -5, "reason": "sale"})
        assert response.status_code == 200
        assert response.json()["quantity"] == 0
        assert response.json()["version"] == 0

        response = client.post(url, json={"adjustment": -1, "reason": "damaged", "note": "Dropped"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot reduce quantity by 1. Current stock is 0."

    def test_adjust_quantity_validates_reason_and_note(self, client):
        store = create_store(client)
        product = create_product(client, store["id"]).json()
        url = f"/products/{product['id']}/adjust-quantity"

        assert client.post(url, json={"adjustment": 1, "reason": "theft"}).status_code == 422
        assert client.post(url, json={"adjustment": 1, "reason": "other", "note": "x" * 501}).status_code == 422

    def test_delete_returns_product(self, client):
        store = create_store(client)
        product = create_product(client, store["id"]).json()

        response = client.delete(f"/products/{product['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == product["id"]
        assert client.get(f"/products/{product['id']}").status_code == 404
        assert client.delete(f"/products/{product['id']}").status_code == 404

    def test_oversized_adjustment_is_unprocessable(self, client):
        store = create_store(client)
        product = create_product(client, store["id"]).json()
        url = f"/products/{product['id']}/adjust-quantity"

        assert client.post(url, json={"adjustment": 10**20, "reason": "sale"}).status_code == 422
        assert client.post(url, json={"adjustment": -(10**20), "reason": "sale"}).status_code == 422
        assert client.get(f"/products/{product['id']}").json()["quantity"] == 10

    def test_oversized_quantity_is_unprocessable(self, client):
        store = create_store(client)

        assert create_product(client, store["id"], quantity=2**31).status_code == 422
        assert create_product(client, store["id"], min_stock=2**31).status_code == 422

    def test_malformed_ids_are_unprocessable(self, client):
        assert client.get("/products/not-a-uuid").status_code == 422
        assert client.patch("/products/not-a-uuid", json={"version": 0}).status_code == 422
        assert client.delete("/products/not-a-uuid").status_code == 422
        assert client.get("/stores/not-a-uuid").status_code == 422
        assert create_product(client, "not-a-uuid").status_code == 422

    def test_uppercase_id_finds_product(self, client):
        store = create_store(client)
        product = create_product(client, store["id"]).json()

        response = client.get(f"/products/{product['id'].upper()}")

        assert response.status_code == 200
        assert response.json()["id"] == product["id"]

    def test_categories(self, client):
        store = create_store(client)
        create_product(client, store["id"], sku="A", category="Toys")
        create_product(client, store["id"], sku="B", category="Books")

        assert client.get("/products/categories").json() == ["Books", "Toys"]


class TestProductListing:
    def test_filters_and_metadata(self, client):
        store = create_store(client)
        for n in range(5):
            create_product(client, store["id"], sku=f"LOW-{n}", quantity=n, min_stock=10)
        create_product(client, store["id"], sku="PLENTY", quantity=100, min_stock=10)

        response = client.get(
            "/products",
            params={"low_stock": "true", "in_stock": "true", "limit": 2, "page": 2, "sort_by": "quantity", "sort_order": "asc"},
        )

        assert response.status_code == 200
        body = response.json()
        assert [p["sku"] for p in body["data"]] == ["LOW-3", "LOW-4"]
        assert body["meta"] == {
            "total": 4,
            "page": 2,
            "limit": 2,
            "total_pages": 2,
            "has_next_page": False,
            "has_previous_page": True,
        }

    def test_invalid_parameters_are_unprocessable(self, client):
        assert client.get("/products", params={"limit": 101}).status_code == 422
        assert client.get("/products", params={"page": 0}).status_code == 422
        assert client.get("/products", params={"sort_by": "version"}).status_code == 422
        assert client.get("/products", params={"sort_order": "up"}).status_code == 422
        assert client.get("/products", params={"page": 10**19}).status_code == 422
        assert client.get("/products", params={"store_id": "store-1"}).status_code == 422


class TestAnalyticsEndpoints:
    def test_analytics(self, client):
        store = create_store(client)
        create_product(client, store["id"], sku="E1", category="Electronics", price=100, quantity=5, min_stock=10)
        create_product(client, store["id"], sku="E2", category="Electronics", price=150, quantity=8, min_stock=2)

        value = client.get("/analytics/inventory-value").json()
        assert Decimal(value["grand_total"]) == Decimal("1700.00")
        assert value["stores"][0]["total_quantity"] == 13

        low = client.get("/analytics/low-stock").json()
        assert [item["sku"] for item in low] == ["E1"]
        assert low[0]["deficit"] == 5
        assert low[0]["store_name"] == store["name"]

        summary = client.get("/analytics/category-summary").json()
        assert summary[0]["category"] == "Electronics"
        assert Decimal(summary[0]["average_price"]) == Decimal("125.00")
