"""
Component tests for the admin panel: product management, order management,
dashboard. Dostep tylko dla usera z rola admin.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tests.conftest import ADMIN_ID, CUSTOMER_ID, OTHER_CUSTOMER_ID
from tests.test_api_checkout_orders import VALID_FORM

ADMIN = {"admin_id": ADMIN_ID}


def place_order(client, user_id, product_id=4, quantity=1):
    params = {"device_id": f"device-{user_id}", "user_id": user_id}
    client.post("/cart/items", params=params, json={"product_id": product_id, "quantity": quantity})
    response = client.post("/checkout", params=params, json=VALID_FORM)
    assert response.status_code == 201
    return response.json()


class TestAdminAccess:
    @pytest.mark.parametrize("path", ["/admin/dashboard", "/admin/products", "/admin/orders"])
    def test_customer_is_forbidden(self, test_client: TestClient, path):
        response = test_client.get(path, params={"admin_id": CUSTOMER_ID})

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_unknown_user_is_forbidden(self, test_client: TestClient):
        assert test_client.get("/admin/dashboard", params={"admin_id": 404}).status_code == 403

    def test_admin_id_is_required(self, test_client: TestClient):
        assert test_client.get("/admin/dashboard").status_code == 422


class TestAdminProducts:
    def test_paginated_sorted_list(self, test_client: TestClient):
        response = test_client.get(
            "/admin/products",
            params={**ADMIN, "sort_field": "price", "sort_direction": "asc", "page": 2, "page_size": 2},
        )

        assert response.status_code == 200
        page = response.json()
        assert [p["name"] for p in page["items"]] == ["Wireless Headphones", "Mechanical Keyboard"]
        assert page["total"] == 5
        assert page["pages"] == 3

    def test_search_and_category_filter(self, test_client: TestClient):
        response = test_client.get(
            "/admin/products",
            params={**ADMIN, "search": "speaker", "category_id": 1, "sort_field": "name", "sort_direction": "asc"},
        )

        names = [p["name"] for p in response.json()["items"]]
        assert names == ["Bluetooth Speaker", "Studio Monitor Speaker"]

    def test_unknown_sort_field_is_400(self, test_client: TestClient):
        response = test_client.get("/admin/products", params={**ADMIN, "sort_field": "password"})

        assert response.status_code == 400

    def test_create_product(self, test_client: TestClient):
        payload = {"name": "USB Hub", "price": "19.90", "category_id": 2, "stock": 15}

        response = test_client.post("/admin/products", params=ADMIN, json=payload)

        assert response.status_code == 201
        created = response.json()
        assert created["name"] == "USB Hub"
        assert Decimal(created["price"]) == Decimal("19.90")
        assert test_client.get(f"/products/{created['id']}").status_code == 200

    @pytest.mark.parametrize(
        "payload, message",
        [
            ({"price": "10", "category_id": 1}, "Name, price and category are required"),
            ({"name": "Cable", "category_id": 1}, "Name, price and category are required"),
            ({"name": "Cable", "price": "-1", "category_id": 1}, "Price cannot be negative"),
        ],
    )
    def test_create_validation(self, test_client: TestClient, payload, message):
        response = test_client.post("/admin/products", params=ADMIN, json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == message

    def test_update_and_delete(self, test_client: TestClient):
        payload = {"name": "Desk Lamp Pro", "price": "29.00", "category_id": 2, "on_sale": True}

        updated = test_client.put("/admin/products/4", params=ADMIN, json=payload)
        assert updated.status_code == 200
        assert updated.json()["name"] == "Desk Lamp Pro"
        assert updated.json()["on_sale"] is True

        deleted = test_client.delete("/admin/products/4", params=ADMIN)
        assert deleted.status_code == 204
        assert test_client.get("/products/4").status_code == 404
        assert test_client.delete("/admin/products/4", params=ADMIN).status_code == 404

    def test_update_missing_product_is_404(self, test_client: TestClient):
        payload = {"name": "Ghost", "price": "1.00", "category_id": 1}

        assert test_client.put("/admin/products/999", params=ADMIN, json=payload).status_code == 404


class TestAdminOrders:
    def test_list_filter_by_status_with_customer_email(self, test_client: TestClient):
        first = place_order(test_client, CUSTOMER_ID)
        place_order(test_client, OTHER_CUSTOMER_ID)
        test_client.patch(f"/admin/orders/{first['id']}/status", params=ADMIN, json={"status": "shipped"})

        shipped = test_client.get("/admin/orders", params={**ADMIN, "status": "shipped"}).json()
        everything = test_client.get("/admin/orders", params=ADMIN).json()

        assert [o["id"] for o in shipped["items"]] == [first["id"]]
        assert shipped["items"][0]["customer_email"] == "ala@example.com"
        assert everything["total"] == 2

    def test_search_by_customer_email(self, test_client: TestClient):
        place_order(test_client, CUSTOMER_ID)
        other = place_order(test_client, OTHER_CUSTOMER_ID)

        page = test_client.get("/admin/orders", params={**ADMIN, "search": "olek@"}).json()

        assert [o["id"] for o in page["items"]] == [other["id"]]

    def test_terminal_status_is_frozen(self, test_client: TestClient):
        order = place_order(test_client, CUSTOMER_ID)
        url = f"/admin/orders/{order['id']}/status"

        completed = test_client.patch(url, params=ADMIN, json={"status": "completed"})
        again = test_client.patch(url, params=ADMIN, json={"status": "completed"})
        reopened = test_client.patch(url, params=ADMIN, json={"status": "processing"})

        assert completed.json()["status"] == "completed"
        assert again.status_code == 200
        assert reopened.status_code == 409

    def test_invalid_status_is_422(self, test_client: TestClient):
        order = place_order(test_client, CUSTOMER_ID)

        response = test_client.patch(f"/admin/orders/{order['id']}/status", params=ADMIN, json={"status": "lost"})

        assert response.status_code == 422

    def test_missing_order_is_404(self, test_client: TestClient):
        response = test_client.patch("/admin/orders/999/status", params=ADMIN, json={"status": "shipped"})

        assert response.status_code == 404


class TestDashboard:
    def test_stats(self, test_client: TestClient):
        # 24.00 + 1.92 tax + 10 shipping = 35.92, 129.00 + 10.32 = 139.32
        place_order(test_client, CUSTOMER_ID, product_id=4)
        place_order(test_client, OTHER_CUSTOMER_ID, product_id=3)

        stats = test_client.get("/admin/dashboard", params=ADMIN).json()

        assert Decimal(stats["total_sales"]) == Decimal("175.24")
        assert stats["total_orders"] == 2
        assert stats["total_products"] == 5
        assert stats["total_customers"] == 2
        assert len(stats["recent_orders"]) == 2
