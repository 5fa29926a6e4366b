"""Integration tests for the /cart endpoints via TestClient."""

import pytest
from catalogue.shared.pricing import line_total
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import cart_router
from ordering.cart.cart import ShoppingCart
from protean import current_domain

from shared.api import register_storefront_handlers


@pytest.fixture()
def client(products):
    app = FastAPI()
    register_storefront_handlers(app)
    app.include_router(cart_router)
    return TestClient(app)


def _add(client, headers, product_id="prod-apple", quantity=1):
    return client.post("/cart/items", json={"product_id": product_id, "quantity": quantity}, headers=headers)


class TestCartEndpoints:
    def test_requires_a_user(self, client):
        response = client.get("/cart")
        assert response.status_code == 401

    def test_empty_cart(self, client, user_headers):
        response = client.get("/cart", headers=user_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["lines"] == []
        assert body["total"] == 0.0

    def test_add_and_view(self, client, user_headers):
        assert _add(client, user_headers, "prod-apple", 2).status_code == 201
        assert _add(client, user_headers, "prod-honey", 1).status_code == 201

        body = client.get("/cart", headers=user_headers).json()
        assert [line["product_id"] for line in body["lines"]] == ["prod-apple", "prod-honey"]
        assert body["lines"][0]["line_total"] == 240.0
        assert body["item_count"] == 3
        assert body["subtotal"] == 690.0
        assert body["shipping_fee"] == 99.0
        assert body["total"] == 789.0

    def test_line_totals_match_the_pricing_resolver(self, client, user_headers):
        _add(client, user_headers, "prod-ghee", 3)
        _add(client, user_headers, "prod-apple", 7)

        body = client.get("/cart", headers=user_headers).json()
        totals = [line["line_total"] for line in body["lines"]]
        assert totals == [line_total(999.0, 3), line_total(120.0, 7)]
        assert round(sum(totals), 2) == body["subtotal"]

    def test_duplicate_add_is_a_bad_request(self, client, user_headers):
        _add(client, user_headers)
        response = _add(client, user_headers)
        assert response.status_code == 400

    def test_set_quantity(self, client, user_headers):
        _add(client, user_headers)
        response = client.put("/cart/items/prod-apple", json={"quantity": 3}, headers=user_headers)
        assert response.status_code == 200

        cart = current_domain.repository_for(ShoppingCart).get("user-001")
        assert cart.line_for("prod-apple").quantity == 3

    def test_zero_quantity_is_a_bad_request(self, client, user_headers):
        _add(client, user_headers)
        response = client.put("/cart/items/prod-apple", json={"quantity": 0}, headers=user_headers)
        assert response.status_code == 400

    def test_remove_twice(self, client, user_headers):
        _add(client, user_headers)
        assert client.delete("/cart/items/prod-apple", headers=user_headers).status_code == 200
        assert client.delete("/cart/items/prod-apple", headers=user_headers).status_code == 200
        assert client.get("/cart", headers=user_headers).json()["lines"] == []

    def test_summary_badge(self, client, user_headers):
        _add(client, user_headers, "prod-apple", 2)
        body = client.get("/cart/summary", headers=user_headers).json()
        assert body == {"line_count": 1, "item_quantity": 2, "subtotal": 240.0}
