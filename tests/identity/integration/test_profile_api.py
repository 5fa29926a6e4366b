"""Integration tests for /profiles via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from identity.api.routes import router

from shared.api import register_storefront_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_storefront_handlers(app)
    app.include_router(router)
    return TestClient(app)


@pytest.fixture()
def signed_up(client, user_headers):
    response = client.post("/profiles", json={"name": "Asha Rao"}, headers=user_headers)
    assert response.status_code == 201
    return response.json()["user_id"]


class TestProfileEndpoints:
    def test_requires_a_user(self, client):
        assert client.get("/profiles/me").status_code == 401

    def test_create_and_read(self, client, user_headers, signed_up):
        assert signed_up == "user-001"
        body = client.get("/profiles/me", headers=user_headers).json()
        assert body["name"] == "Asha Rao"
        assert body["addresses"] == []

    def test_create_twice(self, client, user_headers, signed_up):
        response = client.post("/profiles", json={}, headers=user_headers)
        assert response.status_code == 400

    def test_update(self, client, user_headers, signed_up):
        response = client.put("/profiles/me", json={"phone": "+91 98450 12345"}, headers=user_headers)
        assert response.status_code == 200
        assert client.get("/profiles/me", headers=user_headers).json()["phone"] == "+91 98450 12345"

    def test_bad_phone(self, client, user_headers, signed_up):
        response = client.put("/profiles/me", json={"phone": "call me"}, headers=user_headers)
        assert response.status_code == 400


class TestAddressEndpoints:
    def test_add_replace_remove(self, client, user_headers, signed_up, home, office):
        response = client.post("/profiles/me/addresses", json={**home, "is_default": True}, headers=user_headers)
        assert response.status_code == 201
        address_id = response.json()["address_id"]

        response = client.put(f"/profiles/me/addresses/{address_id}", json=office, headers=user_headers)
        assert response.status_code == 200

        addresses = client.get("/profiles/me/addresses", headers=user_headers).json()
        assert len(addresses) == 1
        assert addresses[0]["street"] == "Outer Ring Road"
        assert addresses[0]["is_default"] is False

        response = client.delete(f"/profiles/me/addresses/{address_id}", headers=user_headers)
        assert response.status_code == 200
        assert client.get("/profiles/me/addresses", headers=user_headers).json() == []

    def test_incomplete_address(self, client, user_headers, signed_up):
        response = client.post("/profiles/me/addresses", json={"city": "Mysuru"}, headers=user_headers)
        assert response.status_code == 400
