"""
API tests for /api/categories.
"""
import pytest

pytestmark = pytest.mark.e2e


def test_empty_listing(client):
    response = client.get("/api/categories")

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["message"] == "No hay categorías disponibles"


def test_listing_is_alphabetical(client, categories):
    client.post("/api/categories", json={"description": "Art"})

    response = client.get("/api/categories")

    assert [c["description"] for c in response.json()["data"]] == ["Art", "Books", "Clothing", "Toys"]


def test_create_and_read(client):
    created = client.post("/api/categories", json={"description": "  Garden  "})

    assert created.status_code == 201
    category = created.json()["data"]
    assert category["description"] == "Garden"

    response = client.get(f"/api/categories/{category['id']}")
    assert response.status_code == 200
    assert response.json()["data"] == category


def test_duplicate(client, categories):
    response = client.post("/api/categories", json={"description": "Books"})

    assert response.status_code == 400
    assert response.json()["error"] == "DuplicateCategory"


def test_blank_description(client):
    assert client.post("/api/categories", json={"description": ""}).status_code == 400


def test_unknown_category(client):
    response = client.get("/api/categories/does-not-exist")

    assert response.status_code == 404
    assert response.json()["message"] == "Categoría no encontrada"


def test_new_category_accepts_products(client, register):
    client.post("/api/categories", json={"description": "Garden"})
    token = register()["token"]

    response = client.post(
        "/api/products",
        json={"name": "Rake", "description": "Sturdy steel garden rake", "price": 19.9, "category": "Garden"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 201
