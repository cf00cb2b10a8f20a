"""
Pytest configuration — shared fixtures.
"""
import os

# Must be set before any storefront module reads the settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from storefront.application.services.auth_service import create_access_token, hash_password
from storefront.domain.models.category import Category
from storefront.domain.models.user import User
from storefront.infrastructure.database import Database
from storefront.main import create_app


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """In-memory SQLite database with all tables created."""
    db = Database("sqlite://")
    db.create_all()
    try:
        yield db
    finally:
        db.drop_all()
        db.dispose()


@pytest.fixture
def test_db(database) -> Generator[Session, None, None]:
    with database.session() as session:
        yield session


@pytest.fixture
def app(database):
    return create_app(database)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def create_user(test_db) -> Callable[..., User]:
    """Insert a user straight into the store."""
    counter = {"n": 0}

    def _create(name="Usuario", email=None, password="secret123", role="user", is_active=True) -> User:
        counter["n"] += 1
        user = User(
            name=name,
            email=email or f"user{counter['n']}@example.com",
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )
        test_db.add(user)
        test_db.commit()
        test_db.refresh(user)
        return user

    return _create


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    def _headers(user_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers


@pytest.fixture
def categories(test_db):
    """Seed the category lookup."""
    for description in ("Books", "Clothing", "Toys"):
        test_db.add(Category(description=description))
    test_db.commit()
    return ["Books", "Clothing", "Toys"]


@pytest.fixture
def register(client) -> Callable[..., dict]:
    """Register through the API and return {"user": ..., "token": ...}."""

    def _register(name="Ana", email="ana@example.com", password="secret123") -> dict:
        response = client.post(
            "/api/users/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def create_product(client) -> Callable[..., dict]:
    """Create a product through the API as the given token's owner."""

    def _create(token: str, **overrides) -> dict:
        payload = {
            "name": "Clean Code",
            "description": "A handbook of agile software craftsmanship",
            "price": 10.0,
            "category": "Books",
            "stock": 5,
        }
        payload.update(overrides)
        response = client.post(
            "/api/products",
            json=payload,
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["product"]

    return _create
