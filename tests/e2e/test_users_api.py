"""
API tests for /api/users — registration, login, profile and administration.
"""
import pytest

from storefront.application.services.auth_service import decode_access_token

pytestmark = pytest.mark.e2e


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestRegistration:

    def test_register_returns_user_and_token(self, client):
        response = client.post(
            "/api/users/register",
            json={"name": "  Ana  ", "email": "Ana@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        user = body["data"]["user"]
        assert user["name"] == "Ana"
        assert user["email"] == "ana@example.com"
        assert user["role"] == "user"
        assert "joinedAt" in user
        assert "password" not in user and "passwordHash" not in user
        assert decode_access_token(body["data"]["token"]) == user["id"]

    def test_registration_cannot_request_admin(self, client):
        response = client.post(
            "/api/users/register",
            json={"name": "Eve", "email": "eve@example.com", "password": "secret123", "role": "admin"},
        )
        assert response.json()["data"]["user"]["role"] == "user"

    def test_duplicate_email(self, client, register):
        register(email="ana@example.com")
        response = client.post(
            "/api/users/register",
            json={"name": "Ana", "email": "ANA@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "DuplicateEmail"

    @pytest.mark.parametrize("payload", [
        {"email": "a@example.com", "password": "secret123"},
        {"name": "Ana", "email": "not-an-email", "password": "secret123"},
        {"name": "Ana", "email": "a@example.com", "password": "123"},
        {"name": "A", "email": "a@example.com", "password": "secret123"},
    ])
    def test_invalid_input(self, client, payload):
        response = client.post("/api/users/register", json=payload)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"] == "ValidationError"


class TestLogin:

    def test_login(self, client, register):
        registered = register(email="ana@example.com", password="secret123")

        response = client.post("/api/users/login", json={"email": "ANA@example.com", "password": "secret123"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == registered["user"]["id"]
        assert data["user"]["lastLogin"] is not None
        assert decode_access_token(data["token"]) == registered["user"]["id"]

    def test_unknown_email_and_wrong_password_are_indistinguishable(self, client, register):
        register(email="ana@example.com", password="secret123")

        wrong_password = client.post("/api/users/login", json={"email": "ana@example.com", "password": "nope99"})
        unknown_email = client.post("/api/users/login", json={"email": "who@example.com", "password": "nope99"})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["message"] == "Credenciales inválidas"

    def test_inactive_account_cannot_login(self, client, create_user):
        create_user(email="off@example.com", password="secret123", is_active=False)

        response = client.post("/api/users/login", json={"email": "off@example.com", "password": "secret123"})

        assert response.status_code == 401
        assert response.json()["message"] == "Credenciales inválidas"


class TestProfile:

    def test_get_profile(self, client, register):
        data = register()
        response = client.get("/api/users/profile", headers=_bearer(data["token"]))

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ana@example.com"

    def test_update_profile(self, client, register):
        data = register()
        response = client.put(
            "/api/users/profile",
            json={"name": "Ana María", "bio": "Lectora", "phone": "+34 600 000 000"},
            headers=_bearer(data["token"]),
        )

        assert response.status_code == 200
        profile = response.json()["data"]
        assert profile["name"] == "Ana María"
        assert profile["bio"] == "Lectora"

    def test_bio_too_long(self, client, register):
        data = register()
        response = client.put("/api/users/profile", json={"bio": "x" * 501}, headers=_bearer(data["token"]))
        assert response.status_code == 400


class TestChangePassword:

    def _change(self, client, token, current, new, confirm):
        return client.put(
            "/api/users/change-password",
            json={"currentPassword": current, "newPassword": new, "confirmPassword": confirm},
            headers=_bearer(token),
        )

    def test_change_password(self, client, register):
        data = register(password="secret123")

        response = self._change(client, data["token"], "secret123", "better456", "better456")
        assert response.status_code == 200

        old = client.post("/api/users/login", json={"email": "ana@example.com", "password": "secret123"})
        new = client.post("/api/users/login", json={"email": "ana@example.com", "password": "better456"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_old_token_survives_password_change(self, client, register):
        data = register(password="secret123")
        self._change(client, data["token"], "secret123", "better456", "better456")

        assert client.get("/api/users/profile", headers=_bearer(data["token"])).status_code == 200

    def test_wrong_current_password(self, client, register):
        data = register(password="secret123")
        response = self._change(client, data["token"], "wrong1", "better456", "better456")

        assert response.status_code == 400
        assert response.json()["message"] == "Contraseña actual incorrecta"

    @pytest.mark.parametrize("new,confirm", [("better456", "other789"), ("secret123", "secret123")])
    def test_rejected_new_password(self, client, register, new, confirm):
        data = register(password="secret123")
        response = self._change(client, data["token"], "secret123", new, confirm)
        assert response.status_code == 400


class TestUserLookup:

    def test_self(self, client, register):
        data = register()
        response = client.get(f"/api/users/{data['user']['id']}", headers=_bearer(data["token"]))
        assert response.status_code == 200

    def test_other_user_is_forbidden(self, client, register):
        ana = register(email="ana@example.com")
        bruno = register(name="Bruno", email="bruno@example.com")

        response = client.get(f"/api/users/{ana['user']['id']}", headers=_bearer(bruno["token"]))
        assert response.status_code == 403

    def test_admin_sees_anyone(self, client, register, create_user, auth_headers):
        ana = register(email="ana@example.com")
        admin = create_user(role="admin")

        response = client.get(f"/api/users/{ana['user']['id']}", headers=auth_headers(admin.id))
        assert response.status_code == 200

    def test_malformed_id(self, client, register):
        data = register()
        response = client.get("/api/users/not-a-uuid", headers=_bearer(data["token"]))
        assert response.status_code == 400

    def test_unknown_id(self, client, create_user, auth_headers):
        admin = create_user(role="admin")
        response = client.get(
            "/api/users/0b5e7a3c-8d2f-4e6a-9c1b-2f3d4e5a6b7c", headers=auth_headers(admin.id)
        )
        assert response.status_code == 404


class TestAdministration:

    def test_listing_requires_admin(self, client, register):
        data = register()
        response = client.get("/api/users", headers=_bearer(data["token"]))

        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    def test_listing(self, client, create_user, auth_headers):
        admin = create_user(name="Admin", role="admin")
        create_user(name="Bruno")
        create_user(name="Carla", is_active=False)

        response = client.get("/api/users?isActive=false", headers=auth_headers(admin.id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert [u["name"] for u in data["users"]] == ["Carla"]
        assert data["pagination"]["totalRecords"] == 1

    def test_listing_limit_bounds(self, client, create_user, auth_headers):
        admin = create_user(role="admin")
        assert client.get("/api/users?limit=101", headers=auth_headers(admin.id)).status_code == 400

    def test_huge_page(self, client, create_user, auth_headers):
        admin = create_user(role="admin")

        response = client.get("/api/users", params={"page": 10**19}, headers=auth_headers(admin.id))

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_stats(self, client, create_user, auth_headers):
        admin = create_user(role="admin")
        create_user()
        create_user(is_active=False)

        response = client.get("/api/users/stats/overview", headers=auth_headers(admin.id))

        assert response.status_code == 200
        stats = response.json()["data"]
        assert stats["total"] == 3
        assert stats["active"] == 2
        assert stats["inactive"] == 1
        assert {r["role"]: r["count"] for r in stats["byRole"]} == {"admin": 1, "user": 2}

    def test_deactivation_revokes_access(self, client, register, create_user, auth_headers):
        ana = register()
        admin = create_user(role="admin")

        response = client.delete(f"/api/users/{ana['user']['id']}", headers=auth_headers(admin.id))
        assert response.status_code == 200

        profile = client.get("/api/users/profile", headers=_bearer(ana["token"]))
        assert profile.status_code == 401
        assert profile.json()["error"] == "AccountInactive"

    def test_admin_cannot_deactivate_self(self, client, create_user, auth_headers):
        admin = create_user(role="admin")
        response = client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin.id))
        assert response.status_code == 400

    def test_deactivate_unknown(self, client, create_user, auth_headers):
        admin = create_user(role="admin")
        response = client.delete(
            "/api/users/0b5e7a3c-8d2f-4e6a-9c1b-2f3d4e5a6b7c", headers=auth_headers(admin.id)
        )
        assert response.status_code == 404
