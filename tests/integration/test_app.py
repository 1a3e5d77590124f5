"""
Application wiring: health check, error envelope and bearer tokens.
"""

import uuid

from rentify_backend.config import settings


class TestSettings:
    def test_test_settings_loaded(self):
        assert settings.app_env == "test"
        assert settings.database_url == "sqlite+aiosqlite:///:memory:"


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["env"] == "test"
        assert body["version"]


class TestErrorEnvelope:
    async def test_not_found_uses_envelope(self, client):
        response = await client.get(f"/api/properties/{uuid.uuid4()}")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert "not found" in body["message"]

    async def test_transaction_id_echoed(self, client):
        response = await client.get("/api/health", headers={"x-transaction-id": "txn-123"})
        assert response.headers["x-transaction-id"] == "txn-123"


class TestTokens:
    async def test_invalid_token_rejected(self, client):
        response = await client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    async def test_signup_login_me(self, client):
        signup = await client.post(
            "/api/auth/signup",
            json={
                "email": "new.tenant@example.com",
                "password": "password123",
                "full_name": "New Tenant",
            },
        )
        assert signup.status_code == 200, signup.text

        login = await client.post(
            "/api/auth/login",
            json={"email": "new.tenant@example.com", "password": "password123"},
        )
        token = login.json()["data"]["access_token"]

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["data"]["email"] == "new.tenant@example.com"
        assert me.json()["data"]["role"] == "tenant"

    async def test_wrong_password(self, client, tenant_user):
        response = await client.post(
            "/api/auth/login",
            json={"email": tenant_user.email, "password": "wrong-password"},
        )
        assert response.status_code == 401
