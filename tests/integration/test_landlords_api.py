"""
Admin landlord directory: creation, lifecycle, payments and documents.
"""

import pytest

from rentify_backend.modules.auth.models import UserRole

BASE = "/api/admin/landlords"

NEW_LANDLORD = {
    "email": "owner@example.com",
    "password": "password123",
    "full_name": "Grace Owner",
    "business_name": "Grace Estates",
    "phone_number": "+256700111222",
    "national_id": "CM1234567890",
    "commission_rate": "10",
}


async def create_landlord(client, headers, **overrides) -> dict:
    response = await client.post(BASE, json={**NEW_LANDLORD, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateLandlord:
    async def test_creates_account_and_profile(self, client, admin_headers):
        data = await create_landlord(client, admin_headers)

        assert data["account_created"] is True
        landlord = data["landlord"]
        assert landlord["full_name"] == "Grace Owner"
        assert landlord["email"] == "owner@example.com"
        assert landlord["status"] == "active"
        assert landlord["verification_status"] == "unverified"
        assert landlord["id_document_type"] == "National ID"
        assert landlord["id_document_number"] == "CM1234567890"

        login = await client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "password123"},
        )
        assert login.status_code == 200
        token = login.json()["data"]["access_token"]
        me = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert me.json()["data"]["role"] == "landlord"

    async def test_existing_account_is_promoted(self, client, admin_headers, user_factory):
        user = await user_factory(UserRole.TENANT, email="existing@example.com")

        data = await create_landlord(
            client, admin_headers, email="existing@example.com", password=None
        )

        assert data["account_created"] is False
        assert data["user_id"] == str(user.id)

    async def test_duplicate_landlord_conflicts(self, client, admin_headers):
        await create_landlord(client, admin_headers)
        response = await client.post(BASE, json=NEW_LANDLORD, headers=admin_headers)
        assert response.status_code == 409

    async def test_new_account_needs_password(self, client, admin_headers):
        response = await client.post(
            BASE,
            json={"email": "nopass@example.com", "full_name": "No Pass"},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert response.json()["message"] == "Email, password, and full name are required"

    async def test_check_email(self, client, admin_headers):
        free = await client.get(
            f"{BASE}/check-email",
            params={"email": "owner@example.com"},
            headers=admin_headers,
        )
        assert free.json()["data"]["available"] is True

        await create_landlord(client, admin_headers)
        taken = await client.get(
            f"{BASE}/check-email",
            params={"email": "owner@example.com"},
            headers=admin_headers,
        )
        assert taken.json()["data"]["available"] is False

    async def test_tenants_cannot_manage_landlords(self, client, tenant_headers):
        response = await client.post(BASE, json=NEW_LANDLORD, headers=tenant_headers)
        assert response.status_code == 403


class TestLandlordLifecycle:
    @pytest.fixture
    async def landlord_id(self, client, admin_headers) -> str:
        return (await create_landlord(client, admin_headers))["landlord"]["id"]

    async def test_allowed_status_change(self, client, admin_headers, landlord_id):
        response = await client.post(
            f"{BASE}/{landlord_id}/status",
            json={"status": "suspended"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "suspended"

    async def test_rejected_status_change(self, client, admin_headers, landlord_id):
        await client.post(
            f"{BASE}/{landlord_id}/status",
            json={"status": "blacklisted"},
            headers=admin_headers,
        )
        response = await client.post(
            f"{BASE}/{landlord_id}/status",
            json={"status": "active"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["details"] == {"allowed": ["inactive"]}

    async def test_verification_sets_date(self, client, admin_headers, landlord_id):
        response = await client.post(
            f"{BASE}/{landlord_id}/verification",
            json={"verification_status": "verified", "notes": "ID checked"},
            headers=admin_headers,
        )
        data = response.json()["data"]
        assert data["verification_status"] == "verified"
        assert data["verification_date"] is not None
        assert data["verification_notes"] == "ID checked"

        response = await client.post(
            f"{BASE}/{landlord_id}/verification",
            json={"verification_status": "pending"},
            headers=admin_headers,
        )
        assert response.json()["data"]["verification_date"] is None

    async def test_update_and_list(self, client, admin_headers, landlord_id):
        response = await client.patch(
            f"{BASE}/{landlord_id}",
            json={"full_name": "Grace N. Owner", "city": "Kampala"},
            headers=admin_headers,
        )
        assert response.json()["data"]["full_name"] == "Grace N. Owner"

        listing = await client.get(BASE, params={"search": "Grace"}, headers=admin_headers)
        body = listing.json()["data"]
        assert body["total"] == 1
        assert body["stats"]["total"] == 1
        assert body["stats"]["active"] == 1

    async def test_stats(self, client, admin_headers, landlord_id):
        response = await client.get(f"{BASE}/stats", headers=admin_headers)
        stats = response.json()["data"]
        assert stats["total"] == 1
        assert stats["verified"] == 0
        assert stats["total_properties"] == 0

    async def test_delete_unassigns_buildings(
        self, client, admin_headers, landlord_id, building_data
    ):
        created = await client.post(
            "/api/admin/buildings",
            json=building_data.model_dump(mode="json"),
            headers=admin_headers,
        )
        block_id = created.json()["data"]["block_id"]
        await client.put(
            f"/api/admin/buildings/{block_id}/landlord",
            json={"landlord_id": landlord_id},
            headers=admin_headers,
        )

        response = await client.delete(f"{BASE}/{landlord_id}", headers=admin_headers)
        assert response.status_code == 200

        listings = await client.get(
            "/api/admin/properties",
            params={"block_id": block_id},
            headers=admin_headers,
        )
        assert {p["landlord_id"] for p in listings.json()["data"]["items"]} == {None}
        missing = await client.get(f"{BASE}/{landlord_id}", headers=admin_headers)
        assert missing.status_code == 404


class TestPaymentsAndDocuments:
    @pytest.fixture
    async def landlord_id(self, client, admin_headers) -> str:
        return (await create_landlord(client, admin_headers))["landlord"]["id"]

    async def test_record_and_list_payments(self, client, admin_headers, landlord_id):
        response = await client.post(
            f"{BASE}/{landlord_id}/payments",
            json={
                "period_start": "2026-09-01",
                "period_end": "2026-09-30",
                "amount_ugx": 250_000_000,
                "commission_ugx": 25_000_000,
                "status": "completed",
            },
            headers=admin_headers,
        )
        assert response.status_code == 200

        payments = await client.get(f"{BASE}/{landlord_id}/payments", headers=admin_headers)
        assert [p["amount_ugx"] for p in payments.json()["data"]] == [250_000_000]

    async def test_payment_period_must_be_ordered(self, client, admin_headers, landlord_id):
        response = await client.post(
            f"{BASE}/{landlord_id}/payments",
            json={
                "period_start": "2026-09-30",
                "period_end": "2026-09-01",
                "amount_ugx": 1,
            },
            headers=admin_headers,
        )
        assert response.status_code == 422

    async def test_document_lifecycle(self, client, admin_headers, landlord_id):
        added = await client.post(
            f"{BASE}/{landlord_id}/documents",
            json={
                "document_type": "title_deed",
                "document_name": "Plot 12 title",
                "document_url": "https://cdn.example.com/deeds/plot12.pdf",
            },
            headers=admin_headers,
        )
        document_id = added.json()["data"]["id"]
        assert added.json()["data"]["is_verified"] is False

        verified = await client.post(
            f"{BASE}/{landlord_id}/documents/{document_id}/verify",
            headers=admin_headers,
        )
        assert verified.json()["data"]["is_verified"] is True

        detail = await client.get(f"{BASE}/{landlord_id}", headers=admin_headers)
        assert [d["id"] for d in detail.json()["data"]["documents"]] == [document_id]

        deleted = await client.delete(
            f"{BASE}/{landlord_id}/documents/{document_id}", headers=admin_headers
        )
        assert deleted.status_code == 200
        documents = await client.get(f"{BASE}/{landlord_id}/documents", headers=admin_headers)
        assert documents.json()["data"] == []
