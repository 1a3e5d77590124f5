"""
Property API: admin listing management, public browsing, views and interest.
"""

import uuid

import pytest

PROPERTY = {
    "title": "Sunny 2 bedroom in Ntinda",
    "location": "Ntinda, Kampala",
    "description": "Bright apartment with a balcony and secure parking.",
    "category": "Apartment",
    "price_ugx": 150_000_000,
    "bedrooms": 2,
    "bathrooms": 1,
    "minimum_initial_months": 3,
    "image_url": "https://cdn.example.com/ntinda/front.jpg",
    "image_urls": [
        "https://cdn.example.com/ntinda/front.jpg",
        "https://cdn.example.com/ntinda/kitchen.jpg",
    ],
}


async def create_listing(client, headers, **overrides) -> dict:
    response = await client.post(
        "/api/admin/properties", json={**PROPERTY, **overrides}, headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestAdminProperties:
    async def test_create_listing(self, client, admin_headers):
        data = await create_listing(client, admin_headers)

        assert data["title"] == PROPERTY["title"]
        assert len(data["property_code"]) == 10
        assert [i["image_url"] for i in data["images"]] == PROPERTY["image_urls"]
        assert data["images"][0]["is_primary"] is True
        assert data["daily_views_count"] == 0

    async def test_invalid_listing_rejected(self, client, admin_headers):
        response = await client.post(
            "/api/admin/properties",
            json={**PROPERTY, "bedrooms": 25},
            headers=admin_headers,
        )
        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["details"]["errors"] == {"bedrooms": "Maximum 20 bedrooms allowed"}

    async def test_requires_admin(self, client, tenant_headers):
        response = await client.post(
            "/api/admin/properties", json=PROPERTY, headers=tenant_headers
        )
        assert response.status_code == 403

    async def test_requires_authentication(self, client):
        response = await client.get("/api/admin/properties")
        assert response.status_code in (401, 403)

    async def test_update_and_deactivate(self, client, admin_headers):
        created = await create_listing(client, admin_headers)

        response = await client.patch(
            f"/api/admin/properties/{created['id']}",
            json={"price_ugx": 170_000_000, "is_active": False},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["price_ugx"] == 170_000_000

        public = await client.get(f"/api/properties/{created['id']}")
        assert public.status_code == 404

    async def test_delete(self, client, admin_headers):
        created = await create_listing(client, admin_headers)
        response = await client.delete(
            f"/api/admin/properties/{created['id']}", headers=admin_headers
        )
        assert response.status_code == 200

        response = await client.get(
            f"/api/admin/properties/{created['id']}", headers=admin_headers
        )
        assert response.status_code == 404


class TestDraftValidation:
    async def test_reports_errors_and_completion(self, client):
        response = await client.post(
            "/api/properties/validate",
            json={"data": {"title": "ab", "location": "Ntinda, Kampala"}},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_valid"] is False
        assert data["errors"]["title"] == "Title must be at least 3 characters"
        assert data["errors"]["description"] == "Description is required"
        assert 0 < data["completion_percentage"] < 100

    async def test_touched_fields_filter_errors(self, client):
        response = await client.post(
            "/api/properties/validate",
            json={"data": {"title": "ab"}, "touched": ["title"]},
        )
        assert list(response.json()["data"]["errors"]) == ["title"]


class TestPublicListings:
    async def test_lists_only_active_unoccupied(self, client, admin_headers):
        visible = await create_listing(client, admin_headers)
        await create_listing(client, admin_headers, title="Hidden listing", is_active=False)

        response = await client.get("/api/properties")
        assert response.status_code == 200
        page = response.json()["data"]
        assert page["total"] == 1
        assert [p["id"] for p in page["items"]] == [visible["id"]]

    async def test_filters_and_sorting(self, client, admin_headers):
        await create_listing(client, admin_headers, price_ugx=100_000_000, bedrooms=1)
        await create_listing(client, admin_headers, price_ugx=300_000_000, bedrooms=3)

        response = await client.get(
            "/api/properties", params={"sort": "price_desc", "min_price": 50_000_000}
        )
        prices = [p["price_ugx"] for p in response.json()["data"]["items"]]
        assert prices == [300_000_000, 100_000_000]

        response = await client.get("/api/properties", params={"bedrooms": 3})
        assert response.json()["data"]["total"] == 1

    async def test_featured(self, client, admin_headers):
        featured = await create_listing(client, admin_headers, is_featured=True)
        await create_listing(client, admin_headers)

        response = await client.get("/api/properties/featured")
        assert [p["id"] for p in response.json()["data"]] == [featured["id"]]

    async def test_unknown_listing(self, client):
        response = await client.get(f"/api/properties/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestViews:
    async def test_view_counted_once_per_session_per_day(self, client, admin_headers):
        listing = await create_listing(client, admin_headers)
        url = f"/api/properties/{listing['id']}/view"

        first = await client.post(url, json={"session_id": "session-a"})
        assert first.status_code == 200
        assert first.json()["message"] == "View recorded successfully"
        assert first.json()["data"]["daily_views"] == 1
        assert first.json()["data"]["already_viewed"] is False

        again = await client.post(url, json={"session_id": "session-a"})
        assert again.json()["message"] == "View already recorded today"
        assert again.json()["data"]["total_views"] == 1

        other = await client.post(url, json={"session_id": "session-b"})
        assert other.json()["data"]["daily_views"] == 2
        assert other.json()["data"]["total_views"] == 2

        stats = await client.get(url)
        assert stats.json()["data"]["total_views"] == 2
        assert stats.json()["data"]["last_view_at"] is not None

    async def test_view_without_session_gets_one(self, client, admin_headers):
        listing = await create_listing(client, admin_headers)
        response = await client.post(f"/api/properties/{listing['id']}/view")
        assert response.status_code == 200
        assert response.json()["data"]["session_id"]


class TestInterest:
    async def test_anonymous_interest_requires_email(self, client, admin_headers):
        listing = await create_listing(client, admin_headers)
        response = await client.post(
            f"/api/properties/{listing['id']}/interested", json={"name": "Visitor"}
        )
        assert response.status_code == 422

    async def test_anonymous_interest_deduplicated_by_email(self, client, admin_headers):
        listing = await create_listing(client, admin_headers)
        url = f"/api/properties/{listing['id']}/interested"

        first = await client.post(url, json={"email": "visitor@example.com"})
        assert first.json()["message"] == "Interest recorded successfully"
        assert first.json()["data"]["interested_count"] == 1

        second = await client.post(
            url, json={"email": "visitor@example.com", "phone": "+256700000000"}
        )
        assert second.json()["message"] == "Interest updated successfully"
        assert second.json()["data"]["interested_count"] == 1

    async def test_signed_in_interest_lifecycle(
        self, client, admin_headers, tenant_headers
    ):
        listing = await create_listing(client, admin_headers)
        url = f"/api/properties/{listing['id']}/interested"

        status = await client.get(url, headers=tenant_headers)
        assert status.json()["data"] == {
            "has_expressed_interest": False,
            "interested_count": 0,
        }

        added = await client.post(url, json={}, headers=tenant_headers)
        assert added.status_code == 200
        assert added.json()["data"]["interested_count"] == 1

        status = await client.get(url, headers=tenant_headers)
        assert status.json()["data"]["has_expressed_interest"] is True

        removed = await client.delete(url, headers=tenant_headers)
        assert removed.json()["message"] == "Interest removed"
        assert removed.json()["data"]["interested_count"] == 0

        missing = await client.delete(url, headers=tenant_headers)
        assert missing.status_code == 404


class TestBuildingsApi:
    @pytest.fixture
    def payload(self, building_data):
        return building_data.model_dump(mode="json")

    async def test_create_and_reconstruct(self, client, admin_headers, payload):
        response = await client.post(
            "/api/admin/buildings", json=payload, headers=admin_headers
        )
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["message"] == "Building created successfully"
        assert body["data"]["total_units"] == 6
        block_id = body["data"]["block_id"]

        config = await client.get(
            f"/api/admin/buildings/{block_id}/config", headers=admin_headers
        )
        assert config.json()["data"]["building_name"] == "Kololo Heights"
        assert len(config.json()["data"]["config"]["floors"]) == 2

        listings = await client.get("/api/properties")
        assert listings.json()["data"]["total"] == 3

    async def test_preview_writes_nothing(self, client, admin_headers, payload):
        response = await client.post(
            "/api/admin/buildings/preview", json=payload, headers=admin_headers
        )
        assert response.json()["data"]["total_units"] == 6

        blocks = await client.get("/api/admin/buildings", headers=admin_headers)
        assert blocks.json()["data"]["total"] == 0

    async def test_landlord_conflict_is_409(
        self, client, admin_headers, payload
    ):
        created = await client.post(
            "/api/admin/buildings", json=payload, headers=admin_headers
        )
        block_id = created.json()["data"]["block_id"]

        landlords = []
        for email in ("one@example.com", "two@example.com"):
            response = await client.post(
                "/api/admin/landlords",
                json={"email": email, "password": "password123", "full_name": "Owner"},
                headers=admin_headers,
            )
            landlords.append(response.json()["data"]["landlord"]["id"])

        url = f"/api/admin/buildings/{block_id}/landlord"
        assigned = await client.put(
            url, json={"landlord_id": landlords[0]}, headers=admin_headers
        )
        assert assigned.json()["data"] == 3

        conflict = await client.put(
            url, json={"landlord_id": landlords[1]}, headers=admin_headers
        )
        assert conflict.status_code == 409
        assert conflict.json()["details"] == {"conflicts_count": 3}


class TestRoomsApi:
    async def test_room_lifecycle(self, client, admin_headers):
        listing = await create_listing(client, admin_headers)
        url = f"/api/admin/properties/{listing['id']}/details"

        created = await client.post(
            url,
            json={
                "detail_type": "Bedroom",
                "detail_name": "Master Bedroom",
                "image_urls": [
                    "https://cdn.example.com/ntinda/bed-1.jpg",
                    "https://cdn.example.com/ntinda/bed-2.jpg",
                ],
            },
            headers=admin_headers,
        )
        assert created.status_code == 201, created.text
        room = created.json()["data"]
        assert room["display_order"] == 0
        assert [i["display_order"] for i in room["images"]] == [0, 1]

        await client.post(
            url,
            json={"detail_type": "Kitchen", "detail_name": "Open kitchen"},
            headers=admin_headers,
        )

        public = await client.get(f"/api/properties/{listing['id']}")
        rooms = public.json()["data"]["rooms"]
        assert [r["detail_name"] for r in rooms] == ["Master Bedroom", "Open kitchen"]
        assert rooms[0]["images"][1]["image_url"].endswith("bed-2.jpg")

        detail_url = f"/api/admin/properties/details/{room['id']}"
        renamed = await client.patch(
            detail_url, json={"detail_name": "Main Bedroom"}, headers=admin_headers
        )
        assert renamed.json()["data"]["detail_name"] == "Main Bedroom"

        reordered = await client.put(
            f"{detail_url}/images",
            json=["https://cdn.example.com/ntinda/bed-2.jpg"],
            headers=admin_headers,
        )
        images = reordered.json()["data"]["images"]
        assert [i["image_url"] for i in images] == [
            "https://cdn.example.com/ntinda/bed-2.jpg"
        ]

        added = await client.post(
            f"{detail_url}/images",
            json={"image_url": "https://cdn.example.com/ntinda/bed-3.jpg"},
            headers=admin_headers,
        )
        assert [i["display_order"] for i in added.json()["data"]["images"]] == [0, 1]

        image_id = added.json()["data"]["images"][0]["id"]
        removed = await client.delete(
            f"/api/admin/properties/details/images/{image_id}", headers=admin_headers
        )
        assert removed.status_code == 200

        deleted = await client.delete(detail_url, headers=admin_headers)
        assert deleted.status_code == 200
        remaining = await client.get(url, headers=admin_headers)
        assert [r["detail_name"] for r in remaining.json()["data"]] == ["Open kitchen"]

    async def test_requires_admin(self, client, admin_headers, tenant_headers):
        listing = await create_listing(client, admin_headers)
        response = await client.post(
            f"/api/admin/properties/{listing['id']}/details",
            json={"detail_type": "Kitchen", "detail_name": "Kitchen"},
            headers=tenant_headers,
        )
        assert response.status_code == 403

    async def test_unknown_detail(self, client, admin_headers):
        response = await client.patch(
            f"/api/admin/properties/details/{uuid.uuid4()}",
            json={"detail_name": "Nothing"},
            headers=admin_headers,
        )
        assert response.status_code == 404
