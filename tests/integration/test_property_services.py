"""
Listing codes and rooms against SQLite.
"""

import pytest

from rentify_backend.core.exceptions import ConflictError, DatabaseError, NotFoundError
from rentify_backend.modules.property_management import crud, services
from rentify_backend.modules.property_management.schemas import (
    PropertyCreate,
    PropertyRoomCreate,
    PropertyRoomUpdate,
    RoomConfig,
    UnitTypeDetails,
)
from rentify_backend.modules.property_management.unit_numbers import (
    validate_unit_number,
)


def listing(**overrides) -> PropertyCreate:
    data = {
        "title": "Quiet 1 bedroom in Bukoto",
        "location": "Bukoto, Kampala",
        "description": "Ground floor flat with a small garden and parking.",
        "category": "Apartment",
        "price_ugx": 90_000_000,
        "bedrooms": 1,
        "bathrooms": 1,
    }
    data.update(overrides)
    return PropertyCreate(**data)


def fixed_codes(monkeypatch, *codes: str):
    """Make the code generator return ``codes`` in order, then repeat the last."""
    remaining = list(codes)

    def next_code() -> str:
        return remaining.pop(0) if len(remaining) > 1 else remaining[0]

    monkeypatch.setattr(services, "random_unit_number", next_code)


class TestPropertyCodes:
    async def test_many_listings_get_distinct_codes(self, db_session):
        codes = []
        for number in range(60):
            prop = await services.create_property(
                db_session, listing(title=f"Quiet 1 bedroom in Bukoto no. {number}")
            )
            codes.append(prop.property_code)

        assert len(set(codes)) == 60
        assert all(validate_unit_number(code) for code in codes)

    async def test_taken_codes_are_skipped(self, db_session, monkeypatch):
        fixed_codes(monkeypatch, "1111111111")
        first = await services.create_property(db_session, listing())

        fixed_codes(monkeypatch, "1111111111", "1111111111", "2222222222")
        second = await services.create_property(db_session, listing())

        assert first.property_code == "1111111111"
        assert second.property_code == "2222222222"

    async def test_gives_up_when_every_draw_is_taken(self, db_session, monkeypatch):
        fixed_codes(monkeypatch, "1111111111")
        await services.create_property(db_session, listing())

        with pytest.raises(DatabaseError):
            await services.create_property(db_session, listing())

    async def test_building_listings_get_distinct_codes(
        self, db_session, building_data, monkeypatch
    ):
        fixed_codes(monkeypatch, "3333333333", "3333333333", "4444444444", "5555555555")

        result = await services.create_building(db_session, building_data)

        properties = await crud.get_properties_for_block(db_session, result.block_id)
        assert sorted(p.property_code for p in properties) == [
            "3333333333",
            "4444444444",
            "5555555555",
        ]


class TestRooms:
    async def test_rooms_are_appended_in_order(self, db_session):
        prop = await services.create_property(db_session, listing())

        for name in ("Master Bedroom", "Kitchen", "Balcony"):
            await services.create_room(
                db_session,
                prop.id,
                PropertyRoomCreate(detail_type="Room", detail_name=name),
            )

        rooms = await services.list_rooms(db_session, prop.id)
        names = [r.detail_name for r in rooms]
        assert names == ["Master Bedroom", "Kitchen", "Balcony"]
        assert [r.display_order for r in rooms] == [0, 1, 2]

    async def test_images_keep_their_order(self, db_session):
        prop = await services.create_property(db_session, listing())
        room = await services.create_room(
            db_session,
            prop.id,
            PropertyRoomCreate(
                detail_type="Bedroom",
                detail_name="Master Bedroom",
                image_urls=[
                    "https://cdn.example.com/a.jpg",
                    "",
                    "https://cdn.example.com/b.jpg",
                ],
            ),
        )
        assert [i.image_url for i in room.images] == [
            "https://cdn.example.com/a.jpg",
            "https://cdn.example.com/b.jpg",
        ]

        room = await services.add_room_image(
            db_session, room.id, "https://cdn.example.com/c.jpg"
        )
        assert [i.display_order for i in room.images] == [0, 1, 2]

        with pytest.raises(ConflictError):
            await services.add_room_image(
                db_session, room.id, "https://cdn.example.com/c.jpg"
            )

        room = await services.replace_room_images(
            db_session,
            room.id,
            ["https://cdn.example.com/c.jpg", "https://cdn.example.com/a.jpg"],
        )
        assert [(i.image_url, i.display_order) for i in room.images] == [
            ("https://cdn.example.com/c.jpg", 0),
            ("https://cdn.example.com/a.jpg", 1),
        ]

        await services.delete_room_image(db_session, room.images[0].id)
        room = await services.get_room(db_session, room.id)
        assert [i.image_url for i in room.images] == ["https://cdn.example.com/a.jpg"]

    async def test_update_and_delete(self, db_session):
        prop = await services.create_property(db_session, listing())
        room = await services.create_room(
            db_session,
            prop.id,
            PropertyRoomCreate(detail_type="Kitchen", detail_name="Kitchen"),
        )

        updated = await services.update_room(
            db_session, room.id, PropertyRoomUpdate(description="Gas cooker included")
        )
        assert updated.description == "Gas cooker included"
        assert updated.detail_name == "Kitchen"

        await services.delete_room(db_session, room.id)
        with pytest.raises(NotFoundError):
            await services.get_room(db_session, room.id)

    async def test_rooms_removed_with_listing(self, db_session):
        prop = await services.create_property(db_session, listing())
        room = await services.create_room(
            db_session,
            prop.id,
            PropertyRoomCreate(
                detail_type="Garden",
                detail_name="Garden",
                image_urls=["https://cdn.example.com/garden.jpg"],
            ),
        )

        await services.delete_property(db_session, prop.id)

        assert await crud.get_room_by_id(db_session, room.id) is None

    async def test_unknown_listing(self, db_session):
        import uuid

        with pytest.raises(NotFoundError):
            await services.create_room(
                db_session,
                uuid.uuid4(),
                PropertyRoomCreate(detail_type="Kitchen", detail_name="Kitchen"),
            )


class TestBuildingRooms:
    async def test_rooms_created_and_reconstructed(self, db_session, building_data):
        building_data.config.unit_type_details = [
            UnitTypeDetails(
                type="2BR",
                property_details=[
                    RoomConfig(
                        type="Bedroom",
                        name="Master Bedroom",
                        description="En-suite",
                        image_urls=[
                            "https://cdn.example.com/kololo/bed-1.jpg",
                            "https://cdn.example.com/kololo/bed-2.jpg",
                        ],
                    ),
                    RoomConfig(type="Balcony", name="City-view balcony"),
                ],
            )
        ]

        result = await services.create_building(db_session, building_data)

        two_bed_id = next(c.property_id for c in result.created if c.unit_type == "2BR")
        rooms = await services.list_rooms(db_session, two_bed_id)
        assert [(r.detail_type, r.detail_name) for r in rooms] == [
            ("Bedroom", "Master Bedroom"),
            ("Balcony", "City-view balcony"),
        ]
        assert [i.image_url for i in rooms[0].images] == [
            "https://cdn.example.com/kololo/bed-1.jpg",
            "https://cdn.example.com/kololo/bed-2.jpg",
        ]

        config = await services.get_block_config(db_session, result.block_id)
        details = {d.type: d for d in config.config.unit_type_details}
        assert details["Studio"].property_details == []
        restored = details["2BR"].property_details
        assert [(r.type, r.name, r.description) for r in restored] == [
            ("Bedroom", "Master Bedroom", "En-suite"),
            ("Balcony", "City-view balcony", None),
        ]
        assert restored[0].image_urls == [
            "https://cdn.example.com/kololo/bed-1.jpg",
            "https://cdn.example.com/kololo/bed-2.jpg",
        ]
