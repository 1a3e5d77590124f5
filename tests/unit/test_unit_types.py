"""
Unit-type expansion of building floor configurations.
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from rentify_backend.core.exceptions import ValidationError
from rentify_backend.modules.property_management.schemas import (
    BuildingConfig,
    FloorConfig,
    RoomConfig,
    UnitTypeCount,
    UnitTypeDetails,
)
from rentify_backend.modules.property_management.unit_numbers import (
    validate_unit_number,
)
from rentify_backend.modules.property_management.unit_types import (
    UnitNumberAllocator,
    bathrooms_for_unit_type,
    bedrooms_for_unit_type,
    building_name_from_titles,
    extract_unique_unit_types,
    generate_block_name,
    plan_building,
    reconstruct_building_config,
    unit_type_from_listing,
)

BLOCK_ID = uuid.UUID("0c4f1d7e-2a3b-4c5d-8e9f-a1b2c3d4e5f6")


def make_config(floors: dict[int, list[tuple[str, int, int]]], total_floors=None):
    return BuildingConfig(
        total_floors=total_floors or max(floors),
        floors=[
            FloorConfig(
                floor_number=number,
                unit_types=[
                    UnitTypeCount(type=t, count=c, monthly_fee=fee)
                    for t, c, fee in entries
                ],
            )
            for number, entries in floors.items()
        ],
    )


CONFIGS = [
    {1: [("Studio", 2, 500_000), ("2BR", 1, 1_000_000)]},
    {
        1: [("Studio", 3, 500_000)],
        2: [("Studio", 2, 550_000), ("1BR", 4, 700_000)],
        3: [("1BR", 1, 700_000), ("Penthouse", 1, 5_000_000)],
    },
    {
        1: [("2BR", 5, 1_000_000)],
        2: [("2BR", 5, 1_000_000)],
        11: [("2BR", 5, 1_000_000)],
    },
    {1: [("Loft", 1, 900_000), ("Studio", 0, 400_000)]},
]


class TestExpansionInvariants:
    @pytest.mark.parametrize("floors", CONFIGS)
    def test_unit_count_matches_configuration(self, floors):
        config = make_config(floors)
        plan = plan_building(BLOCK_ID, config, base_title="Block")

        expected = sum(c for entries in floors.values() for _, c, _ in entries)
        produced = sum(len(p.units) for p in plan.properties)
        assert produced == expected
        assert plan.total_units == expected

    @pytest.mark.parametrize("floors", CONFIGS)
    def test_one_listing_per_distinct_type(self, floors):
        config = make_config(floors)
        plan = plan_building(BLOCK_ID, config, base_title="Block")

        distinct = {t for entries in floors.values() for t, _, _ in entries}
        assert len(plan.properties) == len(distinct)
        assert {p.unit_type.type for p in plan.properties} == distinct

    @pytest.mark.parametrize("floors", CONFIGS)
    def test_unit_numbers_unique_and_valid(self, floors):
        plan = plan_building(BLOCK_ID, make_config(floors), base_title="Block")
        numbers = [u.unit_number for p in plan.properties for u in p.units]
        assert len(numbers) == len(set(numbers))
        assert all(validate_unit_number(n) for n in numbers)

    def test_highest_fee_wins(self):
        config = make_config(
            {1: [("2BR", 1, 1_000_000)], 2: [("2BR", 1, 1_200_000)]}
        )
        unit_types = extract_unique_unit_types(config)
        assert len(unit_types) == 1
        assert unit_types[0].monthly_fee == 1_200_000

        plan = plan_building(BLOCK_ID, config, base_title="Block")
        assert plan.properties[0].price_ugx == 1_200_000 * 100

    def test_first_seen_order_and_floor_contributions(self):
        config = make_config(
            {1: [("2BR", 1, 1), ("Studio", 2, 1)], 2: [("Studio", 3, 1)]}
        )
        unit_types = extract_unique_unit_types(config)
        assert [ut.type for ut in unit_types] == ["2BR", "Studio"]
        assert unit_types[1].units_per_floor == [(1, 2), (2, 3)]
        assert unit_types[1].total_units == 5

    def test_empty_configuration_rejected(self):
        config = BuildingConfig(total_floors=2, floors=[FloorConfig(floor_number=1)])
        with pytest.raises(ValidationError):
            plan_building(BLOCK_ID, config, base_title="Block")


class TestRoomLookup:
    @pytest.mark.parametrize(
        "unit_type,bedrooms,bathrooms",
        [
            ("Studio", 0, 1),
            ("1BR", 1, 1),
            ("2BR", 2, 2),
            ("3BR", 3, 2),
            ("4BR", 4, 3),
            ("Penthouse", 4, 3),
            ("Maisonette", 1, 1),
        ],
    )
    def test_lookup(self, unit_type, bedrooms, bathrooms):
        assert bedrooms_for_unit_type(unit_type) == bedrooms
        assert bathrooms_for_unit_type(unit_type) == bathrooms


class TestListingDetails:
    def test_titles_and_images(self):
        config = make_config({1: [("Studio", 1, 1), ("2BR", 1, 1)]})
        config.unit_type_details = [
            UnitTypeDetails(
                type="2BR",
                title="Garden Suite",
                image_url="https://cdn.example.com/2br.jpg",
            )
        ]
        plan = plan_building(
            BLOCK_ID,
            config,
            base_title="Block",
            building_name="Acacia Court",
            base_image_url="https://cdn.example.com/front.jpg",
            shared_image_urls=[
                "https://cdn.example.com/front.jpg",
                "",
                "https://cdn.example.com/gym.jpg",
            ],
        )
        studio, two_bed = plan.properties

        assert studio.title == "Acacia Court - Studio"
        assert studio.image_urls == [
            "https://cdn.example.com/front.jpg",
            "https://cdn.example.com/gym.jpg",
        ]
        assert two_bed.title == "Garden Suite"
        assert two_bed.image_url == "https://cdn.example.com/2br.jpg"
        assert two_bed.image_urls[0] == "https://cdn.example.com/2br.jpg"

    def test_base_title_used_without_building_name(self):
        plan = plan_building(
            BLOCK_ID, make_config({1: [("1BR", 1, 1)]}), base_title="Ntinda Flats"
        )
        assert plan.properties[0].title == "Ntinda Flats - 1 Bedroom"

    def test_generated_block_name(self):
        now = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        name = generate_block_name("Muyenga Hill Road", now)
        stamp = str(int(now.timestamp() * 1000))[-6:]
        assert name == f"MuyengaHi-{stamp}"


class TestUnitNumberAllocator:
    def test_types_on_same_floor_do_not_collide(self):
        allocator = UnitNumberAllocator(BLOCK_ID)
        numbers = [allocator.allocate(1) for _ in range(10)]
        assert len(set(numbers)) == 10

    def test_floors_sharing_a_digit_do_not_collide(self):
        allocator = UnitNumberAllocator(BLOCK_ID)
        first = allocator.allocate(1)
        eleventh = allocator.allocate(11)
        assert first != eleventh

    def test_taken_numbers_are_skipped(self):
        taken = UnitNumberAllocator(BLOCK_ID).allocate(2)
        allocator = UnitNumberAllocator(BLOCK_ID, taken=[taken])
        assert allocator.allocate(2) != taken


class TestReconstruction:
    def test_type_inference(self):
        assert unit_type_from_listing("Anything", 2, "Penthouse") == "Penthouse"
        assert unit_type_from_listing("Cosy Studio flat", 1) == "Studio"
        assert unit_type_from_listing("Block - 3 Bedroom", None) == "3BR"
        assert unit_type_from_listing("Block A", 0) == "Studio"
        assert unit_type_from_listing("Block A", 6) == "4BR"
        assert unit_type_from_listing("Block A", None) == "1BR"

    def test_building_name_from_titles(self):
        assert building_name_from_titles(["Acacia Court - Studio"], "x") == "Acacia Court"
        assert building_name_from_titles(["Lonely title"], "Kampala") == "Kampala"
        assert building_name_from_titles([], "Kampala") == "Kampala"

    def test_reconstructs_counts_fees_and_empty_floors(self):
        properties = [
            SimpleNamespace(
                title="Acacia Court - Studio",
                bedrooms=0,
                unit_type="Studio",
                price_ugx=50_000_000,
                description=None,
                image_url=None,
                rooms=[],
            )
        ]
        units = [
            SimpleNamespace(floor_number=1, unit_type="Studio", price_ugx=50_000_000),
            SimpleNamespace(floor_number=1, unit_type="Studio", price_ugx=50_000_000),
            SimpleNamespace(floor_number=3, unit_type="Studio", price_ugx=50_000_000),
        ]
        config = reconstruct_building_config(3, units, properties)

        assert [f.floor_number for f in config.floors] == [1, 2, 3]
        assert config.floors[0].unit_types[0].count == 2
        assert config.floors[0].unit_types[0].monthly_fee == 500_000
        assert config.floors[1].unit_types == []
        assert config.unit_type_details[0].title == "Acacia Court - Studio"

    def test_rooms_come_back_in_order(self):
        bedroom = SimpleNamespace(
            detail_type="Bedroom",
            detail_name="Master Bedroom",
            description="Fitted wardrobe",
            images=[
                SimpleNamespace(image_url="https://cdn.example.com/bed-1.jpg"),
                SimpleNamespace(image_url="https://cdn.example.com/bed-2.jpg"),
            ],
        )
        kitchen = SimpleNamespace(
            detail_type="Kitchen", detail_name="Kitchen", description=None, images=[]
        )
        properties = [
            SimpleNamespace(
                title="Acacia Court - 1 Bedroom",
                bedrooms=1,
                unit_type="1BR",
                price_ugx=80_000_000,
                description=None,
                image_url=None,
                rooms=[bedroom, kitchen],
            )
        ]
        units = [SimpleNamespace(floor_number=1, unit_type="1BR", price_ugx=80_000_000)]

        config = reconstruct_building_config(1, units, properties)

        rooms = config.unit_type_details[0].property_details
        assert [(r.type, r.name) for r in rooms] == [
            ("Bedroom", "Master Bedroom"),
            ("Kitchen", "Kitchen"),
        ]
        assert rooms[0].description == "Fitted wardrobe"
        assert rooms[0].image_urls == [
            "https://cdn.example.com/bed-1.jpg",
            "https://cdn.example.com/bed-2.jpg",
        ]
        assert rooms[1].image_urls == []


class TestRoomPlanning:
    def test_rooms_follow_their_unit_type(self):
        config = make_config({1: [("Studio", 1, 500_000), ("2BR", 1, 900_000)]})
        config.unit_type_details = [
            UnitTypeDetails(
                type="2BR",
                property_details=[
                    RoomConfig(type="Bedroom", name="Master Bedroom"),
                    RoomConfig(type="Balcony", name="Balcony"),
                ],
            ),
            UnitTypeDetails(
                type="Villa", property_details=[RoomConfig(type="Pool", name="Pool")]
            ),
        ]

        studio, two_bed = plan_building(BLOCK_ID, config, base_title="Block").properties

        assert studio.rooms == []
        assert [r.name for r in two_bed.rooms] == ["Master Bedroom", "Balcony"]
