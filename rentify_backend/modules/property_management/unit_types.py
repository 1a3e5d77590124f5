"""
Unit-type expansion.

A building is configured floor by floor as ``(unit type, count, monthly
fee)`` entries. Planning turns that into one listing per distinct unit type,
one numbered unit per physical unit and the image rows for each listing.
Nothing here touches the database, so previews and tests run the exact
same code path as building creation.
"""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from ...core.exceptions import ValidationError
from .schemas import (
    BuildingConfig,
    FloorConfig,
    RoomConfig,
    UnitTypeCount,
    UnitTypeDetails,
)
from .unit_numbers import MAX_UNIT_SEQUENCE, generate_unit_number

# type -> (bedrooms, bathrooms, label)
UNIT_TYPE_ROOMS: dict[str, tuple[int, int, str]] = {
    "Studio": (0, 1, "Studio"),
    "1BR": (1, 1, "1 Bedroom"),
    "2BR": (2, 2, "2 Bedroom"),
    "3BR": (3, 2, "3 Bedroom"),
    "4BR": (4, 3, "4 Bedroom"),
    "Penthouse": (4, 3, "Penthouse"),
}
DEFAULT_BEDROOMS = 1
DEFAULT_BATHROOMS = 1
MINOR_UNITS_PER_CURRENCY_UNIT = 100


def bedrooms_for_unit_type(unit_type: str) -> int:
    rooms = UNIT_TYPE_ROOMS.get(unit_type)
    return rooms[0] if rooms else DEFAULT_BEDROOMS


def bathrooms_for_unit_type(unit_type: str) -> int:
    rooms = UNIT_TYPE_ROOMS.get(unit_type)
    return rooms[1] if rooms else DEFAULT_BATHROOMS


def unit_type_label(unit_type: str) -> str:
    rooms = UNIT_TYPE_ROOMS.get(unit_type)
    return rooms[2] if rooms else unit_type


def to_minor_units(amount: int) -> int:
    return amount * MINOR_UNITS_PER_CURRENCY_UNIT


def from_minor_units(amount: int) -> int:
    return amount // MINOR_UNITS_PER_CURRENCY_UNIT


def generate_block_name(location: str, now: datetime | None = None) -> str:
    """Name for an unnamed building: squashed location prefix plus a stamp."""
    now = now or datetime.now()
    prefix = "".join(location[:10].split())
    stamp = str(int(now.timestamp() * 1000))[-6:]
    return f"{prefix}-{stamp}"


@dataclass
class UniqueUnitType:
    """Everything a building says about one unit type, across all floors."""

    type: str
    label: str
    monthly_fee: int
    bedrooms: int
    bathrooms: int
    total_units: int = 0
    units_per_floor: list[tuple[int, int]] = field(default_factory=list)
    custom_title: str | None = None
    description: str | None = None
    image_url: str | None = None
    rooms: list[RoomConfig] = field(default_factory=list)


@dataclass
class PlannedUnit:
    floor_number: int
    unit_number: str
    unit_type: str
    type_sequence: int


@dataclass
class PlannedProperty:
    unit_type: UniqueUnitType
    title: str
    description: str | None
    image_url: str | None
    price_ugx: int
    units: list[PlannedUnit]
    image_urls: list[str]

    @property
    def rooms(self) -> list[RoomConfig]:
        return self.unit_type.rooms

    @property
    def bedrooms(self) -> int:
        return self.unit_type.bedrooms

    @property
    def bathrooms(self) -> int:
        return self.unit_type.bathrooms


@dataclass
class BuildingPlan:
    block_id: uuid.UUID
    block_name: str
    total_floors: int
    unit_types: list[UniqueUnitType]
    properties: list[PlannedProperty]

    @property
    def total_units(self) -> int:
        return sum(ut.total_units for ut in self.unit_types)


def _non_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def extract_unique_unit_types(config: BuildingConfig) -> list[UniqueUnitType]:
    """Aggregate floor entries by unit type, keeping first-seen order.

    Counts are summed, each floor's contribution is kept in order, and the
    highest monthly fee seen for a type wins.
    """
    by_type: dict[str, UniqueUnitType] = {}

    for floor in config.floors:
        for entry in floor.unit_types:
            existing = by_type.get(entry.type)
            if existing is None:
                existing = by_type[entry.type] = UniqueUnitType(
                    type=entry.type,
                    label=unit_type_label(entry.type),
                    monthly_fee=entry.monthly_fee,
                    bedrooms=bedrooms_for_unit_type(entry.type),
                    bathrooms=bathrooms_for_unit_type(entry.type),
                )
            existing.total_units += entry.count
            existing.units_per_floor.append((floor.floor_number, entry.count))
            existing.monthly_fee = max(existing.monthly_fee, entry.monthly_fee)

    for details in config.unit_type_details:
        unit_type = by_type.get(details.type)
        if unit_type is None:
            continue
        unit_type.custom_title = _non_blank(details.title)
        unit_type.description = _non_blank(details.description)
        unit_type.image_url = _non_blank(details.image_url)
        unit_type.rooms = list(details.property_details)

    return list(by_type.values())


def listing_title(
    unit_type: UniqueUnitType, building_name: str | None, base_title: str
) -> str:
    if unit_type.custom_title:
        return unit_type.custom_title
    if building_name:
        return f"{building_name} - {unit_type.label}"
    return f"{base_title} - {unit_type.label}"


def template_name(unit_type: str, building_name: str | None) -> str:
    return f"{unit_type}_{building_name or 'building'}"


class UnitNumberAllocator:
    """Hands out unit numbers that are unique within one block.

    Numbers share a three-digit sequence per floor slot (floor modulo 10),
    so different unit types on the same floor, and floors 1 and 11, never
    collide. Numbers already taken in the block are skipped.
    """

    def __init__(self, block_id: uuid.UUID, taken: Iterable[str] = ()):
        self.block_id = block_id
        self._taken = set(taken)
        self._next_sequence: dict[int, int] = {}

    def allocate(self, floor_number: int) -> str:
        slot = floor_number % 10
        sequence = self._next_sequence.get(slot, 1)
        while True:
            if sequence > MAX_UNIT_SEQUENCE:
                raise ValidationError(
                    f"Floor slot {slot} has more than {MAX_UNIT_SEQUENCE} units",
                    field="config",
                )
            number = generate_unit_number(self.block_id, floor_number, sequence)
            sequence += 1
            if number not in self._taken:
                break
        self._next_sequence[slot] = sequence
        self._taken.add(number)
        return number


def plan_building(
    block_id: uuid.UUID,
    config: BuildingConfig,
    base_title: str,
    building_name: str | None = None,
    base_description: str | None = None,
    base_image_url: str | None = None,
    shared_image_urls: Iterable[str] = (),
    block_name: str | None = None,
    location: str = "",
    taken_unit_numbers: Iterable[str] = (),
) -> BuildingPlan:
    """Expand a floor configuration into listings, units and images.

    Raises:
        ValidationError: If the configuration has no unit types at all
    """
    unit_types = extract_unique_unit_types(config)
    if not unit_types:
        raise ValidationError("No unit types found in floor configuration", field="config")

    allocator = UnitNumberAllocator(block_id, taken_unit_numbers)
    shared = [url for url in shared_image_urls if _non_blank(url)]
    properties = []

    for unit_type in unit_types:
        image_url = unit_type.image_url or _non_blank(base_image_url)

        units = []
        type_sequence = 0
        for floor_number, count in unit_type.units_per_floor:
            for _ in range(count):
                type_sequence += 1
                units.append(
                    PlannedUnit(
                        floor_number=floor_number,
                        unit_number=allocator.allocate(floor_number),
                        unit_type=unit_type.type,
                        type_sequence=type_sequence,
                    )
                )

        image_urls = [image_url] if image_url else []
        image_urls.extend(url for url in shared if url != image_url)

        properties.append(
            PlannedProperty(
                unit_type=unit_type,
                title=listing_title(unit_type, building_name, base_title),
                description=unit_type.description or base_description,
                image_url=image_url,
                price_ugx=to_minor_units(unit_type.monthly_fee),
                units=units,
                image_urls=image_urls,
            )
        )

    return BuildingPlan(
        block_id=block_id,
        block_name=block_name or building_name or generate_block_name(location),
        total_floors=config.total_floors,
        unit_types=unit_types,
        properties=properties,
    )


# ----- Reconstruction -----

_TITLE_KEYWORDS = (
    ("studio", "Studio"),
    ("penthouse", "Penthouse"),
    ("4 bed", "4BR"),
    ("4br", "4BR"),
    ("3 bed", "3BR"),
    ("3br", "3BR"),
    ("2 bed", "2BR"),
    ("2br", "2BR"),
    ("1 bed", "1BR"),
    ("1br", "1BR"),
)


def unit_type_from_listing(
    title: str, bedrooms: int | None, stored_type: str | None = None
) -> str:
    """Best guess of a listing's unit type.

    A stored type wins; otherwise title keywords, then the bedroom count.
    """
    if stored_type:
        return stored_type
    lowered = title.lower()
    for keyword, unit_type in _TITLE_KEYWORDS:
        if keyword in lowered:
            return unit_type
    if bedrooms == 0:
        return "Studio"
    if bedrooms in (1, 2, 3):
        return f"{bedrooms}BR"
    if bedrooms is not None and bedrooms >= 4:
        return "4BR"
    return "1BR"


def building_name_from_titles(titles: list[str], fallback: str) -> str:
    """Text before the last " - " of the first title, else the fallback."""
    if not titles:
        return fallback
    head, sep, _ = titles[0].rpartition(" - ")
    if sep and head.strip():
        return head.strip()
    return fallback


def reconstruct_building_config(
    total_floors: int, units: Iterable, properties: Iterable
) -> BuildingConfig:
    """Rebuild the editable floor configuration of a persisted building.

    ``units`` need ``floor_number``, ``unit_type`` and ``price_ugx``;
    ``properties`` need ``title``, ``bedrooms``, ``unit_type``,
    ``price_ugx``, ``description``, ``image_url`` and ``rooms`` (each with
    ordered ``images``). Floors without units come back with an empty
    unit-type list.
    """
    properties = list(properties)
    fee_by_type: dict[str, int] = {}
    details = []
    for prop in properties:
        unit_type = unit_type_from_listing(prop.title, prop.bedrooms, prop.unit_type)
        fee_by_type.setdefault(unit_type, from_minor_units(prop.price_ugx))
        details.append(
            UnitTypeDetails(
                type=unit_type,
                title=prop.title,
                description=prop.description,
                image_url=prop.image_url,
                property_details=[
                    RoomConfig(
                        type=room.detail_type,
                        name=room.detail_name,
                        description=room.description,
                        image_urls=[image.image_url for image in room.images],
                    )
                    for room in prop.rooms
                ],
            )
        )

    counts: dict[int, dict[str, int]] = {}
    unit_fees: dict[str, int] = {}
    for unit in units:
        per_floor = counts.setdefault(unit.floor_number, {})
        per_floor[unit.unit_type] = per_floor.get(unit.unit_type, 0) + 1
        unit_fees[unit.unit_type] = max(
            unit_fees.get(unit.unit_type, 0), from_minor_units(unit.price_ugx)
        )

    last_floor = max([total_floors, *counts.keys()]) if counts else total_floors
    first_floor = min([1, *counts.keys()]) if counts else 1
    floors = []
    for floor_number in range(first_floor, last_floor + 1):
        floors.append(
            FloorConfig(
                floor_number=floor_number,
                unit_types=[
                    UnitTypeCount(
                        type=unit_type,
                        count=count,
                        monthly_fee=fee_by_type.get(
                            unit_type, unit_fees.get(unit_type, 0)
                        ),
                    )
                    for unit_type, count in counts.get(floor_number, {}).items()
                ],
            )
        )

    return BuildingConfig(
        total_floors=total_floors, floors=floors, unit_type_details=details
    )
