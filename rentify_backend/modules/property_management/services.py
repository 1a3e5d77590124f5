"""Property business logic services."""

import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.utils import utc_now, utc_today
from ..auth.schemas import AuthenticatedUser
from ..commons import SortOrder
from ..landlord_management import crud as landlord_crud
from ..property_editor.validation import validate_all
from . import crud
from .models import (
    Property,
    PropertyBlock,
    PropertyInterest,
    PropertyRoom,
    PropertyUnit,
)
from .schemas import (
    BlockConfigResponse,
    BlockResponse,
    BuildingCreate,
    BuildingCreationResult,
    BuildingPreviewResponse,
    CreatedUnitType,
    FailedUnitType,
    InterestRequest,
    PlannedPropertyResponse,
    PlannedUnitResponse,
    PropertyCreate,
    PropertyRoomCreate,
    PropertyRoomUpdate,
    PropertyUnitUpdate,
    PropertyUpdate,
    UniqueUnitTypeResponse,
    ViewRecordResponse,
    ViewStatsResponse,
)
from .unit_numbers import random_unit_number
from .unit_types import (
    BuildingPlan,
    PlannedProperty,
    building_name_from_titles,
    generate_block_name,
    plan_building,
    reconstruct_building_config,
    template_name,
)

logger = get_logger(__name__)

PROPERTY_CODE_ATTEMPTS = 10


# ----- Listings -----


def validate_listing(values: dict) -> None:
    """Apply the editor's field rules to a listing about to be stored.

    Raises:
        ValidationError: With every failing field in ``details["errors"]``
    """
    errors = validate_all(values)
    if errors:
        first_field, first_message = next(iter(errors.items()))
        raise ValidationError(
            first_message, field=first_field, details={"errors": errors}
        )


async def allocate_property_code(db: AsyncSession) -> str:
    """A ten-digit listing code that no stored listing uses yet."""
    for _ in range(PROPERTY_CODE_ATTEMPTS):
        code = random_unit_number()
        if not await crud.property_code_exists(db, code):
            return code
    raise DatabaseError("Could not allocate a unique property code")


async def get_property(
    db: AsyncSession, property_id: uuid.UUID, include_related: bool = False
) -> Property:
    prop = await crud.get_property_by_id(db, property_id, include_related)
    if not prop:
        raise NotFoundError(f"Property {property_id} not found")
    return prop


async def get_public_property(db: AsyncSession, property_id: uuid.UUID) -> Property:
    """A listing as the public sees it; inactive listings do not exist."""
    prop = await get_property(db, property_id, include_related=True)
    if not prop.is_active:
        raise NotFoundError(f"Property {property_id} not found")
    return prop


async def list_public_properties(
    db: AsyncSession,
    skip: int,
    limit: int,
    sort: SortOrder = SortOrder.NEWEST,
    **filters,
) -> tuple[list[Property], int]:
    return await crud.get_properties(
        db,
        skip=skip,
        limit=limit,
        sort=sort,
        is_active=True,
        is_occupied=False,
        **filters,
    )


async def list_featured_properties(db: AsyncSession, limit: int = 6) -> list[Property]:
    properties, _ = await crud.get_properties(
        db, skip=0, limit=limit, is_active=True, is_occupied=False, is_featured=True
    )
    return properties


async def create_property(
    db: AsyncSession,
    data: PropertyCreate,
    host_id: uuid.UUID | None = None,
) -> Property:
    """Create a stand-alone listing with its images."""
    validate_listing(data.model_dump())
    if data.landlord_id is not None:
        await _require_landlord(db, data.landlord_id)

    property_id = uuid.uuid4()
    fields = data.model_dump(exclude={"image_urls"})
    prop = await crud.create_property(
        db,
        id=property_id,
        property_code=await allocate_property_code(db),
        host_id=host_id,
        **fields,
    )

    image_urls = _ordered_images(data.image_url, data.image_urls)
    if image_urls:
        await crud.create_property_images(db, prop.id, image_urls, data.image_url)

    await db.commit()
    logger.info(f"Created property {prop.id} ({prop.property_code})")
    return await get_property(db, prop.id, include_related=True)


async def update_property(
    db: AsyncSession, property_id: uuid.UUID, data: PropertyUpdate
) -> Property:
    prop = await get_property(db, property_id)
    changes = data.model_dump(exclude_unset=True)

    merged = {
        name: getattr(prop, name)
        for name in (
            "title",
            "location",
            "description",
            "category",
            "price_ugx",
            "bedrooms",
            "bathrooms",
            "minimum_initial_months",
        )
    }
    merged.update(changes)
    validate_listing(merged)

    if changes.get("landlord_id") is not None:
        await _require_landlord(db, changes["landlord_id"])

    await crud.update_property(db, prop, **changes)
    await db.commit()
    return await get_property(db, property_id, include_related=True)


async def replace_property_images(
    db: AsyncSession, property_id: uuid.UUID, image_urls: list[str]
) -> Property:
    """Replace a listing's gallery; the first image becomes primary."""
    prop = await get_property(db, property_id)
    urls = _ordered_images(None, image_urls)
    primary = urls[0] if urls else None
    await crud.replace_property_images(db, prop.id, urls, primary)
    await crud.update_property(db, prop, image_url=primary)
    await db.commit()
    return await get_property(db, property_id, include_related=True)


async def delete_property(db: AsyncSession, property_id: uuid.UUID) -> None:
    prop = await get_property(db, property_id, include_related=True)
    await crud.delete_property(db, prop)
    await db.commit()
    logger.info(f"Deleted property {property_id}")


async def update_unit(
    db: AsyncSession, unit_id: uuid.UUID, data: PropertyUnitUpdate
) -> PropertyUnit:
    unit = await crud.get_unit_by_id(db, unit_id)
    if not unit:
        raise NotFoundError(f"Unit {unit_id} not found")
    await crud.update_unit(db, unit, **data.model_dump(exclude_unset=True))
    await db.commit()
    return unit


def _ordered_images(primary: str | None, others: list[str]) -> list[str]:
    """Primary first, then the rest without blanks or duplicates."""
    ordered = []
    for url in [primary, *others]:
        if url and url.strip() and url not in ordered:
            ordered.append(url)
    return ordered


async def _require_landlord(db: AsyncSession, landlord_id: uuid.UUID):
    landlord = await landlord_crud.get_landlord_by_id(db, landlord_id)
    if not landlord:
        raise ValidationError("Invalid landlord ID", field="landlord_id")
    return landlord


# ----- Rooms -----


async def _store_room(
    db: AsyncSession,
    property_id: uuid.UUID,
    image_urls: list[str],
    **fields,
) -> PropertyRoom:
    room = await crud.create_room(db, property_id=property_id, **fields)
    urls = _ordered_images(None, image_urls)
    if urls:
        await crud.create_room_images(db, room.id, urls)
    return room


async def get_room(db: AsyncSession, room_id: uuid.UUID) -> PropertyRoom:
    room = await crud.get_room_by_id(db, room_id)
    if not room:
        raise NotFoundError(f"Property detail {room_id} not found")
    return room


async def list_rooms(db: AsyncSession, property_id: uuid.UUID) -> list[PropertyRoom]:
    await get_property(db, property_id)
    return await crud.get_rooms_for_property(db, property_id)


async def create_room(
    db: AsyncSession, property_id: uuid.UUID, data: PropertyRoomCreate
) -> PropertyRoom:
    """Add a room to a listing, appended after the existing ones by default."""
    await get_property(db, property_id)
    display_order = data.display_order
    if display_order is None:
        display_order = await crud.next_room_order(db, property_id)
    room = await _store_room(
        db,
        property_id,
        detail_type=data.detail_type.strip(),
        detail_name=data.detail_name.strip(),
        description=data.description,
        display_order=display_order,
        image_urls=data.image_urls,
    )
    await db.commit()
    logger.info(
        f"Added {room.detail_type} '{room.detail_name}' to property {property_id}"
    )
    return await get_room(db, room.id)


async def update_room(
    db: AsyncSession, room_id: uuid.UUID, data: PropertyRoomUpdate
) -> PropertyRoom:
    room = await get_room(db, room_id)
    await crud.update_room(db, room, **data.model_dump(exclude_unset=True))
    await db.commit()
    return await get_room(db, room_id)


async def delete_room(db: AsyncSession, room_id: uuid.UUID) -> None:
    room = await get_room(db, room_id)
    await crud.delete_room(db, room)
    await db.commit()
    logger.info(f"Deleted property detail {room_id}")


async def replace_room_images(
    db: AsyncSession, room_id: uuid.UUID, image_urls: list[str]
) -> PropertyRoom:
    """Replace a room's images; list order becomes display order."""
    room = await get_room(db, room_id)
    await crud.replace_room_images(db, room.id, _ordered_images(None, image_urls))
    await db.commit()
    return await get_room(db, room_id)


async def add_room_image(
    db: AsyncSession, room_id: uuid.UUID, image_url: str
) -> PropertyRoom:
    room = await get_room(db, room_id)
    if any(image.image_url == image_url for image in room.images):
        raise ConflictError("Image already attached to this property detail")
    start = await crud.next_room_image_order(db, room.id)
    await crud.create_room_images(db, room.id, [image_url], start=start)
    await db.commit()
    return await get_room(db, room_id)


async def delete_room_image(db: AsyncSession, image_id: uuid.UUID) -> None:
    image = await crud.get_room_image_by_id(db, image_id)
    if not image:
        raise NotFoundError(f"Image {image_id} not found")
    await crud.delete_room_image(db, image)
    await db.commit()


# ----- Buildings -----


def _plan_for(
    data: BuildingCreate,
    block_id: uuid.UUID,
    block_name: str | None = None,
    taken_unit_numbers: set[str] | None = None,
) -> BuildingPlan:
    return plan_building(
        block_id=block_id,
        config=data.config,
        base_title=data.title,
        building_name=data.building_name,
        base_description=data.description,
        base_image_url=data.image_url,
        shared_image_urls=data.shared_image_urls,
        block_name=block_name,
        location=data.location,
        taken_unit_numbers=taken_unit_numbers or (),
    )


def preview_building(data: BuildingCreate) -> BuildingPreviewResponse:
    """Expand a configuration without storing anything.

    Unit numbers are drawn against a provisional block id, so they change
    once the building is actually created.
    """
    plan = _plan_for(data, uuid.uuid4())
    return BuildingPreviewResponse(
        block_name=plan.block_name,
        total_floors=plan.total_floors,
        total_units=plan.total_units,
        unit_types=[UniqueUnitTypeResponse.model_validate(ut) for ut in plan.unit_types],
        properties=[
            PlannedPropertyResponse(
                unit_type=planned.unit_type.type,
                title=planned.title,
                description=planned.description,
                image_url=planned.image_url,
                price_ugx=planned.price_ugx,
                bedrooms=planned.bedrooms,
                bathrooms=planned.bathrooms,
                units=[PlannedUnitResponse.model_validate(u) for u in planned.units],
                image_urls=planned.image_urls,
                rooms=planned.rooms,
            )
            for planned in plan.properties
        ],
    )


async def get_or_create_block(
    db: AsyncSession,
    location: str,
    total_floors: int,
    total_units: int,
    building_name: str | None = None,
    existing_block_id: uuid.UUID | None = None,
    created_by: uuid.UUID | None = None,
    landlord_id: uuid.UUID | None = None,
) -> PropertyBlock:
    """Update the given block, or create one (named after the location
    when no building name is supplied)."""
    if existing_block_id is not None:
        block = await crud.get_block_by_id(db, existing_block_id)
        if not block:
            raise NotFoundError(f"Block {existing_block_id} not found")
        changes = {
            "location": location,
            "total_floors": total_floors,
            "total_units": total_units,
        }
        if building_name:
            changes["name"] = building_name
        return await crud.update_block(db, block, **changes)

    return await crud.create_block(
        db,
        name=building_name or generate_block_name(location),
        location=location,
        total_floors=total_floors,
        total_units=total_units,
        created_by=created_by,
        landlord_id=landlord_id,
    )


async def _persist_planned_property(
    db: AsyncSession,
    block: PropertyBlock,
    planned: PlannedProperty,
    data: BuildingCreate,
    host_id: uuid.UUID | None,
) -> Property:
    unit_type = planned.unit_type
    property_id = uuid.uuid4()
    prop = await crud.create_property(
        db,
        id=property_id,
        property_code=await allocate_property_code(db),
        title=planned.title,
        location=data.location,
        description=planned.description,
        price_ugx=planned.price_ugx,
        category=data.category,
        bedrooms=planned.bedrooms,
        bathrooms=planned.bathrooms,
        image_url=planned.image_url,
        video_url=data.video_url,
        google_maps_embed_url=data.google_maps_embed_url,
        minimum_initial_months=data.minimum_initial_months,
        total_floors=data.config.total_floors,
        units_config=str(unit_type.total_units),
        unit_type=unit_type.type,
        block_id=block.id,
        host_id=host_id,
        landlord_id=block.landlord_id,
        is_active=True,
    )

    await crud.create_units(
        db,
        [
            PropertyUnit(
                property_id=prop.id,
                block_id=block.id,
                floor_number=unit.floor_number,
                unit_number=unit.unit_number,
                unit_type=unit.unit_type,
                bedrooms=planned.bedrooms,
                bathrooms=planned.bathrooms,
                price_ugx=planned.price_ugx,
                is_available=True,
                sync_with_template=True,
                template_name=template_name(unit.unit_type, data.building_name),
            )
            for unit in planned.units
        ],
    )

    if planned.image_urls:
        await crud.create_property_images(
            db, prop.id, planned.image_urls, planned.image_url
        )
    for order, room in enumerate(planned.rooms):
        await _store_room(
            db,
            prop.id,
            detail_type=room.type,
            detail_name=room.name,
            description=room.description,
            display_order=order,
            image_urls=room.image_urls,
        )
    return prop


async def create_building(
    db: AsyncSession,
    data: BuildingCreate,
    created_by: uuid.UUID | None = None,
    existing_block_id: uuid.UUID | None = None,
) -> BuildingCreationResult:
    """Create a building: one listing per unit type plus all its units.

    By default every unit type is stored in its own savepoint; a failing
    type is logged and reported in ``failed`` while the others are kept.
    With ``data.atomic`` the first failure rolls the whole building back
    and is re-raised.
    """
    if data.landlord_id is not None:
        await _require_landlord(db, data.landlord_id)

    # Validate the configuration before anything is written.
    provisional = _plan_for(data, existing_block_id or uuid.uuid4())

    try:
        block = await get_or_create_block(
            db,
            location=data.location,
            total_floors=data.config.total_floors,
            total_units=provisional.total_units,
            building_name=data.building_name,
            existing_block_id=existing_block_id,
            created_by=created_by,
            landlord_id=data.landlord_id,
        )
        taken = await crud.get_unit_numbers_for_block(db, block.id)
        plan = _plan_for(data, block.id, block.name, taken)

        created: list[CreatedUnitType] = []
        failed: list[FailedUnitType] = []

        for planned in plan.properties:
            unit_type = planned.unit_type.type
            if data.atomic:
                prop = await _persist_planned_property(
                    db, block, planned, data, created_by
                )
            else:
                try:
                    async with db.begin_nested():
                        prop = await _persist_planned_property(
                            db, block, planned, data, created_by
                        )
                except Exception as e:
                    logger.error(
                        f"Failed to create listing for unit type {unit_type} "
                        f"in block {block.id}: {e}",
                        exc_info=True,
                    )
                    failed.append(FailedUnitType(unit_type=unit_type, error=str(e)))
                    continue
            created.append(
                CreatedUnitType(
                    unit_type=unit_type,
                    property_id=prop.id,
                    units_created=len(planned.units),
                )
            )

        units_created = sum(c.units_created for c in created)
        await crud.update_block(
            db, block, total_units=len(taken) + units_created
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    if failed:
        logger.warning(
            f"Block {block.id} created partially: "
            f"{len(created)} unit types stored, {len(failed)} failed"
        )
    else:
        logger.info(
            f"Block {block.id} created with {len(created)} unit types "
            f"and {units_created} units"
        )

    return BuildingCreationResult(
        block_id=block.id,
        block_name=block.name,
        total_units=block.total_units,
        created=created,
        failed=failed,
    )


async def get_block(db: AsyncSession, block_id: uuid.UUID) -> PropertyBlock:
    block = await crud.get_block_by_id(db, block_id)
    if not block:
        raise NotFoundError(f"Block {block_id} not found")
    return block


async def get_block_config(db: AsyncSession, block_id: uuid.UUID) -> BlockConfigResponse:
    """Turn a stored building back into its editable configuration."""
    block = await get_block(db, block_id)
    properties = await crud.get_properties_for_block(db, block_id)
    units = await crud.get_units_for_block(db, block_id)

    config = reconstruct_building_config(block.total_floors, units, properties)
    first = properties[0] if properties else None

    return BlockConfigResponse(
        block=BlockResponse.model_validate(block),
        building_name=building_name_from_titles(
            [p.title for p in properties], first.location if first else block.location
        ),
        location=first.location if first else block.location,
        minimum_initial_months=first.minimum_initial_months if first else 1,
        config=config,
        property_ids=[p.id for p in properties],
    )


async def delete_block(db: AsyncSession, block_id: uuid.UUID) -> None:
    """Delete a building with all of its listings and units."""
    block = await crud.get_block_by_id(db, block_id, include_related=True)
    if not block:
        raise NotFoundError(f"Block {block_id} not found")
    await crud.delete_block(db, block)
    await db.commit()
    logger.info(f"Deleted block {block_id}")


async def assign_block_landlord(
    db: AsyncSession,
    block_id: uuid.UUID,
    landlord_id: uuid.UUID | None,
) -> int:
    """Assign (or clear, with None) the landlord of a building's listings.

    Raises:
        ConflictError: If some listing already belongs to another landlord

    Returns:
        Number of listings updated.
    """
    block = await get_block(db, block_id)
    if landlord_id is not None:
        await _require_landlord(db, landlord_id)

    properties = await crud.get_properties_for_block(db, block_id)
    if landlord_id is not None:
        conflicts = [
            p
            for p in properties
            if p.landlord_id is not None and p.landlord_id != landlord_id
        ]
        if conflicts:
            raise ConflictError(
                "Some listings in this building belong to another landlord",
                details={"conflicts_count": len(conflicts)},
            )

    await crud.update_block(db, block, landlord_id=landlord_id)
    for prop in properties:
        prop.landlord_id = landlord_id
    await db.commit()
    return len(properties)


# ----- Views -----


def _current_daily_views(prop: Property) -> int:
    if prop.last_view_at is None or prop.last_view_at.date() < utc_today():
        return 0
    return prop.daily_views_count


def view_stats(prop: Property) -> ViewStatsResponse:
    return ViewStatsResponse(
        daily_views=_current_daily_views(prop),
        total_views=prop.total_views_count,
        interested=prop.interested_count,
        last_view_at=prop.last_view_at,
    )


async def get_view_stats(db: AsyncSession, property_id: uuid.UUID) -> ViewStatsResponse:
    return view_stats(await get_property(db, property_id))


async def record_view(
    db: AsyncSession,
    property_id: uuid.UUID,
    session_id: str | None = None,
    user_id: uuid.UUID | None = None,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> ViewRecordResponse:
    """Count a view at most once per session per day."""
    prop = await get_property(db, property_id)
    session_id = session_id or uuid.uuid4().hex
    today = utc_today()

    if await crud.get_view(db, property_id, session_id, today):
        return ViewRecordResponse(
            already_viewed=True, session_id=session_id, **view_stats(prop).model_dump()
        )

    now = utc_now()
    try:
        await crud.create_view(
            db,
            property_id=property_id,
            session_id=session_id,
            view_date=today,
            viewed_at=now,
            user_id=user_id,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        prop.daily_views_count = _current_daily_views(prop) + 1
        prop.total_views_count += 1
        prop.last_view_at = now
        await db.commit()
    except IntegrityError:
        # A concurrent request from the same session won the insert.
        await db.rollback()
        prop = await get_property(db, property_id)
        return ViewRecordResponse(
            already_viewed=True, session_id=session_id, **view_stats(prop).model_dump()
        )

    return ViewRecordResponse(
        already_viewed=False, session_id=session_id, **view_stats(prop).model_dump()
    )


# ----- Interest -----


async def express_interest(
    db: AsyncSession,
    property_id: uuid.UUID,
    data: InterestRequest,
    user: AuthenticatedUser | None = None,
) -> tuple[PropertyInterest, bool]:
    """Record or refresh interest in a listing.

    Signed-in users are matched by account, anonymous visitors by e-mail.

    Returns:
        Tuple of (interest, is_new)
    """
    prop = await get_property(db, property_id)
    if user is None and not data.email:
        raise ValidationError("Email is required", field="email")

    existing = await crud.find_interest(
        db,
        property_id,
        user_id=user.id if user else None,
        email=None if user else data.email,
    )
    details = {
        "name": data.name,
        "phone": data.phone,
        "message": data.message,
    }

    if existing:
        for key, value in details.items():
            setattr(existing, key, value)
        await db.commit()
        return existing, False

    interest = await crud.create_interest(
        db,
        property_id=property_id,
        user_id=user.id if user else None,
        email=data.email or (user.email if user else None),
        session_id=data.session_id,
        **details,
    )
    prop.interested_count = await crud.count_interests(db, property_id)
    await db.commit()
    return interest, True


async def get_interest_status(
    db: AsyncSession, property_id: uuid.UUID, user: AuthenticatedUser | None
) -> tuple[bool, int]:
    prop = await get_property(db, property_id)
    if user is None:
        return False, prop.interested_count
    interest = await crud.find_interest(db, property_id, user_id=user.id)
    return interest is not None, prop.interested_count


async def withdraw_interest(
    db: AsyncSession, property_id: uuid.UUID, user: AuthenticatedUser
) -> int:
    prop = await get_property(db, property_id)
    interest = await crud.find_interest(db, property_id, user_id=user.id)
    if not interest:
        raise NotFoundError("No interest recorded for this property")
    await crud.delete_interest(db, interest)
    prop.interested_count = await crud.count_interests(db, property_id)
    await db.commit()
    return prop.interested_count
