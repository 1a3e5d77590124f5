"""CRUD operations for properties, buildings and engagement."""

import uuid
from datetime import date

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..commons import SortOrder
from .models import (
    Property,
    PropertyBlock,
    PropertyImage,
    PropertyInterest,
    PropertyRoom,
    PropertyRoomImage,
    PropertyUnit,
    PropertyView,
)

# ----- Property CRUD -----


async def get_property_by_id(
    db: AsyncSession,
    property_id: uuid.UUID,
    include_related: bool = False,
) -> Property | None:
    query = select(Property).where(Property.id == property_id)
    if include_related:
        query = query.options(
            selectinload(Property.images),
            selectinload(Property.units),
            selectinload(Property.rooms).selectinload(PropertyRoom.images),
        ).execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


def _apply_listing_filters(
    query,
    search: str | None = None,
    location: str | None = None,
    category: str | None = None,
    min_price: int | None = None,
    max_price: int | None = None,
    bedrooms: int | None = None,
    bathrooms: int | None = None,
    block_id: uuid.UUID | None = None,
    landlord_id: uuid.UUID | None = None,
    is_active: bool | None = None,
    is_featured: bool | None = None,
    is_occupied: bool | None = None,
):
    if search:
        term = f"%{search}%"
        query = query.where(
            or_(
                Property.title.ilike(term),
                Property.location.ilike(term),
                Property.property_code.ilike(term),
            )
        )
    if location:
        query = query.where(Property.location.ilike(f"%{location}%"))
    if category:
        query = query.where(Property.category == category)
    if min_price is not None:
        query = query.where(Property.price_ugx >= min_price)
    if max_price is not None:
        query = query.where(Property.price_ugx <= max_price)
    if bedrooms is not None:
        query = query.where(Property.bedrooms >= bedrooms)
    if bathrooms is not None:
        query = query.where(Property.bathrooms >= bathrooms)
    if block_id is not None:
        query = query.where(Property.block_id == block_id)
    if landlord_id is not None:
        query = query.where(Property.landlord_id == landlord_id)
    if is_active is not None:
        query = query.where(Property.is_active == is_active)
    if is_featured is not None:
        query = query.where(Property.is_featured == is_featured)
    if is_occupied is not None:
        query = query.where(Property.is_occupied == is_occupied)
    return query


_SORT_COLUMNS = {
    SortOrder.NEWEST: Property.created_at.desc(),
    SortOrder.PRICE_ASC: Property.price_ugx.asc(),
    SortOrder.PRICE_DESC: Property.price_ugx.desc(),
}


async def get_properties(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    sort: SortOrder = SortOrder.NEWEST,
    **filters,
) -> tuple[list[Property], int]:
    """Page through listings matching the filters."""
    query = _apply_listing_filters(select(Property), **filters)
    count_query = _apply_listing_filters(
        select(func.count()).select_from(Property), **filters
    )

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(_SORT_COLUMNS[sort], Property.id).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


async def create_property(db: AsyncSession, **fields) -> Property:
    prop = Property(**fields)
    db.add(prop)
    await db.flush()
    return prop


async def property_code_exists(db: AsyncSession, code: str) -> bool:
    result = await db.execute(
        select(Property.id).where(Property.property_code == code).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def update_property(db: AsyncSession, prop: Property, **fields) -> Property:
    for key, value in fields.items():
        setattr(prop, key, value)
    await db.flush()
    return prop


async def delete_property(db: AsyncSession, prop: Property) -> None:
    await db.delete(prop)
    await db.flush()


# ----- Images -----


async def create_property_images(
    db: AsyncSession,
    property_id: uuid.UUID,
    image_urls: list[str],
    primary_url: str | None = None,
) -> list[PropertyImage]:
    """Insert images in order; only ``primary_url`` is flagged primary."""
    images = [
        PropertyImage(
            property_id=property_id,
            image_url=url,
            display_order=order,
            is_primary=primary_url is not None and url == primary_url,
        )
        for order, url in enumerate(image_urls)
    ]
    db.add_all(images)
    await db.flush()
    return images


async def replace_property_images(
    db: AsyncSession,
    property_id: uuid.UUID,
    image_urls: list[str],
    primary_url: str | None = None,
) -> list[PropertyImage]:
    await db.execute(delete(PropertyImage).where(PropertyImage.property_id == property_id))
    return await create_property_images(db, property_id, image_urls, primary_url)


# ----- Rooms -----


async def get_room_by_id(db: AsyncSession, room_id: uuid.UUID) -> PropertyRoom | None:
    result = await db.execute(
        select(PropertyRoom)
        .where(PropertyRoom.id == room_id)
        .options(selectinload(PropertyRoom.images))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_rooms_for_property(
    db: AsyncSession, property_id: uuid.UUID
) -> list[PropertyRoom]:
    result = await db.execute(
        select(PropertyRoom)
        .where(PropertyRoom.property_id == property_id)
        .options(selectinload(PropertyRoom.images))
        .order_by(PropertyRoom.display_order, PropertyRoom.created_at)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def next_room_order(db: AsyncSession, property_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.max(PropertyRoom.display_order)).where(
            PropertyRoom.property_id == property_id
        )
    )
    highest = result.scalar()
    return 0 if highest is None else highest + 1


async def create_room(db: AsyncSession, **fields) -> PropertyRoom:
    room = PropertyRoom(**fields)
    db.add(room)
    await db.flush()
    return room


async def update_room(db: AsyncSession, room: PropertyRoom, **fields) -> PropertyRoom:
    for key, value in fields.items():
        setattr(room, key, value)
    await db.flush()
    return room


async def delete_room(db: AsyncSession, room: PropertyRoom) -> None:
    await db.delete(room)
    await db.flush()


async def next_room_image_order(db: AsyncSession, room_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.max(PropertyRoomImage.display_order)).where(
            PropertyRoomImage.property_detail_id == room_id
        )
    )
    highest = result.scalar()
    return 0 if highest is None else highest + 1


async def create_room_images(
    db: AsyncSession, room_id: uuid.UUID, image_urls: list[str], start: int = 0
) -> list[PropertyRoomImage]:
    images = [
        PropertyRoomImage(
            property_detail_id=room_id, image_url=url, display_order=start + offset
        )
        for offset, url in enumerate(image_urls)
    ]
    db.add_all(images)
    await db.flush()
    return images


async def replace_room_images(
    db: AsyncSession, room_id: uuid.UUID, image_urls: list[str]
) -> list[PropertyRoomImage]:
    await db.execute(
        delete(PropertyRoomImage).where(PropertyRoomImage.property_detail_id == room_id)
    )
    return await create_room_images(db, room_id, image_urls)


async def get_room_image_by_id(
    db: AsyncSession, image_id: uuid.UUID
) -> PropertyRoomImage | None:
    result = await db.execute(
        select(PropertyRoomImage).where(PropertyRoomImage.id == image_id)
    )
    return result.scalar_one_or_none()


async def delete_room_image(db: AsyncSession, image: PropertyRoomImage) -> None:
    await db.delete(image)
    await db.flush()


# ----- Blocks and units -----


async def get_block_by_id(
    db: AsyncSession, block_id: uuid.UUID, include_related: bool = False
) -> PropertyBlock | None:
    query = select(PropertyBlock).where(PropertyBlock.id == block_id)
    if include_related:
        query = query.options(
            selectinload(PropertyBlock.properties),
            selectinload(PropertyBlock.units),
        )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_blocks(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    search: str | None = None,
    landlord_id: uuid.UUID | None = None,
) -> tuple[list[PropertyBlock], int]:
    query = select(PropertyBlock)
    count_query = select(func.count()).select_from(PropertyBlock)
    if search:
        term = f"%{search}%"
        condition = or_(PropertyBlock.name.ilike(term), PropertyBlock.location.ilike(term))
        query = query.where(condition)
        count_query = count_query.where(condition)
    if landlord_id is not None:
        query = query.where(PropertyBlock.landlord_id == landlord_id)
        count_query = count_query.where(PropertyBlock.landlord_id == landlord_id)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(PropertyBlock.created_at.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


async def create_block(db: AsyncSession, **fields) -> PropertyBlock:
    block = PropertyBlock(**fields)
    db.add(block)
    await db.flush()
    return block


async def update_block(db: AsyncSession, block: PropertyBlock, **fields) -> PropertyBlock:
    for key, value in fields.items():
        setattr(block, key, value)
    await db.flush()
    return block


async def delete_block(db: AsyncSession, block: PropertyBlock) -> None:
    await db.delete(block)
    await db.flush()


async def get_unit_numbers_for_block(db: AsyncSession, block_id: uuid.UUID) -> set[str]:
    result = await db.execute(
        select(PropertyUnit.unit_number).where(PropertyUnit.block_id == block_id)
    )
    return set(result.scalars().all())


async def get_units_for_block(
    db: AsyncSession, block_id: uuid.UUID
) -> list[PropertyUnit]:
    result = await db.execute(
        select(PropertyUnit)
        .where(PropertyUnit.block_id == block_id)
        .order_by(PropertyUnit.floor_number, PropertyUnit.unit_number)
    )
    return list(result.scalars().all())


async def get_properties_for_block(
    db: AsyncSession, block_id: uuid.UUID
) -> list[Property]:
    result = await db.execute(
        select(Property)
        .where(Property.block_id == block_id)
        .options(selectinload(Property.rooms).selectinload(PropertyRoom.images))
        .order_by(Property.created_at, Property.title)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def create_units(db: AsyncSession, units: list[PropertyUnit]) -> list[PropertyUnit]:
    db.add_all(units)
    await db.flush()
    return units


async def get_unit_by_id(db: AsyncSession, unit_id: uuid.UUID) -> PropertyUnit | None:
    result = await db.execute(select(PropertyUnit).where(PropertyUnit.id == unit_id))
    return result.scalar_one_or_none()


async def update_unit(db: AsyncSession, unit: PropertyUnit, **fields) -> PropertyUnit:
    for key, value in fields.items():
        setattr(unit, key, value)
    await db.flush()
    return unit


# ----- Views -----


async def get_view(
    db: AsyncSession, property_id: uuid.UUID, session_id: str, view_date: date
) -> PropertyView | None:
    result = await db.execute(
        select(PropertyView).where(
            PropertyView.property_id == property_id,
            PropertyView.session_id == session_id,
            PropertyView.view_date == view_date,
        )
    )
    return result.scalar_one_or_none()


async def create_view(db: AsyncSession, **fields) -> PropertyView:
    view = PropertyView(**fields)
    db.add(view)
    await db.flush()
    return view


# ----- Interest -----


async def find_interest(
    db: AsyncSession,
    property_id: uuid.UUID,
    user_id: uuid.UUID | None = None,
    email: str | None = None,
) -> PropertyInterest | None:
    """Match by user first, then by e-mail."""
    query = select(PropertyInterest).where(PropertyInterest.property_id == property_id)
    if user_id is not None:
        query = query.where(PropertyInterest.user_id == user_id)
    elif email:
        query = query.where(func.lower(PropertyInterest.email) == email.lower())
    else:
        return None
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


async def create_interest(db: AsyncSession, **fields) -> PropertyInterest:
    interest = PropertyInterest(**fields)
    db.add(interest)
    await db.flush()
    return interest


async def delete_interest(db: AsyncSession, interest: PropertyInterest) -> None:
    await db.delete(interest)
    await db.flush()


async def count_interests(db: AsyncSession, property_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(PropertyInterest)
        .where(PropertyInterest.property_id == property_id)
    )
    return result.scalar() or 0
