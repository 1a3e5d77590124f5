"""Property API routes: public browsing, engagement, admin listings and buildings."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import AdminUser, CurrentUser, OptionalUser
from ..commons import (
    BaseResponse,
    PaginatedResponse,
    SortOrder,
    get_client_info,
    page_offset,
)
from . import crud, services
from .schemas import (
    AssignLandlordRequest,
    BlockConfigResponse,
    BlockResponse,
    BuildingCreate,
    BuildingCreationResult,
    BuildingPreviewResponse,
    InterestRequest,
    InterestStatusResponse,
    PropertyCreate,
    PropertyDetailResponse,
    PropertyResponse,
    PropertyRoomCreate,
    PropertyRoomResponse,
    PropertyRoomUpdate,
    PropertyUnitResponse,
    PropertyUnitUpdate,
    PropertyUpdate,
    RoomImageCreate,
    ViewRecordRequest,
    ViewRecordResponse,
    ViewStatsResponse,
)

router = APIRouter(prefix="/properties", tags=["Properties"])
admin_router = APIRouter(prefix="/admin/properties", tags=["Admin Properties"])
buildings_router = APIRouter(prefix="/admin/buildings", tags=["Admin Buildings"])


# ----- Public listings -----


@router.get("", response_model=BaseResponse[PaginatedResponse[PropertyResponse]])
async def list_properties(
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    search: str | None = Query(None),
    location: str | None = Query(None),
    category: str | None = Query(None),
    min_price: int | None = Query(None, ge=0),
    max_price: int | None = Query(None, ge=0),
    bedrooms: int | None = Query(None, ge=0),
    bathrooms: int | None = Query(None, ge=0),
    sort: SortOrder = Query(SortOrder.NEWEST),
):
    """Browse active, unoccupied listings."""
    properties, total = await services.list_public_properties(
        db,
        skip=page_offset(page, page_size),
        limit=page_size,
        sort=sort,
        search=search,
        location=location,
        category=category,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[PropertyResponse.model_validate(p) for p in properties],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@router.get("/featured", response_model=BaseResponse[list[PropertyResponse]])
async def list_featured_properties(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(6, ge=1, le=50),
):
    properties = await services.list_featured_properties(db, limit)
    return BaseResponse(
        success=True, data=[PropertyResponse.model_validate(p) for p in properties]
    )


@router.get("/{property_id}", response_model=BaseResponse[PropertyDetailResponse])
async def get_property(
    property_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    prop = await services.get_public_property(db, property_id)
    return BaseResponse(success=True, data=PropertyDetailResponse.model_validate(prop))


# ----- Views -----


@router.post("/{property_id}/view", response_model=BaseResponse[ViewRecordResponse])
async def record_property_view(
    property_id: uuid.UUID,
    request: Request,
    current_user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    body: ViewRecordRequest | None = None,
):
    """Count a view once per session per day."""
    user_agent, ip_address = get_client_info(request)
    result = await services.record_view(
        db,
        property_id,
        session_id=body.session_id if body else None,
        user_id=current_user.id if current_user else None,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    return BaseResponse(
        success=True,
        message="View already recorded today"
        if result.already_viewed
        else "View recorded successfully",
        data=result,
    )


@router.get("/{property_id}/view", response_model=BaseResponse[ViewStatsResponse])
async def get_property_views(
    property_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return BaseResponse(
        success=True, data=await services.get_view_stats(db, property_id)
    )


# ----- Interest -----


@router.get(
    "/{property_id}/interested", response_model=BaseResponse[InterestStatusResponse]
)
async def get_interest_status(
    property_id: uuid.UUID,
    current_user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    has_interest, count = await services.get_interest_status(
        db, property_id, current_user
    )
    return BaseResponse(
        success=True,
        data=InterestStatusResponse(
            has_expressed_interest=has_interest, interested_count=count
        ),
    )


@router.post(
    "/{property_id}/interested", response_model=BaseResponse[InterestStatusResponse]
)
async def express_interest(
    property_id: uuid.UUID,
    data: InterestRequest,
    current_user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Record interest; anonymous visitors must leave an e-mail."""
    _, is_new = await services.express_interest(db, property_id, data, current_user)
    _, count = await services.get_interest_status(db, property_id, current_user)
    return BaseResponse(
        success=True,
        message="Interest recorded successfully"
        if is_new
        else "Interest updated successfully",
        data=InterestStatusResponse(has_expressed_interest=True, interested_count=count),
    )


@router.delete(
    "/{property_id}/interested", response_model=BaseResponse[InterestStatusResponse]
)
async def withdraw_interest(
    property_id: uuid.UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    count = await services.withdraw_interest(db, property_id, current_user)
    return BaseResponse(
        success=True,
        message="Interest removed",
        data=InterestStatusResponse(has_expressed_interest=False, interested_count=count),
    )


# ----- Admin listings -----


@admin_router.get("", response_model=BaseResponse[PaginatedResponse[PropertyResponse]])
async def admin_list_properties(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: str | None = Query(None),
    is_active: bool | None = Query(None),
    is_featured: bool | None = Query(None),
    block_id: uuid.UUID | None = Query(None),
    landlord_id: uuid.UUID | None = Query(None),
):
    properties, total = await crud.get_properties(
        db,
        skip=page_offset(page, page_size),
        limit=page_size,
        search=search,
        is_active=is_active,
        is_featured=is_featured,
        block_id=block_id,
        landlord_id=landlord_id,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[PropertyResponse.model_validate(p) for p in properties],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@admin_router.post("", response_model=BaseResponse[PropertyDetailResponse])
async def admin_create_property(
    data: PropertyCreate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    prop = await services.create_property(db, data, host_id=current_user.id)
    return BaseResponse(
        success=True,
        message="Property created successfully",
        data=PropertyDetailResponse.model_validate(prop),
    )


@admin_router.get("/{property_id}", response_model=BaseResponse[PropertyDetailResponse])
async def admin_get_property(
    property_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    prop = await services.get_property(db, property_id, include_related=True)
    return BaseResponse(success=True, data=PropertyDetailResponse.model_validate(prop))


@admin_router.patch(
    "/{property_id}", response_model=BaseResponse[PropertyDetailResponse]
)
async def admin_update_property(
    property_id: uuid.UUID,
    data: PropertyUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    prop = await services.update_property(db, property_id, data)
    return BaseResponse(
        success=True,
        message="Property updated successfully",
        data=PropertyDetailResponse.model_validate(prop),
    )


@admin_router.put(
    "/{property_id}/images", response_model=BaseResponse[PropertyDetailResponse]
)
async def admin_replace_images(
    property_id: uuid.UUID,
    image_urls: list[str],
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    prop = await services.replace_property_images(db, property_id, image_urls)
    return BaseResponse(success=True, data=PropertyDetailResponse.model_validate(prop))


@admin_router.delete("/{property_id}", response_model=BaseResponse[None])
async def admin_delete_property(
    property_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_property(db, property_id)
    return BaseResponse(success=True, message="Property deleted successfully")


@admin_router.patch(
    "/units/{unit_id}", response_model=BaseResponse[PropertyUnitResponse]
)
async def admin_update_unit(
    unit_id: uuid.UUID,
    data: PropertyUnitUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    unit = await services.update_unit(db, unit_id, data)
    return BaseResponse(success=True, data=PropertyUnitResponse.model_validate(unit))


# ----- Rooms -----


@admin_router.get(
    "/{property_id}/details", response_model=BaseResponse[list[PropertyRoomResponse]]
)
async def admin_list_rooms(
    property_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    rooms = await services.list_rooms(db, property_id)
    return BaseResponse(
        success=True, data=[PropertyRoomResponse.model_validate(r) for r in rooms]
    )


@admin_router.post(
    "/{property_id}/details",
    response_model=BaseResponse[PropertyRoomResponse],
    status_code=201,
)
async def admin_create_room(
    property_id: uuid.UUID,
    data: PropertyRoomCreate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    room = await services.create_room(db, property_id, data)
    return BaseResponse(
        success=True,
        message="Property detail added successfully",
        data=PropertyRoomResponse.model_validate(room),
    )


@admin_router.patch(
    "/details/{detail_id}", response_model=BaseResponse[PropertyRoomResponse]
)
async def admin_update_room(
    detail_id: uuid.UUID,
    data: PropertyRoomUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    room = await services.update_room(db, detail_id, data)
    return BaseResponse(success=True, data=PropertyRoomResponse.model_validate(room))


@admin_router.delete("/details/{detail_id}", response_model=BaseResponse[None])
async def admin_delete_room(
    detail_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_room(db, detail_id)
    return BaseResponse(success=True, message="Property detail deleted successfully")


@admin_router.put(
    "/details/{detail_id}/images", response_model=BaseResponse[PropertyRoomResponse]
)
async def admin_replace_room_images(
    detail_id: uuid.UUID,
    image_urls: list[str],
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    room = await services.replace_room_images(db, detail_id, image_urls)
    return BaseResponse(success=True, data=PropertyRoomResponse.model_validate(room))


@admin_router.post(
    "/details/{detail_id}/images", response_model=BaseResponse[PropertyRoomResponse]
)
async def admin_add_room_image(
    detail_id: uuid.UUID,
    data: RoomImageCreate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    room = await services.add_room_image(db, detail_id, data.image_url)
    return BaseResponse(success=True, data=PropertyRoomResponse.model_validate(room))


@admin_router.delete(
    "/details/images/{image_id}", response_model=BaseResponse[None]
)
async def admin_delete_room_image(
    image_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_room_image(db, image_id)
    return BaseResponse(success=True, message="Image removed")


# ----- Buildings -----


@buildings_router.get("", response_model=BaseResponse[PaginatedResponse[BlockResponse]])
async def list_buildings(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: str | None = Query(None),
    landlord_id: uuid.UUID | None = Query(None),
):
    blocks, total = await crud.get_blocks(
        db,
        skip=page_offset(page, page_size),
        limit=page_size,
        search=search,
        landlord_id=landlord_id,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[BlockResponse.model_validate(b) for b in blocks],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@buildings_router.post("/preview", response_model=BaseResponse[BuildingPreviewResponse])
async def preview_building(data: BuildingCreate, current_user: AdminUser):
    """Show the listings and units a configuration would create."""
    return BaseResponse(success=True, data=services.preview_building(data))


@buildings_router.post("", response_model=BaseResponse[BuildingCreationResult])
async def create_building(
    data: BuildingCreate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a building with one listing per unit type."""
    result = await services.create_building(db, data, created_by=current_user.id)
    if result.failed:
        message = (
            f"Building created partially: {len(result.failed)} unit type(s) failed"
        )
    else:
        message = "Building created successfully"
    return BaseResponse(success=not result.failed, message=message, data=result)


@buildings_router.get("/{block_id}", response_model=BaseResponse[BlockResponse])
async def get_building(
    block_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    block = await services.get_block(db, block_id)
    return BaseResponse(success=True, data=BlockResponse.model_validate(block))


@buildings_router.get(
    "/{block_id}/config", response_model=BaseResponse[BlockConfigResponse]
)
async def get_building_config(
    block_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return BaseResponse(success=True, data=await services.get_block_config(db, block_id))


@buildings_router.post(
    "/{block_id}/unit-types", response_model=BaseResponse[BuildingCreationResult]
)
async def add_building_unit_types(
    block_id: uuid.UUID,
    data: BuildingCreate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Add unit types (and their units) to an existing building."""
    result = await services.create_building(
        db, data, created_by=current_user.id, existing_block_id=block_id
    )
    return BaseResponse(success=not result.failed, data=result)


@buildings_router.put("/{block_id}/landlord", response_model=BaseResponse[int])
async def assign_building_landlord(
    block_id: uuid.UUID,
    data: AssignLandlordRequest,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    updated = await services.assign_block_landlord(db, block_id, data.landlord_id)
    action = "assigned to" if data.landlord_id else "removed from"
    return BaseResponse(
        success=True,
        message=f"Landlord {action} {updated} properties in this building",
        data=updated,
    )


@buildings_router.delete("/{block_id}", response_model=BaseResponse[None])
async def delete_building(
    block_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_block(db, block_id)
    return BaseResponse(success=True, message="Building deleted successfully")
