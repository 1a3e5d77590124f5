"""Property schemas."""

import enum
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

# ----- Enums -----


class PropertyCategory(str, enum.Enum):
    APARTMENT = "Apartment"
    HOUSE = "House"
    CONDO = "Condo"
    VILLA = "Villa"
    TOWNHOUSE = "Townhouse"


# ----- Property Schemas -----


class PropertyBase(BaseModel):
    """Fields shared by create and response schemas."""

    title: str = Field(..., max_length=255)
    location: str = Field(..., max_length=255)
    description: str | None = None
    price_ugx: int = Field(0, description="Monthly price in minor units")
    category: str = Field(PropertyCategory.APARTMENT.value, max_length=50)
    bedrooms: int = 1
    bathrooms: int = 1
    image_url: str | None = Field(None, max_length=1024)
    video_url: str | None = Field(None, max_length=1024)
    google_maps_embed_url: str | None = None
    minimum_initial_months: int = 1


class PropertyCreate(PropertyBase):
    """Create a stand-alone listing.

    Field rules are enforced by the property editor validator so the API
    reports them with the same messages the editor shows.
    """

    unit_type: str | None = Field(None, max_length=50)
    is_active: bool = True
    is_featured: bool = False
    landlord_id: UUID | None = None
    image_urls: list[str] = Field(default_factory=list)


class PropertyUpdate(BaseModel):
    title: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=255)
    description: str | None = None
    price_ugx: int | None = None
    category: str | None = Field(None, max_length=50)
    bedrooms: int | None = None
    bathrooms: int | None = None
    image_url: str | None = Field(None, max_length=1024)
    video_url: str | None = Field(None, max_length=1024)
    google_maps_embed_url: str | None = None
    minimum_initial_months: int | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    is_occupied: bool | None = None
    landlord_id: UUID | None = None


class PropertyImageResponse(BaseModel):
    id: UUID
    image_url: str
    category: str
    display_order: int
    is_primary: bool

    class Config:
        from_attributes = True


class PropertyUnitResponse(BaseModel):
    id: UUID
    property_id: UUID
    block_id: UUID
    floor_number: int
    unit_number: str
    unit_type: str
    bedrooms: int
    bathrooms: int
    price_ugx: int
    is_available: bool
    template_name: str | None = None

    class Config:
        from_attributes = True


class PropertyUnitUpdate(BaseModel):
    price_ugx: int | None = Field(None, ge=0)
    is_available: bool | None = None
    sync_with_template: bool | None = None


# ----- Rooms -----


class PropertyRoomImageResponse(BaseModel):
    id: UUID
    image_url: str
    display_order: int

    class Config:
        from_attributes = True


class PropertyRoomResponse(BaseModel):
    id: UUID
    property_id: UUID
    detail_type: str
    detail_name: str
    description: str | None = None
    display_order: int
    images: list[PropertyRoomImageResponse] = []

    class Config:
        from_attributes = True


class PropertyRoomCreate(BaseModel):
    """A room on a listing; without ``display_order`` it goes last."""

    detail_type: str = Field(..., min_length=1, max_length=50)
    detail_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)
    image_urls: list[str] = Field(default_factory=list)


class PropertyRoomUpdate(BaseModel):
    detail_type: str | None = Field(None, min_length=1, max_length=50)
    detail_name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)


class RoomImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=1024)


class PropertyResponse(PropertyBase):
    id: UUID
    property_code: str | None = None
    unit_type: str | None = None
    block_id: UUID | None = None
    landlord_id: UUID | None = None
    total_floors: int | None = None
    units_config: str | None = None
    is_active: bool
    is_featured: bool
    is_occupied: bool
    daily_views_count: int
    total_views_count: int
    interested_count: int
    last_view_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PropertyDetailResponse(PropertyResponse):
    images: list[PropertyImageResponse] = []
    units: list[PropertyUnitResponse] = []
    rooms: list[PropertyRoomResponse] = []


# ----- Building configuration -----


class UnitTypeCount(BaseModel):
    """How many units of one type sit on a floor, and their monthly fee."""

    type: str = Field(..., min_length=1, max_length=50)
    count: int = Field(..., ge=0)
    monthly_fee: int = Field(..., ge=0, description="Whole currency units")


class FloorConfig(BaseModel):
    floor_number: int = Field(..., ge=0)
    unit_types: list[UnitTypeCount] = Field(default_factory=list)


class RoomConfig(BaseModel):
    """A room every listing of one unit type is created with."""

    type: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    image_urls: list[str] = Field(default_factory=list)


class UnitTypeDetails(BaseModel):
    """Per unit type listing overrides."""

    type: str = Field(..., min_length=1, max_length=50)
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    image_url: str | None = Field(None, max_length=1024)
    property_details: list[RoomConfig] = Field(default_factory=list)


class BuildingConfig(BaseModel):
    total_floors: int = Field(..., ge=1, le=200)
    floors: list[FloorConfig] = Field(default_factory=list)
    unit_type_details: list[UnitTypeDetails] = Field(default_factory=list)

    @field_validator("floors")
    @classmethod
    def floors_are_distinct(cls, floors: list[FloorConfig]) -> list[FloorConfig]:
        numbers = [f.floor_number for f in floors]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Each floor may only be configured once")
        return floors


class BuildingCreate(BaseModel):
    """A building and the listing defaults shared by all its unit types."""

    building_name: str | None = Field(None, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    category: str = Field(PropertyCategory.APARTMENT.value, max_length=50)
    image_url: str | None = Field(None, max_length=1024)
    video_url: str | None = Field(None, max_length=1024)
    google_maps_embed_url: str | None = None
    shared_image_urls: list[str] = Field(default_factory=list)
    minimum_initial_months: int = Field(1, ge=1, le=24)
    landlord_id: UUID | None = None
    config: BuildingConfig
    atomic: bool = Field(
        False, description="Roll back the whole building on the first failure"
    )


class UniqueUnitTypeResponse(BaseModel):
    type: str
    label: str
    monthly_fee: int
    bedrooms: int
    bathrooms: int
    total_units: int
    units_per_floor: list[tuple[int, int]]
    custom_title: str | None = None
    description: str | None = None
    image_url: str | None = None
    rooms: list[RoomConfig] = []

    class Config:
        from_attributes = True


class PlannedUnitResponse(BaseModel):
    floor_number: int
    unit_number: str
    unit_type: str
    type_sequence: int

    class Config:
        from_attributes = True


class PlannedPropertyResponse(BaseModel):
    unit_type: str
    title: str
    description: str | None = None
    image_url: str | None = None
    price_ugx: int
    bedrooms: int
    bathrooms: int
    units: list[PlannedUnitResponse]
    image_urls: list[str]
    rooms: list[RoomConfig] = []


class BuildingPreviewResponse(BaseModel):
    block_name: str
    total_floors: int
    total_units: int
    unit_types: list[UniqueUnitTypeResponse]
    properties: list[PlannedPropertyResponse]


class CreatedUnitType(BaseModel):
    unit_type: str
    property_id: UUID
    units_created: int


class FailedUnitType(BaseModel):
    unit_type: str
    error: str


class BuildingCreationResult(BaseModel):
    block_id: UUID
    block_name: str
    total_units: int
    created: list[CreatedUnitType] = []
    failed: list[FailedUnitType] = []

    @property
    def is_partial(self) -> bool:
        return bool(self.failed)


class BlockResponse(BaseModel):
    id: UUID
    name: str
    location: str
    total_floors: int
    total_units: int
    landlord_id: UUID | None = None
    created_by: UUID | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class BlockConfigResponse(BaseModel):
    """A persisted building turned back into its editable configuration."""

    block: BlockResponse
    building_name: str
    location: str
    minimum_initial_months: int
    config: BuildingConfig
    property_ids: list[UUID]


class AssignLandlordRequest(BaseModel):
    landlord_id: UUID | None


# ----- Engagement -----


class ViewRecordRequest(BaseModel):
    session_id: str | None = Field(None, max_length=64)


class ViewStatsResponse(BaseModel):
    daily_views: int
    total_views: int
    interested: int
    last_view_at: datetime | None = None


class ViewRecordResponse(ViewStatsResponse):
    already_viewed: bool
    session_id: str


class InterestRequest(BaseModel):
    email: EmailStr | None = None
    name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=40)
    message: str | None = Field(None, max_length=2000)
    session_id: str | None = Field(None, max_length=64)


class InterestStatusResponse(BaseModel):
    has_expressed_interest: bool
    interested_count: int
