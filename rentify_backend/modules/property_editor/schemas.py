"""Property editor schemas."""

import enum
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SaveStatusValue(str, enum.Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class SaveStatus(BaseModel):
    status: SaveStatusValue = SaveStatusValue.IDLE
    last_saved: datetime | None = None
    error: str | None = None


class PropertyFormData(BaseModel):
    """Editable listing fields with the editor's starting values.

    Values carry no range constraints; a half-filled draft is held,
    serialized and validated field by field.
    """

    id: UUID | None = None
    title: str = ""
    location: str = ""
    description: str = ""
    price_ugx: int | None = 0
    category: str = ""
    bedrooms: int | None = 1
    bathrooms: int | None = 1
    image_url: str = ""
    image_urls: list[str] = Field(default_factory=list)
    video_url: str = ""
    minimum_initial_months: int | None = 1
    total_floors: int = 1
    units_config: str = ""
    block_id: UUID | None = None
    google_maps_embed_url: str | None = ""
    is_featured: bool = False
    property_code: str | None = None


class DraftValidationRequest(BaseModel):
    data: PropertyFormData
    touched: list[str] | None = Field(
        None, description="Only report errors for these fields; all when omitted"
    )


class DraftValidationResponse(BaseModel):
    errors: dict[str, str]
    is_valid: bool
    completion_percentage: int
