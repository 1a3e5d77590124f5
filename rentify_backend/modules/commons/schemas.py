"""Response envelopes shared across all modules."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class SortOrder(str, Enum):
    """Listing sort orders."""

    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


class BaseResponse(BaseModel, Generic[T]):
    """Envelope for every API response."""

    success: bool = Field(
        default=True, description="Whether the request was successful"
    )
    message: str | None = Field(default=None, description="Response message")
    data: T | None = Field(default=None, description="Response data")
    error: Any | None = Field(default=None, description="Error details if any")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response timestamp",
    )


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of items plus totals."""

    items: list[T] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20
    total_pages: int = 0

    @classmethod
    def from_items(cls, items: list[T], total: int, page: int, page_size: int):
        total_pages = (total + page_size - 1) // page_size if page_size > 0 else 0
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size
