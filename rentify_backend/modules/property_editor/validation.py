"""
Field validation and completion scoring for listing drafts.

Both functions are pure: the same value always produces the same message.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
LOCATION_MIN_LENGTH = 3
DESCRIPTION_MIN_LENGTH = 10
MAX_ROOMS = 20
MIN_INITIAL_MONTHS = 1
MAX_INITIAL_MONTHS = 24

VALIDATED_FIELDS = (
    "title",
    "location",
    "description",
    "category",
    "price_ugx",
    "bedrooms",
    "bathrooms",
    "minimum_initial_months",
)
COMPLETION_REQUIRED_FIELDS = (
    "title",
    "location",
    "description",
    "category",
    "price_ugx",
    "bedrooms",
    "bathrooms",
)
COMPLETION_OPTIONAL_FIELDS = ("image_url", "video_url", "google_maps_embed_url")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _validate_text(value, label: str, min_length: int, max_length: int | None = None):
    text = _text(value)
    if not text:
        return f"{label} is required"
    if len(text) < min_length:
        return f"{label} must be at least {min_length} characters"
    if max_length is not None and len(text) > max_length:
        return f"{label} must be less than {max_length} characters"
    return None


def _validate_rooms(value, label: str):
    if value is None:
        return f"{label} is required"
    if value < 0:
        return f"{label} cannot be negative"
    if value > MAX_ROOMS:
        return f"Maximum {MAX_ROOMS} {label.lower()} allowed"
    return None


def validate_field(name: str, value: Any) -> str | None:
    """Return the error message for one field, or None when it is fine.

    Fields without rules always pass.
    """
    if name == "title":
        return _validate_text(value, "Title", TITLE_MIN_LENGTH, TITLE_MAX_LENGTH)
    if name == "location":
        return _validate_text(value, "Location", LOCATION_MIN_LENGTH)
    if name == "description":
        return _validate_text(value, "Description", DESCRIPTION_MIN_LENGTH)
    if name == "category":
        return None if value else "Category is required"
    if name == "price_ugx":
        if value is None:
            return "Price is required"
        if value < 0:
            return "Price cannot be negative"
        return None
    if name == "bedrooms":
        return _validate_rooms(value, "Bedrooms")
    if name == "bathrooms":
        return _validate_rooms(value, "Bathrooms")
    if name == "minimum_initial_months":
        if value is None:
            return "Minimum deposit months is required"
        if value < MIN_INITIAL_MONTHS:
            return "Minimum 1 month required"
        if value > MAX_INITIAL_MONTHS:
            return f"Maximum {MAX_INITIAL_MONTHS} months allowed"
        return None
    return None


def as_field_mapping(data: Mapping[str, Any] | BaseModel) -> Mapping[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump()
    return data


def validate_all(data: Mapping[str, Any] | BaseModel) -> dict[str, str]:
    """Run every field rule; only failing fields appear in the result."""
    values = as_field_mapping(data)
    errors = {}
    for name in VALIDATED_FIELDS:
        error = validate_field(name, values.get(name))
        if error:
            errors[name] = error
    return errors


def is_valid(data: Mapping[str, Any] | BaseModel) -> bool:
    return not validate_all(data)


def completion_percentage(data: Mapping[str, Any] | BaseModel) -> int:
    """Share of filled fields, rounded half up.

    Required fields count when non-empty and non-zero; optional media
    fields count when non-empty.
    """
    values = as_field_mapping(data)
    completed = sum(
        1
        for name in COMPLETION_REQUIRED_FIELDS
        if values.get(name) not in (None, "", 0)
    )
    completed += sum(
        1 for name in COMPLETION_OPTIONAL_FIELDS if values.get(name) not in (None, "")
    )
    total = len(COMPLETION_REQUIRED_FIELDS) + len(COMPLETION_OPTIONAL_FIELDS)
    return int(completed * 100 / total + 0.5)
