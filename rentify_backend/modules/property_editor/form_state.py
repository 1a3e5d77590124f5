"""Serializable state of one listing being edited."""

from typing import Any

from .schemas import PropertyFormData
from .validation import completion_percentage, validate_all, validate_field


class PropertyFormState:
    """Holds the draft, its per-field errors and which fields were touched.

    Errors only surface for touched fields: touching a field validates it,
    and every later change to it re-validates.
    """

    def __init__(self, initial: PropertyFormData | dict | None = None):
        self.data = self._coerce(initial)
        self.errors: dict[str, str | None] = {}
        self.touched: set[str] = set()
        self.is_dirty = False

    @staticmethod
    def _coerce(data: PropertyFormData | dict | None) -> PropertyFormData:
        if data is None:
            return PropertyFormData()
        if isinstance(data, PropertyFormData):
            return data.model_copy(deep=True)
        return PropertyFormData(**data)

    def update_field(self, name: str, value: Any) -> None:
        if name not in PropertyFormData.model_fields:
            raise KeyError(f"Unknown property field: {name}")
        self.data = self.data.model_copy(update={name: value})
        self.is_dirty = True
        if name in self.touched:
            self.errors[name] = validate_field(name, value)

    def touch_field(self, name: str) -> str | None:
        self.touched.add(name)
        error = validate_field(name, getattr(self.data, name, None))
        self.errors[name] = error
        return error

    def set_data(self, **fields: Any) -> None:
        """Merge server-loaded values without marking the form dirty."""
        self.data = self.data.model_copy(update=fields)

    def reset(self, data: PropertyFormData | dict | None = None) -> None:
        self.data = self._coerce(data)
        self.errors = {}
        self.touched = set()
        self.is_dirty = False

    def validate_all(self) -> dict[str, str]:
        return validate_all(self.data)

    def is_valid(self) -> bool:
        return not self.validate_all()

    def visible_errors(self) -> dict[str, str]:
        return {name: error for name, error in self.errors.items() if error}

    def completion_percentage(self) -> int:
        return completion_percentage(self.data)

    def snapshot(self) -> dict:
        return {
            "data": self.data.model_dump(mode="json"),
            "errors": self.visible_errors(),
            "touched": sorted(self.touched),
            "is_dirty": self.is_dirty,
            "completion_percentage": self.completion_percentage(),
        }
