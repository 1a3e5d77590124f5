"""Property editor: draft validation, completion, auto-save and navigation guard."""

from .autosave import AutoSaver
from .form_state import PropertyFormState
from .navigation import UnsavedChangesGuard
from .routers import router
from .validation import completion_percentage, validate_all, validate_field

__all__ = [
    "AutoSaver",
    "PropertyFormState",
    "UnsavedChangesGuard",
    "router",
    "completion_percentage",
    "validate_all",
    "validate_field",
]
