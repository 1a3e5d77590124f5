"""Property editor API routes."""

from fastapi import APIRouter

from ..commons import BaseResponse
from .schemas import DraftValidationRequest, DraftValidationResponse
from .validation import completion_percentage, validate_all

router = APIRouter(prefix="/properties", tags=["Property Editor"])


@router.post("/validate", response_model=BaseResponse[DraftValidationResponse])
async def validate_draft(request: DraftValidationRequest):
    """Validate a draft listing and report how complete it is."""
    errors = validate_all(request.data)
    if request.touched is not None:
        visible = set(request.touched)
        reported = {name: msg for name, msg in errors.items() if name in visible}
    else:
        reported = errors

    return BaseResponse(
        success=True,
        data=DraftValidationResponse(
            errors=reported,
            is_valid=not errors,
            completion_percentage=completion_percentage(request.data),
        ),
    )
