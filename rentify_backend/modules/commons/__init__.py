"""Common schemas and request helpers shared across modules."""

from .requests import get_client_info
from .schemas import BaseResponse, PaginatedResponse, SortOrder, page_offset
from .verification import VerificationStatus, verification_machine

__all__ = [
    "BaseResponse",
    "PaginatedResponse",
    "SortOrder",
    "VerificationStatus",
    "get_client_info",
    "page_offset",
    "verification_machine",
]
