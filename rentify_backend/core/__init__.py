"""Core infrastructure for the Rentify backend."""

from .database_types import UUID
from .exceptions import (
    AuthenticationError,
    BusinessLogicError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    PermissionError,
    RentifyException,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    ValidationError,
)
from .state_machine import StatusMachine

__all__ = [
    "UUID",
    "RentifyException",
    "ResourceNotFoundError",
    "ResourceAlreadyExistsError",
    "ValidationError",
    "BusinessLogicError",
    "ConflictError",
    "PermissionError",
    "DatabaseError",
    "AuthenticationError",
    "NotFoundError",
    "ExternalServiceError",
    "StatusMachine",
]
