"""
Exception hierarchy shared by every module.

Each class carries the HTTP status the API layer renders it with.
"""

from typing import Any


class RentifyException(Exception):
    """Base exception for all Rentify errors."""

    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(RentifyException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ):
        message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ResourceAlreadyExistsError(RentifyException):
    """Raised when trying to create a resource that already exists."""

    status_code = 409

    def __init__(
        self,
        resource_type: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ):
        message = f"{resource_type} with identifier '{identifier}' already exists"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(RentifyException):
    """Raised when data validation fails."""

    status_code = 422

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class BusinessLogicError(RentifyException):
    """Raised when business rules reject an operation."""

    status_code = 400


class PermissionError(RentifyException):
    """Raised when the caller may not perform an action."""

    status_code = 403

    def __init__(
        self, action: str, resource_type: str, details: dict[str, Any] | None = None
    ):
        message = f"Permission denied: cannot {action} {resource_type}"
        super().__init__(message, details)
        self.action = action
        self.resource_type = resource_type


class DatabaseError(RentifyException):
    """Raised when database operations fail."""

    status_code = 500


class AuthenticationError(RentifyException):
    """Raised when authentication fails."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class NotFoundError(RentifyException):
    """Raised when a resource is not found, with a free-form message."""

    status_code = 404

    def __init__(
        self, message: str = "Resource not found", details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)


class ExternalServiceError(RentifyException):
    """Raised when an external service (object storage) fails."""

    status_code = 502

    def __init__(
        self,
        service_name: str,
        operation: str,
        details: dict[str, Any] | None = None,
    ):
        message = f"External service '{service_name}' failed during '{operation}'"
        super().__init__(message, details)
        self.service_name = service_name
        self.operation = operation


class ConflictError(RentifyException):
    """Raised when a change collides with existing state."""

    status_code = 409
