"""
Domain exceptions for the API layer.

Every exception carries the HTTP status it maps to and a short error code.
The handlers in ``bandstand.main`` render them as
``{"success": false, "error": <code>, "message": <text>}``.
"""
from typing import Any, Dict, Optional

from fastapi import status


class ApplicationException(Exception):
    """Base exception for all application-specific exceptions."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "Internal"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class BadRequestException(ApplicationException):
    """Missing or invalid input."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BadRequest"


class UnauthorizedException(ApplicationException):
    """Missing, invalid or expired token, or bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "Unauthorized"

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ForbiddenException(ApplicationException):
    """Authenticated but not entitled to the action."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "Forbidden"


class ConflictException(ApplicationException):
    """A unique field is already taken."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "Conflict"

    def __init__(self, resource: str, field: str, value: Any):
        message = f"{resource} already exists with {field}: {value}"
        super().__init__(message, {"resource": resource, "field": field, "value": value})


class NotFoundException(ApplicationException):
    """Exception raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NotFound"

    def __init__(self, resource: str, identifier: Any = None):
        super().__init__(f"{resource} not found", {"resource": resource, "identifier": identifier})


class AlreadyRegisteredException(BadRequestException):
    error_code = "AlreadyRegistered"


class SelfRentalForbiddenException(BadRequestException):
    error_code = "SelfRentalForbidden"


class NotAvailableException(BadRequestException):
    error_code = "NotAvailable"


class NotRenterException(BadRequestException):
    error_code = "NotRenter"
