"""
Custom exceptions for AdMedia.

Every error carries the HTTP status it is reported with; the API layer
renders them through a single exception handler.
"""

from typing import Any


class AdMediaError(Exception):
    """Base exception for AdMedia."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DatabaseError(AdMediaError):
    """Database related errors."""

    pass


class ValidationError(AdMediaError):
    """Request validation errors."""

    status_code = 400


class InvalidInputError(ValidationError):
    """An analytics increment is not numeric or is negative."""

    pass


class InvariantViolationError(ValidationError):
    """Applying an increment would leave more clicks than impressions."""

    pass


class AuthenticationError(AdMediaError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class PermissionDeniedError(AdMediaError):
    """Authenticated user lacks the required role."""

    status_code = 403


class NotFoundError(AdMediaError):
    """Requested record does not exist (or is not visible to the caller)."""

    status_code = 404


class ConflictError(AdMediaError):
    """Record already exists."""

    status_code = 409


class StorageError(AdMediaError):
    """Image storage (Cloudinary) upload failed."""

    status_code = 502
