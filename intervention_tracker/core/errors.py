# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error categories shared by services, actions and the HTTP layer.

Domain services define their own exception hierarchies; each leaf also
inherits one of the category classes below so the action boundary can map
it to an ErrorCode without knowing the domain.

Example:
    >>> class StudentNotFoundError(StudentServiceError, NotFoundError):
    ...     pass
"""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Failure codes carried by the action envelope."""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    DATABASE = "DATABASE"
    INTERNAL = "INTERNAL"


class AppError(Exception):
    """Base class for categorized application errors.

    Attributes:
        message: Human-readable error description.
        details: Additional error context.
        code: Category code reported to callers.
    """

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str, details: dict | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class UnauthorizedError(AppError):
    """Raised when no valid session is present."""

    code = ErrorCode.UNAUTHORIZED


class ForbiddenError(AppError):
    """Raised when the caller lacks the required role or tool."""

    code = ErrorCode.FORBIDDEN


class ValidationFailedError(AppError):
    """Raised when input fails a business validation rule."""

    code = ErrorCode.VALIDATION


class NotFoundError(AppError):
    """Raised when a requested entity does not exist."""

    code = ErrorCode.NOT_FOUND


class ConflictError(AppError):
    """Raised when an operation conflicts with existing state."""

    code = ErrorCode.CONFLICT


class DatabaseOperationError(AppError):
    """Raised when a database operation fails unexpectedly."""

    code = ErrorCode.DATABASE


HTTP_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.VALIDATION: 422,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.DATABASE: 500,
    ErrorCode.INTERNAL: 500,
}
