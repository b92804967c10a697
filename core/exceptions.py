"""Custom exception classes for the application.

Defines domain-specific exceptions that can be raised from routers and
services and are rendered consistently by the handlers in
`core.error_handlers`.
"""

from typing import Optional, Any, Dict


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any):
        """Initialize not found error.

        Args:
            resource: Type of resource (e.g., 'Recipe', 'Product').
            identifier: ID or identifier that was not found.
        """
        message = f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class ValidationError(AppException):
    """Exception raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class UnauthorizedError(AppException):
    """Raised when the caller identity is missing or malformed."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message, status_code=401)


class ForbiddenError(AppException):
    """Raised when the caller may not access or modify a resource."""

    def __init__(self, message: str = "Forbidden", resource: Optional[str] = None):
        details = {"resource": resource} if resource else {}
        super().__init__(message, status_code=403, details=details)


class ConflictError(AppException):
    """Raised when a write would violate a uniqueness rule (e.g. email)."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=409, details=details)


class DatabaseError(AppException):
    """Exception raised when database operations fail."""

    def __init__(self, message: str, operation: Optional[str] = None):
        """Initialize database error.

        Args:
            message: Database error message.
            operation: Optional operation that failed (e.g., 'create', 'update').
        """
        details = {"operation": operation} if operation else {}
        super().__init__(message, status_code=500, details=details)
