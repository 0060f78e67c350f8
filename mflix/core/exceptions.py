"""
Custom exception hierarchy for proper error categorization and HTTP status mapping.

Distinguishes:
- User errors (400-level): caller asked for an operation the data layer rejects
- Server errors (500-level): our infrastructure or configuration failed

Usage:
    from mflix.core.exceptions import DuplicateUserError, ValidationError

    # Conflict on registration → 409 Conflict
    raise DuplicateUserError("User is already created", email=email)

    # Missing comment id → 400 Bad Request
    raise ValidationError("Comment id must not be empty")
"""

from typing import Any


class AppError(Exception):
    """
    Base application error with HTTP status mapping.

    All custom exceptions inherit from this to enable consistent error handling.
    """

    # Default status code (subclasses override)
    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, **context: Any):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error description
            **context: Additional key-value pairs for logging (e.g., email, comment_id)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON response and structured logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            **self.context,
        }


# ===== 400-level: Client Errors =====


class ValidationError(AppError):
    """User provided invalid input (e.g., empty identifier, malformed field)."""

    status_code = 400
    error_type = "validation_error"


class IncorrectOperationError(AppError):
    """
    Data layer refused the requested operation.

    Examples:
        - Inserting a comment without an id
        - Replacing user preferences with a null value
    """

    status_code = 400
    error_type = "incorrect_operation"


class DuplicateUserError(IncorrectOperationError):
    """A user with the same email already exists."""

    status_code = 409
    error_type = "duplicate_user"


class NotFoundError(AppError):
    """Requested resource does not exist."""

    status_code = 404
    error_type = "not_found_error"


# ===== 500-level: Server Errors =====


class DatabaseError(AppError):
    """
    Database operation failed (connection, query, schema issues).

    Maps to 500 Internal Server Error (our infrastructure problem).
    """

    status_code = 500
    error_type = "database_error"


class ConfigurationError(AppError):
    """
    Application misconfigured (e.g., missing env vars, invalid settings).

    Should be caught during startup, not during request handling.
    """

    status_code = 500
    error_type = "configuration_error"
