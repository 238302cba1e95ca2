"""Application exception hierarchy"""
from typing import Any, Optional


class AppException(Exception):
    """Base exception for application errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_type: str = "AppError",
        details: Optional[Any] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Rejected input, e.g. a payment from a person to themselves"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_type="ValidationError",
            details=details
        )


class NotFoundError(AppException):
    """Resource not found exception"""

    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=404,
            error_type="NotFoundError",
            details=details
        )


class AuthorizationError(AppException):
    """Caller lacks the role required for the operation"""

    def __init__(self, message: str = "Permission denied", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=403,
            error_type="AuthorizationError",
            details=details
        )


class ConflictError(AppException):
    """Request conflicts with stored state, e.g. an Idempotency-Key reused for another body"""

    def __init__(self, message: str = "Resource conflict", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_type="ConflictError",
            details=details
        )


class DatabaseError(AppException):
    """The data store was unavailable or rejected a write.

    The message carries the underlying driver error so the caller can show it.
    """

    def __init__(self, message: str = "Database error occurred", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_type="DatabaseError",
            details=details
        )

    @classmethod
    def from_exception(cls, action: str, exc: Exception) -> "DatabaseError":
        """Wrap a driver/ORM exception raised while performing `action`"""
        original = getattr(exc, "orig", None) or exc
        return cls(f"Could not {action}: {original}")
