"""
Custom exceptions for the application.

This provides:
1. Specific exception types for each failure kind
2. HTTP status code mapping
3. A stable error kind rendered in every error body
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """Base exception class for application-specific errors."""

    error = "InternalError"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidArgumentError(AppException):
    """Raised when input validation fails (malformed id, out-of-range value, empty field)."""

    error = "InvalidArgument"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(AppException):
    """Raised when the caller token is missing or invalid."""

    error = "Unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class AuthorizationError(AppException):
    """Raised when user doesn't have permission for an operation."""

    error = "Forbidden"

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, status_code=403)


class InvalidStateError(AuthorizationError):
    """Raised when a transition is not allowed from the current state."""

    def __init__(self, message: str = "Operation not allowed in current state"):
        super().__init__(message)


class NotFoundError(AppException):
    """Raised when requested resource is not found."""

    error = "NotFound"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class RequestTimeoutError(AppException):
    """Raised when a request exceeds the configured time budget."""

    error = "Timeout"

    def __init__(self, message: str = "Request timeout"):
        super().__init__(message, status_code=408)


class ServiceError(AppException):
    """Raised when business logic operation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


class StoreError(ServiceError):
    """Raised when the key-value store call fails."""

    def __init__(self, operation: str, message: str = "Key-value store error"):
        super().__init__(f"{operation}: {message}")
