"""
Custom exceptions for the dashboard API.
Every error body carries ``success: false`` next to the error code.
"""

from typing import Any


class DashboardAPIException(Exception):
    """Base exception for all dashboard API errors."""

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.error = error
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response dictionary."""
        response = {
            "success": False,
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class ValidationException(DashboardAPIException):
    """400 - Malformed request (missing or invalid parameters)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="validation_failed",
            message=message,
            status_code=400,
            details=details,
        )


class UnauthorizedException(DashboardAPIException):
    """401 - Missing or invalid admin session token."""

    def __init__(self, message: str = "Valid session token required"):
        super().__init__(
            error="unauthorized",
            message=message,
            status_code=401,
        )


class ForbiddenException(DashboardAPIException):
    """403 - Authenticated but missing the required scope."""

    def __init__(self, message: str = "Access denied", details: dict[str, Any] | None = None):
        super().__init__(
            error="forbidden",
            message=message,
            status_code=403,
            details=details,
        )


class NotFoundException(DashboardAPIException):
    """404 - Single-entity lookup matched nothing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="not_found",
            message=message,
            status_code=404,
            details=details,
        )


class ConflictException(DashboardAPIException):
    """409 - Uniqueness clash or delete blocked by live references."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="conflict",
            message=message,
            status_code=409,
            details=details,
        )


class StorageException(DashboardAPIException):
    """500 - Document store unavailable or failing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="storage_error",
            message=message,
            status_code=500,
            details=details,
        )


class UpstreamException(DashboardAPIException):
    """502 - The dashboard API answered a client fetch with an error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="upstream_error",
            message=message,
            status_code=502,
            details=details,
        )
