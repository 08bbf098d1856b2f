"""
Pydantic schemas for error responses.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Examples:
        400: {"success": false, "error": "validation_failed", "message": "..."}
        401: {"success": false, "error": "unauthorized", "message": "Valid session token required"}
        404: {"success": false, "error": "not_found", "message": "Hashtag not found for this slug"}
        409: {"success": false, "error": "conflict", "message": "...", "details": {...}}
        500: {"success": false, "error": "storage_error", "message": "Failed to fetch hashtags"}
    """

    success: bool = False
    error: str = Field(
        ...,
        description="Error code string",
        examples=["validation_failed", "not_found", "conflict", "storage_error"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional additional error details",
    )
