"""Core utilities and exceptions for the dashboard API."""

from app.core.exceptions import (
    DashboardAPIException,
    ValidationException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    StorageException,
    UpstreamException,
)
from app.core.timestamps import utc_now_iso

__all__ = [
    "DashboardAPIException",
    "ValidationException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "StorageException",
    "UpstreamException",
    "utc_now_iso",
]
