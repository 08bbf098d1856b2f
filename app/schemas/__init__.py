"""
Pydantic schemas for request/response validation.
"""

from app.schemas.content_asset import (
    AssetUsageResponse,
    ContentAssetCreate,
    ContentAssetItem,
    ContentAssetListResponse,
    ContentAssetResponse,
    ContentAssetUpdate,
)
from app.schemas.error import ErrorResponse
from app.schemas.hashtag import (
    HashtagCategoryItem,
    HashtagColorItem,
    HashtagReportResponse,
    HashtagUsageItem,
    HashtagUsageResponse,
)

__all__ = [
    # Hashtag schemas
    "HashtagUsageItem",
    "HashtagUsageResponse",
    "HashtagReportResponse",
    "HashtagColorItem",
    "HashtagCategoryItem",
    # Content asset schemas
    "ContentAssetCreate",
    "ContentAssetUpdate",
    "ContentAssetItem",
    "ContentAssetResponse",
    "ContentAssetListResponse",
    "AssetUsageResponse",
    # Error schemas
    "ErrorResponse",
]
