"""
Business logic services for the dashboard API.
Services handle core operations separate from API endpoints.
"""

from app.services.content_asset_service import ContentAssetService
from app.services.hashtag_color_service import HashtagCategoryService, HashtagColorService
from app.services.hashtag_service import HashtagService
from app.services.hashtag_usage import HashtagUsageAggregator
from app.services.reference_scanner import ReferenceScanner
from app.services.slug_registry import SlugRegistry

__all__ = [
    "HashtagService",
    "HashtagUsageAggregator",
    "SlugRegistry",
    "ReferenceScanner",
    "HashtagColorService",
    "HashtagCategoryService",
    "ContentAssetService",
]
