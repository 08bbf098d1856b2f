"""
SQLAlchemy ORM models for the dashboard API.
"""

from app.models.chart import ChartConfiguration
from app.models.content_asset import ContentAsset, ContentAssetType
from app.models.hashtag import FilterSlug, HashtagCategory, HashtagColor, HashtagSlug
from app.models.project import Partner, Project

__all__ = [
    "Project",
    "Partner",
    "HashtagSlug",
    "HashtagColor",
    "HashtagCategory",
    "FilterSlug",
    "ChartConfiguration",
    "ContentAsset",
    "ContentAssetType",
]
