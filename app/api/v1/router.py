"""
API v1 Router - Aggregates all v1 endpoints.
Base Path: /api/v1
"""

from fastapi import APIRouter

from app.api.v1 import content_assets, hashtag_categories, hashtag_colors, hashtags, health

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(hashtags.router, prefix="/hashtags", tags=["hashtags"])
api_router.include_router(hashtag_colors.router, prefix="/hashtag-colors", tags=["hashtag-colors"])
api_router.include_router(
    hashtag_categories.router, prefix="/hashtag-categories", tags=["hashtag-categories"]
)
api_router.include_router(content_assets.router, prefix="/content-assets", tags=["content-assets"])
