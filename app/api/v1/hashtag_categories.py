"""
Hashtag category endpoints.
"""

from fastapi import APIRouter

from app.auth.dependencies import RequireHashtagWrite
from app.dependencies import DbSession
from app.schemas.hashtag import (
    HashtagCategoryItem,
    HashtagCategoryListResponse,
    HashtagCategoryRequest,
    HashtagCategoryResponse,
)
from app.services.hashtag_color_service import HashtagCategoryService

router = APIRouter()


@router.get("", response_model=HashtagCategoryListResponse)
async def list_hashtag_categories(db: DbSession):
    """Categories in display order."""
    categories = await HashtagCategoryService(db).list_all()
    return HashtagCategoryListResponse(
        categories=[HashtagCategoryItem.model_validate(category) for category in categories]
    )


@router.post("", response_model=HashtagCategoryResponse, status_code=201)
async def create_hashtag_category(
    db: DbSession,
    user: RequireHashtagWrite,
    payload: HashtagCategoryRequest,
):
    category = await HashtagCategoryService(db).create(payload.name, payload.color, payload.order)
    return HashtagCategoryResponse(category=HashtagCategoryItem.model_validate(category))
