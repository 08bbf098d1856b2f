"""
Hashtag color endpoints.
"""

from fastapi import APIRouter, Query

from app.auth.dependencies import RequireHashtagWrite
from app.dependencies import DbSession
from app.schemas.hashtag import (
    HashtagColorItem,
    HashtagColorListResponse,
    HashtagColorRequest,
    HashtagColorResponse,
    HashtagColorUpdateRequest,
)
from app.services.hashtag_color_service import HashtagColorService

router = APIRouter()


@router.get("", response_model=HashtagColorListResponse)
async def list_hashtag_colors(db: DbSession):
    colors = await HashtagColorService(db).list_all()
    return HashtagColorListResponse(
        hashtagColors=[HashtagColorItem.model_validate(color) for color in colors]
    )


@router.post("", response_model=HashtagColorResponse, status_code=201)
async def create_hashtag_color(
    db: DbSession,
    user: RequireHashtagWrite,
    payload: HashtagColorRequest,
):
    """Assign a color to a hashtag. 409 if it already has one."""
    color = await HashtagColorService(db).create(payload.name, payload.color)
    return HashtagColorResponse(hashtagColor=HashtagColorItem.model_validate(color))


@router.put("", response_model=HashtagColorResponse)
async def update_hashtag_color(
    db: DbSession,
    user: RequireHashtagWrite,
    payload: HashtagColorUpdateRequest,
    name: str = Query(..., description="Hashtag whose color changes"),
):
    color = await HashtagColorService(db).update(name, payload.color)
    return HashtagColorResponse(hashtagColor=HashtagColorItem.model_validate(color))


@router.delete("")
async def delete_hashtag_color(
    db: DbSession,
    user: RequireHashtagWrite,
    name: str = Query(..., description="Hashtag whose color is removed"),
):
    await HashtagColorService(db).delete(name)
    return {"success": True, "message": "Hashtag color deleted successfully"}
