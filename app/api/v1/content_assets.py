"""
Content asset endpoints.

Assets are looked up by slug, the same key chart formulas use in their
``[MEDIA:slug]`` and ``[TEXT:slug]`` tokens.
"""

from fastapi import APIRouter, Query

from app.auth.dependencies import RequireContentWrite
from app.core.exceptions import ValidationException
from app.dependencies import DbSession
from app.models.content_asset import ContentAsset, ContentAssetType
from app.schemas.content_asset import (
    AssetUsageResponse,
    ChartReferenceItem,
    ContentAssetCreate,
    ContentAssetDeleteResponse,
    ContentAssetItem,
    ContentAssetListResponse,
    ContentAssetResponse,
    ContentAssetUpdate,
)
from app.services.content_asset_service import ContentAssetService
from app.services.reference_scanner import format_asset_token

router = APIRouter()


def _asset_to_item(asset: ContentAsset) -> ContentAssetItem:
    return ContentAssetItem(
        id=asset.id,
        slug=asset.slug,
        token=format_asset_token(asset.type.value, asset.slug),
        title=asset.title,
        description=asset.description,
        type=asset.type,
        content=asset.content,
        category=asset.category,
        tags=asset.tags,
        isVariable=asset.is_variable,
        usageCount=asset.usage_count,
        createdAt=asset.created_at,
        updatedAt=asset.updated_at,
    )


@router.get("/usage", response_model=AssetUsageResponse)
async def get_asset_usage(
    db: DbSession,
    slug: str | None = Query(default=None, description="Asset slug to look up"),
):
    """
    Chart elements whose formula references the asset.

    A slug nothing references answers ``usageCount: 0``. When the slug
    belongs to a stored asset, its ``usageCount`` field is updated to the
    count found here.
    """
    if slug is None or not slug.strip():
        raise ValidationException("Slug parameter is required")

    usage = await ContentAssetService(db).usage(slug.strip())
    return AssetUsageResponse(
        slug=usage.slug,
        usageCount=usage.usage_count,
        charts=[ChartReferenceItem(**reference.to_dict()) for reference in usage.charts],
    )


@router.get("", response_model=ContentAssetListResponse)
async def list_content_assets(
    db: DbSession,
    type: ContentAssetType | None = Query(default=None, description="Filter by asset type"),
    category: str | None = Query(default=None),
    tags: str | None = Query(default=None, description="Comma-separated; matches any"),
    search: str | None = Query(default=None, description="Search title and description"),
    sort_by: str = Query(default="createdAt", alias="sortBy", pattern="^(title|createdAt|usageCount)$"),
    sort_order: str = Query(default="desc", alias="sortOrder", pattern="^(asc|desc)$"),
):
    """List content assets."""
    tag_list = [tag.strip() for tag in tags.split(",") if tag.strip()] if tags else None
    assets = await ContentAssetService(db).list(
        asset_type=type,
        category=category,
        tags=tag_list,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ContentAssetListResponse(
        assets=[_asset_to_item(asset) for asset in assets],
        total=len(assets),
    )


@router.post("", response_model=ContentAssetResponse, status_code=201)
async def create_content_asset(
    db: DbSession,
    user: RequireContentWrite,
    payload: ContentAssetCreate,
):
    """Create an image or text asset."""
    asset = await ContentAssetService(db).create(payload)
    return ContentAssetResponse(asset=_asset_to_item(asset))


@router.get("/{slug}", response_model=ContentAssetResponse)
async def get_content_asset(db: DbSession, slug: str):
    asset = await ContentAssetService(db).get_by_slug(slug)
    return ContentAssetResponse(asset=_asset_to_item(asset))


@router.put("/{slug}", response_model=ContentAssetResponse)
async def update_content_asset(
    db: DbSession,
    user: RequireContentWrite,
    slug: str,
    payload: ContentAssetUpdate,
):
    """Update an asset; renaming a referenced slug is refused with 409."""
    asset = await ContentAssetService(db).update(slug, payload)
    return ContentAssetResponse(asset=_asset_to_item(asset))


@router.delete("/{slug}", response_model=ContentAssetDeleteResponse)
async def delete_content_asset(
    db: DbSession,
    user: RequireContentWrite,
    slug: str,
    force: bool = Query(default=False, description="Delete even if charts reference it"),
):
    """
    Delete an asset.

    Answers 409 with the referencing chart elements when the asset is still
    in use, unless ``force=true``.
    """
    usage = await ContentAssetService(db).delete(slug, force=force)
    return ContentAssetDeleteResponse(
        slug=slug,
        forced=usage.is_referenced,
        usageCount=usage.usage_count,
    )
