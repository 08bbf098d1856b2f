"""
Content asset service - CRUD for images and text blocks referenced from
chart formulas, with reference checks before destructive changes.
"""

import logging
import re
from typing import Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException, NotFoundException, ValidationException
from app.models.content_asset import ContentAsset, ContentAssetType
from app.schemas.content_asset import ContentAssetCreate, ContentAssetUpdate
from app.services.reference_scanner import ReferenceScanner, ReferenceUsage

logger = logging.getLogger(__name__)

KEBAB_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
STATS_SLUG_PATTERN = re.compile(r"^stats\.[a-zA-Z][a-zA-Z0-9]*$")

SORT_FIELDS = {
    "title": ContentAsset.title,
    "createdAt": ContentAsset.created_at,
    "usageCount": ContentAsset.usage_count,
}


def slugify_title(title: str) -> str:
    """
    URL-safe slug from a display title.

    Example:
        >>> slugify_title("Q4 2024 Summary!")
        'q4-2024-summary'
    """
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower().strip())
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug).strip("-")


def is_valid_asset_slug(slug: str) -> bool:
    return bool(KEBAB_SLUG_PATTERN.match(slug) or STATS_SLUG_PATTERN.match(slug))


class ContentAssetService:
    """Service class for content asset operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_slug(self, slug: str) -> ContentAsset:
        result = await self.db.execute(select(ContentAsset).where(ContentAsset.slug == slug))
        asset = result.scalar_one_or_none()
        if asset is None:
            raise NotFoundException(f"Content asset '{slug}' not found")
        return asset

    async def list(
        self,
        asset_type: ContentAssetType | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
        search: str | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Sequence[ContentAsset]:
        """
        List assets with optional filters.

        Tag filtering is an OR over the given tags and is applied in Python,
        since tags are stored as a JSON list.
        """
        query = select(ContentAsset)
        if asset_type:
            query = query.where(ContentAsset.type == asset_type)
        if category:
            query = query.where(ContentAsset.category == category)
        if search:
            term = f"%{search}%"
            query = query.where(
                or_(ContentAsset.title.ilike(term), ContentAsset.description.ilike(term))
            )

        column = SORT_FIELDS.get(sort_by, ContentAsset.created_at)
        query = query.order_by(column.asc() if sort_order == "asc" else column.desc())

        result = await self.db.execute(query)
        assets = result.scalars().all()
        if tags:
            wanted = set(tags)
            assets = [a for a in assets if wanted & set(a.tags or [])]
        return assets

    async def create(self, data: ContentAssetCreate) -> ContentAsset:
        """
        Create an asset; the slug is derived from the title when omitted.

        Raises:
            ValidationException: On a bad slug or missing global content
            ConflictException: If the slug is taken
        """
        if not data.is_variable:
            if data.type == ContentAssetType.IMAGE and not data.content.get("url"):
                raise ValidationException("Global image assets require content.url")
            if data.type == ContentAssetType.TEXT and not data.content.get("text"):
                raise ValidationException("Global text assets require content.text")

        slug = data.slug or slugify_title(data.title)
        if not is_valid_asset_slug(slug):
            raise ValidationException(
                f'Invalid slug format: "{slug}". Must be lowercase alphanumeric with hyphens only.'
            )

        existing = await self.db.execute(select(ContentAsset.id).where(ContentAsset.slug == slug))
        if existing.scalar_one_or_none() is not None:
            raise ConflictException(
                f'Slug "{slug}" already exists. Please choose a different title or slug.'
            )

        asset = ContentAsset(
            slug=slug,
            title=data.title,
            description=data.description,
            type=data.type,
            content=data.content,
            category=data.category or "Uncategorized",
            tags=data.tags,
            is_variable=data.is_variable,
            usage_count=0,
        )
        self.db.add(asset)
        await self.db.flush()
        logger.info("Created content asset: %s (%s)", slug, data.type.value)
        return asset

    async def update(self, slug: str, data: ContentAssetUpdate) -> ContentAsset:
        """
        Update asset fields.

        Renaming the slug of a referenced asset would leave dangling tokens
        in chart formulas, so it is refused while references exist.
        """
        asset = await self.get_by_slug(slug)

        if data.slug and data.slug != asset.slug:
            if not is_valid_asset_slug(data.slug):
                raise ValidationException(
                    f'Invalid slug format: "{data.slug}". Must be lowercase alphanumeric with hyphens only.'
                )
            duplicate = await self.db.execute(
                select(ContentAsset.id).where(ContentAsset.slug == data.slug)
            )
            if duplicate.scalar_one_or_none() is not None:
                raise ConflictException(f'Slug "{data.slug}" already exists. Choose a different slug.')
            usage = await ReferenceScanner(self.db).scan(asset.slug)
            if usage.is_referenced:
                raise ConflictException(
                    f'Cannot rename "{asset.slug}": referenced by {usage.usage_count} chart element(s)',
                    details={"charts": [c.to_dict() for c in usage.charts]},
                )
            asset.slug = data.slug

        for field_name in ("title", "description", "type", "content", "category", "tags"):
            value = getattr(data, field_name)
            if value is not None:
                setattr(asset, field_name, value)

        await self.db.flush()
        return asset

    async def usage(self, slug: str) -> ReferenceUsage:
        """
        Scan charts for references to a slug and refresh the stored usage count.

        The slug does not need to belong to an existing asset; an unknown
        slug simply has no references.
        """
        usage = await ReferenceScanner(self.db).scan(slug)
        result = await self.db.execute(select(ContentAsset).where(ContentAsset.slug == slug))
        asset = result.scalar_one_or_none()
        if asset is not None and asset.usage_count != usage.usage_count:
            asset.usage_count = usage.usage_count
            await self.db.flush()
        return usage

    async def delete(self, slug: str, force: bool = False) -> ReferenceUsage:
        """
        Delete an asset unless chart elements still reference it.

        Raises:
            NotFoundException: If the asset does not exist
            ConflictException: If referenced and ``force`` is not set
        """
        asset = await self.get_by_slug(slug)
        usage = await ReferenceScanner(self.db).scan(slug)
        if usage.is_referenced and not force:
            raise ConflictException(
                f'Cannot delete asset "{asset.title}": currently used in '
                f"{usage.usage_count} chart element(s). Use force=true to delete anyway.",
                details={"usageCount": usage.usage_count, "charts": [c.to_dict() for c in usage.charts]},
            )

        await self.db.delete(asset)
        await self.db.flush()
        if usage.is_referenced:
            logger.warning(
                "Force-deleted content asset '%s' with %d live references", slug, usage.usage_count
            )
        return usage
