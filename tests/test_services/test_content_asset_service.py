"""
Tests for content asset CRUD and reference-guarded deletes.
"""

import pytest
from sqlalchemy import select

from app.core.exceptions import ConflictException, NotFoundException, ValidationException
from app.models import ContentAsset, ContentAssetType
from app.schemas.content_asset import ContentAssetCreate, ContentAssetUpdate
from app.services.content_asset_service import (
    ContentAssetService,
    is_valid_asset_slug,
    slugify_title,
)


def _image(title: str = "Logo", slug: str | None = "logo", **overrides) -> ContentAssetCreate:
    data = {"title": title, "type": "image", "slug": slug, "content": {"url": "https://x/logo.png"}}
    data.update(overrides)
    return ContentAssetCreate(**data)


def test_slugify_title():
    assert slugify_title("  Q4 2024   Summary! ") == "q4-2024-summary"
    assert slugify_title("Hello -- World") == "hello-world"


@pytest.mark.parametrize("slug", ["logo", "logo-2024", "stats.totalFans"])
def test_valid_asset_slugs(slug):
    assert is_valid_asset_slug(slug)


@pytest.mark.parametrize("slug", ["", "Logo", "logo_2024", "-logo", "logo-", "stats.", "stats.1x"])
def test_invalid_asset_slugs(slug):
    assert not is_valid_asset_slug(slug)


@pytest.mark.asyncio
async def test_create_derives_slug_from_title(db_session):
    asset = await ContentAssetService(db_session).create(_image(title="Partner Logo", slug=None))

    assert asset.slug == "partner-logo"
    assert asset.type == ContentAssetType.IMAGE
    assert asset.category == "Uncategorized"
    assert asset.usage_count == 0


@pytest.mark.asyncio
async def test_create_requires_global_content(db_session):
    service = ContentAssetService(db_session)

    with pytest.raises(ValidationException):
        await service.create(_image(content={}))
    with pytest.raises(ValidationException):
        await service.create(ContentAssetCreate(title="Intro", type="text", content={}))

    variable = await service.create(ContentAssetCreate(title="Per Event", type="text", isVariable=True))
    assert variable.is_variable is True


@pytest.mark.asyncio
async def test_create_duplicate_slug(db_session):
    service = ContentAssetService(db_session)
    await service.create(_image())

    with pytest.raises(ConflictException):
        await service.create(_image(title="Another"))


@pytest.mark.asyncio
async def test_create_rejects_bad_slug(db_session):
    with pytest.raises(ValidationException):
        await ContentAssetService(db_session).create(_image(slug="Bad Slug"))


@pytest.mark.asyncio
async def test_list_filters(db_session):
    service = ContentAssetService(db_session)
    await service.create(_image(tags=["partner"]))
    await service.create(ContentAssetCreate(title="Intro", type="text", content={"text": "Hi"}, tags=["copy"]))

    assert [a.slug for a in await service.list(asset_type=ContentAssetType.TEXT)] == ["intro"]
    assert [a.slug for a in await service.list(tags=["partner", "nope"])] == ["logo"]
    assert [a.slug for a in await service.list(search="intr")] == ["intro"]
    assert [a.slug for a in await service.list(sort_by="title", sort_order="asc")] == ["intro", "logo"]


@pytest.mark.asyncio
async def test_update_fields(db_session):
    service = ContentAssetService(db_session)
    await service.create(_image())

    updated = await service.update("logo", ContentAssetUpdate(title="New Logo", tags=["a"]))

    assert updated.title == "New Logo"
    assert updated.tags == ["a"]
    assert updated.slug == "logo"


@pytest.mark.asyncio
async def test_rename_referenced_slug_refused(db_session, seed_charts):
    service = ContentAssetService(db_session)
    await service.create(_image())

    with pytest.raises(ConflictException):
        await service.update("logo", ContentAssetUpdate(slug="new-logo"))


@pytest.mark.asyncio
async def test_rename_unreferenced_slug(db_session, seed_charts):
    service = ContentAssetService(db_session)
    await service.create(_image(slug="banner"))

    renamed = await service.update("banner", ContentAssetUpdate(slug="top-banner"))

    assert renamed.slug == "top-banner"


@pytest.mark.asyncio
async def test_usage_refreshes_usage_count(db_session, seed_charts):
    service = ContentAssetService(db_session)
    asset = await service.create(_image())

    usage = await service.usage("logo")

    assert usage.usage_count == 3
    assert asset.usage_count == 3


@pytest.mark.asyncio
async def test_delete_referenced_requires_force(db_session, seed_charts):
    service = ContentAssetService(db_session)
    await service.create(_image())

    with pytest.raises(ConflictException) as exc_info:
        await service.delete("logo")
    assert exc_info.value.details["usageCount"] == 3

    usage = await service.delete("logo", force=True)
    assert usage.is_referenced
    remaining = (await db_session.execute(select(ContentAsset))).scalars().all()
    assert remaining == []


@pytest.mark.asyncio
async def test_delete_unreferenced_and_missing(db_session, seed_charts):
    service = ContentAssetService(db_session)
    await service.create(_image(slug="banner"))

    usage = await service.delete("banner")
    assert usage.usage_count == 0

    with pytest.raises(NotFoundException):
        await service.delete("banner")
