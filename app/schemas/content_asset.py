"""
Pydantic schemas for content asset request/response validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.models.content_asset import ContentAssetType


class ContentAssetCreate(BaseModel):
    """Schema for creating a content asset."""

    title: str = Field(..., min_length=1, max_length=200)
    type: ContentAssetType
    slug: str | None = Field(
        default=None,
        max_length=100,
        description="Kebab-case or stats.camelCase; derived from the title when omitted",
        examples=["partner-logo", "stats.totalFans"],
    )
    description: str | None = Field(default=None, max_length=500)
    content: dict[str, Any] = Field(
        default_factory=dict,
        description='{"url": ...} for images, {"text": ...} for text blocks',
    )
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_variable: bool = Field(default=False, alias="isVariable")

    model_config = ConfigDict(populate_by_name=True)


class ContentAssetUpdate(BaseModel):
    """Schema for updating a content asset. Omitted fields are left unchanged."""

    slug: str | None = Field(default=None, max_length=100)
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    type: ContentAssetType | None = None
    content: dict[str, Any] | None = None
    category: str | None = None
    tags: list[str] | None = None


class ContentAssetItem(BaseModel):
    """Response schema for a single content asset."""

    id: str
    slug: str
    token: str
    title: str
    description: str | None = None
    type: ContentAssetType
    content: Any = None
    category: str
    tags: Any = None
    is_variable: bool = Field(alias="isVariable")
    usage_count: int = Field(alias="usageCount")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ContentAssetResponse(BaseModel):
    success: bool = True
    asset: ContentAssetItem


class ContentAssetListResponse(BaseModel):
    success: bool = True
    assets: list[ContentAssetItem]
    total: int


class ChartReferenceItem(BaseModel):
    chart_id: str = Field(alias="chartId")
    title: str
    type: str
    element_index: int = Field(alias="elementIndex")

    model_config = ConfigDict(populate_by_name=True)


class AssetUsageResponse(BaseModel):
    """Response schema for the reference usage query."""

    success: bool = True
    slug: str
    usage_count: int = Field(alias="usageCount")
    charts: list[ChartReferenceItem]

    model_config = ConfigDict(populate_by_name=True)


class ContentAssetDeleteResponse(BaseModel):
    success: bool = True
    slug: str
    forced: bool
    usage_count: int = Field(alias="usageCount")

    model_config = ConfigDict(populate_by_name=True)
