"""
Pydantic schemas for hashtag request/response validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HashtagUsageItem(BaseModel):
    """One hashtag representation with its slug and document count."""

    hashtag: str
    slug: str
    count: int


class Pagination(BaseModel):
    """Offset pagination block of the usage listing."""

    mode: str = "aggregation"
    limit: int
    offset: int
    next_offset: int | None = Field(alias="nextOffset")
    total_matched: int = Field(alias="totalMatched")

    model_config = ConfigDict(populate_by_name=True)


class HashtagUsageResponse(BaseModel):
    """Response schema for ``GET /hashtags``."""

    success: bool = True
    hashtags: list[HashtagUsageItem]
    pagination: Pagination
    debug: dict[str, Any] | None = None


class HashtagValidateRequest(BaseModel):
    hashtag: Any = None


class HashtagValidateResponse(BaseModel):
    success: bool = True
    hashtag: str


class CascadeDeleteResponse(BaseModel):
    """Counts of documents and registry rows touched by a hashtag delete."""

    success: bool = True
    hashtag: str
    mode: str
    projects_cleaned: int = Field(default=0, alias="projectsCleaned")
    partners_cleaned: int = Field(default=0, alias="partnersCleaned")
    hashtag_colors_deleted: int = Field(default=0, alias="hashtagColorsDeleted")
    hashtag_slugs_deleted: int = Field(default=0, alias="hashtagSlugsDeleted")

    model_config = ConfigDict(populate_by_name=True)


class ProjectSummary(BaseModel):
    """Project row as listed in hashtag reports."""

    id: str
    event_name: str = Field(alias="eventName")
    event_date: str = Field(alias="eventDate")
    hashtags: Any = None
    categorized_hashtags: Any = Field(default=None, alias="categorizedHashtags")
    stats: Any = None
    view_slug: str | None = Field(default=None, alias="viewSlug")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class AggregatedProject(BaseModel):
    """Synthetic project summing the stats of every matching project."""

    event_name: str = Field(alias="eventName")
    hashtags: list[str]
    stats: dict[str, float]
    project_count: int = Field(alias="projectCount")
    date_range: dict[str, str | None] = Field(alias="dateRange")

    model_config = ConfigDict(populate_by_name=True)


class HashtagReportResponse(BaseModel):
    success: bool = True
    project: AggregatedProject
    projects: list[ProjectSummary]
    debug: dict[str, Any] | None = None


class FilterCreateRequest(BaseModel):
    hashtags: list[Any] = Field(..., min_length=1)


class FilterCreateResponse(BaseModel):
    success: bool = True
    slug: str
    hashtags: list[str]


class FilterReportResponse(BaseModel):
    success: bool = True
    slug: str
    hashtags: list[str]
    project: AggregatedProject
    projects: list[ProjectSummary]


class HashtagColorRequest(BaseModel):
    name: str = ""
    color: str = ""


class HashtagColorUpdateRequest(BaseModel):
    color: str


class HashtagColorItem(BaseModel):
    """Response schema for a single hashtag color."""

    id: str
    name: str
    color: str
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class HashtagColorListResponse(BaseModel):
    success: bool = True
    hashtag_colors: list[HashtagColorItem] = Field(alias="hashtagColors")

    model_config = ConfigDict(populate_by_name=True)


class HashtagColorResponse(BaseModel):
    success: bool = True
    hashtag_color: HashtagColorItem = Field(alias="hashtagColor")

    model_config = ConfigDict(populate_by_name=True)


class HashtagCategoryRequest(BaseModel):
    name: str = ""
    color: str = ""
    order: int | None = None


class HashtagCategoryItem(BaseModel):
    """Response schema for a single hashtag category."""

    id: str
    name: str
    color: str
    order: int
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class HashtagCategoryListResponse(BaseModel):
    success: bool = True
    categories: list[HashtagCategoryItem]


class HashtagCategoryResponse(BaseModel):
    success: bool = True
    category: HashtagCategoryItem
