"""
Hashtag endpoints: usage listing, validation, delete, reports and saved filters.
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Query

from app.auth.dependencies import RequireHashtagWrite
from app.config import get_settings
from app.core.exceptions import ValidationException
from app.dependencies import AppSettings, DbSession
from app.schemas.hashtag import (
    AggregatedProject,
    CascadeDeleteResponse,
    FilterCreateRequest,
    FilterCreateResponse,
    FilterReportResponse,
    HashtagReportResponse,
    HashtagUsageItem,
    HashtagUsageResponse,
    HashtagValidateRequest,
    HashtagValidateResponse,
    Pagination,
    ProjectSummary,
)
from app.services.hashtag_normalizer import normalize_hashtag
from app.services.hashtag_service import HashtagReport, HashtagService, validate_hashtag

router = APIRouter()
settings = get_settings()


def _aggregate(report: HashtagReport, event_name: str) -> AggregatedProject:
    return AggregatedProject(
        eventName=event_name,
        hashtags=report.hashtags,
        stats=report.stats,
        projectCount=len(report.projects),
        dateRange={"oldest": report.oldest_date, "newest": report.newest_date},
    )


def _dump(response: HashtagUsageResponse | HashtagReportResponse) -> dict[str, Any]:
    """Serialize by alias; the debug block is omitted unless it was filled in."""
    return response.model_dump(by_alias=True, exclude={"debug"} if response.debug is None else None)


def _project_summaries(report: HashtagReport) -> list[ProjectSummary]:
    return [ProjectSummary.model_validate(project) for project in report.projects]


@router.get("", responses={200: {"model": HashtagUsageResponse}})
async def list_hashtags(
    db: DbSession,
    app_settings: AppSettings,
    search: str | None = Query(default=None, description="Substring filter on the hashtag"),
    limit: int = Query(
        default=settings.HASHTAG_PAGE_DEFAULT,
        ge=1,
        le=settings.HASHTAG_PAGE_MAX,
        description="Page size",
    ),
    offset: int = Query(default=0, ge=0, description="Number of items to skip"),
):
    """
    List hashtags by usage with their stable slugs.

    Bare tags and ``category:tag`` composites are listed separately. Each
    project counts once per representation.
    """
    service = HashtagService(db)
    page = await service.list_usage(search=search, limit=limit, offset=offset)

    debug: dict[str, Any] | None = None
    if app_settings.DEBUG:
        debug = {
            "projectsScanned": page.projects_scanned,
            "distinctHashtags": page.distinct_hashtags,
        }

    response = HashtagUsageResponse(
        hashtags=[
            HashtagUsageItem(hashtag=item.hashtag, slug=item.slug, count=item.count)
            for item in page.items
        ],
        pagination=Pagination(
            limit=page.limit,
            offset=page.offset,
            nextOffset=page.next_offset,
            totalMatched=page.total_matched,
        ),
        debug=debug,
    )
    return _dump(response)


@router.post("", response_model=HashtagValidateResponse)
async def validate_hashtag_input(payload: HashtagValidateRequest):
    """Validate and clean a hashtag before it is attached to a project."""
    return HashtagValidateResponse(hashtag=validate_hashtag(payload.hashtag))


@router.delete("", response_model=CascadeDeleteResponse)
async def delete_hashtag(
    db: DbSession,
    user: RequireHashtagWrite,
    hashtag: str = Query(default="", description="Hashtag to delete"),
    mode: str | None = Query(default=None, description="'cascade' removes it everywhere"),
):
    """
    Delete a hashtag.

    Without ``mode=cascade`` this is a check that the hashtag is no longer
    used; it answers 409 otherwise.
    """
    if mode not in (None, "", "cascade"):
        raise ValidationException("mode must be 'cascade' or omitted")

    service = HashtagService(db)
    cascade = mode == "cascade"
    result = await service.delete(hashtag, cascade=cascade)

    return CascadeDeleteResponse(
        hashtag=normalize_hashtag(hashtag),
        mode="cascade" if cascade else "verify",
        **(asdict(result) if result is not None else {}),
    )


@router.post("/filters", response_model=FilterCreateResponse)
async def create_filter(db: DbSession, payload: FilterCreateRequest):
    """Save a hashtag combination and get a shareable slug for it."""
    service = HashtagService(db)
    slug = await service.create_filter(payload.hashtags)
    report = await service.get_filter(slug)
    return FilterCreateResponse(slug=slug, hashtags=report.hashtags)


@router.get("/filters/{slug}", response_model=FilterReportResponse)
async def get_filter(db: DbSession, slug: str):
    """Projects carrying every hashtag of a saved filter, with summed stats."""
    service = HashtagService(db)
    report = await service.get_filter(slug)
    return FilterReportResponse(
        slug=slug,
        hashtags=report.hashtags,
        project=_aggregate(report, " + ".join(f"#{tag}" for tag in report.hashtags)),
        projects=_project_summaries(report),
    )


@router.get("/{hashtag_or_slug}", responses={200: {"model": HashtagReportResponse}})
async def get_hashtag_report(db: DbSession, app_settings: AppSettings, hashtag_or_slug: str):
    """
    Aggregated stats for one hashtag.

    The path parameter is either a slug issued by the listing or a hashtag
    (``tag`` or ``category:tag``) typed directly.
    """
    service = HashtagService(db)
    report, is_slug = await service.get_report(hashtag_or_slug)
    hashtag = report.hashtags[0]

    debug: dict[str, Any] | None = None
    if app_settings.DEBUG:
        debug = {
            "requested": hashtag_or_slug,
            "resolvedHashtag": hashtag,
            "isSlug": is_slug,
            "projectCount": len(report.projects),
        }

    response = HashtagReportResponse(
        project=_aggregate(report, f"#{hashtag}"),
        projects=_project_summaries(report),
        debug=debug,
    )
    return _dump(response)
