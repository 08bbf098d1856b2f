"""
Hashtag service - Business logic for hashtag operations.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Sequence

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConflictException,
    NotFoundException,
    StorageException,
    ValidationException,
)
from app.core.timestamps import utc_now_iso
from app.db.upsert import insert_if_absent
from app.models.hashtag import FilterSlug, HashtagColor, HashtagSlug
from app.models.project import Partner, Project
from app.services.hashtag_normalizer import (
    CATEGORY_SEPARATOR,
    get_all_representations,
    matches_hashtag,
    normalize_hashtag,
    remove_hashtag,
)
from app.services.hashtag_usage import HashtagUsageAggregator, sort_usage
from app.services.slug_registry import SlugRegistry, generate_slug

logger = logging.getLogger(__name__)

HASHTAG_PATTERN = re.compile(r"^[a-z0-9_]+$")
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


@dataclass
class HashtagUsage:
    hashtag: str
    slug: str
    count: int


@dataclass
class HashtagUsagePage:
    """One page of the hashtag usage listing."""

    items: list[HashtagUsage]
    limit: int
    offset: int
    total_matched: int
    projects_scanned: int
    distinct_hashtags: int

    @property
    def next_offset(self) -> int | None:
        end = self.offset + len(self.items)
        return end if end < self.total_matched else None


@dataclass
class CascadeResult:
    """Per-collection counts of a cascade hashtag delete."""

    projects_cleaned: int = 0
    partners_cleaned: int = 0
    hashtag_colors_deleted: int = 0
    hashtag_slugs_deleted: int = 0


@dataclass
class HashtagReport:
    """Projects carrying a hashtag (or hashtag combination) and their summed stats."""

    hashtags: list[str]
    projects: list[Project] = field(default_factory=list)
    stats: dict[str, float] = field(default_factory=dict)

    @property
    def oldest_date(self) -> str | None:
        return min((p.event_date for p in self.projects), default=None)

    @property
    def newest_date(self) -> str | None:
        return max((p.event_date for p in self.projects), default=None)


def validate_hashtag(raw: Any) -> str:
    """
    Clean a user-entered hashtag.

    Raises:
        ValidationException: If empty or not made of letters, digits and underscores
    """
    if not isinstance(raw, str):
        raise ValidationException("Valid hashtag is required")
    hashtag = normalize_hashtag(raw)
    if not hashtag:
        raise ValidationException("Hashtag cannot be empty")
    if not HASHTAG_PATTERN.match(hashtag):
        raise ValidationException("Hashtag can only contain letters, numbers, and underscores")
    return hashtag


def sum_stats(projects: Sequence[Project]) -> dict[str, float]:
    """Sum every numeric stat across projects; non-numeric values are ignored."""
    totals: dict[str, float] = {}
    for project in projects:
        stats = project.stats if isinstance(project.stats, dict) else {}
        for key, value in stats.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                totals[key] = totals.get(key, 0) + value
    return totals


class HashtagService:
    """Service class for hashtag operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.registry = SlugRegistry(db)

    async def list_usage(
        self,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> HashtagUsagePage:
        """
        List hashtag representations by usage with their slugs.

        Every representation found by the scan gets a slug, including those
        outside the requested page, so links stay resolvable.

        Args:
            search: Case-insensitive substring filter on the hashtag
            limit: Page size
            offset: Number of items to skip

        Returns:
            HashtagUsagePage sorted by count desc, hashtag asc
        """
        scan = await HashtagUsageAggregator(self.db).scan()
        slugs = await self.registry.resolve_all(scan.counts.keys())

        ordered = sort_usage(scan.counts)
        if search:
            needle = search.strip().casefold()
            ordered = [(tag, count) for tag, count in ordered if needle in tag]

        items = [
            HashtagUsage(hashtag=tag, slug=slugs[tag], count=count)
            for tag, count in ordered[offset:offset + limit]
        ]
        return HashtagUsagePage(
            items=items,
            limit=limit,
            offset=offset,
            total_matched=len(ordered),
            projects_scanned=scan.documents_scanned,
            distinct_hashtags=len(scan.counts),
        )

    async def _load_projects(self) -> Sequence[Project]:
        try:
            result = await self.db.execute(select(Project))
        except SQLAlchemyError as e:
            raise StorageException("Failed to fetch projects") from e
        return result.scalars().all()

    async def _load_partners(self) -> Sequence[Partner]:
        try:
            result = await self.db.execute(select(Partner))
        except SQLAlchemyError as e:
            raise StorageException("Failed to fetch partners") from e
        return result.scalars().all()

    async def delete(self, raw_hashtag: str, cascade: bool = False) -> CascadeResult | None:
        """
        Delete a hashtag.

        Without ``cascade`` this only verifies that no project or partner
        still carries the hashtag. With ``cascade`` the hashtag is removed
        from every project and partner (flat list and all categories), and
        its color and slug registry entries (bare and every
        ``category:hashtag`` composite) are deleted.

        Raises:
            ValidationException: If the hashtag is blank
            ConflictException: If not cascading and the hashtag is in use
        """
        hashtag = normalize_hashtag(raw_hashtag)
        if not hashtag:
            raise ValidationException("Hashtag parameter is required")

        projects = await self._load_projects()
        partners = await self._load_partners()

        if not cascade:
            for label, documents in (("projects", projects), ("partners", partners)):
                in_use = sum(
                    1 for doc in documents
                    if hashtag in get_all_representations(doc.hashtags, doc.categorized_hashtags)
                )
                if in_use:
                    raise ConflictException(
                        f"Cannot delete hashtag that is still in use by {label}",
                        details={"hashtag": hashtag, label: in_use},
                    )
            return None

        result = CascadeResult()
        for doc in (*projects, *partners):
            flat, categorized, changed = remove_hashtag(doc.hashtags, doc.categorized_hashtags, hashtag)
            if changed:
                doc.hashtags = flat
                doc.categorized_hashtags = categorized
                if isinstance(doc, Project):
                    result.projects_cleaned += 1
                else:
                    result.partners_cleaned += 1

        try:
            await self.db.flush()
            colors = await self.db.execute(
                delete(HashtagColor)
                .where(HashtagColor.name == hashtag)
                .execution_options(synchronize_session=False)
            )
            slugs = await self.db.execute(
                delete(HashtagSlug).where(
                    or_(
                        HashtagSlug.hashtag == hashtag,
                        HashtagSlug.hashtag.endswith(f"{CATEGORY_SEPARATOR}{hashtag}", autoescape=True),
                    )
                ).execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise StorageException("Failed to cleanup hashtag") from e

        result.hashtag_colors_deleted = colors.rowcount
        result.hashtag_slugs_deleted = slugs.rowcount
        logger.info(
            "Cascade-deleted hashtag '%s': %d projects, %d partners, %d slugs",
            hashtag,
            result.projects_cleaned,
            result.partners_cleaned,
            result.hashtag_slugs_deleted,
        )
        return result

    async def _report(self, hashtags: list[str]) -> HashtagReport:
        projects = await self._load_projects()
        matched = [
            project for project in projects
            if all(
                matches_hashtag(project.hashtags, project.categorized_hashtags, tag)
                for tag in hashtags
            )
        ]
        matched.sort(key=lambda p: p.event_date, reverse=True)
        return HashtagReport(hashtags=hashtags, projects=matched, stats=sum_stats(matched))

    async def get_report(self, hashtag_or_slug: str) -> tuple[HashtagReport, bool]:
        """
        Aggregated stats for one hashtag, addressed by name or by slug.

        Returns:
            Tuple of (report, whether the input was a slug)

        Raises:
            NotFoundException: If the slug is unknown or no project matches
        """
        is_slug = bool(UUID_PATTERN.match(hashtag_or_slug))
        if is_slug:
            hashtag = await self.registry.find_hashtag(hashtag_or_slug.lower())
            if hashtag is None:
                raise NotFoundException("Hashtag not found for this slug")
        else:
            hashtag = normalize_hashtag(hashtag_or_slug)
            if not hashtag:
                raise ValidationException("Hashtag is required")

        report = await self._report([hashtag])
        if not report.projects:
            raise NotFoundException(
                "No projects found with this hashtag",
                details={"hashtag": hashtag},
            )
        return report, is_slug

    async def create_filter(self, raw_hashtags: list[Any]) -> str:
        """
        Save a hashtag combination and return its slug.

        The combination is normalized and sorted, so the same set of
        hashtags in any order and case maps to the same slug.
        """
        hashtags = sorted({tag for tag in map(normalize_hashtag, raw_hashtags) if tag})
        if not hashtags:
            raise ValidationException("No valid hashtags provided")
        combination = ",".join(hashtags)
        now = utc_now_iso()

        try:
            await self.db.execute(
                insert_if_absent(
                    self.db,
                    FilterSlug,
                    [{
                        "slug": generate_slug(),
                        "combination": combination,
                        "hashtags": hashtags,
                        "created_at": now,
                        "last_accessed": now,
                    }],
                    FilterSlug.combination,
                )
            )
            await self.db.execute(
                update(FilterSlug)
                .where(FilterSlug.combination == combination)
                .values(last_accessed=now)
            )
            result = await self.db.execute(
                select(FilterSlug.slug).where(FilterSlug.combination == combination)
            )
        except SQLAlchemyError as e:
            raise StorageException("Failed to save hashtag filter") from e
        return result.scalar_one()

    async def get_filter(self, slug: str) -> HashtagReport:
        """
        Projects matching all hashtags of a saved filter.

        A filter with no matching projects is a valid, empty report.

        Raises:
            NotFoundException: If the filter slug is unknown
        """
        try:
            result = await self.db.execute(select(FilterSlug).where(FilterSlug.slug == slug))
        except SQLAlchemyError as e:
            raise StorageException("Failed to fetch hashtag filter") from e
        saved = result.scalar_one_or_none()
        if saved is None:
            raise NotFoundException("Filter not found for this slug")

        saved.last_accessed = utc_now_iso()
        return await self._report(list(saved.hashtags))
