"""
Slug registry - stable, random identifiers for canonical hashtags.

Hashtags have no primary key of their own, so shareable report links point
at a slug stored here instead. Slugs are random UUIDs, never derived from the
hashtag text, and are not rewritten once assigned.

New entries are written with the database's ``INSERT ... ON CONFLICT DO
NOTHING`` on the unique ``hashtag`` column and then read back. Two requests
resolving the same new hashtag at once therefore end up with one row and the
same slug; the loser of the race reads the winner's row.
"""

import logging
from collections.abc import Iterable
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageException, ValidationException
from app.core.timestamps import utc_now_iso
from app.db.upsert import insert_if_absent
from app.models.hashtag import HashtagSlug
from app.services.hashtag_normalizer import normalize_hashtag

logger = logging.getLogger(__name__)


def generate_slug() -> str:
    """New random slug (UUID4, 122 random bits)."""
    return str(uuid4())


class SlugRegistry:
    """Resolve canonical hashtags to their slugs, creating slugs on first sight."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert_if_absent(self, hashtags: Iterable[str]):
        now = utc_now_iso()
        rows = [
            {"hashtag": tag, "slug": generate_slug(), "created_at": now, "updated_at": now}
            for tag in hashtags
        ]
        return insert_if_absent(self.db, HashtagSlug, rows, HashtagSlug.hashtag)

    async def _lookup(self, hashtags: Iterable[str]) -> dict[str, str]:
        result = await self.db.execute(
            select(HashtagSlug.hashtag, HashtagSlug.slug).where(
                HashtagSlug.hashtag.in_(list(hashtags))
            )
        )
        return {hashtag: slug for hashtag, slug in result}

    @staticmethod
    def _canonical(hashtag: str) -> str:
        canonical = normalize_hashtag(hashtag)
        if not canonical:
            raise ValidationException("Hashtag cannot be empty")
        return canonical

    async def resolve(self, hashtag: str) -> str:
        """
        Get the slug of a hashtag, creating it if the hashtag is new.

        Args:
            hashtag: Hashtag or ``category:hashtag``; normalized before lookup

        Returns:
            The hashtag's slug (the same value on every call)

        Raises:
            ValidationException: If the hashtag is blank
            StorageException: If the registry cannot be read or written
        """
        return (await self.resolve_all([hashtag]))[self._canonical(hashtag)]

    async def resolve_all(self, hashtags: Iterable[str]) -> dict[str, str]:
        """
        Batch variant of :meth:`resolve`.

        One lookup for all hashtags, one insert-if-absent for the misses
        only, one read-back of the misses.

        Returns:
            Mapping of canonical hashtag -> slug
        """
        wanted = {self._canonical(tag) for tag in hashtags}
        if not wanted:
            return {}

        try:
            slugs = await self._lookup(wanted)
            missing = sorted(wanted - slugs.keys())
            if missing:
                await self.db.execute(self._insert_if_absent(missing))
                created = await self._lookup(missing)
                slugs.update(created)
                logger.info("Resolved slugs for %d previously unseen hashtags", len(created))
        except SQLAlchemyError as e:
            logger.error("Slug resolution failed: %s", e)
            raise StorageException("Failed to resolve hashtag slugs") from e

        return slugs

    async def find_hashtag(self, slug: str) -> str | None:
        """Reverse lookup: the hashtag a slug was issued for, if any."""
        try:
            result = await self.db.execute(
                select(HashtagSlug.hashtag).where(HashtagSlug.slug == slug)
            )
        except SQLAlchemyError as e:
            raise StorageException("Failed to look up hashtag slug") from e
        return result.scalar_one_or_none()
