"""
Hashtag usage aggregation over the project collection.
"""

import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageException
from app.models.project import Project
from app.services.hashtag_normalizer import get_all_representations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageScan:
    """Result of one full scan of the project collection."""

    counts: dict[str, int]
    documents_scanned: int


def sort_usage(counts: Mapping[str, int]) -> list[tuple[str, int]]:
    """
    Order hashtag counts by count descending, ties by hashtag ascending.

    The tie-break on the canonical string keeps the order reproducible
    across calls with unchanged data.
    """
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


class HashtagUsageAggregator:
    """Counts, per representation, how many projects carry each hashtag."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def scan(self) -> UsageScan:
        """
        Scan every project and count hashtag representations.

        A project adds at most one to each representation it carries,
        however many times the raw hashtag is repeated in it.

        Raises:
            StorageException: If the project collection cannot be read
        """
        counts: Counter[str] = Counter()
        scanned = 0
        try:
            result = await self.db.execute(
                select(Project.hashtags, Project.categorized_hashtags)
            )
            for hashtags, categorized_hashtags in result:
                scanned += 1
                counts.update(get_all_representations(hashtags, categorized_hashtags))
        except SQLAlchemyError as e:
            logger.error("Hashtag usage scan failed after %d projects: %s", scanned, e)
            raise StorageException("Failed to fetch hashtags") from e

        return UsageScan(counts=dict(counts), documents_scanned=scanned)

    async def count_usage(self) -> dict[str, int]:
        """Representation -> number of projects containing it."""
        return (await self.scan()).counts
