"""
Content asset reference scanning.

Chart elements embed assets in their formulas with ``[MEDIA:slug]`` and
``[TEXT:slug]`` tokens. There is no foreign key behind these tokens, so
before an asset is deleted every chart is scanned for elements that still
reference it.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageException
from app.models.chart import ChartConfiguration

logger = logging.getLogger(__name__)

ASSET_TOKEN_PATTERN = re.compile(r"\[(MEDIA|TEXT):([a-z0-9-]+|stats\.[a-zA-Z][a-zA-Z0-9]*)\]")


def extract_asset_tokens(formula: str) -> list[str]:
    """
    Distinct asset slugs referenced by a formula, in first-seen order.

    Example:
        >>> extract_asset_tokens("[MEDIA:logo-abc] + [TEXT:summary] + [MEDIA:logo-abc]")
        ['logo-abc', 'summary']
    """
    seen: dict[str, None] = {}
    for match in ASSET_TOKEN_PATTERN.finditer(formula):
        seen.setdefault(match.group(2), None)
    return list(seen)


def format_asset_token(asset_type: str, slug: str) -> str:
    """Token used to embed an asset: ``[MEDIA:slug]`` for images, ``[TEXT:slug]`` otherwise."""
    prefix = "MEDIA" if asset_type == "image" else "TEXT"
    return f"[{prefix}:{slug}]"


@dataclass(frozen=True)
class ChartReference:
    """One chart element that references an asset."""

    chart_id: str
    title: str
    type: str
    element_index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "chartId": self.chart_id,
            "title": self.title,
            "type": self.type,
            "elementIndex": self.element_index,
        }


@dataclass
class ReferenceUsage:
    """All elements referencing one asset slug."""

    slug: str
    charts: list[ChartReference] = field(default_factory=list)

    @property
    def usage_count(self) -> int:
        return len(self.charts)

    @property
    def is_referenced(self) -> bool:
        return self.usage_count > 0


def find_references(slug: str, chart_id: str, title: str, chart_type: str, elements: Any) -> list[ChartReference]:
    """
    Elements of one chart whose formula references ``slug``.

    Malformed element lists, non-dict elements and non-string formulas are
    skipped. Each element is reported at most once.
    """
    if not isinstance(elements, list):
        return []

    references = []
    for index, element in enumerate(elements):
        if not isinstance(element, Mapping):
            continue
        formula = element.get("formula")
        if not isinstance(formula, str):
            continue
        if slug in extract_asset_tokens(formula):
            references.append(ChartReference(chart_id, title, chart_type, index))
    return references


class ReferenceScanner:
    """Builds the reverse index asset slug -> referencing chart elements."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def scan(self, slug: str) -> ReferenceUsage:
        """
        Find every chart element referencing an asset slug.

        An unused slug gives an empty result, not an error.

        Raises:
            StorageException: If chart configurations cannot be read
        """
        usage = ReferenceUsage(slug=slug)
        seen: set[tuple[str, int]] = set()
        try:
            result = await self.db.execute(
                select(
                    ChartConfiguration.chart_id,
                    ChartConfiguration.title,
                    ChartConfiguration.type,
                    ChartConfiguration.elements,
                ).order_by(ChartConfiguration.order.asc(), ChartConfiguration.chart_id.asc())
            )
            for chart_id, title, chart_type, elements in result:
                for reference in find_references(slug, chart_id, title or "", chart_type, elements):
                    key = (reference.chart_id, reference.element_index)
                    if key not in seen:
                        seen.add(key)
                        usage.charts.append(reference)
        except SQLAlchemyError as e:
            logger.error("Reference scan for '%s' failed: %s", slug, e)
            raise StorageException("Failed to scan chart references") from e

        return usage
