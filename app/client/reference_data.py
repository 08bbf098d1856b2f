"""
Hashtag colors and categories as cached, invalidatable datasets.
"""

import asyncio
from typing import Any

from app.client.api_client import DashboardClient
from app.client.bus import InvalidationBus
from app.client.cache import DerivedDataCache
from app.services.hashtag_color_service import normalize_category_name, resolve_hashtag_color
from app.services.hashtag_normalizer import normalize_hashtag

HASHTAG_COLORS_CHANNEL = "hashtag-colors"
HASHTAG_CATEGORIES_CHANNEL = "hashtag-categories"


class HashtagReferenceData:
    """The two datasets every hashtag badge needs, sharing one bus."""

    def __init__(self, client: DashboardClient, bus: InvalidationBus | None = None):
        self.bus = bus or InvalidationBus()
        self.colors: DerivedDataCache[dict[str, str]] = DerivedDataCache(
            HASHTAG_COLORS_CHANNEL, client.fetch_hashtag_colors, self.bus
        )
        self.categories: DerivedDataCache[list[dict[str, Any]]] = DerivedDataCache(
            HASHTAG_CATEGORIES_CHANNEL, client.fetch_hashtag_categories, self.bus
        )

    async def color_for(self, hashtag: str, category: str | None = None) -> str:
        """
        Display color of a hashtag, optionally shown under a category.

        Category color wins over the hashtag's own color, which wins over
        the default.
        """
        colors, categories = await asyncio.gather(self.colors.get(), self.categories.get())
        category_color = None
        category_name = normalize_category_name(category) if category else ""
        if category_name:
            category_color = next(
                (item.get("color") for item in categories if item.get("name") == category_name),
                None,
            )
        return resolve_hashtag_color(category_color, colors.get(normalize_hashtag(hashtag) or ""))
