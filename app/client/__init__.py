"""
Presentation-side helpers: a coalescing, invalidatable cache of derived
reference data and the HTTP client that feeds it.
"""

from app.client.api_client import DashboardClient
from app.client.bus import InvalidationBus
from app.client.cache import CacheConsumer, CacheState, DerivedDataCache
from app.client.reference_data import HashtagReferenceData

__all__ = [
    "CacheConsumer",
    "CacheState",
    "DashboardClient",
    "DerivedDataCache",
    "HashtagReferenceData",
    "InvalidationBus",
]
