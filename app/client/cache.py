"""
Client-side cache for derived reference data (hashtag colors, categories).

Each dataset moves through ``EMPTY -> LOADING -> READY``. While a load is
in flight every caller awaits the same task, so one fetch serves all
consumers that mount at the same time. A failed load returns the cache to
``EMPTY`` with no snapshot and the error reaches every waiter.

Invalidation is a broadcast on an :class:`InvalidationBus`. The cache drops
its snapshot and each mounted consumer re-fetches on its own. Those re-fetches
are not coalesced with each other, but a caller that arrives while one runs
waits on the latest of them.
"""

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from app.client.bus import InvalidationBus

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class DerivedDataCache(Generic[T]):
    """Shared, coalescing cache of one dataset."""

    def __init__(
        self,
        name: str,
        fetcher: Callable[[], Awaitable[T]],
        bus: InvalidationBus,
    ):
        self.name = name
        self.bus = bus
        self._fetcher = fetcher
        self._state = CacheState.EMPTY
        self._snapshot: T | None = None
        self._inflight: asyncio.Task | None = None
        # Bumped on every invalidation; a load started before it is stale
        self._generation = 0
        self.fetch_count = 0
        bus.subscribe(name, self._on_invalidate)

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def snapshot(self) -> T | None:
        return self._snapshot

    async def get(self) -> T:
        """
        Current snapshot, loading it first if the cache is empty.

        Raises:
            Whatever the fetcher raised, to every caller awaiting the load
        """
        if self._state is CacheState.READY:
            return self._snapshot

        # Assigned before the first await so concurrent callers share it
        if self._inflight is None:
            self._state = CacheState.LOADING
            task = asyncio.create_task(self._load(self._generation))
            task.add_done_callback(self._release)
            self._inflight = task

        return await asyncio.shield(self._inflight)

    async def reload(self) -> T:
        """
        Fetch a fresh snapshot without joining any in-flight load.

        The new load becomes the in-flight one, so callers of :meth:`get`
        that arrive while it runs wait on it instead of fetching again.
        """
        self._state = CacheState.LOADING
        task = asyncio.create_task(self._load(self._generation))
        task.add_done_callback(self._release)
        self._inflight = task
        return await asyncio.shield(task)

    async def invalidate(self) -> None:
        """Announce that the dataset changed; all subscribers refresh."""
        await self.bus.publish(self.name)

    async def _on_invalidate(self) -> None:
        self._generation += 1
        self._snapshot = None
        self._inflight = None
        self._state = CacheState.EMPTY

    async def _load(self, generation: int) -> T:
        self.fetch_count += 1
        try:
            value = await self._fetcher()
        except Exception as e:
            if generation == self._generation:
                self._snapshot = None
                self._state = CacheState.EMPTY
            logger.warning("Loading '%s' failed: %s", self.name, e)
            raise

        if generation == self._generation:
            self._snapshot = value
            self._state = CacheState.READY
        return value

    def _release(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None


class CacheConsumer(Generic[T]):
    """
    One view of a cached dataset, e.g. a page component.

    Holds its own ``value``, ``error`` and ``loading`` flags. While mounted it
    is subscribed to the dataset's invalidation channel.
    """

    def __init__(self, cache: DerivedDataCache[T]):
        self.cache = cache
        self.value: T | None = None
        self.error: Exception | None = None
        self.loading = False
        self._unsubscribe: Callable[[], None] | None = None
        # Only the latest started load may write value and error
        self._latest_run = 0

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    async def mount(self) -> T | None:
        if self._unsubscribe is None:
            self._unsubscribe = self.cache.bus.subscribe(self.cache.name, self._on_invalidate)
        await self._run(self.cache.get)
        return self.value

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def refresh(self) -> T | None:
        """Invalidate the dataset for every consumer, this one included."""
        await self.cache.invalidate()
        return self.value

    async def _on_invalidate(self) -> None:
        await self._run(self.cache.reload)

    async def _run(self, load: Callable[[], Awaitable[T]]) -> None:
        self._latest_run += 1
        run = self._latest_run
        self.loading = True
        try:
            value = await load()
        except Exception as e:
            if run == self._latest_run:
                self.value = None
                self.error = e
        else:
            if run == self._latest_run:
                self.value = value
                self.error = None
        finally:
            if run == self._latest_run:
                self.loading = False
