"""
Tests for the coalescing derived-data cache.
"""

import asyncio

import pytest

from app.client.bus import InvalidationBus
from app.client.cache import CacheConsumer, CacheState, DerivedDataCache


class FakeFetcher:
    """Counts calls and returns a new version on each one."""

    def __init__(self, fail_times: int = 0):
        self.calls = 0
        self.fail_times = fail_times
        self.release = asyncio.Event()
        self.release.set()

    async def __call__(self) -> dict:
        self.calls += 1
        await self.release.wait()
        if self.calls <= self.fail_times:
            raise RuntimeError("store unavailable")
        return {"version": self.calls}


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next real wait."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class GatedFetcher:
    """Each call waits on its own gate, so fetches can finish out of order."""

    def __init__(self):
        self.calls = 0
        self.gates: list[asyncio.Event] = []

    async def __call__(self) -> dict:
        self.calls += 1
        version = self.calls
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return {"version": version}


@pytest.mark.asyncio
async def test_concurrent_consumers_share_one_fetch():
    fetcher = FakeFetcher()
    fetcher.release.clear()
    cache = DerivedDataCache("colors", fetcher, InvalidationBus())
    first, second = CacheConsumer(cache), CacheConsumer(cache)

    mounting = asyncio.gather(first.mount(), second.mount())
    await asyncio.sleep(0)
    assert cache.state is CacheState.LOADING

    fetcher.release.set()
    await mounting

    assert fetcher.calls == 1
    assert first.value == second.value == {"version": 1}
    assert cache.state is CacheState.READY


@pytest.mark.asyncio
async def test_ready_cache_does_not_refetch():
    fetcher = FakeFetcher()
    cache = DerivedDataCache("colors", fetcher, InvalidationBus())

    await cache.get()
    await CacheConsumer(cache).mount()

    assert fetcher.calls == 1
    assert cache.snapshot == {"version": 1}


@pytest.mark.asyncio
async def test_failure_reaches_every_waiter_and_resets():
    fetcher = FakeFetcher(fail_times=1)
    fetcher.release.clear()
    cache = DerivedDataCache("categories", fetcher, InvalidationBus())
    first, second = CacheConsumer(cache), CacheConsumer(cache)

    mounting = asyncio.gather(first.mount(), second.mount())
    await asyncio.sleep(0)
    fetcher.release.set()
    await mounting

    assert fetcher.calls == 1
    assert isinstance(first.error, RuntimeError)
    assert isinstance(second.error, RuntimeError)
    assert first.value is None and second.value is None
    assert first.loading is False
    assert cache.state is CacheState.EMPTY
    assert cache.snapshot is None

    # A later mount retries
    third = CacheConsumer(cache)
    assert await third.mount() == {"version": 2}
    assert third.error is None
    assert cache.state is CacheState.READY


@pytest.mark.asyncio
async def test_get_raises_fetch_error():
    cache = DerivedDataCache("colors", FakeFetcher(fail_times=1), InvalidationBus())

    with pytest.raises(RuntimeError):
        await cache.get()


@pytest.mark.asyncio
async def test_invalidation_refreshes_every_mounted_consumer():
    fetcher = FakeFetcher()
    bus = InvalidationBus()
    cache = DerivedDataCache("colors", fetcher, bus)
    first, second = CacheConsumer(cache), CacheConsumer(cache)
    await first.mount()
    await second.mount()
    assert fetcher.calls == 1

    await cache.invalidate()

    # Each consumer re-fetched on its own
    assert fetcher.calls == 3
    assert first.value["version"] > 1
    assert second.value["version"] > 1
    assert first.value != second.value
    assert cache.state is CacheState.READY
    assert cache.snapshot["version"] > 1


@pytest.mark.asyncio
async def test_unmounted_consumer_is_not_refreshed():
    fetcher = FakeFetcher()
    bus = InvalidationBus()
    cache = DerivedDataCache("colors", fetcher, bus)
    mounted, unmounted = CacheConsumer(cache), CacheConsumer(cache)
    await mounted.mount()
    await unmounted.mount()
    unmounted.unmount()

    await mounted.refresh()

    assert mounted.value == {"version": 2}
    assert unmounted.value == {"version": 1}
    assert not unmounted.mounted


@pytest.mark.asyncio
async def test_invalidation_without_consumers_drops_snapshot():
    fetcher = FakeFetcher()
    cache = DerivedDataCache("colors", fetcher, InvalidationBus())
    await cache.get()

    await cache.invalidate()

    assert cache.state is CacheState.EMPTY
    assert await cache.get() == {"version": 2}


@pytest.mark.asyncio
async def test_load_started_before_invalidation_is_not_stored():
    fetcher = FakeFetcher()
    fetcher.release.clear()
    cache = DerivedDataCache("colors", fetcher, InvalidationBus())

    stale = asyncio.create_task(cache.get())
    await asyncio.sleep(0)
    await cache.invalidate()
    fetcher.release.set()

    assert await stale == {"version": 1}
    assert cache.state is CacheState.EMPTY
    assert cache.snapshot is None


@pytest.mark.asyncio
async def test_bus_isolates_failing_subscriber():
    bus = InvalidationBus()
    seen = []

    async def broken():
        raise RuntimeError("boom")

    async def healthy():
        seen.append("called")

    bus.subscribe("colors", broken)
    unsubscribe = bus.subscribe("colors", healthy)

    await bus.publish("colors")
    assert seen == ["called"]

    unsubscribe()
    unsubscribe()
    assert bus.subscriber_count("colors") == 1


@pytest.mark.asyncio
async def test_consumer_keeps_fresh_value_when_older_load_finishes_last():
    fetcher = GatedFetcher()
    cache = DerivedDataCache("colors", fetcher, InvalidationBus())
    consumer = CacheConsumer(cache)

    mounting = asyncio.create_task(consumer.mount())
    await settle()
    assert fetcher.calls == 1

    invalidating = asyncio.create_task(cache.invalidate())
    await settle()
    assert fetcher.calls == 2

    # The reload after the invalidation completes first
    fetcher.gates[1].set()
    await invalidating
    assert consumer.value == {"version": 2}

    fetcher.gates[0].set()
    await mounting

    assert consumer.value == {"version": 2}
    assert consumer.error is None
    assert consumer.loading is False
    assert cache.snapshot == {"version": 2}


@pytest.mark.asyncio
async def test_mount_during_reload_joins_the_running_fetch():
    fetcher = FakeFetcher()
    cache = DerivedDataCache("colors", fetcher, InvalidationBus())
    first = CacheConsumer(cache)
    await first.mount()
    assert fetcher.calls == 1

    fetcher.release.clear()
    invalidating = asyncio.create_task(cache.invalidate())
    await settle()
    assert cache.state is CacheState.LOADING
    assert fetcher.calls == 2

    second = CacheConsumer(cache)
    mounting = asyncio.create_task(second.mount())
    await settle()
    fetcher.release.set()
    await asyncio.gather(invalidating, mounting)

    assert fetcher.calls == 2
    assert first.value == second.value == {"version": 2}
    assert cache.state is CacheState.READY
