"""
In-process publish/subscribe bus for cache invalidation.

Publishers announce that a dataset changed by channel name; every callback
subscribed to that channel runs. The bus is passed to caches explicitly so
tests and multi-tenant setups can use separate instances.
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Subscriber = Callable[[], Awaitable[None]]


class InvalidationBus:
    """Channel name -> async callbacks."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscriber]] = defaultdict(list)

    def subscribe(self, channel: str, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for a channel.

        Returns:
            Function that removes the subscription; calling it twice is harmless
        """
        self._subscribers[channel].append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(channel, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, []))

    async def publish(self, channel: str) -> None:
        """
        Run every subscriber of ``channel`` concurrently and wait for all.

        A failing subscriber is logged and does not stop the others.
        """
        callbacks = list(self._subscribers.get(channel, []))
        if not callbacks:
            return
        results = await asyncio.gather(*(callback() for callback in callbacks), return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning("Invalidation subscriber on '%s' failed: %s", channel, result)
