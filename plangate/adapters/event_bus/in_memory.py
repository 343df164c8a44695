"""In-memory event bus implementation.

Fans usage and billing events out to subscribers in-process. Outbound
transport (queues, webhooks) subscribes here rather than being called by
the domain services directly.
"""

import asyncio
import fnmatch
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plangate.core.protocols.event_bus import DomainEvent, EventHandler

# Standard logging to avoid a circular import with plangate.core.logging
logger = logging.getLogger(__name__)


class InMemoryEventBus:
    """In-memory event bus with glob-pattern subscriptions.

    Usage:
        bus = InMemoryEventBus()
        bus.subscribe("usage.*", notifier)
        bus.subscribe("subscription.changed", cache_invalidator)
        await bus.publish(UsageThresholdCrossedEvent(...))
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._subscribers: list[tuple[str, "EventHandler"]] = []

    def subscribe(self, event_pattern: str, handler: "EventHandler") -> None:
        """Register a handler for events whose type matches *event_pattern*."""
        self._subscribers.append((event_pattern, handler))
        logger.debug(f"EventBus: subscribed handler to '{event_pattern}'")

    async def publish(self, event: "DomainEvent") -> None:
        """Deliver *event* to every matching subscriber concurrently.

        A failing subscriber is logged and does not affect the others or
        the publisher.
        """
        event_type = str(getattr(event.event_type, "value", event.event_type))
        handlers = [
            handler
            for pattern, handler in self._subscribers
            if fnmatch.fnmatchcase(event_type, pattern)
        ]
        if not handlers:
            logger.debug(f"EventBus: no subscribers for '{event_type}'")
            return

        results = await asyncio.gather(
            *[handler(event) for handler in handlers],
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    f"EventBus: subscriber failed for '{event_type}': {result}",
                    exc_info=result,
                )
