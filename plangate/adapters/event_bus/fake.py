"""Fake event bus for testing.

Records published events for assertions without calling real subscribers.
"""

import fnmatch
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plangate.core.protocols.event_bus import DomainEvent, EventHandler


class FakeEventBus:
    """Test implementation of EventBus.

    Usage:
        fake = FakeEventBus()
        await job.run(now=...)

        event = fake.assert_published("usage.threshold_crossed")
        assert event.threshold == 80
    """

    def __init__(self, call_subscribers: bool = False) -> None:
        """Initialize the fake event bus.

        Args:
            call_subscribers: If True, registered subscribers are invoked too.
        """
        self.events: list["DomainEvent"] = []
        self._subscribers: list[tuple[str, "EventHandler"]] = []
        self._call_subscribers = call_subscribers

    def subscribe(self, event_pattern: str, handler: "EventHandler") -> None:
        """Register a handler (only called if call_subscribers=True)."""
        self._subscribers.append((event_pattern, handler))

    async def publish(self, event: "DomainEvent") -> None:
        """Record the event (and optionally call subscribers)."""
        self.events.append(event)
        if self._call_subscribers:
            for pattern, handler in self._subscribers:
                if fnmatch.fnmatchcase(str(event.event_type.value), pattern):
                    await handler(event)

    # Test helpers

    def get_events(self, event_type: str) -> list["DomainEvent"]:
        """Get all events of the given type."""
        return [e for e in self.events if e.event_type == event_type]

    def has_event(self, event_type: str) -> bool:
        """Check if an event of the given type was published."""
        return bool(self.get_events(event_type))

    def assert_published(self, event_type: str) -> "DomainEvent":
        """Assert that an event was published and return the first one."""
        matches = self.get_events(event_type)
        if not matches:
            published = [str(e.event_type.value) for e in self.events]
            raise AssertionError(
                f"Expected event '{event_type}' was not published. Published events: {published}"
            )
        return matches[0]

    def assert_not_published(self, event_type: str) -> None:
        """Assert that no event of the given type was published."""
        if self.has_event(event_type):
            raise AssertionError(f"Event '{event_type}' was published but should not have been")

    def clear(self) -> None:
        """Clear all recorded events."""
        self.events.clear()
