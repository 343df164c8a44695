"""Event bus adapters."""

from plangate.adapters.event_bus.fake import FakeEventBus
from plangate.adapters.event_bus.in_memory import InMemoryEventBus

__all__ = ["FakeEventBus", "InMemoryEventBus"]
