"""Fake implementations for billing domain testing."""

from plangate.domains.billing.fakes.repository import (
    FakeProcessedEventRepository,
    FakeSubscriptionRepository,
)

__all__ = ["FakeProcessedEventRepository", "FakeSubscriptionRepository"]
