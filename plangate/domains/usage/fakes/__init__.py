"""Fake implementations for usage domain testing."""

from plangate.domains.usage.fakes.limit_gate import FakeLimitEnforcementGate
from plangate.domains.usage.fakes.repository import (
    FakeUsageEventRepository,
    FakeUsageLedgerRepository,
)

__all__ = ["FakeLimitEnforcementGate", "FakeUsageEventRepository", "FakeUsageLedgerRepository"]
