"""Fake implementations for plans domain testing."""

from plangate.domains.plans.fakes.repository import FakePlanRepository
from plangate.domains.plans.fakes.resolver import FakePlanLimitResolver

__all__ = ["FakePlanLimitResolver", "FakePlanRepository"]
