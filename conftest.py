"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before both testpaths (tests/ and plangate/domains/),
making its fixtures available to centralized tests AND colocated domain tests.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables, set before any plangate module import.
# Uses setdefault so real env vars (CI, e2e) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test_user")
os.environ.setdefault("POSTGRES_PASSWORD", "test_password")
os.environ.setdefault("POSTGRES_DB", "test_db")
os.environ.setdefault("STRIPE_ENABLED", "false")
os.environ.setdefault("TEMPORAL_ENABLED", "false")


# ---------------------------------------------------------------------------
# Shared fake fixtures: individual protocol fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_event_bus():
    """Fake EventBus that records published events."""
    from plangate.adapters.event_bus.fake import FakeEventBus

    return FakeEventBus()


@pytest.fixture
def fake_cache():
    """In-memory CacheBackend with a controllable clock."""
    from plangate.adapters.cache.fake import FakeCacheBackend

    return FakeCacheBackend()


@pytest.fixture
def fake_metrics():
    """Spy BillingMetrics that records every observation."""
    from plangate.adapters.metrics.billing import FakeBillingMetrics

    return FakeBillingMetrics()


@pytest.fixture
def fake_audit_log():
    """Spy AuditLog that records every entry."""
    from plangate.adapters.audit.fake import FakeAuditLog

    return FakeAuditLog()
