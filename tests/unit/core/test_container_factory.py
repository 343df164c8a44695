"""Unit tests for container wiring."""

import pytest

from plangate.adapters.event_bus.fake import FakeEventBus
from plangate.adapters.event_bus.in_memory import InMemoryEventBus
from plangate.adapters.metrics.billing import PrometheusBillingMetrics
from plangate.adapters.payment.null import NullPaymentGateway
from plangate.adapters.payment.stripe import StripePaymentGateway
from plangate.core import container as container_mod
from plangate.core.config import Environment, Settings
from plangate.core.container import (
    create_container,
    initialize_container,
    reset_container,
)
from plangate.domains.reconciliation.types import DAILY_SNAPSHOT_JOB, MONTHLY_RESET_JOB


@pytest.fixture(autouse=True)
def _clean_global_container():
    reset_container()
    yield
    reset_container()


class TestCreateContainer:
    def test_default_wiring(self):
        c = create_container(Settings(ENVIRONMENT=Environment.TEST))

        assert isinstance(c.event_bus, InMemoryEventBus)
        assert isinstance(c.metrics, PrometheusBillingMetrics)
        assert isinstance(c.payment_gateway, NullPaymentGateway)
        assert c.daily_snapshot_job.job_name == DAILY_SNAPSHOT_JOB
        assert c.monthly_reset_job.job_name == MONTHLY_RESET_JOB

    def test_stripe_when_enabled(self):
        c = create_container(
            Settings(
                ENVIRONMENT=Environment.TEST,
                STRIPE_ENABLED=True,
                STRIPE_SECRET_KEY="sk_test",
                STRIPE_WEBHOOK_SECRET="whsec_test",
            )
        )

        assert isinstance(c.payment_gateway, StripePaymentGateway)

    def test_each_container_gets_its_own_registry(self):
        a = create_container(Settings(ENVIRONMENT=Environment.TEST))
        b = create_container(Settings(ENVIRONMENT=Environment.TEST))

        assert a.metrics.registry is not b.metrics.registry

    def test_replace_swaps_a_single_dependency(self):
        c = create_container(Settings(ENVIRONMENT=Environment.TEST))
        fake_bus = FakeEventBus()

        replaced = c.replace(event_bus=fake_bus)

        assert replaced.event_bus is fake_bus
        assert replaced.limit_gate is c.limit_gate
        assert c.event_bus is not fake_bus


class TestGlobalContainer:
    def test_initialize_once(self):
        initialize_container(Settings(ENVIRONMENT=Environment.TEST))
        assert container_mod.container is not None

        with pytest.raises(RuntimeError):
            initialize_container(Settings(ENVIRONMENT=Environment.TEST))

    def test_reset(self):
        initialize_container(Settings(ENVIRONMENT=Environment.TEST))
        reset_container()
        assert container_mod.container is None
