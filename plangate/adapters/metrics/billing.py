"""Billing metrics adapters (Prometheus + Fake).

Prometheus implementation creates a dedicated CollectorRegistry so billing
metrics are isolated from the default global registry.
"""

from collections import Counter as TallyCounter
from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter

from plangate.core.protocols.metrics import BillingMetrics


class PrometheusBillingMetrics(BillingMetrics):
    """Prometheus-backed billing counters."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._subscription_events = Counter(
            "billing_subscription_events_total",
            "Payment-provider webhook events by type and result",
            ["event", "result"],
            registry=self._registry,
        )

        self._limit_checks = Counter(
            "plangate_limit_checks_total",
            "Plan-limit enforcement decisions",
            ["metric", "outcome"],
            registry=self._registry,
        )

        self._reconciliation = Counter(
            "plangate_reconciliation_tenants_total",
            "Per-tenant reconciliation outcomes",
            ["job", "outcome"],
            registry=self._registry,
        )

        self._counter_errors = Counter(
            "plangate_usage_counter_errors_total",
            "Live usage counter writes that failed after the ledger committed",
            ["metric", "operation"],
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    # -- BillingMetrics protocol methods --

    def inc_subscription_event(self, event: str, result: str) -> None:
        self._subscription_events.labels(event=event, result=result).inc()

    def inc_limit_check(self, metric: str, outcome: str) -> None:
        self._limit_checks.labels(metric=metric, outcome=outcome).inc()

    def inc_reconciliation(self, job: str, outcome: str) -> None:
        self._reconciliation.labels(job=job, outcome=outcome).inc()

    def inc_counter_error(self, metric: str, operation: str) -> None:
        self._counter_errors.labels(metric=metric, operation=operation).inc()


# ---------------------------------------------------------------------------
# Fake
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubscriptionEventRecord:
    """Single observed webhook outcome."""

    event: str
    result: str


class FakeBillingMetrics(BillingMetrics):
    """In-memory spy implementing the BillingMetrics protocol."""

    def __init__(self) -> None:
        self.subscription_events: list[SubscriptionEventRecord] = []
        self.limit_checks: TallyCounter[tuple[str, str]] = TallyCounter()
        self.reconciliation: TallyCounter[tuple[str, str]] = TallyCounter()
        self.counter_errors: TallyCounter[tuple[str, str]] = TallyCounter()

    def inc_subscription_event(self, event: str, result: str) -> None:
        self.subscription_events.append(SubscriptionEventRecord(event, result))

    def inc_limit_check(self, metric: str, outcome: str) -> None:
        self.limit_checks[(metric, outcome)] += 1

    def inc_reconciliation(self, job: str, outcome: str) -> None:
        self.reconciliation[(job, outcome)] += 1

    def inc_counter_error(self, metric: str, operation: str) -> None:
        self.counter_errors[(metric, operation)] += 1

    # -- test helpers --

    def results_for(self, event: str) -> list[str]:
        """Results recorded for a webhook event type, in order."""
        return [r.result for r in self.subscription_events if r.event == event]

    def clear(self) -> None:
        """Reset all recorded state."""
        self.subscription_events.clear()
        self.limit_checks.clear()
        self.reconciliation.clear()
        self.counter_errors.clear()
