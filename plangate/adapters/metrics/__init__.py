"""Metrics adapters."""

from plangate.adapters.metrics.billing import FakeBillingMetrics, PrometheusBillingMetrics

__all__ = ["FakeBillingMetrics", "PrometheusBillingMetrics"]
