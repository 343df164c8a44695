"""Metrics protocols for dependency injection.

BillingMetrics counts outcomes on the paths that matter for billing
correctness: payment-provider webhooks, request-time limit checks, live
counter writes and the reconciliation jobs.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class BillingMetrics(Protocol):
    """Counters for the billing and usage-enforcement paths."""

    def inc_subscription_event(self, event: str, result: str) -> None:
        """Count a processed payment-provider event.

        Args:
            event: Provider event type, or ``"unknown"`` when it never parsed.
            result: ``ok``, ``duplicate`` or ``error``.
        """
        ...

    def inc_limit_check(self, metric: str, outcome: str) -> None:
        """Count an enforcement decision (``allowed``, ``rejected``, ``failed_open``)."""
        ...

    def inc_reconciliation(self, job: str, outcome: str) -> None:
        """Count a reconciliation tenant outcome (``processed``, ``failed``, ``skipped``)."""
        ...

    def inc_counter_error(self, metric: str, operation: str) -> None:
        """Count a live-counter write that failed after the ledger committed."""
        ...
