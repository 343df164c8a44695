"""Fake payment gateway for testing.

In-memory implementation of PaymentGatewayProtocol. Payloads are plain
JSON; a delivery is "signed" when its signature equals the configured
secret. Verified payloads are returned as attribute bags shaped like
Stripe objects.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from plangate.core.protocols.payment import PaymentGatewayProtocol
from plangate.domains.billing.exceptions import WebhookSignatureError


class FakePaymentGateway(PaymentGatewayProtocol):
    """Test implementation of PaymentGatewayProtocol.

    Usage::

        fake = FakePaymentGateway()
        event = fake.verify_webhook_signature(payload, FakePaymentGateway.VALID_SIGNATURE)
        assert fake.call_count("verify_webhook_signature") == 1
    """

    VALID_SIGNATURE = "t=0,v1=fake"

    def __init__(self, should_raise: Optional[Exception] = None) -> None:
        """Initialize with optional error injection."""
        self._should_raise = should_raise
        self._calls: list[tuple[str, tuple]] = []

    def _record(self, method: str, *args: Any) -> None:
        self._calls.append((method, args))
        if self._should_raise:
            raise self._should_raise

    def call_count(self, method: str) -> int:
        """Number of times a method was called."""
        return sum(1 for name, _ in self._calls if name == method)

    def verify_webhook_signature(self, payload: bytes, signature: str) -> Any:
        """Parse *payload* when *signature* matches, else raise."""
        self._record("verify_webhook_signature", signature)
        if signature != self.VALID_SIGNATURE:
            raise WebhookSignatureError("Invalid webhook signature")
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise WebhookSignatureError(f"Invalid webhook payload: {e}") from e
        return _to_obj(data)


class _obj:
    """Tiny attribute-bag to emulate Stripe object shapes in tests."""

    def __init__(self, **kwargs: Any):
        for k, v in kwargs.items():
            setattr(self, k, v)

    def get(self, key: str, default: Any = None) -> Any:
        """Get attribute by key with default."""
        return getattr(self, key, default)


def _to_obj(value: Any) -> Any:
    """Recursively convert parsed JSON into ``_obj`` bags.

    ``metadata`` stays a plain dict, like on real Stripe objects.
    """
    if isinstance(value, dict):
        return _obj(
            **{k: (v if k == "metadata" else _to_obj(v)) for k, v in value.items()}
        )
    if isinstance(value, list):
        return [_to_obj(v) for v in value]
    return value
