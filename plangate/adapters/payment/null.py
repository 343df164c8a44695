"""Null payment gateway for when Stripe is disabled.

Satisfies PaymentGatewayProtocol so the container can always be fully
constructed. Webhooks can't be verified without a provider, so every
delivery is rejected as unsigned.
"""

from typing import Any

from plangate.core.protocols.payment import PaymentGatewayProtocol
from plangate.domains.billing.exceptions import WebhookSignatureError


class NullPaymentGateway(PaymentGatewayProtocol):
    """No-op payment gateway used when Stripe is disabled."""

    def verify_webhook_signature(self, payload: bytes, signature: str) -> Any:
        """Reject: billing is not enabled."""
        raise WebhookSignatureError("Billing is not enabled")
