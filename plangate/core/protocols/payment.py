"""Payment gateway protocol.

Only the webhook surface is consumed here: checkout-session creation and
subscription CRUD live with the provider integration, outside this package.

Direct consumers: BillingWebhookProcessor.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PaymentGatewayProtocol(Protocol):
    """Protocol for verifying payment-provider webhooks."""

    def verify_webhook_signature(self, payload: bytes, signature: str) -> Any:
        """Verify and construct a webhook event from payload and signature.

        Raises:
            WebhookSignatureError: If the signature or payload is invalid.
        """
        ...
