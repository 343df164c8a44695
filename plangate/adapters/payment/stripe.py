"""Stripe implementation of PaymentGatewayProtocol."""

from typing import Any

import stripe

from plangate.core.protocols.payment import PaymentGatewayProtocol
from plangate.domains.billing.exceptions import WebhookSignatureError


class StripePaymentGateway(PaymentGatewayProtocol):
    """Verify Stripe webhooks with the endpoint signing secret."""

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        """Configure the SDK key and the webhook signing secret."""
        stripe.api_key = api_key
        self._webhook_secret = webhook_secret

    def verify_webhook_signature(self, payload: bytes, signature: str) -> Any:
        """Construct a ``stripe.Event`` from a signed payload.

        Raises:
            WebhookSignatureError: Bad signature or unparseable payload.
        """
        try:
            return stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except ValueError as e:
            raise WebhookSignatureError(f"Invalid webhook payload: {e}") from e
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(f"Invalid webhook signature: {e}") from e
