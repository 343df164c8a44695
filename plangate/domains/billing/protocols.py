"""Billing domain protocols.

BillingWebhookProtocol: verify a provider webhook and apply it exactly once.
"""

from typing import Any, Protocol, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession


@runtime_checkable
class BillingWebhookProtocol(Protocol):
    """Webhook processing interface: verifies signature and processes event."""

    async def process_webhook(self, db: AsyncSession, payload: bytes, signature: str) -> None:
        """Verify webhook signature and process the resulting event."""
        ...

    async def process_event(self, db: AsyncSession, event: Any) -> None:
        """Apply an already verified event at most once."""
        ...
