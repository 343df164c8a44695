"""Payment-provider webhook endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from plangate.api import deps
from plangate.api.deps import Inject
from plangate.core.logging import logger
from plangate.domains.billing.exceptions import WebhookSignatureError
from plangate.domains.billing.protocols import BillingWebhookProtocol

router = APIRouter(prefix="/billing", tags=["billing"])


@router.post("/webhook", include_in_schema=False)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    db: AsyncSession = Depends(deps.get_db),
    webhook: BillingWebhookProtocol = Inject(BillingWebhookProtocol),
) -> Response:
    """Handle Stripe webhook events.

    Returns:
        200 OK on success (including duplicates), 400 on signature error,
        500 on processing error so the provider retries
    """
    payload = await request.body()
    if not stripe_signature:
        return Response(status_code=400)

    try:
        await webhook.process_webhook(db, payload, stripe_signature)
    except WebhookSignatureError:
        return Response(status_code=400)
    except Exception as e:
        logger.error(f"Webhook processing failed: {e}")
        return Response(status_code=500)
    return Response(status_code=200)
