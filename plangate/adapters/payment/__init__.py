"""Payment gateway adapters."""

from plangate.adapters.payment.fake import FakePaymentGateway
from plangate.adapters.payment.null import NullPaymentGateway
from plangate.adapters.payment.stripe import StripePaymentGateway

__all__ = ["FakePaymentGateway", "NullPaymentGateway", "StripePaymentGateway"]
