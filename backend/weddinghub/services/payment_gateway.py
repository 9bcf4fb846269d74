"""
Razorpay payment gateway adapter.

Two responsibilities:

1. Order creation: ``client.order.create`` through the official ``razorpay``
   SDK, authenticated with (key_id, key_secret). The returned order id is
   handed to the browser checkout widget together with the public key id.

2. Callback verification: the widget returns (order_id, payment_id,
   signature). ``client.utility.verify_payment_signature`` recomputes the hex
   HMAC-SHA256 of "{order_id}|{payment_id}" with the shared secret. Matching
   it is the proof that the gateway completed the payment; nothing else about
   the caller is trusted.

The SDK is synchronous (it sits on ``requests``), so network calls run on a
worker thread to keep the event loop free. Gateway failures are surfaced as
GatewayUnavailable and never retried here; a retried order creation could
mint duplicate orders.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Optional

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError, SignatureVerificationError

from weddinghub.core.config import Settings, get_settings
from weddinghub.core.exceptions import GatewayUnavailable
from weddinghub.core.logging import get_logger
from weddinghub.core.metrics import gateway_latency

logger = get_logger(__name__)


@dataclass(frozen=True)
class GatewayOrder:
    order_id: str
    amount: int
    currency: str


class RazorpayGateway:

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        timeout: float = 10.0,
        client: Optional[razorpay.Client] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.timeout = timeout
        self.client = client or razorpay.Client(auth=(key_id, key_secret))

    @classmethod
    def from_settings(cls, settings: Settings) -> "RazorpayGateway":
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    def _require_credentials(self) -> None:
        if not self.configured:
            raise GatewayUnavailable("Payment gateway keys not configured")

    async def create_order(self, amount: int, currency: str, receipt: str) -> GatewayOrder:
        self._require_credentials()

        data = {"amount": amount, "currency": currency, "receipt": receipt}
        started = time.perf_counter()
        try:
            payload = await asyncio.to_thread(self.client.order.create, data, timeout=self.timeout)
        except (BadRequestError, GatewayError, ServerError) as e:
            logger.error("gateway_order_rejected", error=str(e), receipt=receipt)
            raise GatewayUnavailable("Failed to create payment order")
        except (requests.RequestException, ValueError) as e:
            logger.error("gateway_order_failed", error=str(e), receipt=receipt)
            raise GatewayUnavailable("Failed to create payment order")
        finally:
            gateway_latency.observe(time.perf_counter() - started)

        try:
            return GatewayOrder(
                order_id=payload["id"],
                amount=int(payload["amount"]),
                currency=payload["currency"],
            )
        except (KeyError, TypeError, ValueError):
            logger.error("gateway_order_malformed", receipt=receipt)
            raise GatewayUnavailable("Failed to create payment order")

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not self.key_secret:
            raise GatewayUnavailable("Payment gateway keys not configured")
        if not signature.isascii():
            return False
        try:
            return bool(
                self.client.utility.verify_payment_signature(
                    {
                        "razorpay_order_id": order_id,
                        "razorpay_payment_id": payment_id,
                        "razorpay_signature": signature,
                    }
                )
            )
        except SignatureVerificationError:
            return False


def get_payment_gateway() -> RazorpayGateway:
    """FastAPI dependency. Overridden in tests."""
    return RazorpayGateway.from_settings(get_settings())
