"""
StudyHub Backend - Razorpay Payment Gateway Adapter
=====================================================

What:  Creates orders through the Razorpay Orders API and checks the
       signature the checkout widget returns after payment.
How:   httpx.AsyncClient with HTTP basic auth (key id / key secret).
       Signature = hex HMAC-SHA256 of "<order_id>|<payment_id>" keyed with
       the key secret.

No retry around create_order: the Orders API is not idempotent, and a
retried timeout can leave the customer with two live orders.
"""

import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import httpx

from studyhub.config import settings
from studyhub.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class RazorpayGateway:
    SERVICE = "Razorpay"

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        # Injected in tests (httpx.MockTransport); None means real network
        self._transport = transport

    def _require_secret(self) -> str:
        if not self.key_secret:
            raise ExternalServiceError(
                self.SERVICE,
                message="Payment gateway is not configured",
            )
        return self.key_secret

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        POST /orders and return the order JSON.

        Args:
            amount: Total in minor units (paise)
            currency: ISO code, "INR" by default
            receipt: Merchant-side reference, max 40 chars
            notes: Free-form string key/values echoed back on the order

        Raises:
            ExternalServiceError: transport failure or non-2xx answer
        """
        secret = self._require_secret()
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.api_url,
                auth=(self.key_id, secret),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post("/orders", json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            # Razorpay error bodies: {"error": {"code": ..., "description": ...}}
            description = None
            try:
                description = e.response.json().get("error", {}).get("description")
            except ValueError:
                pass
            logger.error(
                "Razorpay order creation rejected: status=%d description=%s",
                e.response.status_code,
                description,
            )
            raise ExternalServiceError(
                self.SERVICE,
                message=description or "Could not initiate order",
                context={"status_code": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.error("Razorpay unreachable: %s", str(e))
            raise ExternalServiceError(
                self.SERVICE,
                message="Could not initiate order",
                context={"error_type": type(e).__name__},
            )

        order = response.json()
        logger.info(
            "Razorpay order created: id=%s amount=%s %s",
            order.get("id"),
            order.get("amount"),
            order.get("currency"),
        )
        return order

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        body = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(
            self._require_secret().encode("utf-8"),
            body,
            hashlib.sha256,
        ).hexdigest()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Constant-time comparison against the expected HMAC."""
        expected = self.expected_signature(order_id, payment_id)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


razorpay_gateway = RazorpayGateway(
    key_id=settings.razorpay_key,
    key_secret=settings.razorpay_key_secret,
    api_url=settings.razorpay_api_url,
    timeout=settings.http_timeout,
)
