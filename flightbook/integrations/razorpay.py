"""
Razorpay payment gateway: order creation, signature verification
and payment lookup over the REST API
"""

import os
import hmac
import hashlib
import logging
import secrets
import httpx
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

RAZORPAY_API_URL = "https://api.razorpay.com/v1"


class PaymentGatewayError(Exception):
    """Raised when the gateway call fails or returns an error."""


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


class RazorpayService:
    def __init__(self):
        self.key_id = os.getenv("RAZORPAY_KEY_ID", "")
        self.key_secret = os.getenv("RAZORPAY_KEY_SECRET", "")
        self.api_url = os.getenv("RAZORPAY_API_URL", RAZORPAY_API_URL)
        self.dry_run = os.getenv("PAYMENTS_DRY_RUN", "true").lower() == "true"

        if not self.dry_run and not (self.key_id and self.key_secret):
            logger.warning("⚠️ Payments live but RAZORPAY_KEY_ID/RAZORPAY_KEY_SECRET not configured")

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.request(
                    method,
                    f"{self.api_url}{path}",
                    auth=(self.key_id, self.key_secret),
                    json=json,
                )
        except httpx.HTTPError as e:
            logger.error(f"Razorpay request failed: {e}")
            raise PaymentGatewayError("Payment gateway unreachable") from e

        if response.status_code >= 400:
            logger.error(f"Razorpay error: {response.status_code} - {response.text}")
            raise PaymentGatewayError(f"Payment gateway returned {response.status_code}")

        return response.json()

    async def create_order(
        self,
        amount: float,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Create an order; amount is given in major units."""
        payload = {
            "amount": to_minor_units(amount),
            "currency": currency.upper(),
            "receipt": receipt,
            "notes": {k: str(v) for k, v in (notes or {}).items()},
        }

        if self.dry_run:
            order_id = f"order_dryrun_{secrets.token_hex(7)}"
            logger.info(f"DRY_RUN: Would create Razorpay order {order_id} for {payload['amount']} {payload['currency']}")
            return {"id": order_id, "status": "created", **payload}

        order = await self._request("POST", "/orders", json=payload)
        logger.info(f"✅ Razorpay order {order.get('id')} created for receipt {receipt}")
        return order

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Checkout signature is HMAC-SHA256 of "order_id|payment_id" keyed with the secret."""
        if not self.key_secret:
            logger.error("RAZORPAY_KEY_SECRET not configured")
            return False

        expected_signature = hmac.new(
            self.key_secret.encode(),
            f"{order_id}|{payment_id}".encode(),
            hashlib.sha256
        ).hexdigest()

        return hmac.compare_digest(signature.encode(), expected_signature.encode())

    async def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        if self.dry_run:
            return {
                "id": payment_id,
                "amount": 0,
                "currency": "USD",
                "status": "captured",
                "method": "card",
                "email": None,
                "contact": None,
                "created_at": int(datetime.now(timezone.utc).timestamp()),
            }

        return await self._request("GET", f"/payments/{payment_id}")


razorpay_service = RazorpayService()


def get_payment_gateway() -> RazorpayService:
    return razorpay_service
