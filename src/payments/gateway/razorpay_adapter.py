"""Razorpay payment gateway adapter.

Orders are created through the REST API with HTTP basic auth. Amounts go
over the wire in paise. Payment confirmations are verified locally with
the key secret.
"""

import requests

from payments.gateway.port import GatewayError, GatewayOrder, PaymentGateway
from payments.gateway.signature import signature_matches

API_BASE_URL = "https://api.razorpay.com/v1"


def to_subunits(amount: float) -> int:
    return int(round(amount * 100))


class RazorpayGateway(PaymentGateway):
    def __init__(self, key_id: str, key_secret: str, base_url: str = API_BASE_URL, timeout: float = 10) -> None:
        if not key_id or not key_secret:
            raise GatewayError("Razorpay key id and secret are required")
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def create_order(
        self,
        amount: float,
        currency: str,
        receipt: str,
        contact: dict | None = None,
    ) -> GatewayOrder:
        payload = {
            "amount": to_subunits(amount),
            "currency": currency,
            "receipt": receipt,
            "notes": {k: v for k, v in (contact or {}).items() if v},
        }
        try:
            resp = requests.post(
                f"{self.base_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise GatewayError(f"Could not create payment order: {exc}") from exc

        try:
            body = resp.json()
            return GatewayOrder(
                gateway_order_id=body["id"],
                amount=body["amount"] / 100,
                currency=body.get("currency", currency),
                receipt=body.get("receipt", receipt),
                status=body.get("status"),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise GatewayError(f"Unexpected payment order response: {exc!r}") from exc

    def verify_payment(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return signature_matches(self.key_secret, gateway_order_id, payment_id, signature)
