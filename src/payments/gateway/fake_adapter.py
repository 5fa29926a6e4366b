"""Configurable fake payment gateway for development and testing.

This adapter simulates the hosted checkout without any external calls. It
can be configured at runtime to refuse new orders, and it signs payments
with a fixed test secret so tests can produce valid (or tampered)
confirmations with ``sign()``.
"""

from uuid import uuid4

from payments.gateway.port import GatewayError, GatewayOrder, PaymentGateway
from payments.gateway.signature import compute_signature, signature_matches

TEST_SECRET = "fake-gateway-secret"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, secret: str = TEST_SECRET) -> None:
        self.secret = secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment gateway unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_order(
        self,
        amount: float,
        currency: str,
        receipt: str,
        contact: dict | None = None,
    ) -> GatewayOrder:
        self.calls.append(
            {
                "method": "create_order",
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
                "contact": contact,
            }
        )

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        return GatewayOrder(
            gateway_order_id=f"order_fake_{uuid4().hex[:14]}",
            amount=amount,
            currency=currency,
            receipt=receipt,
            status="created",
        )

    def verify_payment(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        self.calls.append(
            {
                "method": "verify_payment",
                "gateway_order_id": gateway_order_id,
                "payment_id": payment_id,
            }
        )
        return signature_matches(self.secret, gateway_order_id, payment_id, signature)

    def sign(self, gateway_order_id: str, payment_id: str) -> str:
        """The signature the hosted checkout would return for this payment."""
        return compute_signature(self.secret, gateway_order_id, payment_id)
