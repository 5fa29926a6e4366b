"""Payment gateway port (abstract interface).

Checkout asks the gateway to open a hosted payment order, the shopper pays
on the gateway's page, and the gateway hands back a payment id and a
signature that checkout verifies before saving the order. Adapters:
FakeGateway (dev/test) and RazorpayGateway (production).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GatewayOrder:
    """A payment order opened at the gateway."""

    gateway_order_id: str
    amount: float
    currency: str
    receipt: str | None = None
    status: str | None = None


class GatewayError(Exception):
    """The gateway refused the request or could not be reached."""


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_order(
        self,
        amount: float,
        currency: str,
        receipt: str,
        contact: dict | None = None,
    ) -> GatewayOrder:
        """Open a payment order for ``amount`` (in major currency units)."""
        ...

    @abstractmethod
    def verify_payment(
        self,
        gateway_order_id: str,
        payment_id: str,
        signature: str,
    ) -> bool:
        """Check that the payment confirmation really came from the gateway."""
        ...
