"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (``PAYMENT_GATEWAY=fake``)
- RazorpayGateway for production (``PAYMENT_GATEWAY=razorpay``)
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway
from payments.gateway.razorpay_adapter import RazorpayGateway
from shared.settings import get_settings

_current_gateway: PaymentGateway | None = None


def build_gateway(settings=None) -> PaymentGateway:
    settings = settings or get_settings()
    if settings.payment_gateway == "razorpay":
        return RazorpayGateway(settings.razorpay_key_id, settings.razorpay_key_secret)
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
