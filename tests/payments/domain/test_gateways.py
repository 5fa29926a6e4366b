"""Tests for the fake gateway and the gateway factory."""

import pytest
from payments.gateway import build_gateway, get_gateway, reset_gateway, set_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import GatewayError, GatewayOrder
from payments.gateway.razorpay_adapter import RazorpayGateway, to_subunits

from shared.settings import Settings


class TestFakeGateway:
    def test_create_order(self):
        gateway = FakeGateway()
        order = gateway.create_order(amount=339.0, currency="INR", receipt="chk-1")

        assert isinstance(order, GatewayOrder)
        assert order.gateway_order_id.startswith("order_fake_")
        assert order.amount == 339.0
        assert gateway.calls[0]["receipt"] == "chk-1"

    def test_configured_failure(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Gateway down")

        with pytest.raises(GatewayError, match="Gateway down"):
            gateway.create_order(amount=339.0, currency="INR", receipt="chk-1")

    def test_verifies_its_own_signature(self):
        gateway = FakeGateway()
        assert gateway.verify_payment("order_1", "pay_1", gateway.sign("order_1", "pay_1"))
        assert not gateway.verify_payment("order_1", "pay_1", "forged")


class TestGatewayFactory:
    def test_fake_by_default(self):
        assert isinstance(build_gateway(Settings()), FakeGateway)

    def test_razorpay(self):
        settings = Settings(payment_gateway="razorpay", razorpay_key_id="rzp_test", razorpay_key_secret="s3cret")
        gateway = build_gateway(settings)
        assert isinstance(gateway, RazorpayGateway)
        assert gateway.key_id == "rzp_test"

    def test_razorpay_without_keys(self):
        with pytest.raises(GatewayError):
            build_gateway(Settings(payment_gateway="razorpay"))

    def test_set_and_reset(self):
        fake = FakeGateway()
        set_gateway(fake)
        assert get_gateway() is fake

        reset_gateway()
        assert get_gateway() is not fake


@pytest.mark.parametrize("amount, paise", [(339.0, 33900), (0.1, 10), (19.99, 1999), (1000, 100000)])
def test_to_subunits(amount, paise):
    assert to_subunits(amount) == paise
