"""Application tests for the checkout flow: start, confirm, fail and cancel."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import add_product_to_cart, cart_for
from ordering.checkout.checkout import Checkout
from ordering.order.order import Order
from ordering.reconciliation.case import ReconciliationCase
from protean import current_domain
from protean.exceptions import ValidationError

from shared.exceptions import InvalidTransition, PaymentFailed


def _fill_cart(customer_id="cust-001"):
    add_product_to_cart(customer_id, "prod-apple", quantity=2)
    add_product_to_cart(customer_id, "prod-honey", quantity=1)


def _pay(orchestrator, gateway, checkout, payment_id="pay_001"):
    signature = gateway.sign(checkout.gateway_order_id, payment_id)
    return orchestrator.confirm_payment(checkout.id, payment_id, signature)


def _orders():
    return current_domain.repository_for(Order)._dao.query.all().items


class TestStart:
    def test_opens_a_payment_order(self, orchestrator, gateway, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)

        assert checkout.status == "awaiting_payment"
        assert checkout.gateway_order_id.startswith("order_fake_")
        assert checkout.subtotal == 690.0
        assert checkout.shipping_fee == 99.0
        assert checkout.total_amount == 789.0

        call = gateway.calls[0]
        assert call["amount"] == 789.0
        assert call["currency"] == "INR"
        assert call["contact"]["phone"] == "+919845012345"

    def test_missing_fields_are_listed_and_nothing_is_saved(self, orchestrator, gateway, contact):
        _fill_cart()
        with pytest.raises(ValidationError) as exc:
            orchestrator.start("cust-001", new_address={"street": "Lake View Lane"}, contact=contact)

        assert {"house_number", "city", "postal_code"} <= set(exc.value.messages)
        assert current_domain.repository_for(Checkout)._dao.query.all().items == []
        assert gateway.calls == []

    def test_empty_cart_is_rejected(self, orchestrator, new_address, contact):
        with pytest.raises(ValidationError) as exc:
            orchestrator.start("cust-001", new_address=new_address, contact=contact)
        assert "cart" in exc.value.messages

    def test_saved_address_supplies_name_and_phone(self, orchestrator):
        _fill_cart()
        checkout = orchestrator.start("cust-001", address_id="addr-home")

        assert checkout.customer_name == "Asha Rao"
        assert checkout.primary_phone == "+919845012345"
        assert checkout.shipping_snapshot()["city"] == "Bengaluru"

    def test_unknown_saved_address(self, orchestrator):
        _fill_cart()
        with pytest.raises(ValidationError):
            orchestrator.start("cust-001", address_id="addr-missing")

    def test_buy_now_uses_a_single_line(self, orchestrator, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start(
            "cust-001",
            new_address=new_address,
            contact=contact,
            source="buy_now",
            product_id="prod-ghee",
            quantity=1,
        )
        assert [line["product_id"] for line in checkout.line_items()] == ["prod-ghee"]
        assert checkout.shipping_fee == 99.0

    def test_buy_now_rejects_unapproved_products(self, orchestrator, new_address, contact):
        with pytest.raises(ValidationError):
            orchestrator.start(
                "cust-001", new_address=new_address, contact=contact, source="buy_now", product_id="prod-draft"
            )

    def test_gateway_refusal_fails_the_checkout(self, orchestrator, gateway, new_address, contact):
        _fill_cart()
        gateway.configure(should_succeed=False, failure_reason="Gateway timeout")

        with pytest.raises(PaymentFailed):
            orchestrator.start("cust-001", new_address=new_address, contact=contact)

        checkouts = current_domain.repository_for(Checkout)._dao.query.all().items
        assert [c.status for c in checkouts] == ["payment_failed"]
        assert len(cart_for("cust-001").lines) == 2


class TestConfirmPayment:
    def test_creates_order_and_clears_cart(self, orchestrator, gateway, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)

        order = _pay(orchestrator, gateway, checkout)

        assert order.status == "confirmed"
        assert order.total_amount == 789.0
        assert order.items_total() == round(order.total_amount - order.shipping_fee, 2)
        assert order.payment.payment_id == "pay_001"
        assert order.shipping_address.city == "Bengaluru"
        assert cart_for("cust-001").is_empty

        saved = current_domain.repository_for(Checkout).get(checkout.id)
        assert saved.status == "order_persisted"
        assert str(saved.order_id) == str(order.id)

    def test_records_the_new_address_as_default(self, orchestrator, gateway, address_book, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)
        _pay(orchestrator, gateway, checkout)

        recorded = address_book.recorded[-1]
        assert recorded["address_id"] is None
        assert recorded["address"]["street"] == "Lake View Lane"
        assert recorded["address"]["name"] == "Asha Rao"
        assert recorded["phone"] == "+919845012345"

    def test_selected_address_is_passed_back(self, orchestrator, gateway, address_book):
        _fill_cart()
        checkout = orchestrator.start("cust-001", address_id="addr-home")
        _pay(orchestrator, gateway, checkout)
        assert address_book.recorded[-1]["address_id"] == "addr-home"

    def test_buy_now_leaves_the_cart_alone(self, orchestrator, gateway, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start(
            "cust-001", new_address=new_address, contact=contact, source="buy_now", product_id="prod-ghee"
        )
        _pay(orchestrator, gateway, checkout)
        assert len(cart_for("cust-001").lines) == 2

    def test_bad_signature_fails_payment(self, orchestrator, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)

        with pytest.raises(PaymentFailed):
            orchestrator.confirm_payment(checkout.id, "pay_001", "forged")

        assert current_domain.repository_for(Checkout).get(checkout.id).status == "payment_failed"
        assert _orders() == []
        assert len(cart_for("cust-001").lines) == 2

    def test_confirming_twice_is_rejected(self, orchestrator, gateway, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)
        _pay(orchestrator, gateway, checkout)

        with pytest.raises(InvalidTransition):
            _pay(orchestrator, gateway, checkout)
        assert len(_orders()) == 1


class TestFailAndCancel:
    def test_fail_payment_keeps_cart_and_creates_no_order(self, orchestrator, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)

        with pytest.raises(PaymentFailed) as exc:
            orchestrator.fail_payment(checkout.id, "Card declined")

        assert exc.value.messages == {"payment": ["Card declined"]}
        assert _orders() == []
        assert len(current_domain.repository_for(ShoppingCart).get("cust-001").lines) == 2
        assert current_domain.repository_for(Checkout).get(checkout.id).failure_reason == "Card declined"

    def test_cancel_leaves_no_order(self, orchestrator, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)

        cancelled = orchestrator.cancel(checkout.id)

        assert cancelled.status == "cancelled"
        assert _orders() == []
        assert len(cart_for("cust-001").lines) == 2

    def test_cancelled_checkout_cannot_be_paid(self, orchestrator, gateway, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)
        orchestrator.cancel(checkout.id)

        with pytest.raises(InvalidTransition):
            _pay(orchestrator, gateway, checkout)

    def test_no_reconciliation_case_on_the_happy_path(self, orchestrator, gateway, new_address, contact):
        _fill_cart()
        checkout = orchestrator.start("cust-001", new_address=new_address, contact=contact)
        _pay(orchestrator, gateway, checkout)
        assert current_domain.repository_for(ReconciliationCase).open_cases() == []
