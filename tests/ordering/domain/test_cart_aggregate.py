"""Tests for the ShoppingCart aggregate."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityChanged
from protean.exceptions import ValidationError

from shared.exceptions import AlreadyExists, AlreadyInCart, InvalidQuantity


@pytest.fixture()
def cart():
    return ShoppingCart.create(customer_id="cust-001")


class TestCartCreation:
    def test_keyed_by_customer(self, cart):
        assert str(cart.customer_id) == "cust-001"

    def test_starts_empty(self, cart):
        assert cart.is_empty
        assert cart.subtotal == 0.0
        assert cart.shipping_fee == 0.0
        assert cart.total == 0.0

    def test_sets_timestamps(self, cart):
        assert cart.created_at is not None
        assert cart.updated_at is not None


class TestAddItem:
    def test_adds_line_with_frozen_price(self, cart):
        line = cart.add_item("prod-apple", 2, 120.0, product_name="Organic Apples", company_id="company-001")

        assert len(cart.lines) == 1
        assert line.quantity == 2
        assert line.price_at_add == 120.0
        assert line.product_name == "Organic Apples"

    def test_duplicate_product_is_rejected(self, cart):
        cart.add_item("prod-apple", 2, 120.0)

        with pytest.raises(AlreadyInCart):
            cart.add_item("prod-apple", 5, 110.0)

        line = cart.line_for("prod-apple")
        assert line.quantity == 2
        assert line.price_at_add == 120.0

    def test_duplicate_is_an_already_exists_error(self, cart):
        cart.add_item("prod-apple", 1, 120.0)
        with pytest.raises(AlreadyExists):
            cart.add_item("prod-apple", 1, 120.0)

    @pytest.mark.parametrize("quantity", [0, -1, None])
    def test_quantity_must_be_positive(self, cart, quantity):
        with pytest.raises(InvalidQuantity):
            cart.add_item("prod-apple", quantity, 120.0)
        assert cart.is_empty

    def test_raises_item_added_event(self, cart):
        cart.add_item("prod-apple", 2, 120.0)
        event = cart._events[-1]
        assert isinstance(event, CartItemAdded)
        assert event.customer_id == "cust-001"
        assert event.quantity == 2
        assert event.price_at_add == 120.0


class TestSetQuantity:
    def test_changes_quantity_but_not_price(self, cart):
        cart.add_item("prod-apple", 1, 120.0)
        cart.set_quantity("prod-apple", 4)

        line = cart.line_for("prod-apple")
        assert line.quantity == 4
        assert line.price_at_add == 120.0
        assert cart.subtotal == 480.0

    def test_below_one_is_rejected(self, cart):
        cart.add_item("prod-apple", 3, 120.0)
        with pytest.raises(InvalidQuantity):
            cart.set_quantity("prod-apple", 0)
        assert cart.line_for("prod-apple").quantity == 3

    def test_missing_line(self, cart):
        with pytest.raises(ValidationError):
            cart.set_quantity("prod-unknown", 2)

    def test_raises_quantity_changed_event(self, cart):
        cart.add_item("prod-apple", 1, 120.0)
        cart.set_quantity("prod-apple", 3)
        event = cart._events[-1]
        assert isinstance(event, CartQuantityChanged)
        assert event.previous_quantity == 1
        assert event.new_quantity == 3


class TestRemoveAndClear:
    def test_remove_line(self, cart):
        cart.add_item("prod-apple", 1, 120.0)
        cart.remove_item("prod-apple")
        assert cart.is_empty
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_remove_is_idempotent(self, cart):
        cart.add_item("prod-apple", 1, 120.0)
        cart.remove_item("prod-apple")
        events_before = len(cart._events)

        cart.remove_item("prod-apple")

        assert cart.is_empty
        assert len(cart._events) == events_before

    def test_clear_empties_the_cart(self, cart):
        cart.add_item("prod-apple", 1, 120.0)
        cart.add_item("prod-honey", 2, 450.0)
        cart.clear()
        assert cart.is_empty
        assert isinstance(cart._events[-1], CartCleared)
        assert cart._events[-1].line_count == 2


class TestTotals:
    def test_subtotal_sums_line_totals(self, cart):
        cart.add_item("prod-apple", 2, 120.0)
        cart.add_item("prod-honey", 1, 450.0)
        assert cart.subtotal == 690.0
        assert cart.shipping_fee == 99.0
        assert cart.total == 789.0

    def test_free_shipping_at_threshold(self, cart):
        cart.add_item("prod-a", 2, 500.0)
        assert cart.subtotal == 1000.0
        assert cart.shipping_fee == 0.0
        assert cart.total == 1000.0

    def test_total_is_subtotal_plus_fee(self, cart):
        cart.add_item("prod-a", 3, 77.77)
        assert cart.total == round(cart.subtotal + cart.shipping_fee, 2)

    def test_snapshot_keeps_insertion_order(self, cart):
        cart.add_item("prod-b", 1, 10.0)
        cart.add_item("prod-a", 1, 20.0)
        assert [line["product_id"] for line in cart.snapshot()] == ["prod-b", "prod-a"]
