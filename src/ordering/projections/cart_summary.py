"""Cart summary — the header badge: line count, item quantity and subtotal."""

from datetime import UTC, datetime

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityChanged
from ordering.domain import ordering


@ordering.projection
class CartSummary:
    customer_id = Identifier(identifier=True, required=True)
    line_count = Integer(default=0)
    item_quantity = Integer(default=0)
    subtotal = Float(default=0.0)
    updated_at = DateTime()


def _summary_for(customer_id):
    repo = current_domain.repository_for(CartSummary)
    try:
        return repo, repo.get(customer_id)
    except ObjectNotFoundError:
        return repo, CartSummary(customer_id=customer_id)


@ordering.projector(projector_for=CartSummary, aggregates=[ShoppingCart])
class CartSummaryProjector:
    @on(CartItemAdded)
    def on_item_added(self, event):
        repo, summary = _summary_for(event.customer_id)
        summary.line_count = (summary.line_count or 0) + 1
        summary.item_quantity = (summary.item_quantity or 0) + event.quantity
        summary.subtotal = round((summary.subtotal or 0.0) + event.price_at_add * event.quantity, 2)
        summary.updated_at = datetime.now(UTC)
        repo.add(summary)

    @on(CartQuantityChanged)
    def on_quantity_changed(self, event):
        repo, summary = _summary_for(event.customer_id)
        delta = event.new_quantity - event.previous_quantity
        summary.item_quantity = (summary.item_quantity or 0) + delta
        summary.subtotal = round((summary.subtotal or 0.0) + event.price_at_add * delta, 2)
        summary.updated_at = datetime.now(UTC)
        repo.add(summary)

    @on(CartItemRemoved)
    def on_item_removed(self, event):
        repo, summary = _summary_for(event.customer_id)
        summary.line_count = max(0, (summary.line_count or 0) - 1)
        summary.item_quantity = max(0, (summary.item_quantity or 0) - event.quantity)
        summary.subtotal = max(0.0, round((summary.subtotal or 0.0) - event.price_at_add * event.quantity, 2))
        summary.updated_at = datetime.now(UTC)
        repo.add(summary)

    @on(CartCleared)
    def on_cart_cleared(self, event):
        repo, summary = _summary_for(event.customer_id)
        summary.line_count = 0
        summary.item_quantity = 0
        summary.subtotal = 0.0
        summary.updated_at = datetime.now(UTC)
        repo.add(summary)
