"""Customer orders — the "My Orders" list with live status."""

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusAdvanced
from ordering.order.order import Order


@ordering.projection
class CustomerOrders:
    order_id = Identifier(identifier=True, required=True)
    customer_id = Identifier(required=True)
    status = String(required=True)
    item_count = Integer(default=0)
    total_amount = Float(default=0.0)
    currency = String(max_length=3)
    placed_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=CustomerOrders, aggregates=[Order])
class CustomerOrdersProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(CustomerOrders).add(
            CustomerOrders(
                order_id=event.order_id,
                customer_id=event.customer_id,
                status=event.status,
                item_count=event.item_count,
                total_amount=event.total_amount,
                currency=event.currency,
                placed_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    @on(OrderStatusAdvanced)
    def on_status_advanced(self, event):
        repo = current_domain.repository_for(CustomerOrders)
        record = repo.get(event.order_id)
        record.status = event.new_status
        record.updated_at = event.advanced_at
        repo.add(record)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        repo = current_domain.repository_for(CustomerOrders)
        record = repo.get(event.order_id)
        record.status = "cancelled"
        record.updated_at = event.cancelled_at
        repo.add(record)
