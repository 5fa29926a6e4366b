"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A paid checkout was saved as an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    checkout_id = Identifier()
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    shipping_fee = Float(required=True)
    total_amount = Float(required=True)
    currency = String(max_length=3)
    status = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusAdvanced:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    advanced_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    cancelled_at_stage = String(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)
