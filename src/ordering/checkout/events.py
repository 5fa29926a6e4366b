"""Domain events for the Checkout aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Checkout")
class CheckoutAwaitingPayment:
    """Details were valid and the gateway opened a payment order."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    source = String(required=True)
    gateway_order_id = String(required=True)
    total_amount = Float(required=True)
    currency = String(max_length=3)


@ordering.event(part_of="Checkout")
class CheckoutPaymentFailed:
    __version__ = 1

    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason = String()
    failed_at = DateTime(required=True)


@ordering.event(part_of="Checkout")
class CheckoutCancelled:
    __version__ = 1

    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Checkout")
class CheckoutCompleted:
    """The paid checkout was saved as an order."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    attempts = Integer(required=True)


@ordering.event(part_of="Checkout")
class CheckoutPersistenceFailed:
    """Payment succeeded but the order could not be saved."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_id = String(required=True)
    attempts = Integer(required=True)
    reason = String()
