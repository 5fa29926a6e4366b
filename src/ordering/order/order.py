"""Order aggregate — the denormalized record of a paid checkout.

Everything on an order is copied at placement time: the shipping address,
the contact phones, each item's name and price, and the totals. Afterwards
only the status moves, and only forward (or to cancelled).

State Machine:
    confirmed → payment_accepted → preparing → shipped → delivered
    cancelled (from any stage before delivered)
"""

from datetime import UTC, datetime

from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from catalogue.shared.pricing import line_total
from ordering.domain import ordering
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusAdvanced
from ordering.order.status import (
    OrderStatus,
    TrackerStep,
    can_advance,
    can_cancel,
    next_stages,
    progress,
)
from shared.exceptions import InvalidTransition

SHIPPING_ADDRESS_FIELDS = (
    "name",
    "house_number",
    "street",
    "area",
    "city",
    "state",
    "postal_code",
    "country",
    "latitude",
    "longitude",
)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, copied from the checkout.

    Later edits to the customer's address book never touch it.
    """

    name = String(max_length=100)
    house_number = String(required=True, max_length=50)
    street = String(required=True, max_length=255)
    area = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    latitude = Float()
    longitude = Float()


@ordering.value_object(part_of="Order")
class PaymentReceipt:
    gateway_order_id = String(required=True, max_length=255)
    payment_id = String(required=True, max_length=255)
    signature = String(max_length=255)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    company_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    price_at_purchase = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    checkout_id = Identifier()
    customer_name = String(max_length=100)
    primary_phone = String(max_length=20)
    secondary_phone = String(max_length=20)
    shipping_address = ValueObject(ShippingAddress)
    items = HasMany(OrderItem)
    subtotal = Float(default=0.0)
    shipping_fee = Float(default=0.0)
    total_amount = Float(default=0.0)
    currency = String(max_length=3, default="INR")
    payment = ValueObject(PaymentReceipt)
    status = String(choices=OrderStatus, default=OrderStatus.CONFIRMED.value)
    cancelled_at_stage = String(max_length=20)
    cancellation_reason = String(max_length=500)
    placed_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        items,
        shipping_address,
        shipping_fee,
        payment,
        currency="INR",
        customer_name=None,
        primary_phone=None,
        secondary_phone=None,
        checkout_id=None,
    ):
        """Create a confirmed order from checkout data.

        Args:
            items: Dicts with product_id, product_name, company_id, quantity
                and price_at_add (the cart's frozen unit price).
            shipping_address: Dict with the ShippingAddress fields.
            payment: Dict with gateway_order_id, payment_id and signature.
        """
        now = datetime.now(UTC)
        order_items = [
            OrderItem(
                product_id=item["product_id"],
                product_name=item.get("product_name"),
                company_id=item.get("company_id"),
                quantity=item["quantity"],
                price_at_purchase=item["price_at_add"],
            )
            for item in items
        ]
        subtotal = round(sum(line_total(i.price_at_purchase, i.quantity) for i in order_items), 2)
        address_fields = {k: v for k, v in shipping_address.items() if k in SHIPPING_ADDRESS_FIELDS}

        order = cls(
            customer_id=customer_id,
            checkout_id=checkout_id,
            customer_name=customer_name,
            primary_phone=primary_phone,
            secondary_phone=secondary_phone,
            shipping_address=ShippingAddress(**address_fields),
            items=order_items,
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            total_amount=round(subtotal + shipping_fee, 2),
            currency=currency,
            payment=PaymentReceipt(**payment),
            status=OrderStatus.CONFIRMED.value,
            placed_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                checkout_id=str(checkout_id) if checkout_id else None,
                item_count=sum(i.quantity for i in order_items),
                subtotal=order.subtotal,
                shipping_fee=order.shipping_fee,
                total_amount=order.total_amount,
                currency=currency,
                status=order.status,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def advance(self, target):
        """Move to a later stage. Staying put or moving back is rejected."""
        if not can_advance(self.status, target):
            raise InvalidTransition({"status": [f"Cannot move order from {self.status} to {target}"]})

        previous = self.status
        now = datetime.now(UTC)
        self.status = target
        self.updated_at = now

        self.raise_(
            OrderStatusAdvanced(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=previous,
                new_status=target,
                advanced_at=now,
            )
        )

    def cancel(self, reason=None):
        if not can_cancel(self.status):
            raise InvalidTransition({"status": [f"Cannot cancel an order that is {self.status}"]})

        stage = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at_stage = stage
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                cancelled_at_stage=stage,
                reason=reason,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def tracker(self) -> list[TrackerStep]:
        return progress(self.status, self.cancelled_at_stage)

    def next_stages(self) -> list[str]:
        return next_stages(self.status)

    def contains_company(self, company_id) -> bool:
        return any(str(item.company_id) == str(company_id) for item in self.items)

    def items_for_company(self, company_id) -> list[OrderItem]:
        return [item for item in self.items if str(item.company_id) == str(company_id)]

    def items_total(self) -> float:
        return round(sum(line_total(i.price_at_purchase, i.quantity) for i in self.items), 2)


@ordering.repository(part_of=Order)
class OrderRepository:
    def for_customer(self, customer_id) -> list[Order]:
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-placed_at").limit(None).all().items

    def for_company(self, company_id) -> list[Order]:
        """Orders with at least one item sold by ``company_id``."""
        orders = self._dao.query.order_by("-placed_at").limit(None).all().items
        return [order for order in orders if order.contains_company(company_id)]

    def for_checkout(self, checkout_id) -> Order | None:
        results = self._dao.query.filter(checkout_id=str(checkout_id)).all().items
        return results[0] if results else None
