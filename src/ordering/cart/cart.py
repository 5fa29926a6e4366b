"""Shopping Cart aggregate — one cart per customer.

Each line freezes the unit price the product had when it was added. Totals
are always computed from those prices, never from the live catalogue.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityChanged
from ordering.domain import ordering
from ordering.shared.charges import CartTotals, totals_for
from shared.exceptions import AlreadyInCart, InvalidQuantity


@ordering.entity(part_of="ShoppingCart")
class CartLine:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    company_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    price_at_add = Float(required=True, min_value=0.0)
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier(identifier=True)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def line_for(self, product_id) -> CartLine | None:
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    def add_item(self, product_id, quantity, price_at_add, product_name=None, company_id=None):
        """Add a product. A product already in the cart is rejected, not merged."""
        if self.line_for(product_id) is not None:
            raise AlreadyInCart({"product_id": ["Product is already in the cart"]})
        if quantity is None or quantity < 1:
            raise InvalidQuantity({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        line = CartLine(
            product_id=product_id,
            product_name=product_name,
            company_id=company_id,
            quantity=quantity,
            price_at_add=price_at_add,
            added_at=now,
        )
        self.add_lines(line)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                customer_id=str(self.customer_id),
                line_id=str(line.id),
                product_id=str(product_id),
                product_name=product_name,
                quantity=quantity,
                price_at_add=price_at_add,
            )
        )
        return line

    def set_quantity(self, product_id, quantity):
        """Change a line's quantity. Its price-at-add is left as it was."""
        if quantity is None or quantity < 1:
            raise InvalidQuantity({"quantity": ["Quantity must be at least 1"]})

        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        previous = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityChanged(
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=quantity,
                price_at_add=line.price_at_add,
            )
        )

    def remove_item(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            return

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                quantity=line.quantity,
                price_at_add=line.price_at_add,
            )
        )

    def clear(self):
        count = len(self.lines)
        for line in list(self.lines):
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(customer_id=str(self.customer_id), line_count=count))

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def totals(self, settings=None) -> CartTotals:
        return totals_for(((line.price_at_add, line.quantity) for line in self.lines), settings)

    @property
    def subtotal(self) -> float:
        return self.totals().subtotal

    @property
    def shipping_fee(self) -> float:
        return self.totals().shipping_fee

    @property
    def total(self) -> float:
        return self.totals().total

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def snapshot(self) -> list[dict]:
        """Plain copies of the lines, in the order they were added."""
        return [
            {
                "product_id": str(line.product_id),
                "product_name": line.product_name,
                "company_id": str(line.company_id) if line.company_id else None,
                "quantity": line.quantity,
                "price_at_add": line.price_at_add,
            }
            for line in sorted(self.lines, key=lambda line: line.added_at)
        ]
