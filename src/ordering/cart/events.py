"""Domain events for the ShoppingCart aggregate.

Events carry quantities and prices so the cart summary projection can be
maintained without reloading the cart.
"""

from protean.fields import Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the shopping cart."""

    __version__ = 1

    customer_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String()
    quantity = Integer(required=True)
    price_at_add = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityChanged:
    """The quantity of a cart line was changed."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    price_at_add = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A product was removed from the shopping cart."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    price_at_add = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed, usually after checkout placed an order."""

    __version__ = 1

    customer_id = Identifier(required=True)
    line_count = Integer(required=True)
