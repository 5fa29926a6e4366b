"""Cart item management — commands, handler and the add-to-cart service."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.products import get_product_lookup
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    company_id = Identifier()
    quantity = Integer(default=1)
    price_at_add = Float(required=True)


@ordering.command(part_of="ShoppingCart")
class SetCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        try:
            cart = repo.get(command.customer_id)
        except ObjectNotFoundError:
            cart = ShoppingCart.create(command.customer_id)

        line = cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity,
            price_at_add=command.price_at_add,
            product_name=command.product_name,
            company_id=command.company_id,
        )
        repo.add(cart)
        return str(line.id)

    @handle(SetCartQuantity)
    def set_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        try:
            cart = repo.get(command.customer_id)
        except ObjectNotFoundError:
            raise ValidationError({"product_id": ["Product is not in the cart"]}) from None

        cart.set_quantity(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        try:
            cart = repo.get(command.customer_id)
        except ObjectNotFoundError:
            return

        cart.remove_item(product_id=command.product_id)
        repo.add(cart)


def add_product_to_cart(customer_id, product_id, quantity=1, lookup=None) -> str:
    """Price the product through the catalogue and add it to the cart.

    Only approved products can be bought. The effective unit price at this
    moment becomes the line's price-at-add.
    """
    product = (lookup or get_product_lookup()).snapshot(product_id)
    if not product.is_approved:
        raise ValidationError({"product_id": ["Product is not available for sale"]})

    return current_domain.process(
        AddToCart(
            customer_id=customer_id,
            product_id=product.product_id,
            product_name=product.name,
            company_id=product.company_id,
            quantity=quantity,
            price_at_add=product.unit_price,
        ),
        asynchronous=False,
    )


def cart_for(customer_id) -> ShoppingCart:
    """The customer's cart, or an unsaved empty one."""
    try:
        return current_domain.repository_for(ShoppingCart).get(customer_id)
    except ObjectNotFoundError:
        return ShoppingCart.create(customer_id)
