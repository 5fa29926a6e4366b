"""Vendor edits to a listed product — details, pricing and stock."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    company_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    categories: Text()
    nutrients: Text()


@catalogue.command(part_of="Product")
class UpdateProductPricing:
    product_id: Identifier(required=True)
    company_id: Identifier(required=True)
    original_price: Float()
    discount_price: Float()
    clear_discount: Boolean(default=False)


@catalogue.command(part_of="Product")
class UpdateProductStock:
    product_id: Identifier(required=True)
    company_id: Identifier(required=True)
    stock_quantity: Integer(required=True)


@catalogue.command_handler(part_of=Product)
class ManageProductDetailsHandler:
    def _owned_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.company_id)
        return repo, product

    @handle(UpdateProductDetails)
    def update_details(self, command):
        repo, product = self._owned_product(command)
        product.update_details(
            name=command.name,
            description=command.description,
            categories=command.categories,
            nutrients=command.nutrients,
        )
        repo.add(product)

    @handle(UpdateProductPricing)
    def update_pricing(self, command):
        repo, product = self._owned_product(command)
        product.update_pricing(
            original_price=command.original_price,
            discount_price=command.discount_price,
            clear_discount=command.clear_discount,
        )
        repo.add(product)

    @handle(UpdateProductStock)
    def update_stock(self, command):
        repo, product = self._owned_product(command)
        product.update_stock(command.stock_quantity)
        repo.add(product)
