"""Product creation — command and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.company.company import Company
from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class CreateProduct:
    company_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    description: Text()
    original_price: Float(required=True)
    discount_price: Float()
    stock_quantity: Integer(default=0)
    categories: Text()
    nutrients: Text()


@catalogue.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        # Raises ObjectNotFoundError for an unknown company
        current_domain.repository_for(Company).get(command.company_id)

        product = Product.create(
            company_id=command.company_id,
            name=command.name,
            original_price=command.original_price,
            discount_price=command.discount_price,
            stock_quantity=command.stock_quantity,
            description=command.description,
            categories=command.categories,
            nutrients=command.nutrients,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
