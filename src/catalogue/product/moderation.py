"""Moderator approval of product listings."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class ApproveProduct:
    product_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class RevokeProductApproval:
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class ModerationHandler:
    @handle(ApproveProduct)
    def approve_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.approve()
        repo.add(product)

    @handle(RevokeProductApproval)
    def revoke_approval(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.revoke_approval()
        repo.add(product)
