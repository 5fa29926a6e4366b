"""Product photos and videos — commands, handler and upload service."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue, logger
from catalogue.product.product import MediaKind, Product
from catalogue.storage import get_storage


@catalogue.command(part_of="Product")
class AddProductMedia:
    product_id: Identifier(required=True)
    company_id: Identifier(required=True)
    url: String(required=True, max_length=500)
    kind: String(choices=MediaKind, default=MediaKind.PHOTO.value)


@catalogue.command(part_of="Product")
class RemoveProductMedia:
    product_id: Identifier(required=True)
    company_id: Identifier(required=True)
    media_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class ManageMediaHandler:
    @handle(AddProductMedia)
    def add_media(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.company_id)
        item = product.attach_media(url=command.url, kind=command.kind)
        repo.add(product)
        return str(item.id)

    @handle(RemoveProductMedia)
    def remove_media(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.company_id)
        item = product.detach_media(command.media_id)
        repo.add(product)

        get_storage().delete(item.url)


def upload_product_media(product_id, company_id, data: bytes, filename: str, kind=MediaKind.PHOTO.value) -> str:
    """Store the file, then attach its URL to the product.

    The stored object is deleted again if the product rejects it (wrong
    owner, media limit reached), so no orphaned files are left behind.
    """
    storage = get_storage()
    url = storage.store(data, filename, folder=f"products/{product_id}")
    try:
        return current_domain.process(
            AddProductMedia(product_id=product_id, company_id=company_id, url=url, kind=kind),
            asynchronous=False,
        )
    except Exception:
        logger.warning("product_media_rejected", product_id=str(product_id), url=url)
        storage.delete(url)
        raise
