"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A vendor listed a new product (pending approval)."""

    __version__ = 1

    product_id: Identifier(required=True)
    company_id: Identifier(required=True)
    name: String(required=True)
    original_price: Float(required=True)
    discount_price: Float()
    stock_quantity: Integer()
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String()
    description: Text()
    categories: Text()
    nutrients: Text()


@catalogue.event(part_of="Product")
class ProductPriceChanged:
    """Catalogue price changed. Cart lines keep their price-at-add."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_original_price: Float(required=True)
    original_price: Float(required=True)
    previous_discount_price: Float()
    discount_price: Float()


@catalogue.event(part_of="Product")
class ProductStockUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)


@catalogue.event(part_of="Product")
class ProductMediaAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    media_id: Identifier(required=True)
    url: String(required=True)
    kind: String(required=True)


@catalogue.event(part_of="Product")
class ProductMediaRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    media_id: Identifier(required=True)
    url: String(required=True)


@catalogue.event(part_of="Product")
class ProductApproved:
    __version__ = 1

    product_id: Identifier(required=True)
    approved_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductApprovalRevoked:
    __version__ = 1

    product_id: Identifier(required=True)
    revoked_at: DateTime(required=True)
