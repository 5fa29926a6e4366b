"""Catalogue lookups made by the ordering context.

Ordering never reads catalogue tables directly. It asks a ``ProductLookup``
for a priced snapshot, so tests and the checkout flow can swap the source.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError


@dataclass(frozen=True)
class ProductSnapshot:
    product_id: str
    name: str
    company_id: str | None
    unit_price: float
    is_approved: bool
    stock_quantity: int = 0


class ProductLookup(ABC):
    @abstractmethod
    def snapshot(self, product_id) -> ProductSnapshot:
        """Current name, owner and effective unit price of a product."""
        ...


class CatalogueProductLookup(ProductLookup):
    """Reads products through the catalogue domain."""

    def snapshot(self, product_id) -> ProductSnapshot:
        from catalogue.domain import catalogue
        from catalogue.product.product import Product

        with catalogue.domain_context():
            try:
                product = catalogue.repository_for(Product).get(product_id)
            except ObjectNotFoundError:
                raise ValidationError({"product_id": [f"Product {product_id} does not exist"]}) from None

            return ProductSnapshot(
                product_id=str(product.id),
                name=product.name,
                company_id=str(product.company_id) if product.company_id else None,
                unit_price=product.effective_price(),
                is_approved=bool(product.is_approved),
                stock_quantity=product.stock_quantity or 0,
            )


_current_lookup: ProductLookup | None = None


def get_product_lookup() -> ProductLookup:
    global _current_lookup
    if _current_lookup is None:
        _current_lookup = CatalogueProductLookup()
    return _current_lookup


def set_product_lookup(lookup: ProductLookup) -> None:
    """Override the active lookup (useful for tests)."""
    global _current_lookup
    _current_lookup = lookup


def reset_product_lookup() -> None:
    global _current_lookup
    _current_lookup = None
