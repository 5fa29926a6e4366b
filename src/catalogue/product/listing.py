"""Shop listing — approved products with their effective price."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from catalogue.product.product import Product


@dataclass(frozen=True)
class ListedProduct:
    product_id: str
    company_id: str
    name: str
    original_price: float
    discount_price: float | None
    effective_price: float
    stock_quantity: int
    categories: list[str]
    thumbnail_url: str | None


def _listed(product: Product) -> ListedProduct:
    photos = sorted(product.media, key=lambda m: m.display_order or 0)
    return ListedProduct(
        product_id=str(product.id),
        company_id=str(product.company_id),
        name=product.name,
        original_price=product.original_price,
        discount_price=product.discount_price,
        effective_price=product.effective_price(),
        stock_quantity=product.stock_quantity or 0,
        categories=product.category_list,
        thumbnail_url=photos[0].url if photos else None,
    )


def shop_listing(search: str | None = None, category: str | None = None) -> list[ListedProduct]:
    """Approved products, optionally narrowed by name search and category tag."""
    products = current_domain.repository_for(Product).approved()

    if search:
        needle = search.strip().lower()
        products = [p for p in products if needle in (p.name or "").lower()]
    if category:
        products = [p for p in products if p.in_category(category)]

    return [_listed(p) for p in sorted(products, key=lambda p: p.created_at, reverse=True)]
