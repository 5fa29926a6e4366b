"""Vendor dashboard stock summary."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from catalogue.product.product import Product
from shared.settings import get_settings


@dataclass(frozen=True)
class InventorySummary:
    total_products: int
    approved_listings: int
    out_of_stock: int
    low_stock: int


def inventory_summary(company_id, low_stock_threshold: int | None = None) -> InventorySummary:
    """Count a company's products by listing and stock state.

    Low stock means some units remain but fewer than the threshold.
    """
    threshold = get_settings().low_stock_threshold if low_stock_threshold is None else low_stock_threshold
    products = current_domain.repository_for(Product).for_company(company_id)

    return InventorySummary(
        total_products=len(products),
        approved_listings=sum(1 for p in products if p.is_approved),
        out_of_stock=sum(1 for p in products if (p.stock_quantity or 0) == 0),
        low_stock=sum(1 for p in products if 0 < (p.stock_quantity or 0) < threshold),
    )
