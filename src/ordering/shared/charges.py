"""Cart and order charges — subtotal, shipping fee and total."""

from dataclasses import dataclass

from catalogue.shared.pricing import line_total
from shared.settings import Settings, get_settings


@dataclass(frozen=True)
class CartTotals:
    subtotal: float
    shipping_fee: float
    total: float
    item_count: int


def shipping_fee_for(subtotal: float, settings: Settings | None = None) -> float:
    """Flat fee below the free-shipping threshold. An empty cart ships free."""
    settings = settings or get_settings()
    if 0 < subtotal < settings.free_shipping_threshold:
        return settings.shipping_fee
    return 0.0


def totals_for(lines, settings: Settings | None = None) -> CartTotals:
    """Totals for ``(unit_price, quantity)`` pairs."""
    lines = list(lines)
    subtotal = round(sum(line_total(price, quantity) for price, quantity in lines), 2)
    fee = shipping_fee_for(subtotal, settings)
    return CartTotals(
        subtotal=subtotal,
        shipping_fee=fee,
        total=round(subtotal + fee, 2),
        item_count=sum(quantity for _, quantity in lines),
    )
