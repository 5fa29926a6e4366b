"""Pricing resolver — the unit price a shopper pays and line totals.

A discount applies only when it is present and strictly lower than the
original price. Missing or malformed prices raise ``PricingError`` rather
than being treated as free.
"""

import math

from shared.exceptions import InvalidQuantity, PricingError


def _as_price(value, field: str) -> float:
    if value is None or isinstance(value, bool):
        raise PricingError({field: ["Price is missing"]})
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise PricingError({field: [f"Price {value!r} is not a number"]}) from None
    if math.isnan(price) or math.isinf(price) or price < 0:
        raise PricingError({field: [f"Price {value!r} is not a valid amount"]})
    return price


def effective_unit_price(original_price, discount_price=None) -> float:
    """Resolve the unit price from a product's stored prices."""
    original = _as_price(original_price, "original_price")
    if discount_price is None:
        return original

    discount = _as_price(discount_price, "discount_price")
    return discount if discount < original else original


def line_total(unit_price, quantity: int) -> float:
    if quantity is None or quantity < 1:
        raise InvalidQuantity({"quantity": ["Quantity must be at least 1"]})
    return round(_as_price(unit_price, "unit_price") * quantity, 2)
