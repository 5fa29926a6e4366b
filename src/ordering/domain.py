"""Ordering bounded context — cart, orders and checkout.

Handles the shopping cart, the order status tracker, the checkout flow that
turns a paid cart into an order, and the reconciliation queue for paid
checkouts whose order could not be saved.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
