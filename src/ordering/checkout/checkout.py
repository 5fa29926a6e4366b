"""Checkout aggregate — one attempt at paying for a cart or a single product.

The checkout keeps its own copy of the lines, the shipping address and the
totals, so a paid checkout can always be turned into an order later, even
if the cart or the address book changed in between.

State Machine:
    collecting_details → awaiting_payment → order_persisted
                                          → payment_failed
                                          → persistence_failed → order_persisted
                                          → cancelled
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.checkout.events import (
    CheckoutAwaitingPayment,
    CheckoutCancelled,
    CheckoutCompleted,
    CheckoutPaymentFailed,
    CheckoutPersistenceFailed,
)
from ordering.domain import ordering
from shared.exceptions import InvalidTransition


class CheckoutStatus(Enum):
    COLLECTING_DETAILS = "collecting_details"
    AWAITING_PAYMENT = "awaiting_payment"
    ORDER_PERSISTED = "order_persisted"
    PAYMENT_FAILED = "payment_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    CANCELLED = "cancelled"


class CheckoutSource(Enum):
    CART = "cart"
    BUY_NOW = "buy_now"


_VALID_TRANSITIONS = {
    CheckoutStatus.COLLECTING_DETAILS: {
        CheckoutStatus.AWAITING_PAYMENT,
        CheckoutStatus.PAYMENT_FAILED,
        CheckoutStatus.CANCELLED,
    },
    CheckoutStatus.AWAITING_PAYMENT: {
        CheckoutStatus.ORDER_PERSISTED,
        CheckoutStatus.PAYMENT_FAILED,
        CheckoutStatus.PERSISTENCE_FAILED,
        CheckoutStatus.CANCELLED,
    },
    # Reconciliation may still save the order
    CheckoutStatus.PERSISTENCE_FAILED: {CheckoutStatus.ORDER_PERSISTED},
    CheckoutStatus.ORDER_PERSISTED: set(),
    CheckoutStatus.PAYMENT_FAILED: set(),
    CheckoutStatus.CANCELLED: set(),
}


@ordering.aggregate
class Checkout:
    customer_id = Identifier(required=True)
    source = String(choices=CheckoutSource, default=CheckoutSource.CART.value)
    status = String(choices=CheckoutStatus, default=CheckoutStatus.COLLECTING_DETAILS.value)
    lines = Text(required=True)  # JSON: list of line dicts
    shipping = Text(required=True)  # JSON: address dict
    address_id = String(max_length=50)  # address book id, or "new"
    customer_name = String(max_length=100)
    primary_phone = String(max_length=20)
    secondary_phone = String(max_length=20)
    email = String(max_length=254)
    subtotal = Float(default=0.0)
    shipping_fee = Float(default=0.0)
    total_amount = Float(default=0.0)
    currency = String(max_length=3, default="INR")
    gateway_order_id = String(max_length=255)
    payment_id = String(max_length=255)
    signature = String(max_length=255)
    failure_reason = String(max_length=500)
    persist_attempts = Integer(default=0)
    order_id = Identifier()
    started_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def begin(cls, customer_id, source, lines, shipping, totals, currency, address_id=None, contact=None):
        contact = contact or {}
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            source=source,
            status=CheckoutStatus.COLLECTING_DETAILS.value,
            lines=json.dumps(lines),
            shipping=json.dumps(shipping),
            address_id=address_id,
            customer_name=contact.get("name"),
            primary_phone=contact.get("primary_phone"),
            secondary_phone=contact.get("secondary_phone"),
            email=contact.get("email"),
            subtotal=totals.subtotal,
            shipping_fee=totals.shipping_fee,
            total_amount=totals.total,
            currency=currency,
            started_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------
    def line_items(self) -> list[dict]:
        return json.loads(self.lines) if self.lines else []

    def shipping_snapshot(self) -> dict:
        return json.loads(self.shipping) if self.shipping else {}

    @property
    def is_from_cart(self) -> bool:
        return self.source == CheckoutSource.CART.value

    def payment_receipt(self) -> dict:
        return {
            "gateway_order_id": self.gateway_order_id,
            "payment_id": self.payment_id,
            "signature": self.signature,
        }

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _transition_to(self, target: CheckoutStatus):
        current = CheckoutStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition({"status": [f"Checkout cannot move from {current.value} to {target.value}"]})
        self.status = target.value
        self.updated_at = datetime.now(UTC)

    def await_payment(self, gateway_order_id):
        self._transition_to(CheckoutStatus.AWAITING_PAYMENT)
        self.gateway_order_id = gateway_order_id

        self.raise_(
            CheckoutAwaitingPayment(
                checkout_id=str(self.id),
                customer_id=str(self.customer_id),
                source=self.source,
                gateway_order_id=gateway_order_id,
                total_amount=self.total_amount,
                currency=self.currency,
            )
        )

    def record_payment(self, payment_id, signature):
        """Keep the gateway's payment ids before any order write is tried."""
        if self.status != CheckoutStatus.AWAITING_PAYMENT.value:
            raise InvalidTransition({"status": [f"Checkout is {self.status}, not awaiting payment"]})
        self.payment_id = payment_id
        self.signature = signature
        self.updated_at = datetime.now(UTC)

    def mark_persisted(self, order_id):
        self._transition_to(CheckoutStatus.ORDER_PERSISTED)
        self.order_id = order_id

        self.raise_(
            CheckoutCompleted(
                checkout_id=str(self.id),
                customer_id=str(self.customer_id),
                order_id=str(order_id),
                attempts=self.persist_attempts or 0,
            )
        )

    def mark_payment_failed(self, reason):
        self._transition_to(CheckoutStatus.PAYMENT_FAILED)
        self.failure_reason = reason

        self.raise_(
            CheckoutPaymentFailed(
                checkout_id=str(self.id),
                customer_id=str(self.customer_id),
                reason=reason,
                failed_at=self.updated_at,
            )
        )

    def mark_persistence_failed(self, reason):
        self._transition_to(CheckoutStatus.PERSISTENCE_FAILED)
        self.failure_reason = reason

        self.raise_(
            CheckoutPersistenceFailed(
                checkout_id=str(self.id),
                customer_id=str(self.customer_id),
                payment_id=self.payment_id,
                attempts=self.persist_attempts or 0,
                reason=reason,
            )
        )

    def cancel(self):
        if self.status != CheckoutStatus.AWAITING_PAYMENT.value:
            raise InvalidTransition({"status": ["Only a checkout awaiting payment can be cancelled"]})
        self._transition_to(CheckoutStatus.CANCELLED)

        self.raise_(
            CheckoutCancelled(
                checkout_id=str(self.id),
                customer_id=str(self.customer_id),
                cancelled_at=self.updated_at,
            )
        )
