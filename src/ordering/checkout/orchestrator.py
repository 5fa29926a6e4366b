"""Checkout orchestration — from shipping details to a saved, paid order.

Flow:
    1. start: validate details, snapshot the lines, open a gateway payment
       order, wait for payment.
    2. confirm_payment: verify the gateway signature, keep the payment ids,
       then write the order, the cart clear and the checkout status in one
       unit of work. The write is retried; when every attempt fails the
       checkout is escalated to the reconciliation queue.
    3. After the order commits, the shipping address is recorded in the
       customer's address book. A failure there opens its own
       reconciliation case instead of failing the paid order.

Payment failure and cancellation never create an order and never touch
the cart.
"""

from protean import UnitOfWork
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.products import get_product_lookup
from ordering.checkout.address_book import AddressBook, IdentityAddressBook
from ordering.checkout.checkout import Checkout, CheckoutSource, CheckoutStatus
from ordering.checkout.validation import validate_details
from ordering.domain import logger
from ordering.order.order import SHIPPING_ADDRESS_FIELDS, Order
from ordering.reconciliation.case import CaseKind, ReconciliationCase
from ordering.shared.charges import totals_for
from payments.gateway import get_gateway
from payments.gateway.port import GatewayError, PaymentGateway
from shared.exceptions import InvalidQuantity, InvalidTransition, PaymentFailed, PersistenceFailed
from shared.settings import MIN_PERSIST_ATTEMPTS, Settings, get_settings

NEW_ADDRESS = "new"

PERSISTENCE_FAILED_MESSAGE = (
    "Your payment was received but the order could not be saved. "
    "Our team has been notified and will complete it for you."
)


class CheckoutOrchestrator:
    def __init__(
        self,
        gateway: PaymentGateway | None = None,
        address_book: AddressBook | None = None,
        products=None,
        settings: Settings | None = None,
    ) -> None:
        self.gateway = gateway or get_gateway()
        self.address_book = address_book or IdentityAddressBook()
        self.products = products or get_product_lookup()
        self.settings = settings or get_settings()

    # -------------------------------------------------------------------
    # Collecting details → awaiting payment
    # -------------------------------------------------------------------
    def start(
        self,
        customer_id,
        address_id=NEW_ADDRESS,
        new_address: dict | None = None,
        contact: dict | None = None,
        source=CheckoutSource.CART.value,
        product_id=None,
        quantity=1,
    ) -> Checkout:
        """Validate details and open a payment order.

        Nothing is saved when validation fails.
        """
        log = logger.bind(customer_id=str(customer_id), source=source)
        contact = {k: v for k, v in (contact or {}).items() if v not in (None, "")}

        if not address_id or address_id == NEW_ADDRESS:
            address_id = NEW_ADDRESS
            shipping = dict(new_address or {})
        else:
            shipping = self.address_book.select(customer_id, address_id)
            contact.setdefault("name", shipping.get("name"))

        contact.setdefault("primary_phone", shipping.get("primary_phone"))
        if shipping.get("secondary_phone"):
            contact.setdefault("secondary_phone", shipping.get("secondary_phone"))
        shipping = {field: shipping.get(field) for field in SHIPPING_ADDRESS_FIELDS}

        validate_details(shipping, contact)

        lines = self._lines_for(customer_id, source, product_id, quantity)
        if not lines:
            raise ValidationError({"cart": ["Cart is empty"]})

        totals = totals_for(((line["price_at_add"], line["quantity"]) for line in lines), self.settings)
        checkout = Checkout.begin(
            customer_id=customer_id,
            source=source,
            lines=lines,
            shipping=shipping,
            totals=totals,
            currency=self.settings.currency,
            address_id=address_id,
            contact=contact,
        )
        repo = current_domain.repository_for(Checkout)

        try:
            gateway_order = self.gateway.create_order(
                amount=totals.total,
                currency=self.settings.currency,
                receipt=str(checkout.id),
                contact={
                    "name": contact.get("name"),
                    "email": contact.get("email"),
                    "phone": contact.get("primary_phone"),
                },
            )
        except GatewayError as exc:
            checkout.mark_payment_failed(str(exc))
            repo.add(checkout)
            log.warning("checkout_payment_failed", checkout_id=str(checkout.id), reason=str(exc))
            raise PaymentFailed({"payment": [str(exc)]}) from exc

        checkout.await_payment(gateway_order.gateway_order_id)
        repo.add(checkout)

        log.info(
            "checkout_started",
            checkout_id=str(checkout.id),
            gateway_order_id=gateway_order.gateway_order_id,
            total_amount=totals.total,
        )
        return checkout

    def _lines_for(self, customer_id, source, product_id, quantity) -> list[dict]:
        if source == CheckoutSource.BUY_NOW.value:
            if not product_id:
                raise ValidationError({"product_id": ["This field is required"]})
            if quantity is None or quantity < 1:
                raise InvalidQuantity({"quantity": ["Quantity must be at least 1"]})

            product = self.products.snapshot(product_id)
            if not product.is_approved:
                raise ValidationError({"product_id": ["Product is not available for sale"]})
            return [
                {
                    "product_id": product.product_id,
                    "product_name": product.name,
                    "company_id": product.company_id,
                    "quantity": quantity,
                    "price_at_add": product.unit_price,
                }
            ]

        if source != CheckoutSource.CART.value:
            raise ValidationError({"source": [f"Unknown checkout source {source!r}"]})

        try:
            cart = current_domain.repository_for(ShoppingCart).get(customer_id)
        except ObjectNotFoundError:
            return []
        return cart.snapshot()

    # -------------------------------------------------------------------
    # Awaiting payment → outcome
    # -------------------------------------------------------------------
    def confirm_payment(self, checkout_id, payment_id, signature) -> Order:
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(checkout_id)
        log = logger.bind(checkout_id=str(checkout_id), customer_id=str(checkout.customer_id))

        if checkout.status != CheckoutStatus.AWAITING_PAYMENT.value:
            raise InvalidTransition({"status": [f"Checkout is {checkout.status}, not awaiting payment"]})

        if not self.gateway.verify_payment(checkout.gateway_order_id, payment_id, signature):
            reason = "Payment signature could not be verified"
            checkout.mark_payment_failed(reason)
            repo.add(checkout)
            log.warning("checkout_payment_failed", reason=reason, payment_id=payment_id)
            raise PaymentFailed({"payment": [reason]})

        checkout.record_payment(payment_id, signature)
        repo.add(checkout)

        order = self._persist_with_retry(checkout_id)
        self._sync_address(checkout_id)
        return order

    def fail_payment(self, checkout_id, reason):
        """The gateway reported a failure. No order, cart untouched."""
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(checkout_id)
        reason = reason or "Payment failed"
        checkout.mark_payment_failed(reason)
        repo.add(checkout)

        logger.warning(
            "checkout_payment_failed",
            checkout_id=str(checkout_id),
            customer_id=str(checkout.customer_id),
            reason=reason,
        )
        raise PaymentFailed({"payment": [reason]})

    def cancel(self, checkout_id) -> Checkout:
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(checkout_id)
        checkout.cancel()
        repo.add(checkout)

        logger.info("checkout_cancelled", checkout_id=str(checkout_id), customer_id=str(checkout.customer_id))
        return checkout

    # -------------------------------------------------------------------
    # Order persistence
    # -------------------------------------------------------------------
    def _commit_order(self, checkout_id, attempt=1, checked_out_only=False) -> Order:
        """Write order, cart clear and checkout status as one unit of work.

        With ``checked_out_only`` only the products bought in this checkout
        leave the cart; a late retry must not drop items added since.
        """
        checkout_repo = current_domain.repository_for(Checkout)
        with UnitOfWork():
            checkout = checkout_repo.get(checkout_id)
            checkout.persist_attempts = attempt

            order = Order.place(
                customer_id=checkout.customer_id,
                items=checkout.line_items(),
                shipping_address=checkout.shipping_snapshot(),
                shipping_fee=checkout.shipping_fee,
                payment=checkout.payment_receipt(),
                currency=checkout.currency,
                customer_name=checkout.customer_name,
                primary_phone=checkout.primary_phone,
                secondary_phone=checkout.secondary_phone,
                checkout_id=checkout.id,
            )
            current_domain.repository_for(Order).add(order)

            if checkout.is_from_cart:
                cart_repo = current_domain.repository_for(ShoppingCart)
                try:
                    cart = cart_repo.get(checkout.customer_id)
                except ObjectNotFoundError:
                    cart = None
                if cart is not None and not cart.is_empty:
                    if checked_out_only:
                        for line in checkout.line_items():
                            cart.remove_item(line["product_id"])
                    else:
                        cart.clear()
                    cart_repo.add(cart)

            checkout.mark_persisted(order.id)
            checkout_repo.add(checkout)
        return order

    def _persist_with_retry(self, checkout_id) -> Order:
        attempts = max(MIN_PERSIST_ATTEMPTS, self.settings.persist_attempts)
        log = logger.bind(checkout_id=str(checkout_id))

        last_error = None
        for attempt in range(1, attempts + 1):
            try:
                order = self._commit_order(checkout_id, attempt)
            except Exception as exc:
                last_error = exc
                log.warning("order_persist_retry", attempt=attempt, max_attempts=attempts, error=str(exc))
                continue

            log.info("order_persisted", order_id=str(order.id), attempt=attempt)
            return order

        self._escalate(checkout_id, attempts, last_error)

    def _escalate(self, checkout_id, attempts, error):
        """Every write failed: park the paid checkout for manual follow-up."""
        checkout_repo = current_domain.repository_for(Checkout)
        checkout = checkout_repo.get(checkout_id)
        reason = f"Order could not be saved after {attempts} attempts: {error}"

        with UnitOfWork():
            checkout.persist_attempts = attempts
            checkout.mark_persistence_failed(reason)
            case = ReconciliationCase.open(
                kind=CaseKind.ORDER_PERSISTENCE.value,
                checkout=checkout,
                reason=reason,
                snapshot=self._case_snapshot(checkout),
            )
            checkout_repo.add(checkout)
            current_domain.repository_for(ReconciliationCase).add(case)

        logger.error(
            "checkout_escalated",
            checkout_id=str(checkout_id),
            customer_id=str(checkout.customer_id),
            case_id=str(case.id),
            payment_id=checkout.payment_id,
            attempts=attempts,
        )
        raise PersistenceFailed({"order": [PERSISTENCE_FAILED_MESSAGE]}, case_id=str(case.id)) from error

    @staticmethod
    def _case_snapshot(checkout) -> dict:
        return {
            "lines": checkout.line_items(),
            "shipping": checkout.shipping_snapshot(),
            "contact": {
                "name": checkout.customer_name,
                "primary_phone": checkout.primary_phone,
                "secondary_phone": checkout.secondary_phone,
                "email": checkout.email,
            },
            "payment": checkout.payment_receipt(),
            "totals": {
                "subtotal": checkout.subtotal,
                "shipping_fee": checkout.shipping_fee,
                "total_amount": checkout.total_amount,
            },
        }

    # -------------------------------------------------------------------
    # Address book saga step
    # -------------------------------------------------------------------
    def _record_address(self, checkout):
        shipping = checkout.shipping_snapshot()
        address = {
            **shipping,
            "name": shipping.get("name") or checkout.customer_name,
            "primary_phone": checkout.primary_phone,
            "secondary_phone": checkout.secondary_phone,
        }
        selected = None if checkout.address_id == NEW_ADDRESS else checkout.address_id
        return self.address_book.record(
            checkout.customer_id,
            address,
            phone=checkout.primary_phone,
            address_id=selected,
        )

    def _sync_address(self, checkout_id) -> bool:
        checkout = current_domain.repository_for(Checkout).get(checkout_id)
        try:
            self._record_address(checkout)
        except Exception as exc:
            case = ReconciliationCase.open(
                kind=CaseKind.ADDRESS_SYNC.value,
                checkout=checkout,
                reason=f"Address book update failed: {exc}",
                snapshot=self._case_snapshot(checkout),
            )
            current_domain.repository_for(ReconciliationCase).add(case)
            logger.error(
                "checkout_address_sync_failed",
                checkout_id=str(checkout_id),
                customer_id=str(checkout.customer_id),
                case_id=str(case.id),
                error=str(exc),
            )
            return False
        return True

    # -------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------
    def retry_reconciliation(self, case_id) -> Order | None:
        """Re-run the failed step of an open case and resolve it on success."""
        case_repo = current_domain.repository_for(ReconciliationCase)
        case = case_repo.get(case_id)
        if not case.is_open:
            raise InvalidTransition({"status": ["Case is already resolved"]})

        log = logger.bind(case_id=str(case.id), checkout_id=case.checkout_id, kind=case.kind)
        checkout = current_domain.repository_for(Checkout).get(case.checkout_id)
        order = None

        try:
            if case.kind == CaseKind.ORDER_PERSISTENCE.value:
                order = current_domain.repository_for(Order).for_checkout(case.checkout_id)
                if order is None:
                    order = self._commit_order(
                        case.checkout_id, (checkout.persist_attempts or 0) + 1, checked_out_only=True
                    )
            else:
                self._record_address(checkout)
        except Exception as exc:
            case.record_attempt(str(exc))
            case_repo.add(case)
            log.warning("reconciliation_retry_failed", attempts=case.attempts, error=str(exc))
            raise PersistenceFailed({"case": [f"Retry failed: {exc}"]}, case_id=str(case.id)) from exc

        case.record_attempt()
        case.resolve("Resolved by retry")
        case_repo.add(case)
        log.info("reconciliation_retry_succeeded")

        if case.kind == CaseKind.ORDER_PERSISTENCE.value:
            self._sync_address(case.checkout_id)
        return order
