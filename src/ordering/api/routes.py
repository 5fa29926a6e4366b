"""FastAPI routes for the Ordering domain — cart, checkout, orders and reconciliation."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalogue.shared.pricing import line_total
from ordering.api.schemas import (
    AddToCartRequest,
    AdvanceStatusRequest,
    CancelOrderRequest,
    CartLineResponse,
    CartResponse,
    CartSummaryResponse,
    CheckoutResponse,
    ConfirmPaymentRequest,
    CustomerOrderResponse,
    FailPaymentRequest,
    LineIdResponse,
    OrderDetailResponse,
    OrderIdResponse,
    OrderItemResponse,
    ProductSalesResponse,
    ReconciliationCaseResponse,
    ResolveCaseRequest,
    RetryCaseResponse,
    SalesSummaryResponse,
    SetCartQuantityRequest,
    StartCheckoutRequest,
    StatusResponse,
    TrackerStepResponse,
)
from ordering.cart.items import RemoveFromCart, SetCartQuantity, add_product_to_cart, cart_for
from ordering.checkout.checkout import Checkout
from ordering.checkout.orchestrator import CheckoutOrchestrator
from ordering.order.fulfillment import AdvanceOrderStatus, CancelOrder
from ordering.order.order import Order
from ordering.projections.cart_summary import CartSummary
from ordering.projections.customer_orders import CustomerOrders
from ordering.reconciliation.case import ReconciliationCase
from ordering.reconciliation.resolution import ResolveReconciliation
from ordering.vendor.sales import sales_summary
from shared.auth import CurrentUser, current_operator, current_user, current_vendor
from shared.exceptions import NotAuthorized
from shared.settings import get_settings

cart_router = APIRouter(prefix="/cart", tags=["cart"])
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
reconciliation_router = APIRouter(prefix="/reconciliation", tags=["reconciliation"])


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@cart_router.get("", response_model=CartResponse)
async def view_cart(user: CurrentUser = Depends(current_user)) -> CartResponse:
    cart = cart_for(user.user_id)
    totals = cart.totals(get_settings())
    lines = [
        CartLineResponse(**line, line_total=line_total(line["price_at_add"], line["quantity"]))
        for line in cart.snapshot()
    ]
    return CartResponse(
        customer_id=str(user.user_id),
        lines=lines,
        item_count=totals.item_count,
        subtotal=totals.subtotal,
        shipping_fee=totals.shipping_fee,
        total=totals.total,
    )


@cart_router.get("/summary", response_model=CartSummaryResponse)
async def cart_summary(user: CurrentUser = Depends(current_user)) -> CartSummaryResponse:
    try:
        summary = current_domain.repository_for(CartSummary).get(user.user_id)
    except ObjectNotFoundError:
        return CartSummaryResponse()
    return CartSummaryResponse(
        line_count=summary.line_count or 0,
        item_quantity=summary.item_quantity or 0,
        subtotal=summary.subtotal or 0.0,
    )


@cart_router.post("/items", status_code=201, response_model=LineIdResponse)
async def add_cart_item(body: AddToCartRequest, user: CurrentUser = Depends(current_user)) -> LineIdResponse:
    line_id = add_product_to_cart(user.user_id, body.product_id, quantity=body.quantity)
    return LineIdResponse(line_id=line_id)


@cart_router.put("/items/{product_id}", response_model=StatusResponse)
async def set_cart_quantity(
    product_id: str, body: SetCartQuantityRequest, user: CurrentUser = Depends(current_user)
) -> StatusResponse:
    command = SetCartQuantity(customer_id=user.user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(product_id: str, user: CurrentUser = Depends(current_user)) -> StatusResponse:
    current_domain.process(RemoveFromCart(customer_id=user.user_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
def _checkout_response(checkout: Checkout) -> CheckoutResponse:
    return CheckoutResponse(
        checkout_id=str(checkout.id),
        status=checkout.status,
        gateway_order_id=checkout.gateway_order_id,
        subtotal=checkout.subtotal,
        shipping_fee=checkout.shipping_fee,
        total_amount=checkout.total_amount,
        currency=checkout.currency,
        order_id=str(checkout.order_id) if checkout.order_id else None,
        failure_reason=checkout.failure_reason,
    )


def _own_checkout(checkout_id, user: CurrentUser) -> Checkout:
    checkout = current_domain.repository_for(Checkout).get(checkout_id)
    if str(checkout.customer_id) != str(user.user_id):
        raise NotAuthorized("This checkout belongs to another customer")
    return checkout


@checkout_router.post("", status_code=201, response_model=CheckoutResponse)
async def start_checkout(body: StartCheckoutRequest, user: CurrentUser = Depends(current_user)) -> CheckoutResponse:
    checkout = CheckoutOrchestrator().start(
        customer_id=user.user_id,
        address_id=body.address_id,
        new_address=body.new_address.model_dump() if body.new_address else None,
        contact=body.contact.model_dump(),
        source=body.source,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    return _checkout_response(checkout)


@checkout_router.get("/{checkout_id}", response_model=CheckoutResponse)
async def get_checkout(checkout_id: str, user: CurrentUser = Depends(current_user)) -> CheckoutResponse:
    return _checkout_response(_own_checkout(checkout_id, user))


@checkout_router.post("/{checkout_id}/confirm", status_code=201, response_model=OrderIdResponse)
async def confirm_payment(
    checkout_id: str, body: ConfirmPaymentRequest, user: CurrentUser = Depends(current_user)
) -> OrderIdResponse:
    _own_checkout(checkout_id, user)
    order = CheckoutOrchestrator().confirm_payment(checkout_id, body.payment_id, body.signature)
    return OrderIdResponse(order_id=str(order.id))


@checkout_router.post("/{checkout_id}/fail", response_model=StatusResponse)
async def fail_payment(
    checkout_id: str, body: FailPaymentRequest, user: CurrentUser = Depends(current_user)
) -> StatusResponse:
    _own_checkout(checkout_id, user)
    CheckoutOrchestrator().fail_payment(checkout_id, body.reason)
    return StatusResponse()


@checkout_router.post("/{checkout_id}/cancel", response_model=CheckoutResponse)
async def cancel_checkout(checkout_id: str, user: CurrentUser = Depends(current_user)) -> CheckoutResponse:
    _own_checkout(checkout_id, user)
    return _checkout_response(CheckoutOrchestrator().cancel(checkout_id))


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
def _order_detail(order: Order, company_id=None) -> OrderDetailResponse:
    items = order.items_for_company(company_id) if company_id else list(order.items)
    return OrderDetailResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        customer_name=order.customer_name,
        primary_phone=order.primary_phone,
        secondary_phone=order.secondary_phone,
        shipping_address=order.shipping_address.to_dict() if order.shipping_address else {},
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                company_id=str(item.company_id) if item.company_id else None,
                quantity=item.quantity,
                price_at_purchase=item.price_at_purchase,
            )
            for item in items
        ],
        subtotal=order.subtotal,
        shipping_fee=order.shipping_fee,
        total_amount=order.total_amount,
        currency=order.currency,
        status=order.status,
        cancelled_at_stage=order.cancelled_at_stage,
        placed_at=order.placed_at,
        tracker=[TrackerStepResponse(stage=s.stage, label=s.label, state=s.state) for s in order.tracker()],
        next_stages=order.next_stages(),
    )


@order_router.get("", response_model=list[CustomerOrderResponse])
async def my_orders(user: CurrentUser = Depends(current_user)) -> list[CustomerOrderResponse]:
    records = (
        current_domain.repository_for(CustomerOrders)
        ._dao.query.filter(customer_id=str(user.user_id))
        .order_by("-placed_at")
        .limit(None)
        .all()
        .items
    )
    return [
        CustomerOrderResponse(
            order_id=str(r.order_id),
            status=r.status,
            item_count=r.item_count or 0,
            total_amount=r.total_amount or 0.0,
            currency=r.currency,
            placed_at=r.placed_at,
        )
        for r in records
    ]


@order_router.get("/vendor", response_model=list[OrderDetailResponse])
async def vendor_orders(user: CurrentUser = Depends(current_vendor)) -> list[OrderDetailResponse]:
    orders = current_domain.repository_for(Order).for_company(user.company_id)
    return [_order_detail(order, company_id=user.company_id) for order in orders]


@order_router.get("/vendor/sales", response_model=SalesSummaryResponse)
async def vendor_sales(user: CurrentUser = Depends(current_vendor)) -> SalesSummaryResponse:
    summary = sales_summary(user.company_id)
    return SalesSummaryResponse(
        order_count=summary.order_count,
        revenue=summary.revenue,
        pending_count=summary.pending_count,
        products=[ProductSalesResponse(**vars(p)) for p in summary.products],
    )


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str, user: CurrentUser = Depends(current_user)) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).get(order_id)
    if str(order.customer_id) == str(user.user_id):
        return _order_detail(order)
    if user.is_vendor and order.contains_company(user.company_id):
        return _order_detail(order, company_id=user.company_id)
    raise NotAuthorized("This order belongs to another customer")


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def advance_order_status(
    order_id: str, body: AdvanceStatusRequest, user: CurrentUser = Depends(current_vendor)
) -> StatusResponse:
    command = AdvanceOrderStatus(order_id=order_id, company_id=user.company_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest, user: CurrentUser = Depends(current_vendor)
) -> StatusResponse:
    command = CancelOrder(order_id=order_id, company_id=user.company_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------
@reconciliation_router.get("", response_model=list[ReconciliationCaseResponse])
async def open_cases(user: CurrentUser = Depends(current_operator)) -> list[ReconciliationCaseResponse]:
    cases = current_domain.repository_for(ReconciliationCase).open_cases()
    return [
        ReconciliationCaseResponse(
            case_id=str(c.id),
            kind=c.kind,
            checkout_id=str(c.checkout_id),
            customer_id=str(c.customer_id),
            payment_id=c.payment_id,
            amount=c.amount,
            reason=c.reason,
            status=c.status,
            attempts=c.attempts or 0,
            opened_at=c.opened_at,
        )
        for c in cases
    ]


@reconciliation_router.post("/{case_id}/retry", response_model=RetryCaseResponse)
async def retry_case(case_id: str, user: CurrentUser = Depends(current_operator)) -> RetryCaseResponse:
    order = CheckoutOrchestrator().retry_reconciliation(case_id)
    return RetryCaseResponse(case_id=case_id, order_id=str(order.id) if order else None)


@reconciliation_router.post("/{case_id}/resolve", response_model=StatusResponse)
async def resolve_case(
    case_id: str, body: ResolveCaseRequest, user: CurrentUser = Depends(current_operator)
) -> StatusResponse:
    current_domain.process(ResolveReconciliation(case_id=case_id, note=body.note), asynchronous=False)
    return StatusResponse()
