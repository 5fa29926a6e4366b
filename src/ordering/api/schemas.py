"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Cart ---


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1


class SetCartQuantityRequest(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    company_id: str | None = None
    quantity: int
    price_at_add: float
    line_total: float


class CartResponse(BaseModel):
    customer_id: str
    lines: list[CartLineResponse]
    item_count: int
    subtotal: float
    shipping_fee: float
    total: float


class CartSummaryResponse(BaseModel):
    line_count: int = 0
    item_quantity: int = 0
    subtotal: float = 0.0


class LineIdResponse(BaseModel):
    line_id: str


# --- Checkout ---


class ShippingAddressBody(BaseModel):
    name: str | None = Field(None, max_length=100)
    house_number: str | None = Field(None, max_length=50)
    street: str | None = Field(None, max_length=255)
    area: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    latitude: float | None = None
    longitude: float | None = None


class ContactBody(BaseModel):
    name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=254)
    primary_phone: str | None = Field(None, max_length=20)
    secondary_phone: str | None = Field(None, max_length=20)


class StartCheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "address_id": "new",
                    "new_address": {
                        "house_number": "12B",
                        "street": "Temple Road",
                        "area": "Malleshwaram",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "postal_code": "560003",
                        "country": "India",
                    },
                    "contact": {"name": "Asha Rao", "primary_phone": "+91 98450 12345"},
                    "source": "cart",
                }
            ]
        }
    }

    address_id: str = "new"
    new_address: ShippingAddressBody | None = None
    contact: ContactBody = Field(default_factory=ContactBody)
    source: str = Field("cart", pattern="^(cart|buy_now)$")
    product_id: str | None = None
    quantity: int = 1


class CheckoutResponse(BaseModel):
    checkout_id: str
    status: str
    gateway_order_id: str | None = None
    subtotal: float
    shipping_fee: float
    total_amount: float
    currency: str
    order_id: str | None = None
    failure_reason: str | None = None


class ConfirmPaymentRequest(BaseModel):
    payment_id: str
    signature: str


class FailPaymentRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


# --- Orders ---


class OrderIdResponse(BaseModel):
    order_id: str


class CustomerOrderResponse(BaseModel):
    order_id: str
    status: str
    item_count: int
    total_amount: float
    currency: str | None = None
    placed_at: datetime | None = None


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    company_id: str | None = None
    quantity: int
    price_at_purchase: float


class TrackerStepResponse(BaseModel):
    stage: str
    label: str
    state: str


class OrderDetailResponse(BaseModel):
    order_id: str
    customer_id: str
    customer_name: str | None = None
    primary_phone: str | None = None
    secondary_phone: str | None = None
    shipping_address: dict
    items: list[OrderItemResponse]
    subtotal: float
    shipping_fee: float
    total_amount: float
    currency: str
    status: str
    cancelled_at_stage: str | None = None
    placed_at: datetime | None = None
    tracker: list[TrackerStepResponse]
    next_stages: list[str]


class AdvanceStatusRequest(BaseModel):
    status: str


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class ProductSalesResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    units: int
    revenue: float


class SalesSummaryResponse(BaseModel):
    order_count: int
    revenue: float
    pending_count: int
    products: list[ProductSalesResponse]


# --- Reconciliation ---


class ReconciliationCaseResponse(BaseModel):
    case_id: str
    kind: str
    checkout_id: str
    customer_id: str
    payment_id: str | None = None
    amount: float | None = None
    reason: str | None = None
    status: str
    attempts: int
    opened_at: datetime | None = None


class ResolveCaseRequest(BaseModel):
    note: str = Field(..., max_length=1000)


class RetryCaseResponse(BaseModel):
    case_id: str
    order_id: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
