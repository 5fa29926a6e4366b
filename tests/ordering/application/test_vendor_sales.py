"""Vendor sales figures over the company's own order items."""

from ordering.order.order import Order
from ordering.vendor.sales import sales_summary
from protean import current_domain

ADDRESS = {
    "house_number": "7",
    "street": "Lake View Lane",
    "area": "Indiranagar",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postal_code": "560038",
    "country": "India",
}


def _order(items, status=None):
    order = Order.place(
        customer_id="cust-001",
        items=items,
        shipping_address=ADDRESS,
        shipping_fee=0.0,
        payment={"gateway_order_id": "order_1", "payment_id": "pay_1"},
    )
    if status == "cancelled":
        order.cancel()
    elif status:
        order.advance(status)
    current_domain.repository_for(Order).add(order)
    return order


def _item(product_id, company_id, quantity, price, name=None):
    return {
        "product_id": product_id,
        "product_name": name or product_id,
        "company_id": company_id,
        "quantity": quantity,
        "price_at_add": price,
    }


def test_no_orders():
    summary = sales_summary("company-001")
    assert summary.order_count == 0
    assert summary.revenue == 0.0
    assert summary.products == []


def test_counts_only_the_company_items():
    _order([_item("prod-apple", "company-001", 2, 120.0), _item("prod-honey", "company-002", 1, 450.0)])

    summary = sales_summary("company-001")

    assert summary.order_count == 1
    assert summary.revenue == 240.0
    assert [(p.product_id, p.units) for p in summary.products] == [("prod-apple", 2)]


def test_pending_excludes_delivered_and_cancelled():
    _order([_item("prod-apple", "company-001", 1, 120.0)])
    _order([_item("prod-apple", "company-001", 1, 120.0)], status="shipped")
    _order([_item("prod-apple", "company-001", 1, 120.0)], status="delivered")
    _order([_item("prod-apple", "company-001", 1, 120.0)], status="cancelled")

    summary = sales_summary("company-001")

    assert summary.order_count == 4
    assert summary.pending_count == 2
    assert summary.revenue == 360.0


def test_products_sorted_by_revenue():
    _order([_item("prod-apple", "company-001", 1, 120.0), _item("prod-ghee", "company-001", 1, 999.0)])
    _order([_item("prod-apple", "company-001", 3, 120.0)])

    products = sales_summary("company-001").products

    assert [p.product_id for p in products] == ["prod-ghee", "prod-apple"]
    assert products[1].units == 4
    assert products[1].revenue == 480.0


def test_counts_every_order_beyond_the_default_page():
    for _ in range(101):
        _order([_item("prod-apple", "company-001", 1, 120.0)])

    summary = sales_summary("company-001")

    assert summary.order_count == 101
    assert summary.revenue == 12120.0
