import pytest
from ordering.domain import ordering

from shared.db import reset_data


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield
    reset_data(ordering)


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------
class StaticProductLookup:
    """Product lookup backed by a dict of ProductSnapshot."""

    def __init__(self, *snapshots):
        self.products = {s.product_id: s for s in snapshots}

    def snapshot(self, product_id):
        from protean.exceptions import ValidationError

        if product_id not in self.products:
            raise ValidationError({"product_id": [f"Product {product_id} does not exist"]})
        return self.products[product_id]


class RecordingAddressBook:
    """Address book that keeps saved addresses in memory."""

    def __init__(self, saved=None):
        self.saved = dict(saved or {})
        self.recorded = []

    def select(self, customer_id, address_id):
        from protean.exceptions import ValidationError

        if address_id == "new":
            return "new"
        if address_id not in self.saved:
            raise ValidationError({"address_id": [f"Address {address_id} not found"]})
        return dict(self.saved[address_id])

    def record(self, customer_id, address, phone=None, address_id=None):
        self.recorded.append({"customer_id": customer_id, "address": address, "phone": phone, "address_id": address_id})
        return address_id or f"addr-{len(self.recorded)}"


@pytest.fixture()
def products():
    from ordering.cart.products import ProductSnapshot, set_product_lookup

    lookup = StaticProductLookup(
        ProductSnapshot("prod-apple", "Organic Apples", "company-001", 120.0, True, 40),
        ProductSnapshot("prod-honey", "Raw Honey", "company-002", 450.0, True, 12),
        ProductSnapshot("prod-ghee", "A2 Ghee", "company-001", 999.0, True, 5),
        ProductSnapshot("prod-draft", "Unreviewed Jaggery", "company-001", 80.0, False, 10),
    )
    set_product_lookup(lookup)
    return lookup


@pytest.fixture()
def address_book():
    return RecordingAddressBook(
        saved={
            "addr-home": {
                "address_id": "addr-home",
                "name": "Asha Rao",
                "house_number": "12B",
                "street": "Temple Road",
                "area": "Malleshwaram",
                "city": "Bengaluru",
                "state": "Karnataka",
                "postal_code": "560003",
                "country": "India",
                "primary_phone": "+919845012345",
                "secondary_phone": None,
                "latitude": 13.0035,
                "longitude": 77.5709,
            }
        }
    )


@pytest.fixture()
def new_address():
    return {
        "house_number": "7",
        "street": "Lake View Lane",
        "area": "Indiranagar",
        "city": "Bengaluru",
        "state": "Karnataka",
        "postal_code": "560038",
        "country": "India",
    }


@pytest.fixture()
def contact():
    return {"name": "Asha Rao", "primary_phone": "+919845012345", "email": "asha@example.com"}


@pytest.fixture()
def orchestrator(gateway, address_book, products):
    from ordering.checkout.orchestrator import CheckoutOrchestrator
    from shared.settings import Settings

    return CheckoutOrchestrator(gateway=gateway, address_book=address_book, products=products, settings=Settings())
