import pytest
from identity.domain import identity

from shared.db import reset_data


@pytest.fixture(autouse=True)
def _ctx(identity_bed):
    with identity_bed.domain_context():
        yield
    reset_data(identity)


@pytest.fixture()
def home():
    return {
        "name": "Asha Rao",
        "house_number": "12B",
        "street": "Temple Road",
        "area": "Malleshwaram",
        "city": "Bengaluru",
        "state": "Karnataka",
        "postal_code": "560003",
        "country": "India",
        "primary_phone": " +91 98450 12345 ",
    }


@pytest.fixture()
def office():
    return {
        "name": "Asha Rao",
        "house_number": "4th Floor",
        "street": "Outer Ring Road",
        "area": "Bellandur",
        "city": "Bengaluru",
        "state": "Karnataka",
        "postal_code": "560103",
        "country": "India",
        "primary_phone": "080-4112-7788",
    }
