import pytest
from reviews.domain import reviews

from shared.db import reset_data


@pytest.fixture(autouse=True)
def _ctx(reviews_bed):
    with reviews_bed.domain_context():
        yield
    reset_data(reviews)
