import pytest
from catalogue.company.company import Company
from catalogue.domain import catalogue
from catalogue.product.product import Product
from protean import current_domain

from shared.db import reset_data


@pytest.fixture(autouse=True)
def _ctx(catalogue_bed):
    with catalogue_bed.domain_context():
        yield
    reset_data(catalogue)


@pytest.fixture()
def company():
    """An approved company managed by the ``vendor_headers`` user."""
    company = Company(id="company-001", owner_id="vendor-user-001", name="Green Acres Farm", is_approved=True)
    current_domain.repository_for(Company).add(company)
    return company


@pytest.fixture()
def make_product(company):
    def _make(name="Organic Apples", original_price=120.0, approved=True, company_id=None, **kwargs):
        product = Product.create(
            company_id=company_id or company.id,
            name=name,
            original_price=original_price,
            **kwargs,
        )
        product.is_approved = approved
        current_domain.repository_for(Product).add(product)
        return current_domain.repository_for(Product).get(product.id)

    return _make
