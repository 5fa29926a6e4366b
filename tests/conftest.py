import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the domain.toml overlay before any domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("ENVIRONMENT", "test")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Domain beds, one per bounded context
# ---------------------------------------------------------------------------
def _bed(domain):
    bed = DomainFixture(domain)
    bed.setup()
    return bed


@pytest.fixture(scope="session")
def catalogue_bed():
    from catalogue.domain import catalogue

    bed = _bed(catalogue)
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def identity_bed():
    from identity.domain import identity

    bed = _bed(identity)
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = _bed(ordering)
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def reviews_bed():
    from reviews.domain import reviews

    bed = _bed(reviews)
    yield bed
    bed.teardown()


# ---------------------------------------------------------------------------
# Swappable collaborators
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def reset_collaborators():
    """Drop cached gateway, storage, lookup and settings after every test."""
    yield

    from catalogue.storage import reset_storage
    from ordering.cart.products import reset_product_lookup
    from payments.gateway import reset_gateway
    from shared.settings import reset_settings

    reset_gateway()
    reset_storage()
    reset_product_lookup()
    reset_settings()


@pytest.fixture()
def gateway():
    from payments.gateway import set_gateway
    from payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def storage():
    from catalogue.storage import set_storage
    from catalogue.storage.fake_adapter import InMemoryMediaStorage

    fake = InMemoryMediaStorage(base_url="https://cdn.test")
    set_storage(fake)
    return fake


@pytest.fixture()
def user_headers():
    return {"X-User-Id": "user-001"}


@pytest.fixture()
def vendor_headers():
    return {"X-User-Id": "vendor-user-001", "X-Company-Id": "company-001"}


@pytest.fixture()
def operator_headers():
    from shared.settings import Settings, set_settings

    set_settings(Settings(operator_user_ids=("operator-001",)))
    return {"X-User-Id": "operator-001"}
