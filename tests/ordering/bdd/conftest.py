"""Shared BDD fixtures for the Ordering domain."""

import pytest


@pytest.fixture()
def error():
    """Container for a refused operation."""
    return {"exc": None}
