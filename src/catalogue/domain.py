"""Catalogue bounded context — products, vendor companies and favorites."""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

catalogue = Domain(name="catalogue")
