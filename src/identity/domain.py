"""Identity bounded context — user profiles and their address books."""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

identity = Domain(name="identity")
