"""Reviews bounded context — product reviews and the aggregated rating."""

import structlog
from protean.domain import Domain

reviews = Domain(name="reviews")

logger = structlog.get_logger(__name__)
