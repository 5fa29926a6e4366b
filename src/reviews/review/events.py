"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from reviews.domain import reviews


@reviews.event(part_of="Review")
class ReviewSubmitted:
    """A customer reviewed a product."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    submitted_at = DateTime(required=True)
