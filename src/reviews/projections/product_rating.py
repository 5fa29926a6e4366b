"""ProductRating — review count and average rating per product."""

import math

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer
from protean.utils.globals import current_domain

from reviews.domain import reviews
from reviews.review.events import ReviewSubmitted
from reviews.review.review import Review


@reviews.projection
class ProductRating:
    product_id = Identifier(identifier=True, required=True)
    review_count = Integer(default=0)
    rating_sum = Integer(default=0)
    average_rating = Float(default=0.0)  # unrounded
    updated_at = DateTime()


def star_display(average) -> int:
    """Whole stars to render for an average rating, rounding halves up."""
    if not average:
        return 0
    return int(math.floor(average + 0.5))


@reviews.projector(projector_for=ProductRating, aggregates=[Review])
class ProductRatingProjector:
    @on(ReviewSubmitted)
    def on_review_submitted(self, event):
        repo = current_domain.repository_for(ProductRating)
        try:
            rating = repo.get(event.product_id)
        except ObjectNotFoundError:
            rating = ProductRating(product_id=event.product_id)

        rating.review_count = (rating.review_count or 0) + 1
        rating.rating_sum = (rating.rating_sum or 0) + event.rating
        rating.average_rating = rating.rating_sum / rating.review_count
        rating.updated_at = event.submitted_at
        repo.add(rating)
