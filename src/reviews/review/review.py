"""Review aggregate — one customer's star rating and comment for a product.

Reviews are written once. A customer may review a given product only once;
the uniqueness check needs a repository query, so it lives in the handler.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, Text, ValueObject

from reviews.domain import reviews
from reviews.review.events import ReviewSubmitted

MIN_RATING = 1
MAX_RATING = 5


@reviews.value_object(part_of="Review")
class Rating:
    """A whole-star rating from 1 to 5."""

    score = Integer(required=True)

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and not MIN_RATING <= self.score <= MAX_RATING:
            raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})


@reviews.aggregate
class Review:
    product_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    rating = ValueObject(Rating, required=True)
    comment = Text()
    created_at = DateTime()

    @classmethod
    def submit(cls, product_id, customer_id, rating, comment=None):
        now = datetime.now(UTC)
        review = cls(
            product_id=product_id,
            customer_id=customer_id,
            rating=Rating(score=rating),
            comment=comment,
            created_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_id=str(product_id),
                customer_id=str(customer_id),
                rating=rating,
                comment=comment,
                submitted_at=now,
            )
        )
        return review


@reviews.repository(part_of=Review)
class ReviewRepository:
    def for_product(self, product_id) -> list[Review]:
        """Newest first."""
        return self._dao.query.filter(product_id=str(product_id)).order_by("-created_at").limit(None).all().items

    def find(self, customer_id, product_id) -> Review | None:
        results = self._dao.query.filter(customer_id=str(customer_id), product_id=str(product_id)).all().items
        return results[0] if results else None
