"""SubmitReview — one review per customer per product."""

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from reviews.domain import logger, reviews
from reviews.review.review import Review
from shared.exceptions import AlreadyExists


@reviews.command(part_of="Review")
class SubmitReview:
    product_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()


@reviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        repo = current_domain.repository_for(Review)
        if repo.find(command.customer_id, command.product_id) is not None:
            raise AlreadyExists({"review": ["You have already reviewed this product"]})

        review = Review.submit(
            product_id=command.product_id,
            customer_id=command.customer_id,
            rating=command.rating,
            comment=command.comment,
        )
        repo.add(review)

        logger.info("review_submitted", review_id=str(review.id), product_id=str(command.product_id))
        return str(review.id)
