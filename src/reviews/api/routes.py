"""FastAPI routes for the Reviews bounded context."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from reviews.api.schemas import ProductRatingResponse, ReviewIdResponse, ReviewResponse, SubmitReviewRequest
from reviews.projections.product_rating import ProductRating, star_display
from reviews.review.review import Review
from reviews.review.submission import SubmitReview
from shared.auth import CurrentUser, current_user

review_router = APIRouter(prefix="/reviews", tags=["reviews"])


@review_router.post("", status_code=201, response_model=ReviewIdResponse)
async def submit_review(body: SubmitReviewRequest, user: CurrentUser = Depends(current_user)) -> ReviewIdResponse:
    command = SubmitReview(
        product_id=body.product_id,
        customer_id=user.user_id,
        rating=body.rating,
        comment=body.comment,
    )
    result = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=result)


@review_router.get("/products/{product_id}", response_model=list[ReviewResponse])
async def product_reviews(product_id: str) -> list[ReviewResponse]:
    return [
        ReviewResponse(
            review_id=str(r.id),
            customer_id=str(r.customer_id),
            rating=r.rating.score,
            comment=r.comment,
            created_at=r.created_at,
        )
        for r in current_domain.repository_for(Review).for_product(product_id)
    ]


@review_router.get("/products/{product_id}/rating", response_model=ProductRatingResponse)
async def product_rating(product_id: str) -> ProductRatingResponse:
    try:
        rating = current_domain.repository_for(ProductRating).get(product_id)
    except ObjectNotFoundError:
        return ProductRatingResponse(product_id=product_id)
    return ProductRatingResponse(
        product_id=product_id,
        review_count=rating.review_count or 0,
        average_rating=rating.average_rating or 0.0,
        stars=star_display(rating.average_rating),
    )
