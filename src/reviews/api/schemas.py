"""Pydantic request/response schemas for the Reviews API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SubmitReviewRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "rating": 5,
                    "comment": "Fresh and well packed.",
                }
            ]
        }
    }

    product_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)


class ReviewIdResponse(BaseModel):
    review_id: str


class ReviewResponse(BaseModel):
    review_id: str
    customer_id: str
    rating: int
    comment: str | None = None
    created_at: datetime | None = None


class ProductRatingResponse(BaseModel):
    product_id: str
    review_count: int = 0
    average_rating: float = 0.0
    stars: int = 0
