# =============================================================================
# core/models/review.py - Review Schemas
# =============================================================================
# Customer testimonials shown on the homepage (homepage_reviews table).
# =============================================================================

from pydantic import BaseModel, Field


class Review(BaseModel):
    id: str
    author: str
    role: str | None = None
    quote: str
    rating: int = Field(default=5, ge=1, le=5)
    display_order: int = Field(default=1, ge=1)


class ReviewCreate(BaseModel):
    """
    Input for a new review. Rating is clamped to 1..5 by the service.

    Example:
        {"author": "Anna", "role": "Brautpaar", "quote": "Wunderschöne Bilder!", "rating": 5}
    """

    author: str
    role: str | None = None
    quote: str
    rating: float = 5
    display_order: int | None = None


class ReviewUpdate(ReviewCreate):
    pass
