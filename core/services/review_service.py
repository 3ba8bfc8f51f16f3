# =============================================================================
# core/services/review_service.py - Customer Reviews
# =============================================================================
# CRUD for the homepage_reviews table. Ratings are whole stars 1..5.
# =============================================================================

import logging
import math
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import clean_optional
from app.exceptions import ContentValidationError, RecordNotFoundError
from core.models.common import Actor
from core.models.review import Review, ReviewCreate, ReviewUpdate
from core.services.activity_log_service import ActivityLogService

logger = logging.getLogger(__name__)

TABLE = "homepage_reviews"
COLUMNS = "id, author, role, quote, rating, display_order"


def clamp_rating(value: Any) -> int:
    """
    Round a rating and clamp it to 1..5.

    Example:
        clamp_rating(4.6)  # 5
        clamp_rating(0)    # 1
        clamp_rating(None) # 1
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    if math.isnan(number):
        return 1
    if math.isinf(number):
        return 5 if number > 0 else 1
    return max(1, min(5, int(math.floor(number + 0.5))))


def row_to_review(row: dict[str, Any]) -> Review:
    rating = row.get("rating")
    return Review(
        id=str(row["id"]),
        author=row.get("author") or "",
        role=row.get("role"),
        quote=row.get("quote") or "",
        rating=clamp_rating(5 if rating is None else rating),
        display_order=max(1, int(row.get("display_order") or 1)),
    )


class ReviewService:
    """Service for homepage testimonials."""

    @staticmethod
    def list_reviews() -> list[Review]:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).select(COLUMNS).order("display_order"),
            "list reviews",
        )
        reviews = [row_to_review(row) for row in rows]
        return sorted(reviews, key=lambda r: (r.display_order, r.author.casefold()))

    @staticmethod
    def next_display_order() -> int:
        reviews = ReviewService.list_reviews()
        if not reviews:
            return 1
        return max(review.display_order for review in reviews) + 1

    @staticmethod
    def _to_row(data: ReviewCreate) -> dict[str, Any]:
        author = data.author.strip()
        quote = data.quote.strip()
        if not author:
            raise ContentValidationError("Bitte gib einen Namen an.", field="author")
        if not quote:
            raise ContentValidationError("Bitte gib einen Bewertungstext an.", field="quote")

        display_order = data.display_order
        if display_order is None:
            display_order = ReviewService.next_display_order()

        return {
            "author": author,
            "role": clean_optional(data.role),
            "quote": quote,
            "rating": clamp_rating(data.rating),
            "display_order": max(1, display_order),
        }

    @staticmethod
    def create_review(data: ReviewCreate, actor: Actor | None = None) -> Review:
        """
        Create a review.

        Raises:
            ContentValidationError: If author or quote is blank
        """
        row = ReviewService._to_row(data)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(client.table(TABLE).insert(row), "create review")
        review = row_to_review(rows[0])
        logger.info(f"Created review {review.id} by {review.author}")

        ActivityLogService.log_action(
            "homepage_review_created",
            actor=actor,
            entity_type="homepage_review",
            entity_id=review.id,
            metadata={"author": review.author, "rating": review.rating},
        )
        return review

    @staticmethod
    def update_review(review_id: str, data: ReviewUpdate, actor: Actor | None = None) -> Review:
        """
        Replace a review's fields.

        Raises:
            RecordNotFoundError: If no review has this id
        """
        row = ReviewService._to_row(data)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).update(row).eq("id", review_id),
            "update review",
        )
        if not rows:
            raise RecordNotFoundError("Review", review_id)

        ActivityLogService.log_action(
            "homepage_review_updated",
            actor=actor,
            entity_type="homepage_review",
            entity_id=review_id,
            metadata={"author": row["author"], "rating": row["rating"]},
        )
        return row_to_review(rows[0])

    @staticmethod
    def delete_review(review_id: str, actor: Actor | None = None) -> None:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).delete().eq("id", review_id),
            "delete review",
        )
        if not rows:
            raise RecordNotFoundError("Review", review_id)

        logger.info(f"Deleted review {review_id}")
        ActivityLogService.log_action(
            "homepage_review_deleted",
            actor=actor,
            entity_type="homepage_review",
            entity_id=review_id,
        )
