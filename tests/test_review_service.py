# =============================================================================
# tests/test_review_service.py - Review Service Tests
# =============================================================================

import pytest

from app.exceptions import ContentValidationError, RecordNotFoundError
from core.models.review import ReviewCreate, ReviewUpdate
from core.services.review_service import TABLE, ReviewService, clamp_rating, row_to_review


class TestClampRating:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (4.6, 5),
            (4.4, 4),
            (2.5, 3),
            (0, 1),
            (-3, 1),
            (9, 5),
            ("3", 3),
            ("abc", 1),
            (None, 1),
            (float("nan"), 1),
            (float("inf"), 5),
            (float("-inf"), 1),
            ("-Infinity", 1),
        ],
    )
    def test_clamp(self, value, expected):
        assert clamp_rating(value) == expected

    def test_missing_rating_in_row_means_five(self):
        review = row_to_review({"id": 7, "author": "Anna", "quote": "Super", "display_order": 0})

        assert review.rating == 5
        assert review.id == "7"
        assert review.display_order == 1


class TestReviewCrud:

    def test_create_appends_and_clamps(self, fake_db, actor):
        first = ReviewService.create_review(ReviewCreate(author="Anna", quote="Toll", rating=7), actor=actor)
        second = ReviewService.create_review(ReviewCreate(author="Ben", quote="Super", rating=0.2), actor=actor)

        assert (first.rating, second.rating) == (5, 1)
        assert (first.display_order, second.display_order) == (1, 2)
        assert fake_db.actions() == ["homepage_review_created", "homepage_review_created"]

    def test_create_requires_author_and_quote(self, fake_db):
        with pytest.raises(ContentValidationError):
            ReviewService.create_review(ReviewCreate(author=" ", quote="Text"))
        with pytest.raises(ContentValidationError):
            ReviewService.create_review(ReviewCreate(author="Anna", quote=""))

    def test_list_sorted_by_order_then_author(self, fake_db):
        fake_db.seed(
            TABLE,
            {"author": "zoe", "quote": "a", "display_order": 1},
            {"author": "Anna", "quote": "b", "display_order": 1},
            {"author": "Ben", "quote": "c", "display_order": 0},
        )

        assert [r.author for r in ReviewService.list_reviews()] == ["Anna", "Ben", "zoe"]

    def test_update(self, fake_db, actor):
        review = ReviewService.create_review(ReviewCreate(author="Anna", quote="Toll"))

        updated = ReviewService.update_review(
            review.id,
            ReviewUpdate(author="Anna M.", role=" Braut ", quote="Wunderschön", rating=4, display_order=1),
            actor=actor,
        )

        assert (updated.author, updated.role, updated.rating) == ("Anna M.", "Braut", 4)
        assert fake_db.actions()[-1] == "homepage_review_updated"

    def test_update_missing(self, fake_db):
        with pytest.raises(RecordNotFoundError):
            ReviewService.update_review("missing", ReviewUpdate(author="A", quote="B", display_order=1))

    def test_delete(self, fake_db):
        review = ReviewService.create_review(ReviewCreate(author="Anna", quote="Toll"))

        ReviewService.delete_review(review.id)

        assert fake_db.rows(TABLE) == []
        with pytest.raises(RecordNotFoundError):
            ReviewService.delete_review(review.id)
