# =============================================================================
# tests/test_homepage_service.py - Homepage Content Tests
# =============================================================================
# Slots, introduction, gallery and the assembled landing page.
#
# Run with: pytest tests/test_homepage_service.py -v
# =============================================================================

import pytest

from app.exceptions import ContentValidationError, RecordNotFoundError
from core.models.homepage import SlotKind
from core.services.homepage_service import (
    FALLBACK_BACKGROUND,
    FALLBACK_INTRO,
    FALLBACK_OVERLAY,
    FALLBACK_REVIEWS,
    FALLBACK_SLOTS,
    GALLERY_TABLE,
    IMAGES_TABLE,
    INTRO_TABLE,
    HomepageService,
)


# =============================================================================
# Slots
# =============================================================================

class TestSlots:

    def test_empty_table_gives_three_unsaved_slots(self, fake_db):
        slots = HomepageService.list_slots(SlotKind.USP)

        assert [slot.display_order for slot in slots] == [1, 2, 3]
        assert all(slot.id is None and slot.title == "" for slot in slots)

    def test_save_slot_upserts_by_position(self, fake_db, actor):
        first = HomepageService.save_slot(SlotKind.BENEFIT, 2, " Titel ", "Text", actor=actor)
        second = HomepageService.save_slot(SlotKind.BENEFIT, 2, "Neu", "Neuer Text", actor=actor)

        assert first.id == second.id
        assert len(fake_db.rows("homepage_benefits")) == 1
        assert HomepageService.list_slots(SlotKind.BENEFIT)[1].title == "Neu"
        assert fake_db.actions() == ["homepage_benefit_saved", "homepage_benefit_saved"]

    @pytest.mark.parametrize("position", [0, 4])
    def test_save_slot_rejects_position(self, fake_db, position):
        with pytest.raises(ContentValidationError):
            HomepageService.save_slot(SlotKind.USP, position, "Titel", "Text")

    def test_save_slot_rejects_blank_texts(self, fake_db):
        with pytest.raises(ContentValidationError):
            HomepageService.save_slot(SlotKind.USP, 1, "Titel", "   ")

    def test_resolve_fills_blank_slots(self, fake_db):
        HomepageService.save_slot(SlotKind.USP, 1, "Eigener Titel", "Eigener Text")

        resolved = HomepageService.resolve_slots(SlotKind.USP)

        assert resolved[0].title == "Eigener Titel"
        assert resolved[1].title == FALLBACK_SLOTS[SlotKind.USP][1][0]
        assert resolved[2].description == FALLBACK_SLOTS[SlotKind.USP][2][1]


# =============================================================================
# Photographer Introduction
# =============================================================================

class TestIntro:

    def test_no_row_gives_none(self, fake_db):
        assert HomepageService.get_intro() is None

    def test_save_twice_keeps_singleton(self, fake_db, actor):
        HomepageService.save_intro("Hallo", "Text eins", actor=actor)
        saved = HomepageService.save_intro("Servus", "Text zwei", subheading=" ", actor=actor)

        assert len(fake_db.rows(INTRO_TABLE)) == 1
        assert saved.subheading is None
        assert HomepageService.get_intro().heading == "Servus"
        assert fake_db.actions()[-1] == "homepage_photographer_intro_saved"

    def test_blank_stored_fields_fall_back(self, fake_db):
        fake_db.seed(INTRO_TABLE, {"singleton_key": "homepage", "heading": " ", "body": "Eigener Text"})

        intro = HomepageService.get_intro()

        assert intro.heading == FALLBACK_INTRO.heading
        assert intro.body == "Eigener Text"

    def test_save_requires_heading_and_body(self, fake_db):
        with pytest.raises(ContentValidationError):
            HomepageService.save_intro("", "Text")


# =============================================================================
# Gallery
# =============================================================================

class TestGallery:

    def test_upload_appends(self, fake_db, actor, image_factory):
        first = HomepageService.upload_gallery_image(image_factory("a.jpg"), "Berge", actor=actor)
        second = HomepageService.upload_gallery_image(image_factory("b.jpg"), "See", actor=actor)

        assert (first.display_order, second.display_order) == (1, 2)
        assert first.file_path.startswith(f"{actor.id}/a-")
        assert [image.alt_text for image in HomepageService.list_gallery()] == ["Berge", "See"]

    def test_upload_without_actor_uses_anonymous_folder(self, fake_db, image_factory):
        image = HomepageService.upload_gallery_image(image_factory(), "Alt")
        assert image.file_path.startswith("anonymous/")

    def test_upload_requires_alt_text(self, fake_db, image_factory):
        with pytest.raises(ContentValidationError):
            HomepageService.upload_gallery_image(image_factory(), "  ")
        assert fake_db.storage.files("homepage-gallery") == {}

    def test_update(self, fake_db, image_factory):
        image = HomepageService.upload_gallery_image(image_factory(), "Alt")

        updated = HomepageService.update_gallery_image(image.id, " Neu ", 5)

        assert (updated.alt_text, updated.display_order) == ("Neu", 5)

    @pytest.mark.parametrize("order", [0, True, -1])
    def test_update_rejects_invalid_order(self, fake_db, order):
        with pytest.raises(ContentValidationError):
            HomepageService.update_gallery_image("any", "Alt", order)

    def test_update_missing(self, fake_db):
        with pytest.raises(RecordNotFoundError):
            HomepageService.update_gallery_image("missing", "Alt", 1)

    def test_delete_removes_row_and_file(self, fake_db, image_factory):
        image = HomepageService.upload_gallery_image(image_factory(), "Alt")

        HomepageService.delete_gallery_image(image.id)

        assert fake_db.rows(GALLERY_TABLE) == []
        assert fake_db.storage.files("homepage-gallery") == {}


# =============================================================================
# Landing Page
# =============================================================================

class TestHomepage:

    def test_empty_database_uses_fallbacks(self, fake_db):
        page = HomepageService.get_homepage()

        assert page.background_image_url == FALLBACK_BACKGROUND
        assert page.overlay_image_url == FALLBACK_OVERLAY
        assert page.reviews == FALLBACK_REVIEWS
        assert page.photographer_intro == FALLBACK_INTRO
        assert [slot.title for slot in page.benefits] == [t for t, _ in FALLBACK_SLOTS[SlotKind.BENEFIT]]
        assert page.gallery == []
        assert [review.author for review in page.reviews][-1] == "Lumen Architects"
        assert len(page.reviews) == 4
        assert page.photographer_intro.body.endswith("analytisch, präzise und mit Gespür für Emotionen.")

    @pytest.mark.parametrize(
        "table",
        [IMAGES_TABLE, INTRO_TABLE, GALLERY_TABLE, "homepage_usps", "homepage_benefits", "homepage_reviews"],
    )
    def test_failing_block_falls_back(self, fake_db, table):
        fake_db.failing_tables.add(table)

        page = HomepageService.get_homepage()

        assert page.background_image_url == FALLBACK_BACKGROUND
        assert page.reviews == FALLBACK_REVIEWS
        assert page.photographer_intro == FALLBACK_INTRO
        assert [slot.title for slot in page.usps] == [t for t, _ in FALLBACK_SLOTS[SlotKind.USP]]

    def test_stored_images_and_reviews_win(self, fake_db):
        fake_db.seed(
            IMAGES_TABLE,
            {"image_type": "background", "public_url": "https://x.test/bg.jpg"},
            {"image_type": "other", "public_url": "https://x.test/ignored.jpg"},
        )
        fake_db.seed("homepage_reviews", {"author": "Anna", "quote": "Toll!", "rating": 4, "display_order": 1})

        page = HomepageService.get_homepage()

        assert page.background_image_url == "https://x.test/bg.jpg"
        assert page.overlay_image_url == FALLBACK_OVERLAY
        assert [review.author for review in page.reviews] == ["Anna"]

    def test_reviews_without_quote_are_hidden(self, fake_db):
        fake_db.seed("homepage_reviews", {"author": "Leer", "quote": "", "display_order": 1})

        assert HomepageService.get_homepage().reviews == FALLBACK_REVIEWS
