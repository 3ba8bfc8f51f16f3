# =============================================================================
# tests/test_service_catalog.py - Services Slider Tests
# =============================================================================
# Slide mapping with fallbacks, project link ordering and the admin editor.
#
# Run with: pytest tests/test_service_catalog.py -v
# =============================================================================

from datetime import datetime, timezone

import pytest

from app.exceptions import ContentValidationError, RecordNotFoundError, StorageUploadError
from core.models.service import (
    ProjectAssignment,
    ServiceProjectLink,
    ServiceRecord,
    ServiceSlideImage,
    ServiceUpdate,
)
from core.services.service_catalog_service import (
    FALLBACK_GRADIENT_END,
    FALLBACK_GRADIENT_START,
    FALLBACK_LABEL,
    LINKS_TABLE,
    SERVICES_TABLE,
    SLIDE_IMAGES_TABLE,
    ServiceCatalogService,
    map_service_record,
    newest_slide_image,
    normalize_project_order,
    resolve_image,
)

BUCKET_BASE = "https://test-project.supabase.co/storage/v1/object/public/service-carousel"


def _links(*project_ids: str) -> list[ProjectAssignment]:
    return [ProjectAssignment(project_id=pid, display_order=index) for index, pid in enumerate(project_ids)]


@pytest.fixture
def wedding(fake_db):
    fake_db.seed(SERVICES_TABLE, {"slug": "hochzeit", "label": "Hochzeiten", "headline": "Euer Tag"})
    projects = fake_db.seed(
        "portfolio_projects",
        {"title": "Alpen", "slug": "alpen"},
        {"title": "See", "slug": "see"},
        {"title": "Stadt", "slug": "stadt"},
    )
    return [project["id"] for project in projects]


# =============================================================================
# Mapping
# =============================================================================

class TestMapping:

    def test_fallbacks_for_empty_record(self):
        slide = map_service_record(ServiceRecord(id="1", slug="portrait", label="  "), {})

        assert slide.label == FALLBACK_LABEL
        assert slide.headline == FALLBACK_LABEL
        assert slide.subline == ""
        assert (slide.gradient_start, slide.gradient_end) == (FALLBACK_GRADIENT_START, FALLBACK_GRADIENT_END)
        assert slide.image_url is None
        assert slide.image_alt == "portrait"

    def test_lists_are_sanitized(self):
        record = ServiceRecord(id="1", slug="s", info_paragraphs=[" eins ", "", "zwei"], info_bullet_points=None)
        slide = map_service_record(record, {})

        assert slide.info_paragraphs == ["eins", "zwei"]
        assert slide.info_bullet_points == []

    def test_projects_in_link_order_and_untitled_dropped(self):
        projects = {
            "a": ServiceProjectLink(id="a", title="Alpen"),
            "b": ServiceProjectLink(id="b", title="  "),
            "c": ServiceProjectLink(id="c", title="See"),
        }
        record = ServiceRecord(
            id="1",
            slug="s",
            projects=[
                ProjectAssignment(project_id="c", display_order=0),
                ProjectAssignment(project_id="a", display_order=1),
                ProjectAssignment(project_id="b", display_order=2),
                ProjectAssignment(project_id="gone", display_order=3),
            ],
        )

        assert [p.id for p in map_service_record(record, projects).projects] == ["c", "a"]

    def test_newest_slide_image(self):
        old = ServiceSlideImage(id="1", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
        new = ServiceSlideImage(
            id="2",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            updated_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        assert newest_slide_image([old, new]).id == "2"
        assert newest_slide_image([]) is None

    def test_resolve_image_prefers_public_url(self):
        record = ServiceRecord(
            id="1",
            slug="s",
            label="Label",
            image_path="fallback.jpg",
            slide_images=[ServiceSlideImage(id="1", public_url=" https://x.test/a.jpg ", file_path="a.jpg")],
        )
        assert resolve_image(record) == ("https://x.test/a.jpg", "Label")

    def test_resolve_image_expands_paths(self):
        from_file = ServiceRecord(id="1", slug="s", slide_images=[ServiceSlideImage(id="1", file_path="s/a.jpg")])
        from_service = ServiceRecord(id="1", slug="s", image_path="/s/b.jpg")

        assert resolve_image(from_file)[0] == f"{BUCKET_BASE}/s/a.jpg"
        assert resolve_image(from_service)[0] == f"{BUCKET_BASE}/s/b.jpg"


class TestNormalizeProjectOrder:

    def test_tie_keeps_list_position(self):
        result = normalize_project_order(_links("a", "b", "c"), "c", 0)
        assert [(r.project_id, r.display_order) for r in result] == [("a", 0), ("c", 1), ("b", 2)]

    def test_move_down(self):
        result = normalize_project_order(_links("a", "b", "c"), "a", 2)
        assert [r.project_id for r in result] == ["b", "a", "c"]

    @pytest.mark.parametrize("index", [99, "7"])
    def test_index_clamped_high(self, index):
        result = normalize_project_order(_links("a", "b", "c"), "a", index)
        assert [r.project_id for r in result] == ["b", "a", "c"]

    @pytest.mark.parametrize("index", [-5, "abc", None, float("nan")])
    def test_invalid_index_counts_as_zero(self, index):
        result = normalize_project_order(_links("a", "b", "c"), "b", index)
        assert [r.project_id for r in result] == ["a", "b", "c"]


# =============================================================================
# Service Operations
# =============================================================================

class TestServiceCatalog:

    def test_public_list(self, fake_db, wedding):
        fake_db.seed(LINKS_TABLE, {"service_slug": "hochzeit", "project_id": wedding[1], "display_order": 0})

        slides = ServiceCatalogService.list_public_services()

        assert len(slides) == 1
        assert slides[0].label == "Hochzeiten"
        assert [p.slug for p in slides[0].projects] == ["see"]

    def test_public_list_empty(self, fake_db):
        assert ServiceCatalogService.list_public_services() == []

    def test_get_missing(self, fake_db):
        with pytest.raises(RecordNotFoundError):
            ServiceCatalogService.get_service("nope")

    def test_update_texts_and_links(self, fake_db, wedding, actor):
        record = ServiceCatalogService.update_service(
            "hochzeit",
            ServiceUpdate(
                label=" Hochzeiten ",
                headline="Euer Tag",
                info_paragraphs="Absatz eins\n\n Absatz zwei ",
                info_bullet_points="Punkt",
                gradient_start=" ",
                project_ids=[wedding[2], wedding[0], wedding[2], ""],
            ),
            actor=actor,
        )

        assert record.label == "Hochzeiten"
        assert record.info_paragraphs == ["Absatz eins", "Absatz zwei"]
        assert record.gradient_start is None
        assert [(p.project_id, p.display_order) for p in record.projects] == [(wedding[2], 0), (wedding[0], 1)]

        log = fake_db.rows("activity_logs")[-1]
        assert log["action"] == "update-service"
        assert log["metadata"] == {"paragraphsCount": 2, "bulletPointsCount": 1, "linkedProjects": 2}

    def test_update_removes_unselected_links(self, fake_db, wedding):
        ServiceCatalogService.update_service(
            "hochzeit", ServiceUpdate(label="H", headline="H", project_ids=wedding)
        )
        ServiceCatalogService.update_service(
            "hochzeit", ServiceUpdate(label="H", headline="H", project_ids=[wedding[1]])
        )

        links = fake_db.rows(LINKS_TABLE)
        assert [(link["project_id"], link["display_order"]) for link in links] == [(wedding[1], 0)]

    def test_update_requires_label(self, fake_db, wedding):
        with pytest.raises(ContentValidationError):
            ServiceCatalogService.update_service("hochzeit", ServiceUpdate(label=" ", headline="x"))

    def test_move_project(self, fake_db, wedding, actor):
        ServiceCatalogService.update_service(
            "hochzeit", ServiceUpdate(label="H", headline="H", project_ids=wedding)
        )

        record = ServiceCatalogService.move_project("hochzeit", wedding[0], 5, actor=actor)

        ordered = sorted(record.projects, key=lambda p: p.display_order)
        assert [p.project_id for p in ordered] == [wedding[1], wedding[0], wedding[2]]
        assert fake_db.actions()[-1] == "service_projects_reordered"

    def test_move_unlinked_project(self, fake_db, wedding):
        with pytest.raises(RecordNotFoundError):
            ServiceCatalogService.move_project("hochzeit", wedding[0], 0)

    def test_upload_image(self, fake_db, wedding, actor, image_factory):
        record = ServiceCatalogService.upload_service_image("hochzeit", image_factory("Slide 1.png"), actor=actor)

        assert record.image_path.startswith("hochzeit/slide-1-")
        assert record.image_url == f"{BUCKET_BASE}/{record.image_path}"
        assert len(fake_db.rows(SLIDE_IMAGES_TABLE)) == 1

        ServiceCatalogService.upload_service_image("hochzeit", image_factory("b.png"), actor=actor)
        assert len(fake_db.rows(SLIDE_IMAGES_TABLE)) == 1
        assert fake_db.actions()[-1] == "service_image_uploaded"

    def test_upload_failure_is_logged(self, fake_db, wedding, image_factory):
        fake_db.storage.failing_buckets.add("service-carousel")

        with pytest.raises(StorageUploadError):
            ServiceCatalogService.upload_service_image("hochzeit", image_factory())

        assert fake_db.actions()[-1] == "service_image_upload_failed"

    def test_admin_view_lists_projects(self, fake_db, wedding):
        view = ServiceCatalogService.list_services()

        assert [s.slug for s in view.services] == ["hochzeit"]
        assert [p.title for p in view.projects] == ["Alpen", "See", "Stadt"]
