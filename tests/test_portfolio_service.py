# =============================================================================
# tests/test_portfolio_service.py - Portfolio Service Tests
# =============================================================================
# Runs PortfolioService against the in-memory Supabase from conftest.py.
#
# Run with: pytest tests/test_portfolio_service.py -v
# =============================================================================

import pytest

from app.exceptions import (
    ContentValidationError,
    DatabaseError,
    ImageNotInProjectError,
    ProjectNotFoundError,
    SlugConflictError,
)
from core.models.portfolio import (
    PortfolioProject,
    PortfolioSettingsUpdate,
    ProjectCreate,
    ProjectImage,
    ProjectImageUpdate,
    ProjectUpdate,
)
from core.services.portfolio_service import (
    HERO_FALLBACK,
    IMAGES_TABLE,
    PROJECTS_TABLE,
    SERVICE_LINKS_TABLE,
    PortfolioService,
    sort_images,
    sort_projects,
)


@pytest.fixture
def project(fake_db, actor):
    return PortfolioService.create_project(ProjectCreate(title="Saint Antönien"), actor=actor)


@pytest.fixture
def project_with_images(project, image_factory, actor):
    images = [
        PortfolioService.add_image(project.id, image_factory(f"bild-{n}.jpg"), caption=f"Bild {n}", actor=actor)
        for n in range(3)
    ]
    return project, images


# =============================================================================
# Projects
# =============================================================================

class TestProjects:

    def test_create_derives_slug_and_order(self, fake_db, actor):
        first = PortfolioService.create_project(ProjectCreate(title="Saint Antönien"), actor=actor)
        second = PortfolioService.create_project(ProjectCreate(title="Hochzeit am See"), actor=actor)

        assert first.slug == "saint-antönien"
        assert first.display_order == 0
        assert second.display_order == 1
        assert fake_db.actions() == ["portfolio_project_created", "portfolio_project_created"]

    def test_create_rejects_duplicate_slug(self, project, actor):
        with pytest.raises(SlugConflictError):
            PortfolioService.create_project(ProjectCreate(title="Saint  Antönien!"), actor=actor)

    def test_create_rejects_title_without_slug(self, fake_db):
        with pytest.raises(ContentValidationError):
            PortfolioService.create_project(ProjectCreate(title="!!!"))

    def test_get_missing_project(self, fake_db):
        with pytest.raises(ProjectNotFoundError) as exc:
            PortfolioService.get_project("missing")
        assert exc.value.status_code == 404

    def test_list_sorted_by_order_then_title(self, fake_db):
        fake_db.seed(
            PROJECTS_TABLE,
            {"title": "beta", "slug": "beta", "display_order": 1},
            {"title": "Alpha", "slug": "alpha", "display_order": 1},
            {"title": "Zulu", "slug": "zulu", "display_order": 0},
        )

        titles = [p.title for p in PortfolioService.list_projects()]
        assert titles == ["Zulu", "Alpha", "beta"]

    def test_update_partial(self, project, actor):
        updated = PortfolioService.update_project(project.id, ProjectUpdate(subtitle="  Alpen  "), actor=actor)

        assert updated.subtitle == "Alpen"
        assert updated.title == project.title

    def test_update_without_changes_returns_existing(self, fake_db, project):
        fake_db.calls.clear()
        result = PortfolioService.update_project(project.id, ProjectUpdate())

        assert result == project
        assert (PROJECTS_TABLE, "update") not in fake_db.calls

    def test_update_slug_conflict(self, project, actor):
        other = PortfolioService.create_project(ProjectCreate(title="Other"), actor=actor)

        with pytest.raises(SlugConflictError):
            PortfolioService.update_project(other.id, ProjectUpdate(slug=project.slug), actor=actor)

    def test_delete_removes_images_links_and_files(self, fake_db, project_with_images, actor):
        project, images = project_with_images
        fake_db.seed(SERVICE_LINKS_TABLE, {"service_slug": "hochzeit", "project_id": project.id, "display_order": 0})

        PortfolioService.delete_project(project.id, actor=actor)

        assert fake_db.rows(PROJECTS_TABLE) == []
        assert fake_db.rows(IMAGES_TABLE) == []
        assert fake_db.rows(SERVICE_LINKS_TABLE) == []
        assert fake_db.storage.files("portfolio-images") == {}
        assert "portfolio_project_deleted" in fake_db.actions()

    def test_list_project_slugs(self, project):
        assert PortfolioService.list_project_slugs() == ["saint-antönien"]

    def test_get_by_slug(self, project_with_images):
        project, images = project_with_images
        detail = PortfolioService.get_project_by_slug(project.slug)

        assert detail.project.id == project.id
        assert [image.id for image in detail.images] == [image.id for image in images]

    def test_sort_projects_casefolds(self):
        projects = [
            PortfolioProject(id="1", title="b", display_order=0),
            PortfolioProject(id="2", title="A", display_order=0),
        ]
        assert [p.id for p in sort_projects(projects)] == ["2", "1"]

    def test_sort_images_keeps_uncaptioned_in_place(self):
        def image(image_id, order, caption=None):
            return ProjectImage(
                id=image_id,
                project_id="p",
                caption=caption,
                public_url=f"https://x.test/{image_id}.jpg",
                display_order=order,
            )

        images = [
            image("n1", 1),
            image("b", 1, "b"),
            image("n2", 1),
            image("a", 1, "A"),
            image("z", 0, "z"),
        ]

        assert [i.id for i in sort_images(images)] == ["z", "n1", "a", "n2", "b"]


# =============================================================================
# Gallery Images
# =============================================================================

class TestImages:

    def test_first_image_becomes_cover(self, project_with_images):
        project, images = project_with_images
        stored = PortfolioService.get_project(project.id)

        assert stored.cover_image_id == images[0].id
        assert stored.cover_public_url == images[0].public_url

    def test_images_appended_in_order(self, project_with_images):
        _, images = project_with_images
        assert [image.display_order for image in images] == [0, 1, 2]
        assert images[0].file_path.startswith(f"{images[0].project_id}/bild-0-")

    def test_add_image_to_missing_project(self, fake_db, image_factory):
        with pytest.raises(ProjectNotFoundError):
            PortfolioService.add_image("missing", image_factory())

    def test_failed_insert_removes_upload(self, fake_db, project, image_factory):
        fake_db.failing_tables.add(IMAGES_TABLE)

        with pytest.raises(DatabaseError):
            PortfolioService.add_image(project.id, image_factory())

        assert fake_db.storage.files("portfolio-images") == {}

    def test_update_caption(self, project_with_images, actor):
        _, images = project_with_images
        updated = PortfolioService.update_image(images[1].id, ProjectImageUpdate(caption="Neu"), actor=actor)

        assert updated.caption == "Neu"

    def test_reorder(self, project_with_images, actor):
        project, images = project_with_images
        new_order = [images[2].id, images[0].id, images[1].id]

        result = PortfolioService.reorder_images(project.id, new_order, actor=actor)

        assert [image.id for image in result] == new_order
        assert [image.display_order for image in result] == [0, 1, 2]

    def test_reorder_requires_all_images(self, project_with_images):
        project, images = project_with_images

        with pytest.raises(ContentValidationError):
            PortfolioService.reorder_images(project.id, [images[0].id, images[1].id])

        with pytest.raises(ContentValidationError):
            PortfolioService.reorder_images(project.id, [images[0].id] * 3)

    def test_delete_cover_promotes_next_image(self, fake_db, project_with_images, actor):
        project, images = project_with_images

        PortfolioService.delete_image(images[0].id, actor=actor)

        stored = PortfolioService.get_project(project.id)
        assert stored.cover_image_id == images[1].id
        assert images[0].file_path not in fake_db.storage.files("portfolio-images")

    def test_delete_last_image_clears_cover(self, project, image_factory):
        image = PortfolioService.add_image(project.id, image_factory())

        PortfolioService.delete_image(image.id)

        stored = PortfolioService.get_project(project.id)
        assert stored.cover_image_id is None
        assert stored.cover_public_url is None

    def test_set_cover(self, project_with_images, actor):
        project, images = project_with_images
        result = PortfolioService.set_cover(project.id, images[2].id, actor=actor)

        assert result.cover_image_id == images[2].id
        assert PortfolioService.get_project(project.id).cover_public_url == images[2].public_url

    def test_set_cover_from_other_project(self, project_with_images, image_factory, actor):
        project, _ = project_with_images
        other = PortfolioService.create_project(ProjectCreate(title="Other"), actor=actor)
        foreign = PortfolioService.add_image(other.id, image_factory())

        with pytest.raises(ImageNotInProjectError):
            PortfolioService.set_cover(project.id, foreign.id)


# =============================================================================
# Overview Page
# =============================================================================

class TestOverviewPage:

    def test_page_without_settings_uses_fallback(self, fake_db):
        page = PortfolioService.get_page()

        assert page.hero == HERO_FALLBACK
        assert page.project_count == 0

    def test_page_survives_failing_settings(self, fake_db, project):
        fake_db.failing_tables.add("portfolio_settings")

        page = PortfolioService.get_page()

        assert page.hero == HERO_FALLBACK
        assert [p.id for p in page.projects] == [project.id]

    def test_settings_update_then_update_again(self, fake_db, actor):
        first = PortfolioService.update_settings(PortfolioSettingsUpdate(hero_headline="Alpen"), actor=actor)
        second = PortfolioService.update_settings(PortfolioSettingsUpdate(hero_headline="Berge"), actor=actor)

        assert first.id == second.id
        assert len(fake_db.rows("portfolio_settings")) == 1

        page = PortfolioService.get_page()
        assert page.hero.headline == "Berge"
        assert page.hero.description == HERO_FALLBACK.description

    def test_background_upload_replaces_old_file(self, fake_db, image_factory, actor):
        first = PortfolioService.upload_background(image_factory("one.jpg"), actor=actor)
        second = PortfolioService.upload_background(image_factory("two.jpg"), actor=actor)

        files = fake_db.storage.files("portfolio-backgrounds")
        assert first.background_file_path not in files
        assert second.background_file_path in files
        assert PortfolioService.get_page().hero.background_url == second.background_public_url
