# =============================================================================
# core/services/portfolio_service.py - Portfolio Business Logic
# =============================================================================
# Manages three related collections:
# - portfolio_projects: the projects themselves
# - portfolio_project_images: per-project gallery images (files in storage)
# - the cover pointer on each project (cover_image_id + cover_public_url)
#
# Consistency rules kept by this service:
# - a cover always points at an image of the same project, or is NULL
# - deleting the cover image promotes the first remaining image
# - deleting a project removes its image files, image rows and service links
#
# Every operation is a plain sequence of Supabase calls; there is no
# transaction around them.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import build_upload_path, clean_optional, create_slug, utc_now_iso
from app.config import settings
from app.exceptions import (
    ContentValidationError,
    ImageNotInProjectError,
    ProjectNotFoundError,
    RecordNotFoundError,
    SiteException,
    SlugConflictError,
)
from core.models.common import Actor, UploadedImage
from core.models.portfolio import (
    PortfolioHero,
    PortfolioPage,
    PortfolioProject,
    PortfolioSettings,
    PortfolioSettingsUpdate,
    ProjectCreate,
    ProjectDetail,
    ProjectImage,
    ProjectImageUpdate,
    ProjectUpdate,
)
from core.services.activity_log_service import ActivityLogService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "portfolio_projects"
IMAGES_TABLE = "portfolio_project_images"
SETTINGS_TABLE = "portfolio_settings"
SERVICE_LINKS_TABLE = "service_portfolio_projects"

PROJECT_COLUMNS = (
    "id, title, subtitle, excerpt, slug, cover_image_id, cover_public_url, "
    "display_order, is_featured, created_at"
)
IMAGE_COLUMNS = "id, project_id, caption, file_path, public_url, display_order, created_at"
SETTINGS_COLUMNS = (
    "id, hero_headline, hero_subheadline, hero_description, hero_cta_label, "
    "hero_cta_url, background_file_path, background_public_url, updated_at"
)

HERO_FALLBACK = PortfolioHero(
    headline="Saint Antönien",
    subheadline="Switzerland Alps",
    description=(
        "Entdecke einzigartige Reportagen, Landschaften und Outdoor-Produktionen "
        "aus den Alpen und der ganzen Welt."
    ),
    cta_label="Projekt anfragen",
    cta_url="/kontakt",
)


def sort_projects(projects: list[PortfolioProject]) -> list[PortfolioProject]:
    """Order by display_order, ties broken by title."""
    return sorted(projects, key=lambda p: (p.display_order, p.title.casefold()))


def sort_images(images: list[ProjectImage]) -> list[ProjectImage]:
    """
    Order by display_order, ties broken by caption.

    Images without caption keep their place within a tie; the captioned
    ones are sorted among the remaining places.
    """
    ordered = sorted(images, key=lambda i: i.display_order)

    start = 0
    while start < len(ordered):
        end = start
        while end < len(ordered) and ordered[end].display_order == ordered[start].display_order:
            end += 1

        slots = [index for index in range(start, end) if ordered[index].caption is not None]
        captioned = sorted((ordered[index] for index in slots), key=lambda i: i.caption.casefold())
        for index, image in zip(slots, captioned):
            ordered[index] = image

        start = end
    return ordered


class PortfolioService:
    """
    Service for portfolio projects, their galleries and cover images.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def list_projects() -> list[PortfolioProject]:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(PROJECTS_TABLE)
            .select(PROJECT_COLUMNS)
            .order("display_order")
            .order("created_at"),
            "list portfolio projects",
        )
        return sort_projects([PortfolioProject(**row) for row in rows])

    @staticmethod
    def get_project(project_id: str) -> PortfolioProject:
        """
        Get a project by id.

        Raises:
            ProjectNotFoundError: If the project doesn't exist
        """
        client = SupabaseClient.get_client()
        row = SupabaseClient.execute_one(
            client.table(PROJECTS_TABLE).select(PROJECT_COLUMNS).eq("id", project_id).limit(1),
            "fetch portfolio project",
        )
        if not row:
            raise ProjectNotFoundError(project_id)
        return PortfolioProject(**row)

    @staticmethod
    def list_images(project_id: str) -> list[ProjectImage]:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(IMAGES_TABLE)
            .select(IMAGE_COLUMNS)
            .eq("project_id", project_id)
            .order("display_order")
            .order("created_at"),
            "list project images",
        )
        return sort_images([ProjectImage(**row) for row in rows])

    @staticmethod
    def get_project_detail(project_id: str) -> ProjectDetail:
        project = PortfolioService.get_project(project_id)
        return ProjectDetail(project=project, images=PortfolioService.list_images(project.id))

    @staticmethod
    def get_project_by_slug(slug: str) -> ProjectDetail:
        """
        Get a project and its ordered gallery by slug.

        Raises:
            ProjectNotFoundError: If no project has this slug
        """
        client = SupabaseClient.get_client()
        row = SupabaseClient.execute_one(
            client.table(PROJECTS_TABLE).select(PROJECT_COLUMNS).eq("slug", slug).limit(1),
            "fetch portfolio project by slug",
        )
        if not row:
            raise ProjectNotFoundError(slug)

        project = PortfolioProject(**row)
        return ProjectDetail(project=project, images=PortfolioService.list_images(project.id))

    @staticmethod
    def list_project_slugs() -> list[str]:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(PROJECTS_TABLE).select("slug"),
            "list portfolio slugs",
        )
        return [row["slug"] for row in rows if row.get("slug")]

    @staticmethod
    def get_settings() -> PortfolioSettings | None:
        """Newest portfolio_settings row, if any."""
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(SETTINGS_TABLE)
            .select(SETTINGS_COLUMNS)
            .order("updated_at", desc=True)
            .limit(1),
            "fetch portfolio settings",
        )
        return PortfolioSettings(**rows[0]) if rows else None

    @staticmethod
    def get_page() -> PortfolioPage:
        """
        Build the public portfolio overview.

        Missing settings fields fall back to the built-in hero texts, as do
        all of them when the settings cannot be loaded.
        """
        try:
            page_settings = PortfolioService.get_settings()
        except SiteException as e:
            logger.error(f"Failed to load portfolio settings: {e.message}")
            page_settings = None
        projects = PortfolioService.list_projects()

        hero = HERO_FALLBACK.model_copy()
        if page_settings:
            hero = PortfolioHero(
                headline=page_settings.hero_headline or HERO_FALLBACK.headline,
                subheadline=page_settings.hero_subheadline or HERO_FALLBACK.subheadline,
                description=page_settings.hero_description or HERO_FALLBACK.description,
                cta_label=page_settings.hero_cta_label or HERO_FALLBACK.cta_label,
                cta_url=page_settings.hero_cta_url or HERO_FALLBACK.cta_url,
                background_url=page_settings.background_public_url,
            )

        return PortfolioPage(hero=hero, projects=projects, project_count=len(projects))

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    @staticmethod
    def _ensure_unique_slug(slug: str, exclude_id: str | None = None) -> None:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(PROJECTS_TABLE).select("id").eq("slug", slug),
            "check project slug",
        )
        if any(str(row["id"]) != str(exclude_id) for row in rows):
            raise SlugConflictError("Project", slug)

    @staticmethod
    def _next_display_order(table: str, column: str | None = None, value: str | None = None) -> int:
        client = SupabaseClient.get_client()
        query = client.table(table).select("display_order")
        if column:
            query = query.eq(column, value)
        rows = SupabaseClient.execute(
            query.order("display_order", desc=True).limit(1),
            f"fetch max display_order of {table}",
        )
        if not rows or rows[0].get("display_order") is None:
            return 0
        return int(rows[0]["display_order"]) + 1

    @staticmethod
    def create_project(data: ProjectCreate, actor: Actor | None = None) -> PortfolioProject:
        """
        Create a project.

        The slug is derived from the title unless given, and must be unique.
        New projects are appended after the last display_order.

        Raises:
            ContentValidationError: If title or slug end up empty
            SlugConflictError: If the slug is taken
        """
        title = data.title.strip()
        if not title:
            raise ContentValidationError("Bitte gib einen Projekttitel an.", field="title")

        slug = create_slug(data.slug or title)
        if not slug:
            raise ContentValidationError("Aus dem Titel konnte kein Slug erzeugt werden.", field="slug")

        PortfolioService._ensure_unique_slug(slug)

        display_order = data.display_order
        if display_order is None:
            display_order = PortfolioService._next_display_order(PROJECTS_TABLE)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(PROJECTS_TABLE).insert({
                "title": title,
                "subtitle": clean_optional(data.subtitle),
                "excerpt": clean_optional(data.excerpt),
                "slug": slug,
                "display_order": display_order,
                "is_featured": data.is_featured,
            }),
            "create portfolio project",
        )
        if not rows:
            raise ContentValidationError("Das Projekt konnte nicht angelegt werden.")

        project = PortfolioProject(**rows[0])
        logger.info(f"Created portfolio project: {project.id} ({slug})")

        ActivityLogService.log_action(
            "portfolio_project_created",
            actor=actor,
            entity_type="portfolio_project",
            entity_id=project.id,
            metadata={"slug": slug, "title": title},
        )
        return project

    @staticmethod
    def update_project(project_id: str, data: ProjectUpdate, actor: Actor | None = None) -> PortfolioProject:
        """
        Update the given fields of a project.

        Raises:
            ProjectNotFoundError: If the project doesn't exist
            SlugConflictError: If a changed slug is taken
        """
        existing = PortfolioService.get_project(project_id)
        changes = data.model_dump(exclude_unset=True)
        updates: dict[str, Any] = {}

        if "title" in changes and changes["title"] is not None:
            title = changes["title"].strip()
            if not title:
                raise ContentValidationError("Bitte gib einen Projekttitel an.", field="title")
            updates["title"] = title

        for field in ("subtitle", "excerpt"):
            if field in changes:
                updates[field] = clean_optional(changes[field])

        if changes.get("slug") is not None:
            slug = create_slug(changes["slug"])
            if not slug:
                raise ContentValidationError("Der Slug darf nicht leer sein.", field="slug")
            if slug != existing.slug:
                PortfolioService._ensure_unique_slug(slug, exclude_id=project_id)
            updates["slug"] = slug

        if changes.get("display_order") is not None:
            updates["display_order"] = changes["display_order"]
        if changes.get("is_featured") is not None:
            updates["is_featured"] = changes["is_featured"]

        if not updates:
            return existing

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(PROJECTS_TABLE).update(updates).eq("id", project_id),
            "update portfolio project",
        )
        project = PortfolioProject(**rows[0]) if rows else existing.model_copy(update=updates)

        ActivityLogService.log_action(
            "portfolio_project_updated",
            actor=actor,
            entity_type="portfolio_project",
            entity_id=project_id,
            metadata={"fields": sorted(updates)},
        )
        return project

    @staticmethod
    def delete_project(project_id: str, actor: Actor | None = None) -> None:
        """
        Delete a project with its gallery files, image rows and service links.

        Raises:
            ProjectNotFoundError: If the project doesn't exist
        """
        project = PortfolioService.get_project(project_id)
        images = PortfolioService.list_images(project_id)
        client = SupabaseClient.get_client()

        StorageService.remove_files(
            settings.PORTFOLIO_BUCKET,
            [image.file_path for image in images if image.file_path],
        )

        if project.cover_image_id:
            SupabaseClient.execute(
                client.table(PROJECTS_TABLE)
                .update({"cover_image_id": None, "cover_public_url": None})
                .eq("id", project_id),
                "clear project cover",
            )

        SupabaseClient.execute(
            client.table(IMAGES_TABLE).delete().eq("project_id", project_id),
            "delete project images",
        )
        SupabaseClient.execute(
            client.table(SERVICE_LINKS_TABLE).delete().eq("project_id", project_id),
            "delete project service links",
        )
        SupabaseClient.execute(
            client.table(PROJECTS_TABLE).delete().eq("id", project_id),
            "delete portfolio project",
        )

        logger.info(f"Deleted portfolio project {project_id} with {len(images)} image(s)")
        ActivityLogService.log_action(
            "portfolio_project_deleted",
            actor=actor,
            entity_type="portfolio_project",
            entity_id=project_id,
            metadata={"slug": project.slug, "deletedImages": len(images)},
        )

    # -------------------------------------------------------------------------
    # Gallery Images
    # -------------------------------------------------------------------------

    @staticmethod
    def _get_image(image_id: str) -> ProjectImage:
        client = SupabaseClient.get_client()
        row = SupabaseClient.execute_one(
            client.table(IMAGES_TABLE).select(IMAGE_COLUMNS).eq("id", image_id).limit(1),
            "fetch project image",
        )
        if not row:
            raise RecordNotFoundError("Image", image_id)
        return ProjectImage(**row)

    @staticmethod
    def _write_cover(project_id: str, image: ProjectImage | None) -> None:
        client = SupabaseClient.get_client()
        SupabaseClient.execute(
            client.table(PROJECTS_TABLE)
            .update({
                "cover_image_id": image.id if image else None,
                "cover_public_url": image.public_url if image else None,
            })
            .eq("id", project_id),
            "update project cover",
        )

    @staticmethod
    def add_image(
        project_id: str,
        image: UploadedImage,
        caption: str | None = None,
        actor: Actor | None = None,
    ) -> ProjectImage:
        """
        Upload a gallery image and append it to the project.

        The first image of a project without cover becomes its cover.
        If the row insert fails, the uploaded file is removed again.
        """
        project = PortfolioService.get_project(project_id)
        bucket = settings.PORTFOLIO_BUCKET

        path = build_upload_path(project.id, image.filename, project.slug or "project")
        stored_path, public_url = StorageService.store_image(bucket, path, image)

        client = SupabaseClient.get_client()
        try:
            rows = SupabaseClient.execute(
                client.table(IMAGES_TABLE).insert({
                    "project_id": project.id,
                    "caption": clean_optional(caption),
                    "file_path": stored_path,
                    "public_url": public_url,
                    "display_order": PortfolioService._next_display_order(IMAGES_TABLE, "project_id", project.id),
                }),
                "insert project image",
            )
        except Exception:
            StorageService.remove_files(bucket, [stored_path])
            raise

        new_image = ProjectImage(**rows[0])

        if not project.cover_image_id:
            PortfolioService._write_cover(project.id, new_image)

        ActivityLogService.log_action(
            "portfolio_image_uploaded",
            actor=actor,
            entity_type="portfolio_project_image",
            entity_id=new_image.id,
            metadata={
                "projectId": project.id,
                "filePath": stored_path,
                "fileSize": image.size,
                "mimeType": image.content_type,
            },
        )
        return new_image

    @staticmethod
    def update_image(image_id: str, data: ProjectImageUpdate, actor: Actor | None = None) -> ProjectImage:
        image = PortfolioService._get_image(image_id)
        changes = data.model_dump(exclude_unset=True)

        updates: dict[str, Any] = {}
        if "caption" in changes:
            updates["caption"] = clean_optional(changes["caption"])
        if changes.get("display_order") is not None:
            updates["display_order"] = changes["display_order"]

        if not updates:
            return image

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(IMAGES_TABLE).update(updates).eq("id", image_id),
            "update project image",
        )

        ActivityLogService.log_action(
            "portfolio_image_updated",
            actor=actor,
            entity_type="portfolio_project_image",
            entity_id=image_id,
            metadata=updates,
        )
        return ProjectImage(**rows[0]) if rows else image.model_copy(update=updates)

    @staticmethod
    def reorder_images(project_id: str, image_ids: list[str], actor: Actor | None = None) -> list[ProjectImage]:
        """
        Rewrite display_order of all project images to match image_ids.

        Raises:
            ContentValidationError: If image_ids is not exactly the project's images
        """
        current = PortfolioService.list_images(project_id)
        if not current:
            PortfolioService.get_project(project_id)

        if sorted(image_ids) != sorted(image.id for image in current):
            raise ContentValidationError(
                "Die Reihenfolge muss alle Bilder des Projekts genau einmal enthalten.",
                field="image_ids",
            )

        client = SupabaseClient.get_client()
        by_id = {image.id: image for image in current}
        for index, image_id in enumerate(image_ids):
            if by_id[image_id].display_order == index:
                continue
            SupabaseClient.execute(
                client.table(IMAGES_TABLE).update({"display_order": index}).eq("id", image_id),
                "reorder project image",
            )

        ActivityLogService.log_action(
            "portfolio_images_reordered",
            actor=actor,
            entity_type="portfolio_project",
            entity_id=project_id,
            metadata={"order": image_ids},
        )
        return PortfolioService.list_images(project_id)

    @staticmethod
    def delete_image(image_id: str, actor: Actor | None = None) -> None:
        """
        Delete a gallery image.

        If it was the project's cover, the first remaining image becomes the
        cover (or the cover is cleared when none remain).
        """
        image = PortfolioService._get_image(image_id)
        project = PortfolioService.get_project(image.project_id)
        client = SupabaseClient.get_client()

        if project.cover_image_id == image.id:
            remaining = [other for other in PortfolioService.list_images(project.id) if other.id != image.id]
            PortfolioService._write_cover(project.id, remaining[0] if remaining else None)

        SupabaseClient.execute(
            client.table(IMAGES_TABLE).delete().eq("id", image_id),
            "delete project image",
        )
        StorageService.remove_files(settings.PORTFOLIO_BUCKET, [image.file_path] if image.file_path else [])

        ActivityLogService.log_action(
            "portfolio_image_deleted",
            actor=actor,
            entity_type="portfolio_project_image",
            entity_id=image_id,
            metadata={"projectId": project.id, "filePath": image.file_path},
        )

    @staticmethod
    def set_cover(project_id: str, image_id: str, actor: Actor | None = None) -> PortfolioProject:
        """
        Make one of the project's images its cover.

        Raises:
            ImageNotInProjectError: If the image belongs to another project
        """
        project = PortfolioService.get_project(project_id)
        image = PortfolioService._get_image(image_id)

        if str(image.project_id) != str(project.id):
            raise ImageNotInProjectError(image_id, project_id)

        PortfolioService._write_cover(project.id, image)

        ActivityLogService.log_action(
            "portfolio_cover_selected",
            actor=actor,
            entity_type="portfolio_project",
            entity_id=project.id,
            metadata={"imageId": image.id},
        )
        return project.model_copy(update={"cover_image_id": image.id, "cover_public_url": image.public_url})

    # -------------------------------------------------------------------------
    # Overview Page Settings
    # -------------------------------------------------------------------------

    @staticmethod
    def _save_settings(values: dict[str, Any]) -> PortfolioSettings:
        """Update the newest settings row, or create the first one."""
        client = SupabaseClient.get_client()
        current = PortfolioService.get_settings()
        values = {**values, "updated_at": utc_now_iso()}

        if current and current.id:
            rows = SupabaseClient.execute(
                client.table(SETTINGS_TABLE).update(values).eq("id", current.id),
                "update portfolio settings",
            )
        else:
            rows = SupabaseClient.execute(
                client.table(SETTINGS_TABLE).insert(values),
                "create portfolio settings",
            )

        if rows:
            return PortfolioSettings(**rows[0])
        base = current.model_dump() if current else {}
        return PortfolioSettings(**{**base, **values})

    @staticmethod
    def update_settings(data: PortfolioSettingsUpdate, actor: Actor | None = None) -> PortfolioSettings:
        values = {field: clean_optional(value) for field, value in data.model_dump().items()}
        saved = PortfolioService._save_settings(values)

        ActivityLogService.log_action(
            "portfolio_settings_saved",
            actor=actor,
            entity_type="portfolio_settings",
            entity_id=saved.id,
        )
        return saved

    @staticmethod
    def upload_background(image: UploadedImage, actor: Actor | None = None) -> PortfolioSettings:
        """Replace the overview background image; the old file is removed."""
        bucket = settings.PORTFOLIO_BACKGROUND_BUCKET
        previous = PortfolioService.get_settings()

        path = build_upload_path("portfolio", image.filename, "background")
        stored_path, public_url = StorageService.store_image(bucket, path, image)

        saved = PortfolioService._save_settings({
            "background_file_path": stored_path,
            "background_public_url": public_url,
        })

        if previous and previous.background_file_path and previous.background_file_path != stored_path:
            StorageService.remove_files(bucket, [previous.background_file_path])

        ActivityLogService.log_action(
            "portfolio_background_uploaded",
            actor=actor,
            entity_type="portfolio_settings",
            entity_id=saved.id,
            metadata={"filePath": stored_path, "publicUrl": public_url},
        )
        return saved
