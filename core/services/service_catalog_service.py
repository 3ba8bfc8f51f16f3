# =============================================================================
# core/services/service_catalog_service.py - Service Slides
# =============================================================================
# The services page shows one slide per row of the services table.
# Each slide combines:
# - the services row (texts, gradient colours, image_path)
# - its newest service_slide_images row (one per service_slug)
# - linked portfolio projects (service_portfolio_projects, ordered)
#
# Slides are fixed; admins edit them but never create or delete them.
# =============================================================================

import logging
import math
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import (
    build_upload_path,
    clean_optional,
    normalize_multiline,
    sanitize_file_stem,
    sanitize_string_list,
)
from app.config import settings
from app.exceptions import ContentValidationError, RecordNotFoundError
from core.models.common import Actor, UploadedImage
from core.models.service import (
    ProjectAssignment,
    ServiceAdminView,
    ServiceProjectLink,
    ServiceRecord,
    ServiceSlide,
    ServiceSlideImage,
    ServiceUpdate,
)
from core.services.activity_log_service import ActivityLogService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

SERVICES_TABLE = "services"
SLIDE_IMAGES_TABLE = "service_slide_images"
LINKS_TABLE = "service_portfolio_projects"
PROJECTS_TABLE = "portfolio_projects"

SERVICE_COLUMNS = (
    "id, slug, label, headline, subline, info_title, info_paragraphs, "
    "info_bullet_points, gradient_start, gradient_end, image_path, created_at"
)

FALLBACK_LABEL = "Service"
FALLBACK_GRADIENT_START = "#111827"
FALLBACK_GRADIENT_END = "#1f2937"


def _image_timestamp(image: ServiceSlideImage) -> float:
    moment = image.updated_at or image.created_at
    return moment.timestamp() if moment else 0


def newest_slide_image(images: list[ServiceSlideImage]) -> ServiceSlideImage | None:
    """The most recently updated (or created) slide image."""
    if not images:
        return None
    return sorted(images, key=_image_timestamp, reverse=True)[0]


def resolve_image(record: ServiceRecord) -> tuple[str | None, str]:
    """
    Work out the slide image URL and alt text.

    Prefers the newest slide image's public URL; otherwise uses its
    file_path or the service's image_path. Absolute URLs pass through,
    relative paths are expanded against the service bucket.
    """
    alt = (record.label or "").strip() or record.slug
    primary = newest_slide_image(record.slide_images)

    if primary and primary.public_url and primary.public_url.strip():
        return primary.public_url.strip(), alt

    candidate = (primary.file_path if primary else None) or record.image_path
    return StorageService.build_public_url(settings.SERVICE_BUCKET, candidate), alt


def map_service_record(record: ServiceRecord, projects: dict[str, ServiceProjectLink]) -> ServiceSlide:
    """Turn a stored service into a slide, applying every fallback."""
    label = (record.label or "").strip() or FALLBACK_LABEL
    image_url, image_alt = resolve_image(record)

    linked = []
    for assignment in sorted(record.projects, key=lambda a: a.display_order):
        project = projects.get(assignment.project_id)
        if project and project.title.strip():
            linked.append(project)

    return ServiceSlide(
        id=record.id,
        slug=record.slug,
        label=label,
        headline=(record.headline or "").strip() or label,
        subline=(record.subline or "").strip(),
        info_title=clean_optional(record.info_title),
        info_paragraphs=sanitize_string_list(record.info_paragraphs),
        info_bullet_points=sanitize_string_list(record.info_bullet_points),
        gradient_start=(record.gradient_start or "").strip() or FALLBACK_GRADIENT_START,
        gradient_end=(record.gradient_end or "").strip() or FALLBACK_GRADIENT_END,
        image_url=image_url,
        image_alt=image_alt,
        projects=linked,
    )


def normalize_project_order(
    selections: list[ProjectAssignment],
    project_id: str,
    new_index: Any,
) -> list[ProjectAssignment]:
    """
    Move one linked project to a new position and renumber 0..n-1.

    The index is clamped to the valid range; non-numbers count as 0.
    Ties keep the previous order of the list.

    Example:
        normalize_project_order([a(0), b(1), c(2)], "c", 0)
        # [a(0), c(1), b(2)]
    """
    max_index = max(len(selections) - 1, 0)
    try:
        value = float(new_index)
    except (TypeError, ValueError):
        value = 0.0
    if math.isnan(value):
        value = 0.0
    target = min(max(value, 0), max_index)

    moved = [
        (target if selection.project_id == project_id else selection.display_order, position, selection)
        for position, selection in enumerate(selections)
    ]
    moved.sort(key=lambda item: (item[0], item[1]))

    return [
        ProjectAssignment(project_id=selection.project_id, display_order=index)
        for index, (_, _, selection) in enumerate(moved)
    ]


class ServiceCatalogService:
    """Service for the services slider and its admin editor."""

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @staticmethod
    def _load_records(slug: str | None = None) -> list[ServiceRecord]:
        client = SupabaseClient.get_client()

        query = client.table(SERVICES_TABLE).select(SERVICE_COLUMNS)
        if slug:
            query = query.eq("slug", slug)
        rows = SupabaseClient.execute(query.order("created_at"), "list services")
        if not rows:
            return []

        slugs = [row["slug"] for row in rows]
        image_rows = SupabaseClient.execute(
            client.table(SLIDE_IMAGES_TABLE)
            .select("id, service_slug, file_path, public_url, created_at, updated_at")
            .in_("service_slug", slugs),
            "list service slide images",
        )
        link_rows = SupabaseClient.execute(
            client.table(LINKS_TABLE)
            .select("service_slug, project_id, display_order")
            .in_("service_slug", slugs)
            .order("display_order"),
            "list service project links",
        )

        records = []
        for row in rows:
            images = [
                ServiceSlideImage(**{**image, "id": str(image["id"])})
                for image in image_rows
                if image.get("service_slug") == row["slug"]
            ]
            links = [
                ProjectAssignment(project_id=str(link["project_id"]), display_order=link.get("display_order") or 0)
                for link in link_rows
                if link.get("service_slug") == row["slug"] and link.get("project_id") is not None
            ]
            data = {key: value for key, value in row.items() if key != "created_at"}
            record = ServiceRecord(**{**data, "id": str(row["id"]), "slide_images": images, "projects": links})
            record.image_url = resolve_image(record)[0]
            records.append(record)
        return records

    @staticmethod
    def _load_projects() -> dict[str, ServiceProjectLink]:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(PROJECTS_TABLE).select("id, title, slug").order("title"),
            "list linkable projects",
        )
        return {
            str(row["id"]): ServiceProjectLink(
                id=str(row["id"]),
                title=(row.get("title") or "").strip(),
                slug=clean_optional(row.get("slug")),
            )
            for row in rows
        }

    @staticmethod
    def list_public_services() -> list[ServiceSlide]:
        records = ServiceCatalogService._load_records()
        projects = ServiceCatalogService._load_projects() if records else {}
        return [map_service_record(record, projects) for record in records]

    @staticmethod
    def list_services() -> ServiceAdminView:
        """Services with their raw fields plus every project for the picker."""
        projects = ServiceCatalogService._load_projects()
        return ServiceAdminView(
            services=ServiceCatalogService._load_records(),
            projects=[project for project in projects.values() if project.title],
        )

    @staticmethod
    def get_service(slug: str) -> ServiceRecord:
        records = ServiceCatalogService._load_records(slug)
        if not records:
            raise RecordNotFoundError("Service", slug)
        return records[0]

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    @staticmethod
    def _save_links(slug: str, current: list[ProjectAssignment], selections: list[ProjectAssignment]) -> None:
        """Delete links that are no longer selected, upsert the rest."""
        client = SupabaseClient.get_client()
        selected = {selection.project_id for selection in selections}
        removed = [link.project_id for link in current if link.project_id not in selected]

        if removed:
            SupabaseClient.execute(
                client.table(LINKS_TABLE).delete().eq("service_slug", slug).in_("project_id", removed),
                "delete service project links",
            )

        if selections:
            SupabaseClient.execute(
                client.table(LINKS_TABLE).upsert(
                    [
                        {"service_slug": slug, "project_id": s.project_id, "display_order": s.display_order}
                        for s in selections
                    ],
                    on_conflict="service_slug,project_id",
                ),
                "save service project links",
            )

    @staticmethod
    def update_service(slug: str, data: ServiceUpdate, actor: Actor | None = None) -> ServiceRecord:
        """
        Save the admin form of one service.

        Texts are trimmed, blank optional fields become NULL, paragraphs and
        bullet points are read one per line. The project selection is
        stored in the given order as display_order 0..n-1.

        Raises:
            RecordNotFoundError: Unknown slug
            ContentValidationError: Blank label
        """
        current = ServiceCatalogService.get_service(slug)

        label = data.label.strip()
        if not label:
            raise ContentValidationError("Bitte gib ein Label an.", field="label")

        paragraphs = normalize_multiline(data.info_paragraphs)
        bullet_points = normalize_multiline(data.info_bullet_points)

        client = SupabaseClient.get_client()
        SupabaseClient.execute(
            client.table(SERVICES_TABLE)
            .update({
                "label": label,
                "headline": data.headline.strip(),
                "subline": data.subline.strip(),
                "info_title": clean_optional(data.info_title),
                "info_paragraphs": paragraphs,
                "info_bullet_points": bullet_points,
                "gradient_start": clean_optional(data.gradient_start),
                "gradient_end": clean_optional(data.gradient_end),
                "image_path": clean_optional(data.image_path),
            })
            .eq("slug", slug),
            "update service",
        )

        selections = []
        for project_id in data.project_ids:
            if project_id and project_id not in [s.project_id for s in selections]:
                selections.append(ProjectAssignment(project_id=project_id, display_order=len(selections)))

        ServiceCatalogService._save_links(slug, current.projects, selections)
        logger.info(f"Updated service {slug} ({len(selections)} linked projects)")

        ActivityLogService.log_action(
            "update-service",
            actor=actor,
            description=f"Service {label} aktualisiert",
            entity_type="service",
            entity_id=slug,
            metadata={
                "paragraphsCount": len(paragraphs),
                "bulletPointsCount": len(bullet_points),
                "linkedProjects": len(selections),
            },
        )
        return ServiceCatalogService.get_service(slug)

    @staticmethod
    def move_project(slug: str, project_id: str, new_index: int, actor: Actor | None = None) -> ServiceRecord:
        """
        Change the position of one linked project.

        Raises:
            RecordNotFoundError: Unknown slug or project not linked
        """
        current = ServiceCatalogService.get_service(slug)
        if project_id not in [link.project_id for link in current.projects]:
            raise RecordNotFoundError("Service project link", f"{slug}/{project_id}")

        ordered = sorted(current.projects, key=lambda link: link.display_order)
        selections = normalize_project_order(ordered, project_id, new_index)
        ServiceCatalogService._save_links(slug, current.projects, selections)

        ActivityLogService.log_action(
            "service_projects_reordered",
            actor=actor,
            entity_type="service",
            entity_id=slug,
            metadata={"projectId": project_id, "order": [s.project_id for s in selections]},
        )
        return ServiceCatalogService.get_service(slug)

    @staticmethod
    def upload_service_image(slug: str, image: UploadedImage, actor: Actor | None = None) -> ServiceRecord:
        """
        Upload a new slide image for a service.

        The image is stored under <slug>/..., recorded in
        service_slide_images (one row per service) and set as image_path.
        """
        ServiceCatalogService.get_service(slug)

        folder = sanitize_file_stem(slug) or "service"
        path = build_upload_path(folder, image.filename, folder)
        client = SupabaseClient.get_client()

        try:
            stored_path, public_url = StorageService.store_image(settings.SERVICE_BUCKET, path, image)
            SupabaseClient.execute(
                client.table(SLIDE_IMAGES_TABLE).upsert(
                    {"service_slug": slug, "file_path": stored_path, "public_url": public_url},
                    on_conflict="service_slug",
                ),
                "save service slide image",
            )
            SupabaseClient.execute(
                client.table(SERVICES_TABLE).update({"image_path": stored_path}).eq("slug", slug),
                "update service image path",
            )
        except Exception as e:
            logger.error(f"Service image upload failed for {slug}: {e}")
            ActivityLogService.log_action(
                "service_image_upload_failed",
                actor=actor,
                entity_type="service",
                entity_id=slug,
                metadata={"error": str(e), "fileName": image.filename},
            )
            raise

        ActivityLogService.log_action(
            "service_image_uploaded",
            actor=actor,
            entity_type="service",
            entity_id=slug,
            metadata={"filePath": stored_path, "fileSize": image.size, "mimeType": image.content_type},
        )
        return ServiceCatalogService.get_service(slug)
