# =============================================================================
# core/services/metadata_service.py - SEO Page Metadata
# =============================================================================
# Every public page has built-in metadata. Admins can override it per page
# slug in the page_metadata table; a stored field wins over the default,
# blank stored fields fall back to it.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from lib.utils import clean_optional
from app.config import settings
from app.exceptions import ContentValidationError, RecordNotFoundError, SiteException
from core.models.common import Actor
from core.models.metadata import OpenGraph, PageMetadata, PageMetadataForm, PageMetadataRecord
from core.services.activity_log_service import ActivityLogService

logger = logging.getLogger(__name__)

TABLE = "page_metadata"
COLUMNS = (
    "slug, title, description, open_graph_title, open_graph_description, "
    "open_graph_image_url, canonical_url, keywords"
)

# Slugs offered by the admin editor
SLUG_SUGGESTIONS = {
    "home": "Startseite",
    "blog": "Blog Übersicht",
    "portfolio": "Portfolio",
    "kontakt": "Kontakt",
    "impressum": "Impressum",
    "datenschutz": "Datenschutz",
}


def _page_defaults(path: str, title: str, description: str) -> PageMetadata:
    url = f"{settings.SITE_URL.rstrip('/')}{path}"
    return PageMetadata(
        title=title,
        description=description,
        canonical=url,
        open_graph=OpenGraph(
            title=title,
            description=description,
            url=url,
            site_name=settings.SITE_NAME,
            locale="de_DE",
            type="website",
        ),
    )


DEFAULT_PAGE_METADATA: dict[str, PageMetadata] = {
    "home": _page_defaults(
        "",
        "DS_Capture",
        "Portfolio & Fotografie von DS_Capture: urbane, ästhetische Bildwelten.",
    ),
    "blog": _page_defaults(
        "/blog",
        "Blog | DS_Capture",
        "Aktuelle Beiträge und Neuigkeiten von DS_Capture.",
    ),
    "portfolio": _page_defaults(
        "/portfolio",
        "Portfolio | DS_Capture",
        "Projekte und Arbeiten von DS_Capture im Überblick.",
    ),
    "kontakt": _page_defaults(
        "/kontakt",
        "Kontakt | DS_Capture",
        "Projekt anfragen oder Fragen stellen: Schreib DS_Capture eine Nachricht.",
    ),
    "services": _page_defaults(
        "/services",
        "Service | DS_Capture",
        "Unsere Services im Überblick.",
    ),
    "impressum": _page_defaults(
        "/impressum",
        "Impressum | DS_Capture",
        "Impressum von DS_Capture mit allen gesetzlich geforderten Angaben.",
    ),
    "datenschutz": _page_defaults(
        "/datenschutz",
        "Datenschutzerklärung | DS_Capture",
        "Transparente Informationen zum Umgang mit personenbezogenen Daten bei DS_Capture.",
    ),
    "agb": _page_defaults(
        "/agb",
        "Allgemeine Geschäftsbedingungen | DS_Capture",
        "Allgemeine Geschäftsbedingungen von DS_Capture mit Informationen zu "
        "Urheberrecht, Nutzungsrechten und Zahlungsmodalitäten.",
    ),
}


def split_keywords(value: str | None) -> list[str]:
    """Comma separated keywords, trimmed, empties dropped."""
    if not value:
        return []
    return [keyword.strip() for keyword in value.split(",") if keyword.strip()]


def apply_page_metadata(defaults: PageMetadata, record: PageMetadataRecord | None) -> PageMetadata:
    """
    Merge a stored override into a page's default metadata.

    Rules:
    - title/description: trimmed stored value, else default
    - keywords: stored list if it has any entry, else default
    - canonical: stored URL also becomes the Open Graph URL
    - Open Graph title: og title, page title, default og title, merged title
      (description follows the same chain)
    - Open Graph image: stored URL, else default images
    """
    if record is None:
        return defaults

    title = clean_optional(record.title) or defaults.title
    description = clean_optional(record.description) or defaults.description
    keywords = split_keywords(record.keywords) or list(defaults.keywords)
    canonical_url = clean_optional(record.canonical_url)

    base = defaults.open_graph or OpenGraph()
    image_url = clean_optional(record.open_graph_image_url)

    open_graph = base.model_copy(update={
        "url": canonical_url or base.url,
        "title": (
            clean_optional(record.open_graph_title)
            or clean_optional(record.title)
            or base.title
            or title
        ),
        "description": (
            clean_optional(record.open_graph_description)
            or clean_optional(record.description)
            or base.description
            or description
        ),
        "images": [image_url] if image_url else list(base.images),
    })

    return PageMetadata(
        title=title,
        description=description,
        keywords=keywords,
        canonical=canonical_url or defaults.canonical,
        open_graph=open_graph,
    )


class MetadataService:
    """Service for per-page SEO metadata."""

    @staticmethod
    def fetch(slug: str) -> PageMetadataRecord | None:
        """
        Load the stored override of a page.

        Errors are logged and treated as "no override" so a database
        hiccup never breaks page rendering.
        """
        client = SupabaseClient.get_client()
        try:
            row = SupabaseClient.execute_one(
                client.table(TABLE).select(COLUMNS).eq("slug", slug).limit(1),
                "load page metadata",
            )
        except SiteException as e:
            logger.error(f"Failed to load metadata for '{slug}': {e.message}")
            return None
        return PageMetadataRecord(**row) if row else None

    @staticmethod
    def resolve(slug: str) -> PageMetadata:
        """
        Final metadata of a page.

        Raises:
            RecordNotFoundError: Neither defaults nor a stored entry exist
        """
        defaults = DEFAULT_PAGE_METADATA.get(slug)
        record = MetadataService.fetch(slug)

        if defaults is None and record is None:
            raise RecordNotFoundError("Page metadata", slug)

        return apply_page_metadata(defaults or PageMetadata(), record)

    @staticmethod
    def list_entries() -> list[PageMetadataRecord]:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).select(COLUMNS).order("slug"),
            "list page metadata",
        )
        return [PageMetadataRecord(**row) for row in rows]

    @staticmethod
    def save_entry(form: PageMetadataForm, actor: Actor | None = None) -> PageMetadataRecord:
        """
        Create or replace the override of one slug.

        Raises:
            ContentValidationError: If the slug is blank
        """
        slug = form.slug.strip()
        if not slug:
            raise ContentValidationError("Bitte gib einen Slug an.", field="slug")

        record = PageMetadataRecord(
            slug=slug,
            title=clean_optional(form.title),
            description=clean_optional(form.description),
            open_graph_title=clean_optional(form.open_graph_title),
            open_graph_description=clean_optional(form.open_graph_description),
            open_graph_image_url=clean_optional(form.open_graph_image_url),
            canonical_url=clean_optional(form.canonical_url),
            keywords=clean_optional(form.keywords),
        )

        client = SupabaseClient.get_client()
        try:
            SupabaseClient.execute(
                client.table(TABLE).upsert(record.model_dump(), on_conflict="slug"),
                "save page metadata",
            )
        except SiteException as e:
            ActivityLogService.log_action(
                "page_metadata_save_failed",
                actor=actor,
                entity_type="page_metadata",
                entity_id=slug,
                metadata={"error": e.message},
            )
            raise

        logger.info(f"Saved page metadata for '{slug}'")
        ActivityLogService.log_action(
            "page_metadata_saved",
            actor=actor,
            entity_type="page_metadata",
            entity_id=slug,
        )
        return record

    @staticmethod
    def delete_entry(slug: str, actor: Actor | None = None) -> None:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).delete().eq("slug", slug),
            "delete page metadata",
        )
        if not rows:
            raise RecordNotFoundError("Page metadata", slug)

        ActivityLogService.log_action(
            "page_metadata_deleted",
            actor=actor,
            entity_type="page_metadata",
            entity_id=slug,
        )
