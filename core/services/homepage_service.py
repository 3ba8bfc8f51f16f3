# =============================================================================
# core/services/homepage_service.py - Homepage Content
# =============================================================================
# Assembles the landing page and edits its blocks:
# - hero images (homepage_images, read only here)
# - USP and benefit slots (three fixed display_order slots each)
# - photographer introduction (singleton row)
# - gallery images (homepage-gallery bucket)
#
# Blocks without stored content fall back to built-in copy so the page
# never renders empty.
# =============================================================================

import logging
from typing import Any, Callable, TypeVar

from lib.supabase_client import SupabaseClient
from lib.utils import build_upload_path, clean_optional
from app.config import settings
from app.exceptions import ContentValidationError, RecordNotFoundError, SiteException
from core.models.common import Actor, UploadedImage
from core.models.homepage import (
    SLOT_COUNT,
    ContentSlot,
    GalleryImage,
    HomepageContent,
    PhotographerIntro,
    SlotKind,
)
from core.models.review import Review
from core.services.activity_log_service import ActivityLogService
from core.services.review_service import ReviewService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

T = TypeVar("T")

IMAGES_TABLE = "homepage_images"
INTRO_TABLE = "homepage_photographer_intro"
GALLERY_TABLE = "homepage_gallery_images"

INTRO_SINGLETON_KEY = "homepage"
GALLERY_COLUMNS = "id, public_url, file_path, alt_text, display_order, created_at"

FALLBACK_BACKGROUND = "/DJI_0727.jpg"
FALLBACK_OVERLAY = "/dawid3Mask.png"

FALLBACK_SLOTS: dict[SlotKind, list[tuple[str, str]]] = {
    SlotKind.USP: [
        (
            "Ganzheitliche Markenstrategie",
            "Wir verbinden Analyse, Beratung und Umsetzung zu einer klaren Roadmap "
            "für Ihre Markenentwicklung.",
        ),
        (
            "Premium Visual Storytelling",
            "Inszenierungen, die Emotionen wecken: Von Fotografie bis Film entsteht "
            "ein konsistentes Markenerlebnis.",
        ),
        (
            "Messbare digitale Ergebnisse",
            "Kreationen, die performen: wir gestalten digitale Experiences mit klaren "
            "KPIs und spürbarer Wirkung.",
        ),
    ],
    SlotKind.BENEFIT: [
        (
            "Strategie & Kreation aus einer Hand",
            "Wir begleiten Ihr Team von der Markenpositionierung bis zur finalen "
            "Produktion und sorgen für konsistente Botschaften in jedem Kanal.",
        ),
        (
            "Prozesse mit messbarem Impact",
            "Transparente Workflows, klare KPIs und regelmäßige Reportings stellen "
            "sicher, dass jede Produktion Ihr Business-Ziel unterstützt.",
        ),
        (
            "Premium Experience für Ihre Zielgruppe",
            "Wir kombinieren High-End-Visuals mit intuitiven digitalen Touchpoints, "
            "damit sich Ihre Marke unverwechselbar anfühlt.",
        ),
    ],
}

FALLBACK_REVIEWS = [
    Review(
        id="fallback-1",
        author="Studio Blend",
        role="Creative Director",
        quote=(
            "DS_Capture hat unsere Marke mit einem konsistenten visuellen Leitbild "
            "gestärkt. Der Prozess war fokussiert und hocheffizient."
        ),
        rating=5,
        display_order=1,
    ),
    Review(
        id="fallback-2",
        author="NXT Ventures",
        role="Head of Marketing",
        quote=(
            "Von der Strategie bis zur Umsetzung: Das Team hat komplexe Inhalte in "
            "klare, inspirierende Kampagnen übersetzt."
        ),
        rating=5,
        display_order=2,
    ),
    Review(
        id="fallback-3",
        author="Urban Pulse",
        role="CEO",
        quote=(
            "Die Zusammenarbeit war partnerschaftlich und transparent. Unsere "
            "digitale Präsenz performt messbar besser."
        ),
        rating=5,
        display_order=3,
    ),

    Review(
        id="fallback-4",
        author="Lumen Architects",
        role="Managing Partner",
        quote=(
            "Dank DS_Capture sprechen wir unsere Zielgruppe jetzt präzise an – visuell "
            "stark und inhaltlich auf den Punkt."
        ),
        rating=5,
        display_order=4,
    ),
]

FALLBACK_INTRO = PhotographerIntro(
    heading="Der Fotograf hinter DS_Capture",
    subheading="Daniel Szymański vereint künstlerische Vision und strategische Markenführung.",
    body=(
        "Mit über einem Jahrzehnt Erfahrung in Fotografie, Regie und visueller "
        "Kommunikation entwickelt Daniel Szymański Bildwelten, die Markenidentitäten "
        "erlebbar machen. Von der ersten Idee bis zur finalen Produktion begleitet er "
        "Unternehmen als kreativer Sparringspartner – analytisch, präzise und mit "
        "Gespür für Emotionen."
    ),
)


def _unsaved_slots() -> list[ContentSlot]:
    return [ContentSlot(display_order=order) for order in range(1, SLOT_COUNT + 1)]


def fill_slots(kind: SlotKind, slots: list[ContentSlot]) -> list[ContentSlot]:
    """Replace blank slot texts with the built-in copy of the same position."""
    resolved = []
    for slot, (title, description) in zip(slots, FALLBACK_SLOTS[kind]):
        resolved.append(slot.model_copy(update={
            "title": slot.title.strip() or title,
            "description": slot.description.strip() or description,
        }))
    return resolved


def _load_block(name: str, loader: Callable[[], T], fallback: T) -> T:
    """Run one block query of the public page; failures give the fallback."""
    try:
        return loader()
    except SiteException as e:
        logger.error(f"Failed to load homepage block '{name}': {e.message}")
        return fallback


def _validate_slot_order(display_order: int) -> None:
    if not 1 <= display_order <= SLOT_COUNT:
        raise ContentValidationError(
            f"Position muss zwischen 1 und {SLOT_COUNT} liegen.",
            field="display_order",
        )


class HomepageService:
    """Service for the landing page content blocks."""

    # -------------------------------------------------------------------------
    # Public Page
    # -------------------------------------------------------------------------

    @staticmethod
    def get_homepage() -> HomepageContent:
        """
        Load every block of the landing page.

        Each block is loaded on its own: a block whose query fails is
        logged and rendered from the built-in copy like an empty one.
        Slots missing in the database are filled from the built-in copy,
        the review list falls back to sample reviews when empty.
        """
        images = _load_block("images", HomepageService.get_images, {})
        reviews = _load_block("reviews", ReviewService.list_reviews, [])
        usps = _load_block("usps", lambda: HomepageService.list_slots(SlotKind.USP), _unsaved_slots())
        benefits = _load_block(
            "benefits", lambda: HomepageService.list_slots(SlotKind.BENEFIT), _unsaved_slots()
        )

        reviews = [review for review in reviews if review.author and review.quote]

        return HomepageContent(
            background_image_url=images.get("background", FALLBACK_BACKGROUND),
            overlay_image_url=images.get("overlay", FALLBACK_OVERLAY),
            usps=fill_slots(SlotKind.USP, usps),
            benefits=fill_slots(SlotKind.BENEFIT, benefits),
            reviews=reviews or FALLBACK_REVIEWS,
            photographer_intro=_load_block("intro", HomepageService.get_intro, None) or FALLBACK_INTRO,
            gallery=_load_block("gallery", HomepageService.list_gallery, []),
        )

    @staticmethod
    def get_images() -> dict[str, str]:
        """Public URLs of the hero background and overlay, by image_type."""
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(IMAGES_TABLE).select("image_type, public_url"),
            "load homepage images",
        )

        images: dict[str, str] = {}
        for row in rows:
            if row.get("image_type") in ("background", "overlay") and row.get("public_url"):
                images[row["image_type"]] = row["public_url"]
        return images

    @staticmethod
    def resolve_slots(kind: SlotKind) -> list[ContentSlot]:
        """Slots 1..3 with blank fields replaced by the fallback copy."""
        return fill_slots(kind, HomepageService.list_slots(kind))

    # -------------------------------------------------------------------------
    # USP / Benefit Slots
    # -------------------------------------------------------------------------

    @staticmethod
    def list_slots(kind: SlotKind) -> list[ContentSlot]:
        """All three slots; unsaved slots come back with id=None and empty texts."""
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(kind.table)
            .select("id, title, description, display_order")
            .order("display_order"),
            f"list {kind.value} slots",
        )

        by_order = {row.get("display_order"): row for row in rows}
        slots = []
        for order in range(1, SLOT_COUNT + 1):
            row = by_order.get(order)
            if row is None:
                slots.append(ContentSlot(display_order=order))
                continue
            slots.append(ContentSlot(
                id=str(row["id"]) if row.get("id") is not None else None,
                display_order=order,
                title=row.get("title") or "",
                description=row.get("description") or "",
            ))
        return slots

    @staticmethod
    def save_slot(
        kind: SlotKind,
        display_order: int,
        title: str,
        description: str,
        actor: Actor | None = None,
    ) -> ContentSlot:
        """
        Create or overwrite one slot.

        Raises:
            ContentValidationError: Position outside 1..3, or blank title/description
        """
        _validate_slot_order(display_order)

        title = title.strip()
        description = description.strip()
        if not title or not description:
            raise ContentValidationError("Titel und Beschreibung dürfen nicht leer sein.")

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(kind.table).upsert(
                {"title": title, "description": description, "display_order": display_order},
                on_conflict="display_order",
            ),
            f"save {kind.value} slot",
        )

        saved = rows[0] if rows else {}
        slot = ContentSlot(
            id=str(saved["id"]) if saved.get("id") is not None else None,
            display_order=display_order,
            title=title,
            description=description,
        )
        logger.info(f"Saved {kind.value} slot {display_order}")

        ActivityLogService.log_action(
            f"{kind.entity_type}_saved",
            actor=actor,
            entity_type=kind.entity_type,
            entity_id=slot.id,
            metadata={"displayOrder": display_order, "title": title},
        )
        return slot

    # -------------------------------------------------------------------------
    # Photographer Intro
    # -------------------------------------------------------------------------

    @staticmethod
    def get_intro() -> PhotographerIntro | None:
        """
        The stored introduction, or None when nothing usable is stored.

        Blank heading or body fall back to the built-in texts.
        """
        client = SupabaseClient.get_client()
        row = SupabaseClient.execute_one(
            client.table(INTRO_TABLE)
            .select("id, heading, subheading, body")
            .eq("singleton_key", INTRO_SINGLETON_KEY)
            .limit(1),
            "load photographer intro",
        )
        if not row:
            return None

        return PhotographerIntro(
            id=str(row["id"]) if row.get("id") is not None else None,
            heading=(row.get("heading") or "").strip() or FALLBACK_INTRO.heading,
            subheading=clean_optional(row.get("subheading")),
            body=(row.get("body") or "").strip() or FALLBACK_INTRO.body,
        )

    @staticmethod
    def save_intro(
        heading: str,
        body: str,
        subheading: str | None = None,
        actor: Actor | None = None,
    ) -> PhotographerIntro:
        """
        Store the introduction in its singleton row.

        Raises:
            ContentValidationError: If heading or body is blank
        """
        heading = heading.strip()
        body = body.strip()
        if not heading or not body:
            raise ContentValidationError("Überschrift und Text dürfen nicht leer sein.")

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(INTRO_TABLE).upsert(
                {
                    "singleton_key": INTRO_SINGLETON_KEY,
                    "heading": heading,
                    "subheading": clean_optional(subheading),
                    "body": body,
                },
                on_conflict="singleton_key",
            ),
            "save photographer intro",
        )

        saved = rows[0] if rows else {}
        intro = PhotographerIntro(
            id=str(saved["id"]) if saved.get("id") is not None else None,
            heading=heading,
            subheading=clean_optional(subheading),
            body=body,
        )

        ActivityLogService.log_action(
            "homepage_photographer_intro_saved",
            actor=actor,
            entity_type="homepage_photographer_intro",
            entity_id=intro.id,
        )
        return intro

    # -------------------------------------------------------------------------
    # Gallery
    # -------------------------------------------------------------------------

    @staticmethod
    def _row_to_gallery_image(row: dict[str, Any]) -> GalleryImage:
        return GalleryImage(
            id=str(row["id"]),
            public_url=row.get("public_url") or "",
            file_path=row.get("file_path") or "",
            alt_text=(row.get("alt_text") or "").strip(),
            display_order=row.get("display_order") or 0,
            created_at=row.get("created_at"),
        )

    @staticmethod
    def list_gallery() -> list[GalleryImage]:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(GALLERY_TABLE)
            .select(GALLERY_COLUMNS)
            .order("display_order")
            .order("created_at"),
            "list gallery images",
        )
        return [HomepageService._row_to_gallery_image(row) for row in rows]

    @staticmethod
    def _get_gallery_image(image_id: str) -> GalleryImage:
        client = SupabaseClient.get_client()
        row = SupabaseClient.execute_one(
            client.table(GALLERY_TABLE).select(GALLERY_COLUMNS).eq("id", image_id).limit(1),
            "fetch gallery image",
        )
        if not row:
            raise RecordNotFoundError("Gallery image", image_id)
        return HomepageService._row_to_gallery_image(row)

    @staticmethod
    def upload_gallery_image(image: UploadedImage, alt_text: str, actor: Actor | None = None) -> GalleryImage:
        """
        Upload an image and append it to the gallery.

        Raises:
            ContentValidationError: If alt_text is blank
        """
        alt_text = alt_text.strip()
        if not alt_text:
            raise ContentValidationError("Bitte gib einen Alternativtext an.", field="alt_text")

        gallery = HomepageService.list_gallery()
        next_order = max((item.display_order for item in gallery), default=0) + 1

        folder = actor.id if actor and actor.id else "anonymous"
        path = build_upload_path(folder, image.filename, "gallery")
        stored_path, public_url = StorageService.store_image(settings.HOMEPAGE_GALLERY_BUCKET, path, image)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(GALLERY_TABLE).insert({
                "file_path": stored_path,
                "public_url": public_url,
                "alt_text": alt_text,
                "display_order": next_order,
            }),
            "insert gallery image",
        )
        created = HomepageService._row_to_gallery_image(rows[0])
        logger.info(f"Gallery image uploaded: {stored_path}")

        ActivityLogService.log_action(
            "homepage_gallery_image_uploaded",
            actor=actor,
            entity_type="homepage_gallery_image",
            entity_id=created.id,
            metadata={"filePath": stored_path, "displayOrder": next_order},
        )
        return created

    @staticmethod
    def update_gallery_image(
        image_id: str,
        alt_text: str,
        display_order: int,
        actor: Actor | None = None,
    ) -> GalleryImage:
        """
        Change alt text and position of a gallery image.

        Raises:
            ContentValidationError: Blank alt text or position below 1
        """
        alt_text = alt_text.strip()
        if not alt_text:
            raise ContentValidationError("Bitte gib einen Alternativtext an.", field="alt_text")
        if isinstance(display_order, bool) or not isinstance(display_order, int) or display_order < 1:
            raise ContentValidationError(
                "Die Reihenfolge muss eine ganze Zahl größer oder gleich 1 sein.",
                field="display_order",
            )

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(GALLERY_TABLE)
            .update({"alt_text": alt_text, "display_order": display_order})
            .eq("id", image_id),
            "update gallery image",
        )
        if not rows:
            raise RecordNotFoundError("Gallery image", image_id)

        ActivityLogService.log_action(
            "homepage_gallery_image_updated",
            actor=actor,
            entity_type="homepage_gallery_image",
            entity_id=image_id,
            metadata={"altText": alt_text, "displayOrder": display_order},
        )
        return HomepageService._row_to_gallery_image(rows[0])

    @staticmethod
    def delete_gallery_image(image_id: str, actor: Actor | None = None) -> None:
        """Delete the row first, then the file."""
        image = HomepageService._get_gallery_image(image_id)

        client = SupabaseClient.get_client()
        SupabaseClient.execute(
            client.table(GALLERY_TABLE).delete().eq("id", image_id),
            "delete gallery image",
        )
        StorageService.remove_files(settings.HOMEPAGE_GALLERY_BUCKET, [image.file_path])

        ActivityLogService.log_action(
            "homepage_gallery_image_deleted",
            actor=actor,
            entity_type="homepage_gallery_image",
            entity_id=image_id,
            metadata={"filePath": image.file_path},
        )
