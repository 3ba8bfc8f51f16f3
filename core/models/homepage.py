# =============================================================================
# core/models/homepage.py - Homepage Content Schemas
# =============================================================================
# Content blocks of the landing page:
# - USPs and benefits: three fixed slots each (display_order 1..3)
# - photographer introduction: singleton row (singleton_key = "homepage")
# - gallery: ordered images in the homepage-gallery bucket
# - reviews: see core/models/review.py
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .review import Review

SLOT_COUNT = 3


class SlotKind(str, Enum):
    """Which slot table an editor works on."""
    USP = "usp"
    BENEFIT = "benefit"

    @property
    def table(self) -> str:
        return "homepage_usps" if self is SlotKind.USP else "homepage_benefits"

    @property
    def entity_type(self) -> str:
        return "homepage_usp" if self is SlotKind.USP else "homepage_benefit"


class ContentSlot(BaseModel):
    """One of the three title/description slots. id is None while unsaved."""

    id: str | None = None
    display_order: int = Field(..., ge=1, le=SLOT_COUNT)
    title: str = ""
    description: str = ""


class SlotSaveRequest(BaseModel):
    title: str
    description: str


class PhotographerIntro(BaseModel):
    id: str | None = None
    heading: str
    subheading: str | None = None
    body: str


class PhotographerIntroUpdate(BaseModel):
    heading: str
    subheading: str | None = None
    body: str


class GalleryImage(BaseModel):
    id: str
    public_url: str
    file_path: str = ""
    alt_text: str = ""
    display_order: int = 0
    created_at: datetime | None = None


class GalleryImageUpdate(BaseModel):
    alt_text: str
    display_order: int


class HomepageContent(BaseModel):
    """Everything the public landing page needs in one response."""

    background_image_url: str | None = None
    overlay_image_url: str | None = None
    usps: list[ContentSlot] = Field(default_factory=list)
    benefits: list[ContentSlot] = Field(default_factory=list)
    reviews: list[Review] = Field(default_factory=list)
    photographer_intro: PhotographerIntro
    gallery: list[GalleryImage] = Field(default_factory=list)
