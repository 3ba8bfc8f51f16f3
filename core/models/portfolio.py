# =============================================================================
# core/models/portfolio.py - Portfolio Schemas
# =============================================================================
# These models define the API contract for the portfolio:
# - PortfolioProject: a project (reportage, shoot) shown on /portfolio
# - ProjectImage: one gallery image of a project
# - PortfolioSettings: hero texts and background of the overview page
#
# A project points at one of its own images as cover (cover_image_id),
# with the public URL copied to cover_public_url for cheap listing.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field


class ProjectImage(BaseModel):
    """One gallery image belonging to a portfolio project."""

    id: str
    project_id: str
    caption: str | None = None
    file_path: str | None = None
    public_url: str
    display_order: int = 0
    created_at: datetime | None = None


class PortfolioProject(BaseModel):
    """
    Schema for returning a portfolio project.

    Example:
        {
            "id": "5a3c...",
            "title": "Saint Antönien",
            "slug": "saint-antönien",
            "cover_public_url": "https://xxx.supabase.co/storage/v1/object/public/portfolio-images/...",
            "display_order": 1,
            "is_featured": true
        }
    """

    id: str
    title: str
    subtitle: str | None = None
    excerpt: str | None = None
    slug: str | None = None
    cover_image_id: str | None = None
    cover_public_url: str | None = None
    display_order: int = 0
    is_featured: bool = False
    created_at: datetime | None = None


class ProjectDetail(BaseModel):
    """A project together with its ordered gallery."""

    project: PortfolioProject
    images: list[ProjectImage] = Field(default_factory=list)


class ProjectCreate(BaseModel):
    """Input for creating a project. Slug defaults to a slug of the title."""

    title: str = Field(..., min_length=1, max_length=200)
    subtitle: str | None = None
    excerpt: str | None = None
    slug: str | None = None
    display_order: int | None = Field(default=None, ge=0)
    is_featured: bool = False


class ProjectUpdate(BaseModel):
    """Partial update of a project; unset fields are left untouched."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    subtitle: str | None = None
    excerpt: str | None = None
    slug: str | None = None
    display_order: int | None = Field(default=None, ge=0)
    is_featured: bool | None = None


class ProjectImageUpdate(BaseModel):
    caption: str | None = None
    display_order: int | None = Field(default=None, ge=0)


class ImageOrderRequest(BaseModel):
    """The complete list of a project's image ids in their new order."""

    image_ids: list[str] = Field(..., min_length=1)


class CoverRequest(BaseModel):
    image_id: str


class PortfolioSettings(BaseModel):
    """Hero texts and background image of the portfolio overview page."""

    id: str | None = None
    hero_headline: str | None = None
    hero_subheadline: str | None = None
    hero_description: str | None = None
    hero_cta_label: str | None = None
    hero_cta_url: str | None = None
    background_file_path: str | None = None
    background_public_url: str | None = None
    updated_at: datetime | None = None


class PortfolioSettingsUpdate(BaseModel):
    hero_headline: str | None = None
    hero_subheadline: str | None = None
    hero_description: str | None = None
    hero_cta_label: str | None = None
    hero_cta_url: str | None = None


class PortfolioHero(BaseModel):
    """Hero block after fallbacks have been applied."""

    headline: str
    subheadline: str
    description: str
    cta_label: str | None = None
    cta_url: str | None = None
    background_url: str | None = None


class PortfolioPage(BaseModel):
    """Everything the public portfolio overview needs in one response."""

    hero: PortfolioHero
    projects: list[PortfolioProject] = Field(default_factory=list)
    project_count: int = 0
