# =============================================================================
# core/models/service.py - Service Slide Schemas
# =============================================================================
# The services page is a slider; each slide is one row of the services table
# with an optional slide image (service_slide_images) and linked portfolio
# projects (service_portfolio_projects, ordered by display_order).
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field


class ServiceSlideImage(BaseModel):
    id: str
    service_slug: str | None = None
    file_path: str | None = None
    public_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectAssignment(BaseModel):
    """Link between a service and a portfolio project."""

    project_id: str
    display_order: int = 0


class ServiceRecord(BaseModel):
    """A services row plus its images and project links, as edited by admins."""

    id: str
    slug: str
    label: str | None = None
    headline: str | None = None
    subline: str | None = None
    info_title: str | None = None
    info_paragraphs: list[str] | None = None
    info_bullet_points: list[str] | None = None
    gradient_start: str | None = None
    gradient_end: str | None = None
    image_path: str | None = None
    image_url: str | None = None
    slide_images: list[ServiceSlideImage] = Field(default_factory=list)
    projects: list[ProjectAssignment] = Field(default_factory=list)


class ServiceProjectLink(BaseModel):
    id: str
    title: str
    slug: str | None = None


class ServiceSlide(BaseModel):
    """A service as rendered on the public slider, fallbacks applied."""

    id: str
    slug: str
    label: str
    headline: str
    subline: str
    info_title: str | None = None
    info_paragraphs: list[str] = Field(default_factory=list)
    info_bullet_points: list[str] = Field(default_factory=list)
    gradient_start: str
    gradient_end: str
    image_url: str | None = None
    image_alt: str
    projects: list[ServiceProjectLink] = Field(default_factory=list)


class ServiceUpdate(BaseModel):
    """
    Admin form for one service.

    info_paragraphs and info_bullet_points are textarea contents, one entry
    per line. project_ids is the ordered selection of linked projects.

    Example:
        {
            "label": "Hochzeiten",
            "headline": "Euer Tag in Bildern",
            "subline": "Reportagen mit Gefühl",
            "info_paragraphs": "Absatz eins\\nAbsatz zwei",
            "project_ids": ["5a3c...", "9b21..."]
        }
    """

    label: str
    headline: str
    subline: str = ""
    info_title: str | None = None
    info_paragraphs: str = ""
    info_bullet_points: str = ""
    gradient_start: str | None = None
    gradient_end: str | None = None
    image_path: str | None = None
    project_ids: list[str] = Field(default_factory=list)


class ServiceAdminView(BaseModel):
    """Admin page payload: services plus the projects that can be linked."""

    services: list[ServiceRecord] = Field(default_factory=list)
    projects: list[ServiceProjectLink] = Field(default_factory=list)
