# =============================================================================
# app/routers/public.py - Public Website Endpoints
# =============================================================================
# Read endpoints for the public pages plus the contact form.
# No authentication; everything here is visible to every visitor.
# =============================================================================

import json
import logging

from fastapi import APIRouter, Path, Query, Request, status
from pydantic import BaseModel, Field, ValidationError

from app.config import settings
from app.exceptions import ContentValidationError, InvalidRequestBodyError
from core.models.blog import BlogOverview, BlogPost
from core.models.contact import ContactEmailPayload, ContactSubmission, ContactSubmitResponse
from core.models.homepage import HomepageContent
from core.models.metadata import PageMetadata
from core.models.portfolio import PortfolioPage, ProjectDetail
from core.models.service import ServiceSlide
from core.services.blog_service import BlogService
from core.services.contact_service import ContactService
from core.services.homepage_service import HomepageService
from core.services.metadata_service import MetadataService
from core.services.notification_service import NotificationService
from core.services.portfolio_service import PortfolioService
from core.services.service_catalog_service import ServiceCatalogService

logger = logging.getLogger(__name__)

router = APIRouter()

# Static pages listed in the sitemap; admin and API paths are never listed
STATIC_PAGES = ["", "/portfolio", "/services", "/blog", "/kontakt", "/impressum", "/datenschutz", "/agb"]


# =============================================================================
# Response Models
# =============================================================================

class SitemapResponse(BaseModel):
    """Absolute URLs of every public page."""
    urls: list[str] = Field(default_factory=list)
    count: int = 0


class NotificationResponse(BaseModel):
    success: bool = True


# =============================================================================
# Pages
# =============================================================================

@router.get("/home", response_model=HomepageContent)
async def get_homepage():
    """Landing page content with fallbacks applied."""
    return HomepageService.get_homepage()


@router.get("/portfolio", response_model=PortfolioPage)
async def get_portfolio():
    """Portfolio overview: hero texts, background and all projects."""
    return PortfolioService.get_page()


@router.get("/portfolio/{slug}", response_model=ProjectDetail)
async def get_portfolio_project(
    slug: str = Path(..., description="Project slug"),
):
    """One project with its ordered gallery."""
    return PortfolioService.get_project_by_slug(slug)


@router.get("/services", response_model=list[ServiceSlide])
async def get_services():
    return ServiceCatalogService.list_public_services()


@router.get("/blog", response_model=BlogOverview)
async def get_blog(
    category: str | None = Query(default=None, description="Only posts of this category slug"),
):
    """Published posts, spotlight, background and categories."""
    return BlogService.get_overview(category)


@router.get("/blog/{slug}", response_model=BlogPost)
async def get_blog_post(slug: str = Path(..., description="Post slug")):
    return BlogService.get_published_post(slug)


@router.get("/pages/{slug}/metadata", response_model=PageMetadata)
async def get_page_metadata(slug: str = Path(..., description="Page slug, e.g. 'blog'")):
    """SEO metadata of a page: defaults merged with the stored override."""
    return MetadataService.resolve(slug)


@router.get("/sitemap", response_model=SitemapResponse)
async def get_sitemap():
    """
    All public URLs: static pages, published posts and portfolio projects.
    """
    base = settings.SITE_URL.rstrip("/")
    urls = [f"{base}{path}" for path in STATIC_PAGES]
    urls += [f"{base}/blog/{slug}" for slug in BlogService.list_slugs()]
    urls += [f"{base}/portfolio/{slug}" for slug in PortfolioService.list_project_slugs()]

    return SitemapResponse(urls=urls, count=len(urls))


# =============================================================================
# Contact
# =============================================================================

@router.post("/contact", response_model=ContactSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(submission: ContactSubmission):
    """
    Store a contact message and notify the studio by e-mail.

    Returns 502 when the message was stored but the e-mail failed.
    """
    stored = ContactService.submit(submission)
    return ContactSubmitResponse(id=stored.id)


@router.post("/contact-notification", response_model=NotificationResponse)
async def send_contact_notification(request: Request):
    """
    Send the contact notification e-mail only.

    Errors:
        400: Body is not JSON
        422: name, email or message missing
        500: EmailJS not configured
        502: EmailJS rejected the request
    """
    raw = await request.body()
    try:
        body = json.loads(raw or b"null")
    except ValueError as e:
        raise InvalidRequestBodyError(str(e))

    if not isinstance(body, dict) or not all(body.get(key) for key in ("name", "email", "message")):
        raise ContentValidationError("Es fehlen Pflichtfelder für die Kontaktanfrage.")

    try:
        payload = ContactEmailPayload.model_validate(body)
    except ValidationError as e:
        raise ContentValidationError(f"Ungültige Kontaktanfrage: {e.error_count()} Fehler")

    NotificationService.send_contact_notification(payload)
    return NotificationResponse()
