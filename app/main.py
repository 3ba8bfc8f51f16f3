# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the DS_Capture API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main        (host and port from API_HOST / API_PORT)
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import SiteException, site_exception_handler
from app.routers import (
    admin_blog,
    admin_contact,
    admin_homepage,
    admin_portfolio,
    admin_services,
    admin_site,
    health,
    public,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the configuration that matters when debugging a deployment.
    """
    logger.info(f"Starting DS_Capture API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if settings.emailjs_missing_settings:
        logger.warning(
            f"EmailJS not configured, contact notifications will fail: {settings.emailjs_missing_settings}"
        )

    yield

    logger.info("Shutting down DS_Capture API")


# Create FastAPI application
app = FastAPI(
    title="DS_Capture API",
    description="""
## Backend of the DS_Capture photography website

### Public

- Homepage, portfolio, services and blog content with built-in fallbacks
- Contact form with e-mail notification via EmailJS
- Page metadata and sitemap

### Back-Office

All `/api/v1/admin` routes require a Supabase access token of a user listed
in the admin table:

```bash
curl -X POST http://localhost:8000/api/v1/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "owner@ds-capture.de", "password": "..."}'

curl http://localhost:8000/api/v1/admin/portfolio/projects \\
  -H "Authorization: Bearer <access_token>"
```
""",
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Login, password reset and token checks"},
        {"name": "Public", "description": "Content of the public website"},
        {"name": "Admin Portfolio", "description": "Projects, gallery images and overview settings"},
        {"name": "Admin Blog", "description": "Posts, categories, spotlight and background"},
        {"name": "Admin Homepage", "description": "USPs, benefits, introduction, gallery and reviews"},
        {"name": "Admin Services", "description": "Service slides and linked projects"},
        {"name": "Admin Contact", "description": "Contact inbox and GDPR cleanup"},
        {"name": "Admin Site", "description": "Dashboard, page metadata and activity log"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(SiteException)
async def handle_site_exception(request: Request, exc: SiteException):
    """Handle custom site exceptions."""
    return await site_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints (router carries its own /auth prefix)
app.include_router(auth_routes.router, prefix="/api/v1")

# Health check endpoints
app.include_router(health.router, prefix="/api/v1", tags=["Health"])

# Public website endpoints
app.include_router(public.router, prefix="/api/v1", tags=["Public"])

# Back-office endpoints
app.include_router(
    admin_portfolio.router,
    prefix="/api/v1/admin/portfolio",
    tags=["Admin Portfolio"]
)

app.include_router(
    admin_blog.router,
    prefix="/api/v1/admin/blog",
    tags=["Admin Blog"]
)

app.include_router(
    admin_homepage.router,
    prefix="/api/v1/admin/homepage",
    tags=["Admin Homepage"]
)

app.include_router(
    admin_services.router,
    prefix="/api/v1/admin/services",
    tags=["Admin Services"]
)

app.include_router(
    admin_contact.router,
    prefix="/api/v1/admin/contact",
    tags=["Admin Contact"]
)

app.include_router(
    admin_site.router,
    prefix="/api/v1/admin",
    tags=["Admin Site"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "DS_Capture API",
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
