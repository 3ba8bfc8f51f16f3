# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - public.py: Public website content, contact form and sitemap
# - admin_portfolio.py: Portfolio projects, images and settings
# - admin_blog.py: Posts, categories, spotlight and background
# - admin_homepage.py: Slots, introduction, gallery and reviews
# - admin_services.py: Service slides and linked projects
# - admin_contact.py: Contact inbox and GDPR cleanup
# - admin_site.py: Dashboard summary, page metadata and activity log
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import public
from . import admin_portfolio
from . import admin_blog
from . import admin_homepage
from . import admin_services
from . import admin_contact
from . import admin_site

__all__ = [
    "health",
    "public",
    "admin_portfolio",
    "admin_blog",
    "admin_homepage",
    "admin_services",
    "admin_contact",
    "admin_site",
]
