# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .activity_log_service import ActivityLogService
from .blog_service import BlogService
from .contact_service import ContactService
from .homepage_service import HomepageService
from .metadata_service import MetadataService
from .notification_service import NotificationService
from .portfolio_service import PortfolioService
from .review_service import ReviewService
from .service_catalog_service import ServiceCatalogService
from .storage_service import StorageService

__all__ = [
    "ActivityLogService",
    "BlogService",
    "ContactService",
    "HomepageService",
    "MetadataService",
    "NotificationService",
    "PortfolioService",
    "ReviewService",
    "ServiceCatalogService",
    "StorageService",
]
