# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - common.py: uploaded images, actors, generic results
# - portfolio.py: projects, project images, overview settings
# - blog.py: posts, categories, background
# - homepage.py: USP/benefit slots, photographer intro, gallery
# - review.py: customer reviews
# - service.py: service slides and project links
# - contact.py: contact messages and e-mail notification
# - metadata.py: per-page SEO metadata
# - activity.py: activity log entries
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Common Models
# -----------------------------------------------------------------------------
from .common import Actor, OperationResult, UploadedImage

# -----------------------------------------------------------------------------
# Portfolio Models
# -----------------------------------------------------------------------------
from .portfolio import (
    CoverRequest,
    ImageOrderRequest,
    PortfolioHero,
    PortfolioPage,
    PortfolioProject,
    PortfolioSettings,
    PortfolioSettingsUpdate,
    ProjectCreate,
    ProjectDetail,
    ProjectImage,
    ProjectImageUpdate,
    ProjectUpdate,
)

# -----------------------------------------------------------------------------
# Blog Models
# -----------------------------------------------------------------------------
from .blog import (
    AdminPostList,
    BlogBackground,
    BlogCategory,
    BlogOverview,
    BlogPost,
    BlogPostCreate,
    BlogPostSummary,
    BlogPostUpdate,
    CategoryCreate,
    PostStatus,
)

# -----------------------------------------------------------------------------
# Homepage Models
# -----------------------------------------------------------------------------
from .homepage import (
    ContentSlot,
    GalleryImage,
    GalleryImageUpdate,
    HomepageContent,
    PhotographerIntro,
    PhotographerIntroUpdate,
    SlotKind,
    SlotSaveRequest,
)
from .review import Review, ReviewCreate, ReviewUpdate

# -----------------------------------------------------------------------------
# Service Slides
# -----------------------------------------------------------------------------
from .service import (
    ProjectAssignment,
    ServiceAdminView,
    ServiceProjectLink,
    ServiceRecord,
    ServiceSlide,
    ServiceUpdate,
)

# -----------------------------------------------------------------------------
# Contact Models
# -----------------------------------------------------------------------------
from .contact import (
    ContactEmailPayload,
    ContactEmailTemplateParams,
    ContactMessage,
    ContactStatus,
    ContactStatusUpdate,
    ContactSubmission,
    ContactSubmitResponse,
    GdprOverview,
    PendingCount,
)

# -----------------------------------------------------------------------------
# Metadata & Activity Log
# -----------------------------------------------------------------------------
from .metadata import OpenGraph, PageMetadata, PageMetadataForm, PageMetadataRecord
from .activity import ActivityLogEntry, ActivityLogList, ActivityLogRecord, LogContext

__all__ = [
    # Common
    "Actor",
    "OperationResult",
    "UploadedImage",
    # Portfolio
    "CoverRequest",
    "ImageOrderRequest",
    "PortfolioHero",
    "PortfolioPage",
    "PortfolioProject",
    "PortfolioSettings",
    "PortfolioSettingsUpdate",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectImage",
    "ProjectImageUpdate",
    "ProjectUpdate",
    # Blog
    "AdminPostList",
    "BlogBackground",
    "BlogCategory",
    "BlogOverview",
    "BlogPost",
    "BlogPostCreate",
    "BlogPostSummary",
    "BlogPostUpdate",
    "CategoryCreate",
    "PostStatus",
    # Homepage
    "ContentSlot",
    "GalleryImage",
    "GalleryImageUpdate",
    "HomepageContent",
    "PhotographerIntro",
    "PhotographerIntroUpdate",
    "SlotKind",
    "SlotSaveRequest",
    "Review",
    "ReviewCreate",
    "ReviewUpdate",
    # Services
    "ProjectAssignment",
    "ServiceAdminView",
    "ServiceProjectLink",
    "ServiceRecord",
    "ServiceSlide",
    "ServiceUpdate",
    # Contact
    "ContactEmailPayload",
    "ContactEmailTemplateParams",
    "ContactMessage",
    "ContactStatus",
    "ContactStatusUpdate",
    "ContactSubmission",
    "ContactSubmitResponse",
    "GdprOverview",
    "PendingCount",
    # Metadata & Activity
    "OpenGraph",
    "PageMetadata",
    "PageMetadataForm",
    "PageMetadataRecord",
    "ActivityLogEntry",
    "ActivityLogList",
    "ActivityLogRecord",
    "LogContext",
]
