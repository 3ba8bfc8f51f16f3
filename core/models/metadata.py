# =============================================================================
# core/models/metadata.py - Page Metadata Schemas
# =============================================================================
# SEO metadata per page slug (page_metadata table). Stored rows override the
# built-in defaults of each page field by field.
# =============================================================================

from pydantic import BaseModel, Field


class PageMetadataRecord(BaseModel):
    """A page_metadata row. Every field but slug may be NULL."""

    slug: str
    title: str | None = None
    description: str | None = None
    open_graph_title: str | None = None
    open_graph_description: str | None = None
    open_graph_image_url: str | None = None
    canonical_url: str | None = None
    keywords: str | None = None


class PageMetadataForm(BaseModel):
    """Admin form; blank strings are stored as NULL."""

    slug: str
    title: str = ""
    description: str = ""
    open_graph_title: str = ""
    open_graph_description: str = ""
    open_graph_image_url: str = ""
    canonical_url: str = ""
    keywords: str = ""


class OpenGraph(BaseModel):
    title: str | None = None
    description: str | None = None
    url: str | None = None
    site_name: str | None = None
    locale: str | None = None
    type: str | None = None
    images: list[str] = Field(default_factory=list)


class PageMetadata(BaseModel):
    """Resolved metadata of a page, ready for <head> rendering."""

    title: str | None = None
    description: str | None = None
    keywords: list[str] = Field(default_factory=list)
    canonical: str | None = None
    open_graph: OpenGraph | None = None
