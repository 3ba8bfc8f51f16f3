# =============================================================================
# core/models/blog.py - Blog Schemas
# =============================================================================
# Posts, categories and the blog page background.
#
# Post lifecycle: draft -> published -> archived. published_at is set when a
# post becomes published and cleared when it leaves that state. At most one
# published post carries the spotlight flag.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class BlogCategory(BaseModel):
    id: str
    name: str
    slug: str


def normalize_category(value: Any) -> BlogCategory | None:
    """
    Coerce an embedded category into a BlogCategory.

    PostgREST returns a joined row as an object or a one-element list,
    depending on the relationship; anything without id/name/slug is None.
    """
    if isinstance(value, list):
        for candidate in value:
            category = normalize_category(candidate)
            if category:
                return category
        return None

    if isinstance(value, dict) and all(
        isinstance(value.get(key), str) for key in ("id", "name", "slug")
    ):
        return BlogCategory(id=value["id"], name=value["name"], slug=value["slug"])

    return None


class BlogPostSummary(BaseModel):
    """Post fields used by list views."""

    id: int
    title: str
    slug: str
    excerpt: str | None = None
    cover_image: str | None = None
    published_at: datetime | None = None
    status: PostStatus = PostStatus.DRAFT
    spotlight: bool = False
    category: BlogCategory | None = None


class BlogPost(BlogPostSummary):
    """Full post including content."""

    content: str = ""
    author_id: str | None = None
    category_id: str | None = None


class BlogPostCreate(BaseModel):
    """
    Input for a new post.

    Example:
        {
            "title": "Hochzeit in den Alpen",
            "content": "...",
            "status": "published",
            "category_id": "b1f0..."
        }
    """

    title: str = Field(..., min_length=1, max_length=300)
    slug: str | None = None
    excerpt: str | None = None
    content: str = ""
    cover_image: str | None = Field(
        default=None,
        description="External cover URL; an uploaded file takes precedence"
    )
    status: PostStatus = PostStatus.DRAFT
    category_id: str | None = None


class BlogPostUpdate(BlogPostCreate):
    """Full replacement of a post's editable fields."""


class AdminPostList(BaseModel):
    published: list[BlogPostSummary] = Field(default_factory=list)
    drafts: list[BlogPostSummary] = Field(default_factory=list)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class BlogBackground(BaseModel):
    id: str
    file_path: str
    public_url: str


class BlogOverview(BaseModel):
    """Public blog page: posts, spotlight and background."""

    posts: list[BlogPostSummary] = Field(default_factory=list)
    spotlight: BlogPostSummary | None = None
    background: BlogBackground | None = None
    categories: list[BlogCategory] = Field(default_factory=list)
