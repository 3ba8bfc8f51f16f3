# =============================================================================
# app/routers/admin_blog.py - Blog Back-Office Endpoints
# =============================================================================
# Post editing (multipart form with optional cover upload), spotlight,
# categories and the blog page background. All routes require an admin.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Path, Query, UploadFile, status
from pydantic import ValidationError

from app.dependencies import AdminDep, read_upload
from app.exceptions import ContentValidationError
from core.models.blog import (
    AdminPostList,
    BlogBackground,
    BlogCategory,
    BlogPost,
    BlogPostCreate,
    CategoryCreate,
    PostStatus,
)
from core.models.common import OperationResult, UploadedImage
from core.services.blog_service import BlogService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Helper Functions
# =============================================================================

def _post_from_form(
    title: str,
    slug: str | None,
    excerpt: str | None,
    content: str,
    cover_image: str | None,
    status_value: str,
    category_id: str | None,
) -> BlogPostCreate:
    """Build the post input from the editor's form fields."""
    try:
        return BlogPostCreate(
            title=title,
            slug=slug or None,
            excerpt=excerpt,
            content=content,
            cover_image=cover_image or None,
            status=status_value,
            category_id=category_id or None,
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ContentValidationError(f"Ungültiger Beitrag: {first.get('msg')}", field=field or None)


async def _optional_cover(file: UploadFile | None) -> UploadedImage | None:
    if file is None or not file.filename:
        return None
    return await read_upload(file, fallback_name="cover")


# =============================================================================
# Posts
# =============================================================================

@router.get("/posts", response_model=AdminPostList)
async def list_posts(
    admin: AdminDep,
    category_id: str | None = Query(default=None, description="Only posts of this category"),
):
    """All posts split into published and drafts."""
    return BlogService.list_posts(category_id)


@router.get("/posts/{post_id}", response_model=BlogPost)
async def get_post(
    post_id: Annotated[int, Path(description="Post id")],
    admin: AdminDep,
):
    return BlogService.get_post(post_id)


@router.post("/posts", response_model=BlogPost, status_code=status.HTTP_201_CREATED)
async def create_post(
    admin: AdminDep,
    title: Annotated[str, Form()],
    content: Annotated[str, Form()] = "",
    slug: Annotated[str | None, Form()] = None,
    excerpt: Annotated[str | None, Form()] = None,
    cover_image: Annotated[str | None, Form()] = None,
    post_status: Annotated[str, Form(alias="status")] = PostStatus.DRAFT.value,
    category_id: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File(description="Cover image")] = None,
):
    """
    Create a post.

    An uploaded cover file takes precedence over the cover_image URL.
    published_at is set only when the post is created as published.
    """
    data = _post_from_form(title, slug, excerpt, content, cover_image, post_status, category_id)
    cover = await _optional_cover(file)
    return BlogService.create_post(data, actor=admin.as_actor(), cover=cover)


@router.put("/posts/{post_id}", response_model=BlogPost)
async def update_post(
    post_id: Annotated[int, Path(description="Post id")],
    admin: AdminDep,
    title: Annotated[str, Form()],
    content: Annotated[str, Form()] = "",
    slug: Annotated[str | None, Form()] = None,
    excerpt: Annotated[str | None, Form()] = None,
    cover_image: Annotated[str | None, Form()] = None,
    post_status: Annotated[str, Form(alias="status")] = PostStatus.DRAFT.value,
    category_id: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File(description="Cover image")] = None,
):
    """Replace a post's editable fields, optionally with a new cover file."""
    data = _post_from_form(title, slug, excerpt, content, cover_image, post_status, category_id)
    cover = await _optional_cover(file)
    return BlogService.update_post(post_id, data, actor=admin.as_actor(), cover=cover)


@router.delete("/posts/{post_id}", response_model=OperationResult)
async def delete_post(
    post_id: Annotated[int, Path(description="Post id")],
    admin: AdminDep,
):
    BlogService.delete_post(post_id, actor=admin.as_actor())
    return OperationResult(message="Beitrag gelöscht.", affected_ids=[str(post_id)])


@router.post("/posts/{post_id}/spotlight", response_model=BlogPost)
async def toggle_spotlight(
    post_id: Annotated[int, Path(description="Post id")],
    admin: AdminDep,
):
    """Switch the spotlight flag; enabling it clears every other spotlight."""
    return BlogService.toggle_spotlight(post_id, actor=admin.as_actor())


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories", response_model=list[BlogCategory])
async def list_categories(admin: AdminDep):
    return BlogService.list_categories()


@router.post("/categories", response_model=BlogCategory, status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, admin: AdminDep):
    return BlogService.create_category(data.name, actor=admin.as_actor())


# =============================================================================
# Background
# =============================================================================

@router.get("/background", response_model=BlogBackground | None)
async def get_background(admin: AdminDep):
    return BlogService.get_background()


@router.post("/background", response_model=BlogBackground)
async def upload_background(
    file: Annotated[UploadFile, File(description="Background image")],
    admin: AdminDep,
):
    image = await read_upload(file, fallback_name="background")
    return BlogService.upload_background(image, actor=admin.as_actor())


@router.delete("/background", response_model=OperationResult)
async def delete_background(admin: AdminDep):
    BlogService.delete_background(actor=admin.as_actor())
    return OperationResult(message="Hintergrundbild entfernt.")
