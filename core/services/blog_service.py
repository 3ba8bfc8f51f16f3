# =============================================================================
# core/services/blog_service.py - Blog Business Logic
# =============================================================================
# Posts, categories, the spotlight flag and the blog page background.
#
# Categories are joined in Python: posts carry category_id, the category
# list is small and loaded once per request.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import clean_optional, create_slug, random_suffix, sanitize_file_stem, split_filename, utc_now_iso
from app.config import settings
from app.exceptions import ContentValidationError, RecordNotFoundError, SlugConflictError
from core.models.blog import (
    AdminPostList,
    BlogBackground,
    BlogCategory,
    BlogOverview,
    BlogPost,
    BlogPostCreate,
    BlogPostSummary,
    BlogPostUpdate,
    PostStatus,
    normalize_category,
)
from core.models.common import Actor, UploadedImage
from core.services.activity_log_service import ActivityLogService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

POSTS_TABLE = "posts"
CATEGORIES_TABLE = "blog_categories"
BACKGROUNDS_TABLE = "blog_backgrounds"

BACKGROUND_SINGLETON_KEY = "blog"

SUMMARY_COLUMNS = "id, title, slug, excerpt, cover_image, published_at, status, spotlight, category_id"
POST_COLUMNS = f"{SUMMARY_COLUMNS}, content, author_id"


def _epoch_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def build_cover_path(user_id: str | None, filename: str, slug: str | None, title: str | None) -> str:
    """
    Storage path of a post cover: <user>/<slug-or-title>-<millis>-<random>.<ext>

    Example:
        build_cover_path("u1", "IMG_1.JPG", "alpen-tour", None)
        # "u1/alpen-tour-1760620000000-k3j9xq.jpg"
    """
    _, ext = split_filename(filename, default_ext="png")
    stem = sanitize_file_stem(slug or title or "", allow_umlauts=True) or "cover-image"
    return f"{user_id or 'anonymous'}/{stem}-{_epoch_millis()}-{random_suffix()}.{ext}"


def build_background_path(user_id: str | None, filename: str) -> str:
    _, ext = split_filename(filename, default_ext="jpg")
    return f"{user_id or 'anonymous'}/blog-background-{_epoch_millis()}.{ext}"


class BlogService:
    """Service for blog posts and their page furniture."""

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @staticmethod
    def list_categories() -> list[BlogCategory]:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(CATEGORIES_TABLE).select("id, name, slug").order("name"),
            "list blog categories",
        )
        categories = []
        for row in rows:
            category = normalize_category({**row, "id": str(row.get("id"))})
            if category:
                categories.append(category)
        return categories

    @staticmethod
    def create_category(name: str, actor: Actor | None = None) -> BlogCategory:
        """
        Create a category; its slug is derived from the name.

        Raises:
            ContentValidationError: If the name is blank
            SlugConflictError: If a category with the same slug exists
        """
        name = name.strip()
        slug = create_slug(name)
        if not name or not slug:
            raise ContentValidationError("Bitte gib einen Kategorienamen an.", field="name")

        if any(category.slug == slug for category in BlogService.list_categories()):
            raise SlugConflictError("Category", slug)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(CATEGORIES_TABLE).insert({"name": name, "slug": slug}),
            "create blog category",
        )
        row = rows[0]
        category = BlogCategory(id=str(row["id"]), name=row["name"], slug=row["slug"])
        logger.info(f"Created blog category {slug}")

        ActivityLogService.log_action(
            "blog_category_created",
            actor=actor,
            entity_type="blog_category",
            entity_id=category.id,
            metadata={"name": name, "slug": slug},
        )
        return category

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def _attach_categories(rows: list[dict[str, Any]], model: type[BlogPostSummary]) -> list[Any]:
        categories = {category.id: category for category in BlogService.list_categories()}
        posts = []
        for row in rows:
            data = {key: value for key, value in row.items() if key != "category"}
            data["spotlight"] = bool(row.get("spotlight"))
            category_id = row.get("category_id")
            if category_id is not None:
                data["category_id"] = str(category_id)
                data["category"] = categories.get(str(category_id))
            posts.append(model(**data))
        return posts

    @staticmethod
    def list_published(category_slug: str | None = None) -> list[BlogPostSummary]:
        """Published posts, newest first; posts without published_at last."""
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(POSTS_TABLE)
            .select(SUMMARY_COLUMNS)
            .eq("status", PostStatus.PUBLISHED.value)
            .order("published_at", desc=True, nullsfirst=False),
            "list published posts",
        )
        posts = BlogService._attach_categories(rows, BlogPostSummary)

        if category_slug:
            posts = [post for post in posts if post.category and post.category.slug == category_slug]
        return posts

    @staticmethod
    def get_published_post(slug: str) -> BlogPost:
        """
        Get a published post by slug.

        Raises:
            RecordNotFoundError: Unknown slug or post not published
        """
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(POSTS_TABLE)
            .select(POST_COLUMNS)
            .eq("slug", slug)
            .eq("status", PostStatus.PUBLISHED.value)
            .limit(1),
            "fetch published post",
        )
        if not rows:
            raise RecordNotFoundError("Post", slug)
        return BlogService._attach_categories(rows, BlogPost)[0]

    @staticmethod
    def get_spotlight() -> BlogPostSummary | None:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(POSTS_TABLE)
            .select(SUMMARY_COLUMNS)
            .eq("status", PostStatus.PUBLISHED.value)
            .eq("spotlight", True)
            .limit(1),
            "fetch spotlight post",
        )
        if not rows:
            return None
        return BlogService._attach_categories(rows, BlogPostSummary)[0]

    @staticmethod
    def get_background() -> BlogBackground | None:
        client = SupabaseClient.get_client()
        row = SupabaseClient.execute_one(
            client.table(BACKGROUNDS_TABLE)
            .select("id, file_path, public_url")
            .eq("singleton_key", BACKGROUND_SINGLETON_KEY)
            .limit(1),
            "fetch blog background",
        )
        if not row:
            return None
        return BlogBackground(id=str(row["id"]), file_path=row["file_path"], public_url=row["public_url"])

    @staticmethod
    def get_overview(category_slug: str | None = None) -> BlogOverview:
        posts = BlogService.list_published(category_slug)
        return BlogOverview(
            posts=posts,
            spotlight=next((post for post in posts if post.spotlight), None) or BlogService.get_spotlight(),
            background=BlogService.get_background(),
            categories=BlogService.list_categories(),
        )

    @staticmethod
    def list_slugs() -> list[str]:
        return [post.slug for post in BlogService.list_published() if post.slug]

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    @staticmethod
    def list_posts(category_id: str | None = None) -> AdminPostList:
        """Published posts (newest first) and drafts (highest id first)."""
        client = SupabaseClient.get_client()
        published_rows = SupabaseClient.execute(
            client.table(POSTS_TABLE)
            .select(SUMMARY_COLUMNS)
            .eq("status", PostStatus.PUBLISHED.value)
            .order("published_at", desc=True, nullsfirst=False),
            "list published posts",
        )
        draft_rows = SupabaseClient.execute(
            client.table(POSTS_TABLE)
            .select(SUMMARY_COLUMNS)
            .eq("status", PostStatus.DRAFT.value)
            .order("id", desc=True),
            "list draft posts",
        )

        published = BlogService._attach_categories(published_rows, BlogPostSummary)
        drafts = BlogService._attach_categories(draft_rows, BlogPostSummary)

        if category_id:
            published = [p for p in published if p.category and p.category.id == str(category_id)]
            drafts = [p for p in drafts if p.category and p.category.id == str(category_id)]

        return AdminPostList(published=published, drafts=drafts)

    @staticmethod
    def get_post(post_id: int) -> BlogPost:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(POSTS_TABLE).select(POST_COLUMNS).eq("id", post_id).limit(1),
            "fetch post",
        )
        if not rows:
            raise RecordNotFoundError("Post", str(post_id))
        return BlogService._attach_categories(rows, BlogPost)[0]

    @staticmethod
    def _upload_cover(actor: Actor | None, cover: UploadedImage, slug: str, title: str) -> str:
        path = build_cover_path(actor.id if actor else None, cover.filename, slug, title)
        _, public_url = StorageService.store_image(settings.BLOG_COVER_BUCKET, path, cover)
        return public_url

    @staticmethod
    def _ensure_unique_slug(slug: str, exclude_id: int | None = None) -> None:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(POSTS_TABLE).select("id").eq("slug", slug),
            "check post slug",
        )
        if any(str(row["id"]) != str(exclude_id) for row in rows):
            raise SlugConflictError("Post", slug)

    @staticmethod
    def _validated_fields(data: BlogPostCreate) -> tuple[str, str]:
        title = data.title.strip()
        if not title:
            raise ContentValidationError("Bitte gib einen Titel an.", field="title")
        slug = create_slug(data.slug or title)
        if not slug:
            raise ContentValidationError("Der Slug darf nicht leer sein.", field="slug")
        return title, slug

    @staticmethod
    def create_post(data: BlogPostCreate, actor: Actor | None = None, cover: UploadedImage | None = None) -> BlogPost:
        """
        Create a post.

        An uploaded cover replaces data.cover_image. published_at is set
        only when the post is created as published.
        """
        title, slug = BlogService._validated_fields(data)
        BlogService._ensure_unique_slug(slug)

        cover_image = clean_optional(data.cover_image)
        if cover:
            cover_image = BlogService._upload_cover(actor, cover, slug, title)

        is_published = data.status == PostStatus.PUBLISHED
        row = {
            "title": title,
            "slug": slug,
            "excerpt": clean_optional(data.excerpt),
            "content": data.content,
            "cover_image": cover_image,
            "status": data.status.value,
            "category_id": data.category_id or None,
            "author_id": actor.id if actor else None,
            "spotlight": False,
            "published_at": utc_now_iso() if is_published else None,
        }

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(client.table(POSTS_TABLE).insert(row), "create post")
        post = BlogService._attach_categories(rows, BlogPost)[0]
        logger.info(f"Created post {post.id} ({slug}, {data.status.value})")

        ActivityLogService.log_action(
            "blog_post_created",
            actor=actor,
            entity_type="blog_post",
            entity_id=post.id,
            metadata={"slug": slug, "status": data.status.value},
        )
        return post

    @staticmethod
    def update_post(
        post_id: int,
        data: BlogPostUpdate,
        actor: Actor | None = None,
        cover: UploadedImage | None = None,
    ) -> BlogPost:
        """
        Replace a post's editable fields.

        A post that stays published keeps its published_at; one that becomes
        published gets the current time; any other status clears it.
        A replaced cover file in the cover bucket is removed afterwards.
        """
        existing = BlogService.get_post(post_id)
        title, slug = BlogService._validated_fields(data)
        if slug != existing.slug:
            BlogService._ensure_unique_slug(slug, exclude_id=post_id)

        cover_image = clean_optional(data.cover_image)
        if cover:
            try:
                cover_image = BlogService._upload_cover(actor, cover, slug, title)
            except Exception as e:
                ActivityLogService.log_action(
                    "blog_post_cover_upload_failed",
                    actor=actor,
                    entity_type="blog_post",
                    entity_id=post_id,
                    metadata={"error": str(e)},
                )
                raise

        if data.status == PostStatus.PUBLISHED:
            published_at = existing.published_at.isoformat() if existing.published_at else utc_now_iso()
        else:
            published_at = None

        updates = {
            "title": title,
            "slug": slug,
            "excerpt": clean_optional(data.excerpt),
            "content": data.content,
            "cover_image": cover_image,
            "status": data.status.value,
            "category_id": data.category_id or None,
            "published_at": published_at,
        }

        client = SupabaseClient.get_client()
        try:
            rows = SupabaseClient.execute(
                client.table(POSTS_TABLE).update(updates).eq("id", post_id),
                "update post",
            )
        except Exception as e:
            ActivityLogService.log_action(
                "blog_post_update_failed",
                actor=actor,
                entity_type="blog_post",
                entity_id=post_id,
                metadata={"error": str(e)},
            )
            raise

        if existing.cover_image and existing.cover_image != cover_image:
            old_path = StorageService.path_from_public_url(settings.BLOG_COVER_BUCKET, existing.cover_image)
            if old_path:
                StorageService.remove_files(settings.BLOG_COVER_BUCKET, [old_path])

        ActivityLogService.log_action(
            "blog_post_updated",
            actor=actor,
            entity_type="blog_post",
            entity_id=post_id,
            metadata={"slug": slug, "status": data.status.value},
        )

        if rows:
            return BlogService._attach_categories(rows, BlogPost)[0]
        return BlogService.get_post(post_id)

    @staticmethod
    def delete_post(post_id: int, actor: Actor | None = None) -> None:
        """Remove the cover file (if stored in the cover bucket), then the row."""
        post = BlogService.get_post(post_id)

        cover_path = StorageService.path_from_public_url(settings.BLOG_COVER_BUCKET, post.cover_image)
        if cover_path:
            StorageService.remove_files(settings.BLOG_COVER_BUCKET, [cover_path], ignore_missing=True)

        client = SupabaseClient.get_client()
        SupabaseClient.execute(
            client.table(POSTS_TABLE).delete().eq("id", post_id),
            "delete post",
        )
        logger.info(f"Deleted post {post_id}")

        ActivityLogService.log_action(
            "blog_post_deleted",
            actor=actor,
            entity_type="blog_post",
            entity_id=post_id,
            metadata={"slug": post.slug, "coverPath": cover_path},
        )

    @staticmethod
    def toggle_spotlight(post_id: int, actor: Actor | None = None) -> BlogPost:
        """
        Switch the spotlight of a post.

        Turning it on clears every other spotlight first, so at most one
        post is highlighted.
        """
        post = BlogService.get_post(post_id)
        client = SupabaseClient.get_client()

        if post.spotlight:
            SupabaseClient.execute(
                client.table(POSTS_TABLE).update({"spotlight": False}).eq("id", post_id),
                "disable spotlight",
            )
            action = "blog_spotlight_disabled"
        else:
            SupabaseClient.execute(
                client.table(POSTS_TABLE).update({"spotlight": False}).eq("spotlight", True),
                "clear spotlight",
            )
            SupabaseClient.execute(
                client.table(POSTS_TABLE).update({"spotlight": True}).eq("id", post_id),
                "enable spotlight",
            )
            action = "blog_spotlight_enabled"

        ActivityLogService.log_action(
            action,
            actor=actor,
            entity_type="blog_post",
            entity_id=post_id,
            metadata={"slug": post.slug},
        )
        return post.model_copy(update={"spotlight": not post.spotlight})

    # -------------------------------------------------------------------------
    # Background
    # -------------------------------------------------------------------------

    @staticmethod
    def upload_background(image: UploadedImage, actor: Actor | None = None) -> BlogBackground:
        """Store the blog page background in its singleton row."""
        bucket = settings.BLOG_BACKGROUND_BUCKET
        previous = BlogService.get_background()

        path = build_background_path(actor.id if actor else None, image.filename)
        stored_path, public_url = StorageService.store_image(bucket, path, image, upsert=True)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(BACKGROUNDS_TABLE).upsert(
                {
                    "singleton_key": BACKGROUND_SINGLETON_KEY,
                    "file_path": stored_path,
                    "public_url": public_url,
                },
                on_conflict="singleton_key",
            ),
            "save blog background",
        )

        if previous and previous.file_path != stored_path:
            StorageService.remove_files(bucket, [previous.file_path])

        row = rows[0] if rows else {}
        background = BlogBackground(
            id=str(row.get("id", previous.id if previous else "")),
            file_path=stored_path,
            public_url=public_url,
        )

        ActivityLogService.log_action(
            "blog_background_uploaded",
            actor=actor,
            entity_type="blog_background",
            entity_id=background.id,
            metadata={"filePath": stored_path},
        )
        return background

    @staticmethod
    def delete_background(actor: Actor | None = None) -> None:
        """
        Remove the background file, then its row.

        Raises:
            RecordNotFoundError: If no background is stored
        """
        background = BlogService.get_background()
        if not background:
            raise RecordNotFoundError("Blog background", BACKGROUND_SINGLETON_KEY)

        StorageService.remove_files(settings.BLOG_BACKGROUND_BUCKET, [background.file_path])

        client = SupabaseClient.get_client()
        SupabaseClient.execute(
            client.table(BACKGROUNDS_TABLE).delete().eq("singleton_key", BACKGROUND_SINGLETON_KEY),
            "delete blog background",
        )

        ActivityLogService.log_action(
            "blog_background_deleted",
            actor=actor,
            entity_type="blog_background",
            entity_id=background.id,
            metadata={"filePath": background.file_path},
        )
