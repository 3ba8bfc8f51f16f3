# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles image upload, public URL resolution and removal in Supabase
# Storage. Every bucket used by the site is public; rows store both the
# object path (for deletion) and the public URL (for rendering).
# =============================================================================

import logging
from urllib.parse import unquote, urlparse

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    StorageDeleteError,
    StorageUploadError,
)
from core.models.common import UploadedImage

logger = logging.getLogger(__name__)

PUBLIC_OBJECT_PREFIX = "/storage/v1/object/public/"
CACHE_CONTROL_SECONDS = "3600"


class StorageService:
    """
    Service for Supabase Storage operations.

    Stateless; the bucket is passed to each call.
    """

    @staticmethod
    def validate_image(image: UploadedImage) -> None:
        """
        Check extension and size of an uploaded image.

        Raises:
            InvalidFileTypeError: Extension not in ALLOWED_IMAGE_EXTENSIONS
            FileTooLargeError: File exceeds MAX_UPLOAD_SIZE_MB
        """
        allowed = settings.allowed_image_extensions_list
        name = image.filename.lower()
        if not any(name.endswith(ext) for ext in allowed):
            raise InvalidFileTypeError(image.filename, allowed)

        if image.size > settings.max_upload_size_bytes:
            raise FileTooLargeError(image.size / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    @staticmethod
    def upload_image(
        bucket: str,
        path: str,
        image: UploadedImage,
        upsert: bool = False,
    ) -> str:
        """
        Upload an image to a bucket.

        Args:
            bucket: Storage bucket name
            path: Object path inside the bucket
            image: The uploaded file
            upsert: Overwrite an existing object at the same path

        Returns:
            Storage path where the file was stored

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        try:
            response = client.storage.from_(bucket).upload(
                path=path,
                file=image.content,
                file_options={
                    "content-type": image.content_type,
                    "cache-control": CACHE_CONTROL_SECONDS,
                    "upsert": "true" if upsert else "false",
                },
            )
        except Exception as e:
            logger.error(f"Storage upload failed ({bucket}/{path}): {e}")
            raise StorageUploadError(str(e))

        stored_path = getattr(response, "path", None) or path
        logger.info(f"Uploaded file to storage: {bucket}/{stored_path}")
        return stored_path

    @staticmethod
    def get_public_url(bucket: str, path: str) -> str:
        """
        Get the public URL of an object.

        Raises:
            StorageUploadError: If Supabase returns no URL
        """
        client = SupabaseClient.get_client()

        try:
            url = client.storage.from_(bucket).get_public_url(path)
        except Exception as e:
            logger.error(f"Failed to get public URL for {bucket}/{path}: {e}")
            raise StorageUploadError(f"Public URL could not be resolved: {e}")

        if not url:
            raise StorageUploadError("Public URL could not be resolved")

        # Newer storage clients append an empty query string
        return url.rstrip("?")

    @staticmethod
    def store_image(bucket: str, path: str, image: UploadedImage, upsert: bool = False) -> tuple[str, str]:
        """
        Validate, upload and resolve an image in one step.

        Returns:
            (stored_path, public_url)
        """
        StorageService.validate_image(image)
        stored_path = StorageService.upload_image(bucket, path, image, upsert=upsert)
        return stored_path, StorageService.get_public_url(bucket, stored_path)

    @staticmethod
    def remove_files(bucket: str, paths: list[str], ignore_missing: bool = True) -> None:
        """
        Delete objects from a bucket.

        Args:
            bucket: Storage bucket name
            paths: Object paths; empty entries are skipped
            ignore_missing: Treat "not found" errors as success

        Raises:
            StorageDeleteError: For any other failure
        """
        targets = [path for path in paths if path]
        if not targets:
            return

        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).remove(targets)
            logger.info(f"Deleted {len(targets)} file(s) from storage bucket {bucket}")
        except Exception as e:
            if ignore_missing and "not found" in str(e).lower():
                logger.warning(f"Files already gone from {bucket}: {targets}")
                return
            logger.error(f"Failed to delete files from {bucket}: {e}")
            raise StorageDeleteError(targets, str(e))

    @staticmethod
    def path_from_public_url(bucket: str, public_url: str | None) -> str | None:
        """
        Recover the object path from a public URL of the given bucket.

        Example:
            path_from_public_url(
                "blog-cover-images",
                "https://x.supabase.co/storage/v1/object/public/blog-cover-images/u1/cover.png",
            )
            # "u1/cover.png"
        """
        if not public_url:
            return None

        try:
            pathname = unquote(urlparse(public_url).path)
        except ValueError:
            logger.warning(f"Could not parse storage URL: {public_url}")
            return None

        marker = f"{PUBLIC_OBJECT_PREFIX}{bucket}/"
        index = pathname.find(marker)
        if index == -1:
            return None

        return pathname[index + len(marker):] or None

    @staticmethod
    def build_public_url(bucket: str, path: str | None) -> str | None:
        """
        Expand a stored path into a public URL without calling Supabase.

        Absolute http(s) URLs are returned unchanged.
        """
        if not path:
            return None

        if path.lower().startswith(("http://", "https://")):
            return path

        normalized = path.lstrip("/")
        base = settings.SUPABASE_URL.rstrip("/")
        return f"{base}{PUBLIC_OBJECT_PREFIX}{bucket}/{normalized}"
