# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection and small route helpers shared by routers.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, UploadFile

from app.auth.dependencies import get_current_admin
from app.auth.models import AdminUser
from core.models.common import UploadedImage


# Type alias for back-office routes
AdminDep = Annotated[AdminUser, Depends(get_current_admin)]


async def read_upload(file: UploadFile, fallback_name: str = "upload") -> UploadedImage:
    """
    Read a multipart upload into the framework-free UploadedImage.

    Validation (extension, size) happens in StorageService.
    """
    content = await file.read()
    return UploadedImage(
        filename=file.filename or fallback_name,
        content=content,
        content_type=file.content_type or "application/octet-stream",
    )
