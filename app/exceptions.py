# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells the caller what failed and, where possible, how to fix it.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class SiteException(Exception):
    """
    Base exception for the site API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SITE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Generic Exceptions
# =============================================================================

class RecordNotFoundError(SiteException):
    """Raised when a row looked up by id or slug doesn't exist."""

    def __init__(self, entity: str, identifier: str | int):
        super().__init__(
            message=f"{entity} not found: {identifier}",
            code="NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {entity.lower()} exists and the identifier is correct",
            details={"entity": entity, "identifier": str(identifier)}
        )


class ContentValidationError(SiteException):
    """Raised when submitted content is missing required values."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            details={"field": field} if field else None,
        )


class SlugConflictError(SiteException):
    """Raised when a slug is already used by another row."""

    def __init__(self, entity: str, slug: str):
        super().__init__(
            message=f"{entity} slug already in use: {slug}",
            code="SLUG_CONFLICT",
            status_code=409,
            suggestion="Choose a different title or pass an explicit slug",
            details={"entity": entity, "slug": slug}
        )


class DatabaseError(SiteException):
    """Raised when a Supabase table operation fails."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Database operation failed ({operation}): {error}",
            code="DATABASE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation, "error": error}
        )


# =============================================================================
# Portfolio Exceptions
# =============================================================================

class ProjectNotFoundError(RecordNotFoundError):
    """Raised when a portfolio project id or slug doesn't exist."""

    def __init__(self, identifier: str):
        super().__init__("Project", identifier)
        self.code = "PROJECT_NOT_FOUND"


class ImageNotInProjectError(SiteException):
    """Raised when an image is used with a project it does not belong to."""

    def __init__(self, image_id: str, project_id: str):
        super().__init__(
            message=f"Image {image_id} does not belong to project {project_id}",
            code="IMAGE_NOT_IN_PROJECT",
            status_code=400,
            suggestion="Pick one of the project's own gallery images",
            details={"image_id": image_id, "project_id": project_id}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(SiteException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class FileTooLargeError(SiteException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(SiteException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


class StorageDeleteError(SiteException):
    """Raised when removing a file from storage fails."""

    def __init__(self, paths: list[str], error: str):
        super().__init__(
            message=f"Failed to remove file from storage: {error}",
            code="STORAGE_DELETE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"paths": paths, "error": error}
        )


# =============================================================================
# Contact / Notification Exceptions
# =============================================================================

class InvalidRequestBodyError(SiteException):
    """Raised when a request body is not valid JSON."""

    def __init__(self, error: str):
        super().__init__(
            message="Ungültige Daten im Anfragekörper.",
            code="INVALID_BODY",
            status_code=400,
            details={"error": error}
        )


class PrivacyNotAcceptedError(SiteException):
    """Raised when the contact form is submitted without privacy consent."""

    def __init__(self):
        super().__init__(
            message="Bitte akzeptiere die Datenschutzbestimmungen.",
            code="PRIVACY_NOT_ACCEPTED",
            status_code=422,
        )


class NotificationNotConfiguredError(SiteException):
    """Raised when EmailJS credentials are missing."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message="Die E-Mail-Benachrichtigung ist nicht konfiguriert.",
            code="NOTIFICATION_NOT_CONFIGURED",
            status_code=500,
            suggestion="Set the EmailJS environment variables",
            details={"missing": missing}
        )


class NotificationDeliveryError(SiteException):
    """Raised when EmailJS rejects the request or cannot be reached."""

    def __init__(self, error: str):
        super().__init__(
            message="Die Anfrage an EmailJS ist fehlgeschlagen.",
            code="NOTIFICATION_FAILED",
            status_code=502,
            details={"error": error}
        )


class ContactNotificationError(SiteException):
    """Raised when a contact message was stored but the e-mail failed."""

    def __init__(self, message_id: str | int | None, error: str):
        super().__init__(
            message=(
                "Deine Nachricht wurde gespeichert, aber die E-Mail-Benachrichtigung "
                "konnte nicht versendet werden. Bitte kontaktiere uns direkt per E-Mail."
            ),
            code="CONTACT_NOTIFICATION_FAILED",
            status_code=502,
            details={"message_id": message_id, "error": error}
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class LoginFailedError(SiteException):
    """Raised when Supabase rejects email/password credentials."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Login fehlgeschlagen: {reason}",
            code="LOGIN_FAILED",
            status_code=401,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def site_exception_handler(
    request: Request,
    exc: SiteException
) -> JSONResponse:
    """
    Convert SiteException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
