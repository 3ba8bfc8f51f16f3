# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Database, auth and storage all live in one Supabase project

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for password sign-in)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying access tokens"
    )

    # -------------------------------------------------------------------------
    # Storage Buckets
    # -------------------------------------------------------------------------

    BLOG_COVER_BUCKET: str = Field(default="blog-cover-images")
    BLOG_BACKGROUND_BUCKET: str = Field(default="blog-backgrounds")
    HOMEPAGE_GALLERY_BUCKET: str = Field(default="homepage-gallery")
    SERVICE_BUCKET: str = Field(default="service-carousel")
    PORTFOLIO_BUCKET: str = Field(default="portfolio-images")
    PORTFOLIO_BACKGROUND_BUCKET: str = Field(default="portfolio-backgrounds")

    # -------------------------------------------------------------------------
    # Site
    # -------------------------------------------------------------------------

    SITE_URL: str = Field(
        default="https://ds-capture.de",
        description="Public base URL used for canonical links and the sitemap"
    )

    SITE_NAME: str = Field(default="DS_Capture")

    PASSWORD_RESET_REDIRECT_URL: str | None = Field(
        default=None,
        description="Where Supabase should send users after a password reset"
    )

    # -------------------------------------------------------------------------
    # Contact Form / EmailJS
    # -------------------------------------------------------------------------
    # Notification is optional; without credentials the contact form still
    # stores messages but reports the notification as failed

    EMAILJS_ENDPOINT: str = Field(default="https://api.emailjs.com/api/v1.0/email/send")
    EMAILJS_SERVICE_ID: str | None = Field(default=None)
    EMAILJS_TEMPLATE_ID: str | None = Field(default=None)
    EMAILJS_PUBLIC_KEY: str | None = Field(default=None)
    EMAILJS_PRIVATE_KEY: str | None = Field(default=None)

    EMAILJS_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    CONTACT_RETENTION_MONTHS: int = Field(
        default=12,
        ge=1,
        le=120,
        description="Contact messages older than this are listed for GDPR deletion"
    )

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    ACTIVITY_LOG_LIMIT: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Max activity log entries returned to the log viewer"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_VERSION: str = Field(default="1.0.0")

    API_HOST: str = Field(default="0.0.0.0")

    API_PORT: int = Field(default=8000, ge=1, le=65535)

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=15,
        ge=1,
        le=100,
        description="Maximum image upload size in MB"
    )

    ALLOWED_IMAGE_EXTENSIONS: str = Field(
        default=".jpg,.jpeg,.png,.webp,.avif,.gif",
        description="Allowed image extensions (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS string into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_image_extensions_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_EXTENSIONS string into a list.

        Example: ".jpg, .PNG" -> [".jpg", ".png"]
        """
        return [ext.strip().lower() for ext in self.ALLOWED_IMAGE_EXTENSIONS.split(",") if ext.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def emailjs_missing_settings(self) -> list[str]:
        """Names of the EmailJS settings required for notifications that are unset."""
        required = {
            "EMAILJS_SERVICE_ID": self.EMAILJS_SERVICE_ID,
            "EMAILJS_TEMPLATE_ID": self.EMAILJS_TEMPLATE_ID,
            "EMAILJS_PUBLIC_KEY": self.EMAILJS_PUBLIC_KEY,
        }
        return [name for name, value in required.items() if not value]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
