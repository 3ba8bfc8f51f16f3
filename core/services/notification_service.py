# =============================================================================
# core/services/notification_service.py - Contact E-Mail Notification
# =============================================================================
# Sends new contact messages to the studio inbox through the EmailJS REST
# API. The template variables are German and use the Europe/Berlin clock.
# =============================================================================

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import httpx

from app.config import settings
from app.exceptions import NotificationDeliveryError, NotificationNotConfiguredError
from core.models.contact import ContactEmailPayload, ContactEmailTemplateParams

logger = logging.getLogger(__name__)

FALLBACK_SUBJECT = "Allgemeine Anfrage"
FALLBACK_PHONE = "Keine Telefonnummer angegeben"
TIME_ZONE = ZoneInfo("Europe/Berlin")


def format_submitted_at(value: datetime | None = None) -> str:
    """
    German short date and time in Berlin local time.

    Example:
        format_submitted_at(datetime(2026, 3, 5, 8, 4, 9, tzinfo=timezone.utc))
        # "5.3.2026, 09:04:09"
    """
    moment = value or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(TIME_ZONE)
    return f"{local.day}.{local.month}.{local.year}, {local:%H:%M:%S}"


def build_contact_template_params(payload: ContactEmailPayload) -> ContactEmailTemplateParams:
    """Map a contact message onto the EmailJS template variables."""
    return ContactEmailTemplateParams(
        customer_name=payload.name,
        customer_email=payload.email,
        customer_subject=(payload.subject or "").strip() or FALLBACK_SUBJECT,
        customer_phone=(payload.phone or "").strip() or FALLBACK_PHONE,
        customer_message=payload.message,
        privacy_status="Ja" if payload.has_accepted_privacy else "Nein",
        submitted_at=format_submitted_at(payload.submitted_at),
    )


class NotificationService:
    """Service for outgoing e-mail notifications."""

    @staticmethod
    def build_request_body(payload: ContactEmailPayload) -> dict:
        """
        Build the EmailJS send request.

        user_id repeats the public key for older EmailJS accounts;
        accessToken is only sent when a private key is configured.
        """
        body = {
            "service_id": settings.EMAILJS_SERVICE_ID,
            "template_id": settings.EMAILJS_TEMPLATE_ID,
            "public_key": settings.EMAILJS_PUBLIC_KEY,
            "template_params": build_contact_template_params(payload).model_dump(),
            "user_id": settings.EMAILJS_PUBLIC_KEY,
        }
        if settings.EMAILJS_PRIVATE_KEY:
            body["accessToken"] = settings.EMAILJS_PRIVATE_KEY
        return body

    @staticmethod
    def send_contact_notification(payload: ContactEmailPayload) -> None:
        """
        Send the notification e-mail for a contact message.

        Raises:
            NotificationNotConfiguredError: EmailJS settings are missing
            NotificationDeliveryError: EmailJS unreachable or non-2xx answer
        """
        missing = settings.emailjs_missing_settings
        if missing:
            logger.error(f"Contact notification not configured, missing: {', '.join(missing)}")
            raise NotificationNotConfiguredError(missing)

        body = NotificationService.build_request_body(payload)

        try:
            response = httpx.post(
                settings.EMAILJS_ENDPOINT,
                json=body,
                timeout=settings.EMAILJS_TIMEOUT_SECONDS,
            )
        except httpx.HTTPError as e:
            logger.error(f"EmailJS request failed: {e}")
            raise NotificationDeliveryError(str(e))

        if not response.is_success:
            error_text = response.text or f"Status {response.status_code}"
            logger.error(f"EmailJS rejected notification ({response.status_code}): {error_text}")
            raise NotificationDeliveryError(f"EmailJS responded with {response.status_code}: {error_text}")

        logger.info(f"Contact notification sent for {payload.email}")
