# =============================================================================
# core/services/contact_service.py - Contact Messages
# =============================================================================
# Stores contact form submissions, triggers the e-mail notification and
# implements the GDPR retention cleanup.
#
# A submission is stored before the notification is sent. When sending
# fails the message stays stored and the caller is told so.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import clean_optional, subtract_months
from app.config import settings
from app.exceptions import (
    ContactNotificationError,
    ContentValidationError,
    PrivacyNotAcceptedError,
    RecordNotFoundError,
    SiteException,
)
from core.models.activity import LogContext
from core.models.common import Actor
from core.models.contact import (
    PENDING_STATUSES,
    ContactEmailPayload,
    ContactMessage,
    ContactStatus,
    ContactSubmission,
    GdprOverview,
)
from core.services.activity_log_service import ActivityLogService
from core.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

TABLE = "contact_messages"
COLUMNS = "id, name, email, subject, phone, message, status, created_at"

GDPR_REASON = "gdpr_cleanup"


class ContactService:
    """Service for contact messages."""

    # -------------------------------------------------------------------------
    # Public Submission
    # -------------------------------------------------------------------------

    @staticmethod
    def submit(submission: ContactSubmission) -> ContactMessage:
        """
        Store a contact form submission and notify the studio.

        Raises:
            PrivacyNotAcceptedError: Privacy notice not accepted
            ContentValidationError: Name, e-mail or message blank
            ContactNotificationError: Stored, but the e-mail could not be sent
        """
        if not submission.has_accepted_privacy:
            raise PrivacyNotAcceptedError()

        name = submission.name.strip()
        email = submission.email.strip()
        message = submission.message.strip()
        subject = clean_optional(submission.subject)
        phone = clean_optional(submission.phone)

        for field, value in (("name", name), ("email", email), ("message", message)):
            if not value:
                raise ContentValidationError("Bitte fülle alle Pflichtfelder aus.", field=field)

        flags = {"hasSubject": subject is not None, "hasPhone": phone is not None}
        public_actor = Actor(email=email)

        client = SupabaseClient.get_client()
        try:
            rows = SupabaseClient.execute(
                client.table(TABLE).insert({
                    "name": name,
                    "email": email,
                    "subject": subject,
                    "phone": phone,
                    "message": message,
                    "status": ContactStatus.OPEN.value,
                }),
                "store contact message",
            )
        except SiteException as e:
            ActivityLogService.log_action(
                "contact_message_failed",
                actor=public_actor,
                context=LogContext.PUBLIC,
                description="Kontaktformular konnte nicht gespeichert werden.",
                metadata={"error": e.message, **flags},
            )
            raise

        stored = ContactMessage(**rows[0])
        logger.info(f"Contact message {stored.id} stored")

        ActivityLogService.log_action(
            "contact_message_submitted",
            actor=public_actor,
            context=LogContext.PUBLIC,
            description="Kontaktformular wurde erfolgreich abgesendet.",
            entity_type="contact_message",
            entity_id=stored.id,
            metadata=flags,
        )

        try:
            NotificationService.send_contact_notification(ContactEmailPayload(
                name=name,
                email=email,
                subject=subject,
                phone=phone,
                message=message,
                has_accepted_privacy=True,
                submitted_at=datetime.now(timezone.utc),
            ))
        except SiteException as e:
            error = str(e.details.get("error") or e.message)
            ActivityLogService.log_action(
                "contact_notification_failed",
                actor=public_actor,
                context=LogContext.PUBLIC,
                description=(
                    "Kontaktformular wurde gespeichert, aber die "
                    "E-Mail-Benachrichtigung ist fehlgeschlagen."
                ),
                entity_type="contact_message",
                entity_id=stored.id,
                metadata={"error": error, **flags},
            )
            raise ContactNotificationError(stored.id, error)

        return stored

    # -------------------------------------------------------------------------
    # Admin Inbox
    # -------------------------------------------------------------------------

    @staticmethod
    def list_messages(status: ContactStatus | None = None) -> list[ContactMessage]:
        """Newest first, optionally only one status."""
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select(COLUMNS)
        if status is not None:
            query = query.eq("status", status.value)
        rows = SupabaseClient.execute(
            query.order("created_at", desc=True),
            "list contact messages",
        )
        return [ContactMessage(**row) for row in rows]

    @staticmethod
    def update_status(message_id: int, status: ContactStatus, actor: Actor | None = None) -> ContactMessage:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).update({"status": status.value}).eq("id", message_id),
            "update contact message status",
        )
        if not rows:
            raise RecordNotFoundError("Contact message", message_id)

        ActivityLogService.log_action(
            "contact_message_status_updated",
            actor=actor,
            entity_type="contact_message",
            entity_id=message_id,
            metadata={"status": status.value},
        )
        return ContactMessage(**rows[0])

    @staticmethod
    def count_pending() -> int:
        """Messages that still need an answer (status NULL, open or in progress)."""
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).select("id, status"),
            "count pending contact messages",
        )
        return sum(1 for row in rows if row.get("status") in PENDING_STATUSES)

    # -------------------------------------------------------------------------
    # GDPR Retention
    # -------------------------------------------------------------------------

    @staticmethod
    def retention_cutoff(now: datetime | None = None) -> datetime:
        """Messages created at or before this moment are due for deletion."""
        now = now or datetime.now(timezone.utc)
        return subtract_months(now, settings.CONTACT_RETENTION_MONTHS)

    @staticmethod
    def list_expired(now: datetime | None = None) -> GdprOverview:
        cutoff = ContactService.retention_cutoff(now)
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE)
            .select(COLUMNS)
            .lte("created_at", cutoff.isoformat())
            .order("created_at"),
            "list expired contact messages",
        )
        return GdprOverview(cutoff=cutoff, messages=[ContactMessage(**row) for row in rows])

    @staticmethod
    def delete_message(message_id: int, actor: Actor | None = None) -> None:
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).delete().eq("id", message_id),
            "delete contact message",
        )
        if not rows:
            raise RecordNotFoundError("Contact message", message_id)

        logger.info(f"Deleted contact message {message_id}")
        ActivityLogService.log_action(
            "contact_message_deleted_gdpr",
            actor=actor,
            entity_type="contact_message",
            entity_id=message_id,
            metadata={"reason": GDPR_REASON},
        )

    @staticmethod
    def delete_expired(actor: Actor | None = None, now: datetime | None = None) -> list[Any]:
        """
        Delete every message past the retention period.

        Returns:
            Ids of the deleted messages
        """
        cutoff = ContactService.retention_cutoff(now)
        client = SupabaseClient.get_client()
        rows = SupabaseClient.execute(
            client.table(TABLE).delete().lte("created_at", cutoff.isoformat()),
            "delete expired contact messages",
        )
        deleted_ids = [row["id"] for row in rows]
        logger.info(f"GDPR cleanup deleted {len(deleted_ids)} contact message(s)")

        ActivityLogService.log_action(
            "contact_messages_bulk_deleted_gdpr",
            actor=actor,
            entity_type="contact_message",
            metadata={
                "reason": GDPR_REASON,
                "cutoffDate": cutoff.isoformat(),
                "deletedIds": deleted_ids,
            },
        )
        return deleted_ids
