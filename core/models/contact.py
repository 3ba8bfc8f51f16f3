# =============================================================================
# core/models/contact.py - Contact Form Schemas
# =============================================================================
# Contact messages submitted on /kontakt, their processing status and the
# EmailJS notification payload.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, Field


class ContactStatus(str, Enum):
    """
    Processing state of a contact message.

    Rows created before statuses existed have NULL and count as open.
    """
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    DONE = "done"


PENDING_STATUSES = (None, ContactStatus.OPEN.value, ContactStatus.IN_PROGRESS.value)


class ContactSubmission(BaseModel):
    """
    Payload of the public contact form.

    Example:
        {
            "name": "Anna Muster",
            "email": "anna@example.com",
            "subject": "Hochzeit 2027",
            "message": "Hallo, ...",
            "has_accepted_privacy": true
        }
    """

    name: str
    email: str
    subject: str | None = None
    phone: str | None = None
    message: str
    has_accepted_privacy: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_accepted_privacy", "hasAcceptedPrivacy"),
    )


class ContactMessage(BaseModel):
    id: int
    name: str
    email: str
    subject: str | None = None
    phone: str | None = None
    message: str
    status: ContactStatus | None = None
    created_at: datetime | None = None


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class ContactSubmitResponse(BaseModel):
    id: int | None = None
    message: str = "Vielen Dank für deine Nachricht!"


class ContactEmailPayload(BaseModel):
    """
    Input of the contact notification e-mail.

    Accepts the camelCase keys sent by the website's contact form.
    """

    name: str
    email: str
    subject: str | None = None
    phone: str | None = None
    message: str
    has_accepted_privacy: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_accepted_privacy", "hasAcceptedPrivacy"),
    )
    submitted_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("submitted_at", "submittedAt"),
    )


class ContactEmailTemplateParams(BaseModel):
    """Variables of the EmailJS template."""

    customer_name: str
    customer_email: str
    customer_subject: str
    customer_phone: str
    customer_message: str
    privacy_status: str
    submitted_at: str


class GdprOverview(BaseModel):
    """Messages past the retention period, oldest first."""

    cutoff: datetime
    messages: list[ContactMessage] = Field(default_factory=list)


class PendingCount(BaseModel):
    pending_contacts: int = 0
