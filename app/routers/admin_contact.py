# =============================================================================
# app/routers/admin_contact.py - Contact Inbox Endpoints
# =============================================================================
# Inbox of contact messages with status handling and the GDPR cleanup of
# messages past the retention period.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import AdminDep
from core.models.common import OperationResult
from core.models.contact import ContactMessage, ContactStatus, ContactStatusUpdate, GdprOverview
from core.services.contact_service import ContactService

logger = logging.getLogger(__name__)

router = APIRouter()

MessageId = Annotated[int, Path(description="Contact message id")]


@router.get("/messages", response_model=list[ContactMessage])
async def list_messages(
    admin: AdminDep,
    status: ContactStatus | None = Query(default=None, description="Only messages with this status"),
):
    """Newest messages first."""
    return ContactService.list_messages(status)


@router.patch("/messages/{message_id}", response_model=ContactMessage)
async def update_message_status(message_id: MessageId, data: ContactStatusUpdate, admin: AdminDep):
    return ContactService.update_status(message_id, data.status, actor=admin.as_actor())


# =============================================================================
# GDPR
# =============================================================================

@router.get("/gdpr", response_model=GdprOverview)
async def list_expired_messages(admin: AdminDep):
    """Messages older than the retention period, oldest first."""
    return ContactService.list_expired()


@router.delete("/gdpr/{message_id}", response_model=OperationResult)
async def delete_message(message_id: MessageId, admin: AdminDep):
    ContactService.delete_message(message_id, actor=admin.as_actor())
    return OperationResult(message="Nachricht gelöscht.", affected_ids=[str(message_id)])


@router.delete("/gdpr", response_model=OperationResult)
async def delete_expired_messages(admin: AdminDep):
    """Delete every message past the retention period in one go."""
    deleted = ContactService.delete_expired(actor=admin.as_actor())
    return OperationResult(
        message=f"{len(deleted)} Nachricht(en) gelöscht.",
        affected_ids=[str(message_id) for message_id in deleted],
    )
