# =============================================================================
# app/routers/admin_site.py - Site-Wide Back-Office Endpoints
# =============================================================================
# Dashboard summary, page metadata editor and the activity log viewer.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel

from app.dependencies import AdminDep
from core.models.activity import ActivityLogList, LogContext
from core.models.common import OperationResult
from core.models.contact import PendingCount
from core.models.metadata import PageMetadataForm, PageMetadataRecord
from core.services.activity_log_service import ActivityLogService
from core.services.contact_service import ContactService
from core.services.metadata_service import SLUG_SUGGESTIONS, MetadataService

logger = logging.getLogger(__name__)

router = APIRouter()


class SlugSuggestion(BaseModel):
    slug: str
    label: str


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/summary", response_model=PendingCount)
async def get_summary(admin: AdminDep):
    """Counters shown on the dashboard navigation."""
    return PendingCount(pending_contacts=ContactService.count_pending())


# =============================================================================
# Page Metadata
# =============================================================================

@router.get("/metadata", response_model=list[PageMetadataRecord])
async def list_metadata(admin: AdminDep):
    return MetadataService.list_entries()


@router.get("/metadata/suggestions", response_model=list[SlugSuggestion])
async def list_metadata_suggestions(admin: AdminDep):
    return [SlugSuggestion(slug=slug, label=label) for slug, label in SLUG_SUGGESTIONS.items()]


@router.put("/metadata", response_model=PageMetadataRecord)
async def save_metadata(form: PageMetadataForm, admin: AdminDep):
    """Create or replace the metadata of one page; blank fields become NULL."""
    return MetadataService.save_entry(form, actor=admin.as_actor())


@router.delete("/metadata/{slug}", response_model=OperationResult)
async def delete_metadata(
    slug: Annotated[str, Path(description="Page slug")],
    admin: AdminDep,
):
    MetadataService.delete_entry(slug, actor=admin.as_actor())
    return OperationResult(message="Metadaten gelöscht.", affected_ids=[slug])


# =============================================================================
# Activity Log
# =============================================================================

@router.get("/logs", response_model=ActivityLogList)
async def list_logs(
    admin: AdminDep,
    context: LogContext | None = Query(default=None, description="public, admin or system"),
    q: str | None = Query(default=None, description="Full-text filter"),
    limit: int | None = Query(default=None, ge=1, description="Max entries"),
):
    """
    Newest activity entries.

    The text filter matches action, description, user, entity and metadata.
    """
    logs = ActivityLogService.list_logs(context=context, query=q, limit=limit)
    return ActivityLogList(logs=logs, total=len(logs))
