# =============================================================================
# app/routers/admin_services.py - Services Back-Office Endpoints
# =============================================================================
# Editing the service slides: texts, slide image and linked projects.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Path, UploadFile
from pydantic import BaseModel, Field

from app.dependencies import AdminDep, read_upload
from core.models.service import ServiceAdminView, ServiceRecord, ServiceUpdate
from core.services.service_catalog_service import ServiceCatalogService

logger = logging.getLogger(__name__)

router = APIRouter()

ServiceSlug = Annotated[str, Path(description="Service slug")]


class ProjectMoveRequest(BaseModel):
    """New zero-based position of a linked project; clamped to the list."""
    new_index: int = Field(..., description="Target position, 0 = first")


@router.get("", response_model=ServiceAdminView)
async def list_services(admin: AdminDep):
    """All services plus the projects available for linking."""
    return ServiceCatalogService.list_services()


@router.get("/{slug}", response_model=ServiceRecord)
async def get_service(slug: ServiceSlug, admin: AdminDep):
    return ServiceCatalogService.get_service(slug)


@router.put("/{slug}", response_model=ServiceRecord)
async def update_service(slug: ServiceSlug, data: ServiceUpdate, admin: AdminDep):
    """
    Save a service.

    Paragraph and bullet textareas are split into lines; project_ids
    replaces the linked projects in the given order.
    """
    return ServiceCatalogService.update_service(slug, data, actor=admin.as_actor())


@router.post("/{slug}/image", response_model=ServiceRecord)
async def upload_service_image(
    slug: ServiceSlug,
    file: Annotated[UploadFile, File(description="Slide image")],
    admin: AdminDep,
):
    image = await read_upload(file, fallback_name="service")
    return ServiceCatalogService.upload_service_image(slug, image, actor=admin.as_actor())


@router.put("/{slug}/projects/{project_id}/position", response_model=ServiceRecord)
async def move_service_project(
    slug: ServiceSlug,
    project_id: Annotated[str, Path(description="Linked project id")],
    request: ProjectMoveRequest,
    admin: AdminDep,
):
    return ServiceCatalogService.move_project(
        slug, project_id, request.new_index, actor=admin.as_actor()
    )
