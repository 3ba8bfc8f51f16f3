# =============================================================================
# app/routers/admin_portfolio.py - Portfolio Back-Office Endpoints
# =============================================================================
# Project CRUD, gallery uploads, image ordering, cover selection and the
# settings of the portfolio overview page. All routes require an admin.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Path, UploadFile, status

from app.dependencies import AdminDep, read_upload
from core.models.common import OperationResult
from core.models.portfolio import (
    CoverRequest,
    ImageOrderRequest,
    PortfolioProject,
    PortfolioSettings,
    PortfolioSettingsUpdate,
    ProjectCreate,
    ProjectDetail,
    ProjectImage,
    ProjectImageUpdate,
    ProjectUpdate,
)
from core.services.portfolio_service import PortfolioService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Projects
# =============================================================================

@router.get("/projects", response_model=list[PortfolioProject])
async def list_projects(admin: AdminDep):
    return PortfolioService.list_projects()


@router.post("/projects", response_model=PortfolioProject, status_code=status.HTTP_201_CREATED)
async def create_project(data: ProjectCreate, admin: AdminDep):
    """
    Create a project.

    The slug defaults to a slug of the title; display_order defaults to
    the end of the list.
    """
    return PortfolioService.create_project(data, actor=admin.as_actor())


@router.get("/projects/{project_id}", response_model=ProjectDetail)
async def get_project(
    project_id: Annotated[str, Path(description="Project id")],
    admin: AdminDep,
):
    return PortfolioService.get_project_detail(project_id)


@router.patch("/projects/{project_id}", response_model=PortfolioProject)
async def update_project(
    project_id: Annotated[str, Path(description="Project id")],
    data: ProjectUpdate,
    admin: AdminDep,
):
    return PortfolioService.update_project(project_id, data, actor=admin.as_actor())


@router.delete("/projects/{project_id}", response_model=OperationResult)
async def delete_project(
    project_id: Annotated[str, Path(description="Project id")],
    admin: AdminDep,
):
    """Delete a project with all its images, files and service links."""
    PortfolioService.delete_project(project_id, actor=admin.as_actor())
    return OperationResult(message="Projekt gelöscht.", affected_ids=[project_id])


# =============================================================================
# Gallery Images
# =============================================================================

@router.post(
    "/projects/{project_id}/images",
    response_model=ProjectImage,
    status_code=status.HTTP_201_CREATED,
)
async def upload_project_image(
    project_id: Annotated[str, Path(description="Project id")],
    file: Annotated[UploadFile, File(description="Image file")],
    admin: AdminDep,
    caption: Annotated[str | None, Form()] = None,
):
    """
    Upload an image into the project's gallery.

    The first image of a project without cover becomes its cover.
    """
    image = await read_upload(file, fallback_name="image")
    return PortfolioService.add_image(project_id, image, caption=caption, actor=admin.as_actor())


@router.patch("/images/{image_id}", response_model=ProjectImage)
async def update_project_image(
    image_id: Annotated[str, Path(description="Image id")],
    data: ProjectImageUpdate,
    admin: AdminDep,
):
    return PortfolioService.update_image(image_id, data, actor=admin.as_actor())


@router.put("/projects/{project_id}/images/order", response_model=list[ProjectImage])
async def reorder_project_images(
    project_id: Annotated[str, Path(description="Project id")],
    request: ImageOrderRequest,
    admin: AdminDep,
):
    """
    Store a new gallery order.

    image_ids must contain every image of the project exactly once.
    """
    return PortfolioService.reorder_images(project_id, request.image_ids, actor=admin.as_actor())


@router.delete("/images/{image_id}", response_model=OperationResult)
async def delete_project_image(
    image_id: Annotated[str, Path(description="Image id")],
    admin: AdminDep,
):
    PortfolioService.delete_image(image_id, actor=admin.as_actor())
    return OperationResult(message="Bild gelöscht.", affected_ids=[image_id])


@router.put("/projects/{project_id}/cover", response_model=PortfolioProject)
async def set_project_cover(
    project_id: Annotated[str, Path(description="Project id")],
    request: CoverRequest,
    admin: AdminDep,
):
    return PortfolioService.set_cover(project_id, request.image_id, actor=admin.as_actor())


# =============================================================================
# Overview Page Settings
# =============================================================================

@router.get("/settings", response_model=PortfolioSettings | None)
async def get_portfolio_settings(admin: AdminDep):
    return PortfolioService.get_settings()


@router.put("/settings", response_model=PortfolioSettings)
async def update_portfolio_settings(data: PortfolioSettingsUpdate, admin: AdminDep):
    """Save the hero texts of the overview page."""
    return PortfolioService.update_settings(data, actor=admin.as_actor())


@router.post("/settings/background", response_model=PortfolioSettings)
async def upload_portfolio_background(
    file: Annotated[UploadFile, File(description="Background image")],
    admin: AdminDep,
):
    """Replace the background image; the previous file is removed."""
    image = await read_upload(file, fallback_name="background")
    return PortfolioService.upload_background(image, actor=admin.as_actor())
