# =============================================================================
# app/routers/admin_homepage.py - Homepage Back-Office Endpoints
# =============================================================================
# Editors for the landing page: USP and benefit slots, the photographer
# introduction, the gallery and the customer reviews.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Path, UploadFile, status

from app.dependencies import AdminDep, read_upload
from core.models.common import OperationResult
from core.models.homepage import (
    SLOT_COUNT,
    ContentSlot,
    GalleryImage,
    GalleryImageUpdate,
    PhotographerIntro,
    PhotographerIntroUpdate,
    SlotKind,
    SlotSaveRequest,
)
from core.models.review import Review, ReviewCreate, ReviewUpdate
from core.services.homepage_service import HomepageService
from core.services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter()

SlotPosition = Annotated[int, Path(ge=1, le=SLOT_COUNT, description="Slot position 1..3")]


# =============================================================================
# USPs and Benefits
# =============================================================================

@router.get("/usps", response_model=list[ContentSlot])
async def list_usps(admin: AdminDep):
    return HomepageService.list_slots(SlotKind.USP)


@router.put("/usps/{display_order}", response_model=ContentSlot)
async def save_usp(display_order: SlotPosition, data: SlotSaveRequest, admin: AdminDep):
    return HomepageService.save_slot(
        SlotKind.USP, display_order, data.title, data.description, actor=admin.as_actor()
    )


@router.get("/benefits", response_model=list[ContentSlot])
async def list_benefits(admin: AdminDep):
    return HomepageService.list_slots(SlotKind.BENEFIT)


@router.put("/benefits/{display_order}", response_model=ContentSlot)
async def save_benefit(display_order: SlotPosition, data: SlotSaveRequest, admin: AdminDep):
    return HomepageService.save_slot(
        SlotKind.BENEFIT, display_order, data.title, data.description, actor=admin.as_actor()
    )


# =============================================================================
# Photographer Introduction
# =============================================================================

@router.get("/intro", response_model=PhotographerIntro | None)
async def get_intro(admin: AdminDep):
    """The stored introduction, or null while none was saved."""
    return HomepageService.get_intro()


@router.put("/intro", response_model=PhotographerIntro)
async def save_intro(data: PhotographerIntroUpdate, admin: AdminDep):
    return HomepageService.save_intro(
        data.heading, data.body, subheading=data.subheading, actor=admin.as_actor()
    )


# =============================================================================
# Gallery
# =============================================================================

@router.get("/gallery", response_model=list[GalleryImage])
async def list_gallery(admin: AdminDep):
    return HomepageService.list_gallery()


@router.post("/gallery", response_model=GalleryImage, status_code=status.HTTP_201_CREATED)
async def upload_gallery_image(
    file: Annotated[UploadFile, File(description="Gallery image")],
    alt_text: Annotated[str, Form()],
    admin: AdminDep,
):
    """Append an image to the homepage gallery."""
    image = await read_upload(file, fallback_name="gallery")
    return HomepageService.upload_gallery_image(image, alt_text, actor=admin.as_actor())


@router.patch("/gallery/{image_id}", response_model=GalleryImage)
async def update_gallery_image(
    image_id: Annotated[str, Path(description="Gallery image id")],
    data: GalleryImageUpdate,
    admin: AdminDep,
):
    return HomepageService.update_gallery_image(
        image_id, data.alt_text, data.display_order, actor=admin.as_actor()
    )


@router.delete("/gallery/{image_id}", response_model=OperationResult)
async def delete_gallery_image(
    image_id: Annotated[str, Path(description="Gallery image id")],
    admin: AdminDep,
):
    HomepageService.delete_gallery_image(image_id, actor=admin.as_actor())
    return OperationResult(message="Bild gelöscht.", affected_ids=[image_id])


# =============================================================================
# Reviews
# =============================================================================

@router.get("/reviews", response_model=list[Review])
async def list_reviews(admin: AdminDep):
    return ReviewService.list_reviews()


@router.post("/reviews", response_model=Review, status_code=status.HTTP_201_CREATED)
async def create_review(data: ReviewCreate, admin: AdminDep):
    """Add a review; rating is clamped to 1..5."""
    return ReviewService.create_review(data, actor=admin.as_actor())


@router.put("/reviews/{review_id}", response_model=Review)
async def update_review(
    review_id: Annotated[str, Path(description="Review id")],
    data: ReviewUpdate,
    admin: AdminDep,
):
    return ReviewService.update_review(review_id, data, actor=admin.as_actor())


@router.delete("/reviews/{review_id}", response_model=OperationResult)
async def delete_review(
    review_id: Annotated[str, Path(description="Review id")],
    admin: AdminDep,
):
    ReviewService.delete_review(review_id, actor=admin.as_actor())
    return OperationResult(message="Bewertung gelöscht.", affected_ids=[review_id])
