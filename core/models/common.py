# =============================================================================
# core/models/common.py - Shared Schemas
# =============================================================================
# Small models shared by several services:
# - UploadedImage: an image file received from the admin UI
# - Actor: who performed an action (for the activity log)
# - OperationResult: generic acknowledgement for deletes and toggles
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class UploadedImage(BaseModel):
    """
    An image file handed from a route to the service layer.

    Routes read FastAPI's UploadFile into this model so services never
    depend on the web framework.
    """

    filename: str = Field(..., min_length=1, description="Original file name")
    content: bytes = Field(..., description="Raw file bytes")
    content_type: str = Field(default="application/octet-stream")

    @property
    def size(self) -> int:
        return len(self.content)


class Actor(BaseModel):
    """The signed-in user an action is attributed to."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    email: str | None = None


class OperationResult(BaseModel):
    """Acknowledgement returned by delete/toggle endpoints."""

    success: bool = True
    message: str
    affected_ids: list[str] = Field(default_factory=list)
