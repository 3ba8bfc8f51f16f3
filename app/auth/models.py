# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from uuid import UUID
from typing import Optional

from core.models.common import Actor


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None

    def as_actor(self) -> Actor:
        """The user as recorded in the activity log."""
        return Actor(id=str(self.id), email=self.email)


class AdminUser(AuthUser):
    """
    Authenticated user with a row in the adminUsers table.

    Only admins may use the back-office routes.
    """
    role: str


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    """
    Session returned after a successful password sign-in.

    role is None when the user has no admin entry.
    """
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None


class PasswordResetRequest(BaseModel):
    email: str


class UserResponse(BaseModel):
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    is_admin: bool = False
