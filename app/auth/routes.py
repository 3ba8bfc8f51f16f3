# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Password login for the back-office, password reset mails, logout and
# token checks. Sign-in goes through Supabase Auth with the anon client;
# the admin role comes from the adminUsers table.
# =============================================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import fetch_admin_role, get_current_user, get_current_user_optional
from app.auth.models import (
    AuthUser,
    LoginRequest,
    LoginResponse,
    PasswordResetRequest,
    UserResponse,
)
from app.config import settings
from app.exceptions import LoginFailedError, SiteException
from core.models.activity import LogContext
from core.models.common import Actor
from core.services.activity_log_service import ActivityLogService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest) -> LoginResponse:
    """
    Sign in with e-mail and password.

    The session is returned for non-admin users too; the back-office
    routes reject them with 403.

    Raises:
        401: Wrong credentials
    """
    auth_client = SupabaseClient.get_auth_client()

    try:
        result = auth_client.auth.sign_in_with_password({
            "email": request.email,
            "password": request.password,
        })
    except Exception as e:
        logger.warning(f"Login failed for {request.email}: {e}")
        ActivityLogService.log_action(
            "login_failed",
            actor=Actor(email=request.email),
            context=LogContext.PUBLIC,
            description="Fehlgeschlagener Login-Versuch.",
            metadata={"reason": str(e)},
        )
        raise LoginFailedError(str(e))

    user = result.user
    session = result.session
    if user is None or session is None:
        raise LoginFailedError("No session returned")

    actor = Actor(id=str(user.id), email=user.email or request.email)

    role = None
    try:
        role = fetch_admin_role(str(user.id))
    except SiteException as e:
        ActivityLogService.log_action(
            "load_admin_role_failed",
            actor=actor,
            metadata={"error": e.message},
        )

    if role is None:
        ActivityLogService.log_action("admin_role_missing", actor=actor)

    ActivityLogService.log_action(
        "login_success",
        actor=actor,
        context=LogContext.ADMIN if role else LogContext.PUBLIC,
        metadata={"role": role},
    )

    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user_id=actor.id,
        email=actor.email,
        role=role,
    )


@router.post("/password-reset", status_code=status.HTTP_202_ACCEPTED)
async def request_password_reset(request: PasswordResetRequest) -> dict:
    """
    Send a password reset mail.

    Always answers 202 so the endpoint does not reveal which addresses
    have an account.
    """
    auth_client = SupabaseClient.get_auth_client()
    options = {}
    if settings.PASSWORD_RESET_REDIRECT_URL:
        options["redirect_to"] = settings.PASSWORD_RESET_REDIRECT_URL

    try:
        auth_client.auth.reset_password_for_email(request.email, options)
        ActivityLogService.log_action(
            "password_reset_requested",
            actor=Actor(email=request.email),
            context=LogContext.PUBLIC,
        )
    except Exception as e:
        logger.warning(f"Password reset failed for {request.email}: {e}")
        ActivityLogService.log_action(
            "password_reset_failed",
            actor=Actor(email=request.email),
            context=LogContext.PUBLIC,
            metadata={"error": str(e)},
        )

    return {
        "accepted": True,
        "message": "Falls ein Konto existiert, wurde eine E-Mail zum Zurücksetzen versendet.",
    }


@router.post("/logout")
async def logout(
    user: Optional[AuthUser] = Depends(get_current_user_optional)
) -> dict:
    """
    Record a logout.

    Tokens are stateless; the client discards them.
    """
    if user:
        ActivityLogService.log_action("logout", actor=user.as_actor())
    return {"success": True}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current user with their admin role.

    Raises:
        401: If not authenticated
    """
    try:
        role = fetch_admin_role(str(user.id))
    except SiteException as e:
        logger.warning(f"Could not load admin role: {e.message}")
        role = None

    return UserResponse(id=user.id, email=user.email, role=role, is_admin=role is not None)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
