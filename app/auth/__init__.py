# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth.
#
# Usage:
#   from app.auth import get_current_admin, AdminUser
#
#   @router.get("/admin-only")
#   async def admin_only(admin: AdminUser = Depends(get_current_admin)):
#       return {"role": admin.role}
# =============================================================================

from app.auth.dependencies import get_current_admin, get_current_user, get_current_user_optional
from app.auth.models import AdminUser, AuthUser, UserResponse

__all__ = [
    "get_current_admin",
    "get_current_user",
    "get_current_user_optional",
    "AdminUser",
    "AuthUser",
    "UserResponse",
]
