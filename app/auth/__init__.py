# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Single-credential admin gate with an in-memory session flag.
#
# Usage:
#   from app.auth import require_admin
#
#   @router.get("/protected", dependencies=[Depends(require_admin)])
#   async def protected():
#       ...
# =============================================================================

from app.auth.dependencies import get_admin_session, require_admin
from app.auth.models import LoginRequest, SessionResponse
from app.auth.session import AdminSession

__all__ = [
    "AdminSession",
    "LoginRequest",
    "SessionResponse",
    "get_admin_session",
    "require_admin",
]
