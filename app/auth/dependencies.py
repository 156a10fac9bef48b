# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for the admin gate.
#
# Usage:
#   from app.auth import require_admin
#
#   router = APIRouter(dependencies=[Depends(require_admin)])
# =============================================================================

from fastapi import Request

from app.auth.session import AdminSession
from app.exceptions import AuthenticationError


def get_admin_session(request: Request) -> AdminSession:
    """Return the admin session of the running application."""
    return request.app.state.services.admin_session


def require_admin(request: Request) -> None:
    """
    Reject the request unless the admin is signed in.

    Raises:
        AuthenticationError: 401 when signed out
    """
    if not get_admin_session(request).authenticated:
        raise AuthenticationError("Admin sign-in required")
