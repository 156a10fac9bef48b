# =============================================================================
# app/auth/routes.py - Admin Sign-in Endpoints
# =============================================================================
# POST /login, POST /logout and GET /session under /api/v1/admin.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_admin_session
from app.auth.models import LoginRequest, SessionResponse
from app.auth.session import AdminSession

router = APIRouter()


@router.post("/login", response_model=SessionResponse)
async def login(
    credentials: LoginRequest,
    session: AdminSession = Depends(get_admin_session),
):
    """
    Sign the admin in.

    Returns 401 on wrong credentials.
    """
    session.sign_in(credentials.email, credentials.password)
    return SessionResponse(authenticated=True)


@router.post("/logout", response_model=SessionResponse)
async def logout(session: AdminSession = Depends(get_admin_session)):
    """Sign the admin out."""
    session.sign_out()
    return SessionResponse(authenticated=False)


@router.get("/session", response_model=SessionResponse)
async def get_session(session: AdminSession = Depends(get_admin_session)):
    """Report whether the admin is signed in."""
    return SessionResponse(authenticated=session.authenticated)
