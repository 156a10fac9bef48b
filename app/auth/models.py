# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the admin sign-in flow.
# =============================================================================

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials typed into the admin login form."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Whether the admin is currently signed in."""
    authenticated: bool
