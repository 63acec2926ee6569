"""
Pydantic schemas for admin authentication and the session gate.
"""

from typing import Optional
from pydantic import BaseModel, EmailStr


class AdminLoginRequest(BaseModel):
    """Request schema for admin sign-in."""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    is_admin: bool


class SessionResponse(BaseModel):
    """Current session identity (unauthenticated sessions are allowed)."""
    authenticated: bool
    is_admin: bool
    email: Optional[str] = None
    full_name: Optional[str] = None


class RouteDecisionResponse(BaseModel):
    path: str
    view: str
    redirect_to: Optional[str] = None
