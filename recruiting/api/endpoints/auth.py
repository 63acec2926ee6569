"""
Admin authentication endpoints and the route gate.

- POST /login: sign in with email/password and receive a JWT
- POST /logout: revoke the presented JWT
- GET /session: current identity and is_admin flag (anonymous allowed)
- GET /route: gate decision for a path given the current session
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from recruiting.core.database import get_db
from recruiting.core.deps import get_current_user, get_optional_user, security
from recruiting.core.security import create_admin_token, decode_token, token_expiry, verify_password
from recruiting.core.session_gate import resolve_route
from recruiting.crud import revoked_token as revoked_token_crud
from recruiting.models.admin_user import AdminUser
from recruiting.schemas.auth import AdminLoginRequest, RouteDecisionResponse, SessionResponse, TokenResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
def login(
    request: AdminLoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate an admin and return an access token.

    Updates last_login_at on success.
    """
    user = db.query(AdminUser).filter(AdminUser.email == request.email).first()
    if not user or not verify_password(request.password, user.hashed_password):
        logger.warning(f"Failed sign-in attempt for {request.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive. Please contact support."
        )

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()

    logger.info(f"Admin signed in: {user.email}")

    access_token, expires_in = create_admin_token(user.id, user.is_admin)
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=expires_in,
        is_admin=user.is_admin,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    user: AdminUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Sign out by revoking the current token until it would have expired."""
    payload = decode_token(credentials.credentials)
    revoked_token_crud.revoke(db, payload["jti"], token_expiry(payload))

    logger.info(f"Admin signed out: {user.email}")


@router.get("/session", response_model=SessionResponse)
def get_session(user: Optional[AdminUser] = Depends(get_optional_user)):
    """Who is signed in, if anyone."""
    if user is None:
        return SessionResponse(authenticated=False, is_admin=False)

    return SessionResponse(
        authenticated=True,
        is_admin=user.is_admin,
        email=user.email,
        full_name=user.full_name,
    )


@router.get("/route", response_model=RouteDecisionResponse)
def get_route_decision(
    path: str = Query(..., description="Path the browser is navigating to"),
    user: Optional[AdminUser] = Depends(get_optional_user)
):
    """
    Gate decision for a navigation.

    /admin needs an admin session (otherwise redirect to /login), /login
    redirects admins to /admin, everything else is the public page.
    """
    is_admin = bool(user and user.is_admin)
    decision = resolve_route(path, is_admin)
    return RouteDecisionResponse(path=path, view=decision.view, redirect_to=decision.redirect_to)
