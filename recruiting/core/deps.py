"""
FastAPI dependencies for collaborators and admin authentication.

Collaborators (storage backend, notification dispatcher, lifecycle policy)
are built once by the application lifespan and exposed to requests through
the lifespan state. Tests replace them with app.dependency_overrides.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from recruiting.core.database import get_db
from recruiting.core.security import decode_token
from recruiting.core.storage import StorageBackend
from recruiting.models.admin_user import AdminUser
from recruiting.models.revoked_token import RevokedToken
from recruiting.services.lifecycle import TransitionPolicy
from recruiting.services.notifications import NotificationDispatcher

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_storage(request: Request) -> StorageBackend:
    return request.state.storage


def get_notifier(request: Request) -> NotificationDispatcher:
    return request.state.notifier


def get_transition_policy(request: Request) -> TransitionPolicy:
    return request.state.transition_policy


def _resolve_admin(token: str, db: Session) -> Optional[AdminUser]:
    """Return the active account behind a token, or None if the token is unusable."""
    try:
        payload = decode_token(token)
    except JWTError:
        return None

    user_id = payload.get("sub")
    jti = payload.get("jti")
    if user_id is None or jti is None:
        return None

    if db.query(RevokedToken).filter(RevokedToken.jti == jti).first():
        return None

    try:
        user = db.query(AdminUser).filter(AdminUser.id == UUID(user_id)).first()
    except ValueError:
        return None

    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> AdminUser:
    """
    Extract and validate the signed-in account from the JWT.

    Raises:
        HTTPException 401: If token is invalid, revoked, or the account is gone/inactive
    """
    user = _resolve_admin(credentials.credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_admin(
    user: AdminUser = Depends(get_current_user),
) -> AdminUser:
    """
    Require an account with is_admin set.

    Raises:
        HTTPException 403: If the account is not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db)
) -> Optional[AdminUser]:
    """
    Signed-in account if a valid token was sent, otherwise None.

    Used by the session and route-gate endpoints, which must answer for
    anonymous visitors too.
    """
    if not credentials:
        return None
    return _resolve_admin(credentials.credentials, db)
