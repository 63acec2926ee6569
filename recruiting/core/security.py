"""
Password hashing and admin session tokens.

Admin sessions are HS256 JWTs. Each token carries a unique `jti` so sign-out
can revoke that one token (see RevokedToken) while other sessions of the same
admin stay valid.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from jose import jwt
from passlib.context import CryptContext
from recruiting.core.config import settings

# Password hashing context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    # bcrypt only uses the first 72 bytes
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_password_bytes(plain_password), hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(_password_bytes(password))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token.

    Args:
        data: Claims to encode (typically {"sub": admin_id, "is_admin": True})
        expires_delta: Lifetime (default: ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT with exp and a fresh jti added
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = data.copy()
    to_encode.update({
        "exp": datetime.now(timezone.utc) + lifetime,
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_admin_token(admin_id: uuid.UUID, is_admin: bool) -> Tuple[str, int]:
    """Session token for a signed-in account, plus its lifetime in seconds."""
    lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token({"sub": str(admin_id), "is_admin": is_admin}, expires_delta=lifetime)
    return token, int(lifetime.total_seconds())


def decode_token(token: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        JWTError: If the token is malformed, badly signed or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def token_expiry(payload: dict) -> Optional[datetime]:
    """Expiry of a decoded token; revoked ids can be purged after this."""
    if "exp" not in payload:
        return None
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
