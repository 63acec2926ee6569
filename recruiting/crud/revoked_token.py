"""
CRUD operations for revoked session tokens.

A revoked jti only matters until the token would have expired anyway, so
rows past their expires_at are purged whenever a new revocation is written.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session
from recruiting.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)


def purge_expired(db: Session, now: Optional[datetime] = None) -> int:
    """
    Delete revocations whose token has expired. Does not commit.

    Returns:
        Number of rows deleted
    """
    now = now or datetime.now(timezone.utc)
    deleted = (
        db.query(RevokedToken)
        .filter(RevokedToken.expires_at.isnot(None), RevokedToken.expires_at < now)
        .delete(synchronize_session=False)
    )
    if deleted:
        logger.info(f"Purged {deleted} expired token revocation(s)")
    return deleted


def revoke(db: Session, jti: str, expires_at: Optional[datetime]) -> RevokedToken:
    """Record a revoked jti and drop revocations that are no longer needed."""
    purge_expired(db)

    revoked = RevokedToken(jti=jti, expires_at=expires_at)
    db.add(revoked)
    db.commit()

    return revoked
