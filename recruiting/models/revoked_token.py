"""
Revoked JWT identifiers.

Sign-out stores the token's jti here so the token stops working before its
natural expiry.
"""

from sqlalchemy import Column, String, DateTime
from recruiting.core.database import Base
from recruiting.models.application import utcnow


class RevokedToken(Base):
    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    revoked_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at = Column(DateTime(timezone=True), nullable=True)  # Safe to purge after this
