"""
Admin account model.

Only admins sign in to this system; candidates never have accounts. Accounts
are provisioned with create_admin.py.
"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from recruiting.core.database import Base
from recruiting.models.application import utcnow


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Authentication credentials
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    full_name = Column(String, nullable=True)

    # Account status
    is_active = Column(Boolean, default=True, nullable=False)
    is_admin = Column(Boolean, default=True, nullable=False)  # Gate for the /admin view

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<AdminUser(id={self.id}, email='{self.email}', is_admin={self.is_admin})>"
