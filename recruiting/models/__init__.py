"""
Database models package.
"""

from recruiting.models.application import Application, ApplicationStatus
from recruiting.models.admin_user import AdminUser
from recruiting.models.revoked_token import RevokedToken

__all__ = ["Application", "ApplicationStatus", "AdminUser", "RevokedToken"]
