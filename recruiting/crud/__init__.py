"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from recruiting.crud import application, revoked_token

__all__ = ["application", "revoked_token"]
