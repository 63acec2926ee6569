"""
CRUD operations for the Application model.

The admin dashboard only ever lists, reads and edits triage fields; the
landing page only creates. Nothing here deletes.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from recruiting.models.application import Application, ApplicationStatus
from recruiting.schemas.application import ApplicationSubmission

logger = logging.getLogger(__name__)


def create(db: Session, submission: ApplicationSubmission) -> Application:
    """
    Insert a new application with status "new".

    Video metadata is copied only when video_url is present, so a record
    either carries all four video fields or none of them.

    Args:
        db: Database session
        submission: Validated form payload

    Returns:
        Created Application instance with id
    """
    db_application = Application(
        name=submission.name,
        phone=submission.phone,
        email=submission.email,
        message=submission.message,
        status=ApplicationStatus.NEW.value,
    )

    if submission.has_video:
        db_application.video_url = submission.video_url
        db_application.video_filename = submission.video_filename or submission.video_url.rsplit("/", 1)[-1]
        db_application.video_size = submission.video_size if submission.video_size is not None else 0
        db_application.video_uploaded_at = submission.video_uploaded_at or datetime.now(timezone.utc)

    db.add(db_application)
    db.commit()
    db.refresh(db_application)

    return db_application


def get_by_id(db: Session, application_id: UUID) -> Optional[Application]:
    return db.query(Application).filter(Application.id == application_id).first()


def list_all(db: Session) -> List[Application]:
    """
    Retrieve every application, newest first.

    No pagination: the dashboard filters the full list in memory.
    """
    return db.query(Application).order_by(Application.created_at.desc()).all()


def update_triage(
    db: Session,
    application_id: UUID,
    status: ApplicationStatus,
    notes: Optional[str]
) -> Optional[Application]:
    """
    Update exactly the status and notes of an application.

    Concurrent edits are last-write-wins.

    Returns:
        Updated Application instance if found, None otherwise (nothing is written)
    """
    application = get_by_id(db, application_id)
    if not application:
        return None

    application.status = ApplicationStatus(status).value
    application.notes = notes

    db.commit()
    db.refresh(application)

    return application
