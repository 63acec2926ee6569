"""
Application database model.

Represents one candidate's submission from the recruiting landing page plus the
triage fields admins maintain while working through the pipeline.
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, BigInteger, DateTime, Uuid
from recruiting.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationStatus(str, enum.Enum):
    """
    Recruiting triage status.

    NEW -> CONTACTED -> SCHEDULED -> INTERVIEWED -> HIRED
                                                 -> REJECTED

    The arrows show the usual progression only; which moves are permitted is
    decided by recruiting.services.lifecycle.
    """
    NEW = "new"                  # Submitted, nobody has reached out yet
    CONTACTED = "contacted"      # Recruiter reached out (e.g. sent a Calendly link)
    SCHEDULED = "scheduled"      # Interview booked
    INTERVIEWED = "interviewed"  # Interview held, decision pending
    HIRED = "hired"
    REJECTED = "rejected"


VIDEO_FIELDS = ("video_url", "video_filename", "video_size", "video_uploaded_at")


class Application(Base):
    """
    A single application submitted through the landing page form.

    Status is stored as plain text; the admin API validates every record
    against the status enum and the all-or-nothing video rule before
    returning it.
    """
    __tablename__ = "applications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Candidate-supplied fields (all required at submission)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=False)

    # Triage fields (admin-maintained)
    status = Column(String(32), nullable=False, default=ApplicationStatus.NEW.value, index=True)
    notes = Column(Text, nullable=True)

    # Optional video introduction - set together or not at all
    video_url = Column(String, nullable=True)
    video_filename = Column(String, nullable=True)
    video_size = Column(BigInteger, nullable=True)
    video_uploaded_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def has_video(self) -> bool:
        return self.video_url is not None

    def __repr__(self):
        return f"<Application(id={self.id}, email='{self.email}', status='{self.status}')>"
