"""
Pydantic schemas for Application API requests/responses.
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, computed_field, model_validator
from recruiting.models.application import ApplicationStatus, VIDEO_FIELDS
from recruiting.services.lifecycle import is_terminal
from recruiting.services.video_upload import format_file_size


class ApplicationSubmission(BaseModel):
    """Payload posted by the landing page form."""
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)

    # Present only when the candidate attached a video (see /upload-video)
    video_url: Optional[str] = None
    video_filename: Optional[str] = None
    video_size: Optional[int] = Field(None, ge=0)
    video_uploaded_at: Optional[datetime] = None

    @property
    def has_video(self) -> bool:
        return bool(self.video_url)


class ApplicationRecord(BaseModel):
    """
    An application as returned by the admin API.

    Every row read from the store passes through this model; rows with an
    unknown status or a partial set of video fields fail validation.
    """
    id: UUID
    name: str
    phone: str
    email: str
    message: Optional[str] = None
    status: ApplicationStatus
    notes: Optional[str] = None
    video_url: Optional[str] = None
    video_filename: Optional[str] = None
    video_size: Optional[int] = None
    video_uploaded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def check_video_fields(self):
        present = [getattr(self, field) is not None for field in VIDEO_FIELDS]
        if any(present) and not all(present):
            raise ValueError("video fields must be set together or not at all")
        return self

    @computed_field
    @property
    def has_notes(self) -> bool:
        return bool(self.notes)

    class Config:
        from_attributes = True


class ApplicationDetail(ApplicationRecord):
    """Single application with display helpers for the detail view."""

    @computed_field
    @property
    def video_size_display(self) -> Optional[str]:
        if self.video_size is None:
            return None
        return format_file_size(self.video_size)

    @computed_field
    @property
    def is_terminal(self) -> bool:
        """True for hired/rejected; the dashboard greys out status changes under the lock policy."""
        return is_terminal(self.status)


class ApplicationUpdateRequest(BaseModel):
    """Triage edit: only status and notes are mutable."""
    status: ApplicationStatus
    notes: Optional[str] = Field(None, description="Internal notes about the applicant")


class ApplicationListResponse(BaseModel):
    """Filtered/sorted applications plus the unfiltered total ("Showing count of total")."""
    total: int
    count: int
    applications: List[ApplicationRecord]


class ApplicationStatsResponse(BaseModel):
    total: int
    by_status: Dict[ApplicationStatus, int]


class VideoUploadResponse(BaseModel):
    url: str
    filename: str
    size: int
    uploaded_at: datetime
