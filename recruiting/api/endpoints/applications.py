"""
Admin API for reviewing and triaging applications.

All endpoints require an admin account. The list endpoint returns the whole
table filtered and sorted in memory; there is no pagination.
"""

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recruiting.core.database import get_db
from recruiting.core.deps import get_current_admin, get_transition_policy
from recruiting.crud import application as application_crud
from recruiting.models.admin_user import AdminUser
from recruiting.models.application import Application, ApplicationStatus
from recruiting.schemas.application import (
    ApplicationDetail,
    ApplicationListResponse,
    ApplicationRecord,
    ApplicationStatsResponse,
    ApplicationUpdateRequest,
)
from recruiting.services.application_filters import ALL_STATUSES, SortOrder, filter_and_sort
from recruiting.services.lifecycle import StatusTransitionError, TransitionPolicy, check_transition

router = APIRouter(prefix="/applications", tags=["Applications"])
logger = logging.getLogger(__name__)


def to_records(applications: List[Application]) -> List[ApplicationRecord]:
    """
    Validate stored rows at the API boundary.

    Rows that do not fit the schema (unknown status, partial video fields)
    are logged and left out instead of being shown half-broken.
    """
    records = []
    for application in applications:
        try:
            records.append(ApplicationRecord.model_validate(application))
        except ValidationError as e:
            logger.error(f"Skipping malformed application {application.id}: {e.error_count()} validation error(s)")
    return records


@router.get("", response_model=ApplicationListResponse)
def list_applications(
    search: str = Query("", description="Matches name, email, message (case-insensitive) or phone"),
    status_filter: str = Query(ALL_STATUSES, alias="status", description="A status value or 'all'"),
    sort: SortOrder = Query(SortOrder.NEWEST, description="newest, oldest or name"),
    db: Session = Depends(get_db),
    admin_user: AdminUser = Depends(get_current_admin)
):
    """
    List applications for the dashboard.

    `total` counts every valid application, `count` the ones left after the
    search and status filter.
    """
    try:
        records = to_records(application_crud.list_all(db))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching applications: {e}")
        raise HTTPException(status_code=500, detail="Failed to load applications")

    try:
        filtered = filter_and_sort(records, search=search, status=status_filter, sort_by=sort)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown status filter '{status_filter}'"
        )

    return ApplicationListResponse(total=len(records), count=len(filtered), applications=filtered)


@router.get("/stats", response_model=ApplicationStatsResponse)
def get_application_stats(
    db: Session = Depends(get_db),
    admin_user: AdminUser = Depends(get_current_admin)
):
    """
    Number of applications in each status (statuses with none report 0).

    Counts the same validated records as the list endpoint, so `total` here
    equals the list's `total`.
    """
    try:
        records = to_records(application_crud.list_all(db))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching applications for stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to load applications")

    by_status = {s: 0 for s in ApplicationStatus}
    for record in records:
        by_status[record.status] += 1
    return ApplicationStatsResponse(total=len(records), by_status=by_status)


@router.get("/{application_id}", response_model=ApplicationDetail)
def get_application(
    application_id: UUID,
    db: Session = Depends(get_db),
    admin_user: AdminUser = Depends(get_current_admin)
):
    application = application_crud.get_by_id(db, application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    try:
        return ApplicationDetail.model_validate(application)
    except ValidationError as e:
        logger.error(f"Application {application_id} is malformed: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Application record is malformed"
        )


@router.patch("/{application_id}", response_model=ApplicationDetail)
def update_application(
    application_id: UUID,
    request: ApplicationUpdateRequest,
    db: Session = Depends(get_db),
    policy: TransitionPolicy = Depends(get_transition_policy),
    admin_user: AdminUser = Depends(get_current_admin)
):
    """
    Save triage changes (status and notes) for one application.

    Last write wins if two admins edit the same record.

    Raises:
        HTTPException 404: Unknown application (nothing is written)
        HTTPException 409: Status change forbidden by the lifecycle policy
    """
    application = application_crud.get_by_id(db, application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    previous_status = application.status
    try:
        check_transition(previous_status, request.status, policy)
    except StatusTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError:
        # Stored status is outside the enum; let the admin repair it
        logger.warning(f"Application {application_id} had unknown status '{previous_status}'")

    try:
        updated = application_crud.update_triage(db, application_id, request.status, request.notes)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating application {application_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save changes")

    if updated is None:
        raise HTTPException(status_code=404, detail="Application not found")

    logger.info(
        f"Admin {admin_user.email} updated application {application_id}: "
        f"{previous_status} -> {updated.status}"
    )
    return ApplicationDetail.model_validate(updated)
