"""
Public endpoints called by the recruiting landing page.

- /upload-video: validate and store an optional video introduction
- /submit-application: create the application record

Both answer CORS preflight themselves with permissive headers, since the
landing page may be hosted on any origin.
"""

import logging
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from recruiting.core.database import get_db
from recruiting.core.deps import get_notifier, get_storage
from recruiting.core.storage import StorageBackend, StorageError
from recruiting.crud import application as application_crud
from recruiting.schemas.application import ApplicationSubmission, VideoUploadResponse
from recruiting.services.notifications import NotificationDispatcher, build_notification_payload
from recruiting.services.video_upload import VideoValidationError, upload_video

router = APIRouter(tags=["Landing Page"])
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

REQUIRED_FIELDS = ("name", "phone", "email", "message")


def _json(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


def _preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route("/submit-application", methods=ALL_METHODS)
async def submit_application(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    Create an application from the landing page form.

    Flow:
    1. OPTIONS -> 200 with CORS headers; other non-POST methods -> 405
    2. Reject payloads missing name, phone, email or message (400)
    3. Insert the record with status="new" (500 if the insert fails)
    4. Queue the notification email after the response is sent; its outcome
       never changes the response
    """
    if request.method == "OPTIONS":
        return _preflight()

    if request.method != "POST":
        return _json(405, {"error": "Method not allowed"})

    try:
        data = await request.json()
    except ValueError as e:
        logger.error(f"Unexpected error reading application payload: {e}")
        return _json(500, {"error": "Internal server error"})

    if not isinstance(data, dict):
        logger.error(f"Unexpected application payload type: {type(data).__name__}")
        return _json(500, {"error": "Internal server error"})

    if any(not data.get(field) for field in REQUIRED_FIELDS):
        return _json(400, {"error": "Missing required fields"})

    try:
        submission = ApplicationSubmission.model_validate(data)
    except ValidationError as e:
        logger.info(f"Rejected application payload: {e.error_count()} validation error(s)")
        return _json(400, {"error": "Invalid application data"})

    try:
        application = application_crud.create(db, submission)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error inserting application: {e}")
        return _json(500, {"error": "Failed to submit application"})

    logger.info(
        f"New application submitted: {application.id} ({application.email}, video={application.has_video})"
    )

    background_tasks.add_task(notifier.dispatch_new_application, build_notification_payload(application))

    return _json(200, {
        "success": True,
        "message": "Application submitted successfully",
        "applicationId": str(application.id),
    })


@router.api_route("/upload-video", methods=["POST", "OPTIONS"])
async def upload_application_video(
    request: Request,
    storage: StorageBackend = Depends(get_storage),
):
    """
    Store a candidate's video introduction (multipart field "file").

    Size (max 100MB) and type (MP4, MOV, AVI, WebM) are checked before the
    storage backend is called. The returned metadata is sent back with the
    application form.

    Returns:
        dict: url, filename, size, uploaded_at
    """
    if request.method == "OPTIONS":
        return _preflight()

    form = await request.form()
    file = form.get("file")
    if not isinstance(file, UploadFile) or not file.filename:
        return _json(400, {"error": "No video file provided"})

    size = file.size
    if size is None:
        file.file.seek(0, 2)
        size = file.file.tell()
        file.file.seek(0)

    try:
        result = await run_in_threadpool(
            upload_video, storage, file.file, file.filename, size, file.content_type
        )
    except VideoValidationError as e:
        return _json(400, {"error": str(e)})
    except StorageError as e:
        logger.error(f"Failed to upload video {file.filename}: {e}")
        return _json(500, {"error": "Failed to upload video"})
    finally:
        await file.close()

    body = VideoUploadResponse(
        url=result.url,
        filename=result.filename,
        size=result.size,
        uploaded_at=result.uploaded_at,
    )
    return _json(200, body.model_dump(mode="json"))
