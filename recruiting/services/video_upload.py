"""
Candidate video uploads.

Validation happens before any bytes leave the process: oversized files and
unsupported formats are rejected without touching the storage backend.
Accepted files are stored under a generated key of the form
"<millisecond timestamp>-<random suffix>.<extension>".
"""

import logging
import re
import secrets
import string
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Optional

from recruiting.core.storage import StorageBackend

logger = logging.getLogger(__name__)

MAX_VIDEO_SIZE = 100 * 1024 * 1024  # 100 MiB
ALLOWED_VIDEO_TYPES = ("video/mp4", "video/quicktime", "video/x-msvideo", "video/webm")

_KEY_ALPHABET = string.ascii_lowercase + string.digits
_KEY_SUFFIX_LENGTH = 13


class VideoValidationError(ValueError):
    """Raised when a video file is too large or in an unsupported format."""


@dataclass
class VideoUploadResult:
    url: str
    filename: str
    size: int
    uploaded_at: datetime


def validate_video(filename: str, size: int, content_type: Optional[str]) -> None:
    """
    Check a candidate-selected video before upload.

    Raises:
        VideoValidationError: If the file exceeds 100MB or is not MP4/MOV/AVI/WebM
    """
    if size > MAX_VIDEO_SIZE:
        raise VideoValidationError("Video file size must be less than 100MB")

    if content_type not in ALLOWED_VIDEO_TYPES:
        raise VideoValidationError("Only MP4, MOV, AVI, and WebM video formats are allowed")


def generate_storage_key(filename: str, now_ms: Optional[int] = None) -> str:
    """
    Build a storage key that is unique in practice.

    Collisions are not impossible, only negligible; the storage backend still
    refuses to overwrite an existing key.
    """
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(_KEY_ALPHABET) for _ in range(_KEY_SUFFIX_LENGTH))
    # Keep only alphanumerics so the key can never contain a path separator
    extension = re.sub(r"[^A-Za-z0-9]", "", filename.rsplit(".", 1)[-1]) or "bin"
    return f"{timestamp}-{suffix}.{extension}"


def upload_video(
    storage: StorageBackend,
    file: BinaryIO,
    filename: str,
    size: int,
    content_type: Optional[str],
) -> VideoUploadResult:
    """
    Validate and store a candidate video.

    Args:
        storage: Backend that receives the bytes
        file: Readable binary file object
        filename: Original filename chosen by the candidate
        size: Size in bytes
        content_type: MIME type reported by the browser

    Returns:
        VideoUploadResult with the public URL, original filename and size

    Raises:
        VideoValidationError: Before any storage call, if the file is rejected
        StorageError: If the backend fails (not retried)
    """
    validate_video(filename, size, content_type)

    key = generate_storage_key(filename)
    url = storage.upload_file(key, file, content_type)
    logger.info(f"Stored application video {filename} ({format_file_size(size)}) as {key}")

    return VideoUploadResult(
        url=url,
        filename=filename,
        size=size,
        uploaded_at=datetime.now(timezone.utc),
    )


def format_file_size(num_bytes: int) -> str:
    """Human-readable size: 0 Bytes, 512 Bytes, 1.5 KB, 12.34 MB"""
    if num_bytes <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    value = float(num_bytes)
    for unit in units:
        if value < 1024 or unit == units[-1]:
            break
        value /= 1024
    value = round(value, 2)
    if value == int(value):
        value = int(value)
    return f"{value} {unit}"
