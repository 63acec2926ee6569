"""
Object storage abstraction layer supporting both local filesystem and AWS S3.

Application videos are written once under a generated key and served from a
stable public URL. Backends never overwrite an existing key: a collision is
reported as StorageKeyExistsError instead of silently replacing the object.
"""

import logging
import os
import shutil
from typing import BinaryIO
import boto3
from botocore.exceptions import ClientError, BotoCoreError

from recruiting.core.config import Settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage backend fails to store or look up an object."""


class StorageKeyExistsError(StorageError):
    """Raised when an upload targets a key that already exists."""


class StorageBackend:
    """Abstract base class for storage backends"""

    def upload_file(self, key: str, file: BinaryIO, content_type: str) -> str:
        """Store file under key and return its public URL"""
        raise NotImplementedError

    def file_exists(self, key: str) -> bool:
        """Check if an object exists"""
        raise NotImplementedError

    def public_url(self, key: str) -> str:
        raise NotImplementedError

    def check_access(self) -> None:
        """Raise if the backend cannot currently accept uploads"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend (development)"""

    def __init__(self, base_dir: str = "uploads", base_url: str = "http://localhost:8000"):
        self.base_dir = base_dir
        self.base_url = base_url.rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    def upload_file(self, key: str, file: BinaryIO, content_type: str) -> str:
        """Save file to the uploads directory; mode "xb" refuses to overwrite"""
        file_path = os.path.join(self.base_dir, key)

        try:
            with open(file_path, "xb") as buffer:
                shutil.copyfileobj(file, buffer)
        except FileExistsError:
            raise StorageKeyExistsError(f"Object already exists: {key}")
        except OSError as e:
            logger.error(f"Error writing {file_path}: {e}")
            raise StorageError(f"Failed to store file locally: {e}") from e

        return self.public_url(key)

    def file_exists(self, key: str) -> bool:
        return os.path.exists(os.path.join(self.base_dir, key))

    def check_access(self) -> None:
        if not os.access(self.base_dir, os.W_OK):
            raise StorageError(f"Upload directory {self.base_dir} is not writable")

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/uploads/{key}"


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self, settings: Settings, s3_client=None):
        self.bucket_name = settings.S3_BUCKET_NAME
        self.region = settings.AWS_REGION
        self.public_base_url = settings.S3_PUBLIC_BASE_URL.rstrip("/")

        if s3_client is not None:
            self.s3_client = s3_client
        # If AWS_ACCESS_KEY_ID is not set, boto3 will use IAM roles (for EC2/ECS)
        elif settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION
            )
        else:
            self.s3_client = boto3.client('s3', region_name=settings.AWS_REGION)

    def upload_file(self, key: str, file: BinaryIO, content_type: str) -> str:
        """Upload file to S3 with a conditional write and return its public URL"""
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file,
                ContentType=content_type,
                CacheControl="max-age=3600",
                IfNoneMatch="*",  # Reject instead of overwriting an existing key
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            if error_code in ("PreconditionFailed", "ConditionalRequestConflict"):
                raise StorageKeyExistsError(f"Object already exists: {key}") from e
            logger.error(f"Error uploading {key} to S3: {e}")
            raise StorageError(f"Failed to upload file to S3: {e}") from e
        except BotoCoreError as e:
            logger.error(f"AWS BotoCoreError uploading {key}: {e}")
            raise StorageError(f"Failed to upload file to S3: {e}") from e

        return self.public_url(key)

    def file_exists(self, key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError:
            return False

    def check_access(self) -> None:
        """Raise if the bucket cannot be listed (used by the health check)"""
        self.s3_client.list_objects_v2(Bucket=self.bucket_name, MaxKeys=1)

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"


def build_storage(settings: Settings) -> StorageBackend:
    """Build the storage backend selected by USE_S3"""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage(settings)
    return LocalStorage(base_dir=settings.UPLOAD_DIR, base_url=settings.PUBLIC_BASE_URL)
