"""
Durable object storage for uploaded study files.

Works against AWS S3 or any S3-compatible endpoint (Cloudflare R2, MinIO)
through boto3.
"""

import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import boto3
from botocore.client import Config
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.logging_config import get_logger
from app.services.upload_staging import remove_staged_file

logger = get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class StorageUploadError(Exception):
    """The remote store refused the object or could not be reached."""


@dataclass
class StoredObject:
    url: str
    storage_id: str


def object_key(folder: str, filename: str) -> str:
    """Build a unique, URL-safe key under ``folder``."""
    base = _UNSAFE_KEY_CHARS.sub("_", Path(filename).name).strip("._") or "file"
    return f"{folder.strip('/')}/{uuid.uuid4().hex}-{base}"


def create_s3_client():
    """Create a boto3 S3 client from settings."""
    if not settings.s3_bucket:
        logger.error("Object storage bucket not configured")
        raise ValueError("S3_BUCKET not configured")
    session = boto3.session.Session()
    return session.client(
        "s3",
        endpoint_url=settings.s3_endpoint_url or None,
        region_name=settings.s3_region or None,
        aws_access_key_id=settings.s3_access_key_id or None,
        aws_secret_access_key=settings.s3_secret_access_key or None,
        config=Config(signature_version="s3v4"),
    )


class S3Storage:
    """
    Bucket-backed store. The boto3 client is created on first use so a
    misconfigured deployment fails the upload, not application startup.
    """

    def __init__(self, bucket: str, client=None, public_base_url: str = "", region: str = ""):
        self.bucket = bucket
        self._client = client
        self.public_base_url = public_base_url.rstrip("/")
        self.region = region

    @property
    def client(self):
        if self._client is None:
            self._client = create_s3_client()
        return self._client

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(
        self,
        local_path: str | Path,
        folder: str | None = None,
        content_type: str | None = None,
        filename: str | None = None,
    ) -> StoredObject:
        """
        Upload a local file and delete it afterwards, whatever the outcome.

        Args:
            local_path: Path of the staged file
            folder: Logical grouping used as key prefix (defaults to settings.storage_folder)
            content_type: Media type recorded on the object
            filename: Original filename used in the key (defaults to the local name)

        Returns:
            StoredObject with the public URL and the object key

        Raises:
            StorageUploadError: if the upload failed
        """
        key = object_key(folder or settings.storage_folder, filename or str(local_path))
        extra_args = {"ContentType": content_type} if content_type else None
        try:
            self.client.upload_file(str(local_path), self.bucket, key, ExtraArgs=extra_args)
        except (Boto3Error, BotoCoreError, ClientError, OSError, ValueError) as e:
            logger.error(f"Upload to bucket {self.bucket!r} failed | key={key} | error={e}")
            raise StorageUploadError(str(e)) from e
        finally:
            remove_staged_file(local_path)

        logger.info(f"Uploaded object | bucket={self.bucket} | key={key}")
        return StoredObject(url=self.public_url(key), storage_id=key)

    def delete(self, storage_id: str) -> None:
        """Remove an object. Deleting a missing key is not an error on S3."""
        try:
            self.client.delete_object(Bucket=self.bucket, Key=storage_id)
        except (Boto3Error, BotoCoreError, ClientError, ValueError) as e:
            logger.error(f"Delete from bucket {self.bucket!r} failed | key={storage_id} | error={e}")
            raise StorageUploadError(str(e)) from e
        logger.info(f"Deleted object | bucket={self.bucket} | key={storage_id}")


@lru_cache
def get_object_storage() -> S3Storage:
    """Process-wide storage (boto3 clients are thread-safe)."""
    return S3Storage(
        bucket=settings.s3_bucket,
        public_base_url=settings.s3_public_base_url,
        region=settings.s3_region,
    )
