"""
Document upload: required fields, staging, allow-list, remote storage and
the database record, in that order.
"""

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import StorageError, ValidationError
from app.core.logging_config import get_logger
from app.models.document import Document
from app.models.user import User
from app.services.document_store import create_document
from app.services.file_validator import validate_upload
from app.services.storage_service import StorageUploadError
from app.services.upload_staging import staged_upload

logger = get_logger(__name__)

UPLOAD_FAILED = "Failed to upload file. Please try again."
SAVE_FAILED = "Failed to save file. Please try again."


def _clean(value: str | None) -> str:
    return value.strip() if value else ""


async def upload_document(
    db: Session,
    storage,
    *,
    title: str | None,
    description: str | None,
    subject: str | None,
    upload: UploadFile | None,
    owner: User,
) -> Document:
    """
    Store an uploaded study file and record it.

    Raises:
        ValidationError: missing title/subject/file or disallowed type
        PayloadTooLargeError: file over the configured size limit
        StorageError: remote upload or record write failed
    """
    title, subject, description = _clean(title), _clean(subject), _clean(description)

    # Cheapest checks first: nothing touches disk or network before these pass
    if not title or not subject:
        raise ValidationError("Please provide title and subject")
    if upload is None or not upload.filename:
        raise ValidationError("Please upload a file")

    async with staged_upload(upload) as staged:
        file_type = validate_upload(staged)

        try:
            # boto3 transfers are blocking; keep them off the event loop
            stored = await run_in_threadpool(
                storage.upload,
                staged.path,
                folder=settings.storage_folder,
                content_type=staged.content_type,
                filename=staged.original_filename,
            )
        except StorageUploadError as e:
            logger.error(f"Upload of {staged.original_filename!r} failed for user {owner.id}: {e}")
            raise StorageError(UPLOAD_FAILED) from e

    try:
        document = create_document(
            db,
            title=title,
            description=description,
            subject=subject,
            file_url=stored.url,
            storage_id=stored.storage_id,
            file_type=file_type,
            owner_id=owner.id,
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Saving document record failed, removing object {stored.storage_id}: {e}")
        try:
            await run_in_threadpool(storage.delete, stored.storage_id)
        except StorageUploadError:
            logger.error(f"Orphaned object left in storage: {stored.storage_id}")
        raise StorageError(SAVE_FAILED) from e

    logger.info(
        f"Document created | id={document.id} | type={document.file_type} | owner={owner.id}"
    )
    return document
