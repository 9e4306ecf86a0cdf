"""
Local staging of multipart uploads.

The incoming file is streamed to ``settings.upload_dir`` so it can be handed
to the object storage client by path. Whoever touches the staged file last
deletes it; ``staged_upload`` removes whatever is left on exit.
"""

import os
import random
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import PayloadTooLargeError
from app.core.logging_config import get_logger

CHUNK_SIZE = 1024 * 1024

logger = get_logger(__name__)


@dataclass
class StagedFile:
    path: Path
    original_filename: str
    content_type: str
    size: int


def remove_staged_file(path: Path | str) -> bool:
    """Delete a staged file if it still exists. Returns True when a file was removed."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    logger.debug(f"Removed staged file {path}")
    return True


def _staged_name(original_filename: str) -> str:
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{unique_suffix}-{Path(original_filename).name}"


async def stage_upload(upload: UploadFile, max_bytes: int | None = None) -> StagedFile:
    """
    Stream an UploadFile to the upload directory.

    Raises:
        PayloadTooLargeError: if the file exceeds ``max_bytes``. The partial
            file is removed first.
    """
    if max_bytes is None:
        max_bytes = settings.max_upload_size_mb * 1024 * 1024

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / _staged_name(upload.filename or "upload")

    size = 0
    try:
        with open(path, "wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                size += len(chunk)
                if size > max_bytes:
                    raise PayloadTooLargeError(
                        f"File size exceeds maximum allowed size of {max_bytes // (1024 * 1024)} MB"
                    )
                await run_in_threadpool(out.write, chunk)
    except BaseException:
        remove_staged_file(path)
        raise

    logger.debug(f"Staged upload {upload.filename} -> {path} ({size} bytes)")
    return StagedFile(
        path=path,
        original_filename=upload.filename or "",
        content_type=upload.content_type or "",
        size=size,
    )


@asynccontextmanager
async def staged_upload(upload: UploadFile, max_bytes: int | None = None):
    """Stage ``upload`` for the duration of the block, then make sure it is gone."""
    staged = await stage_upload(upload, max_bytes=max_bytes)
    try:
        yield staged
    finally:
        if remove_staged_file(staged.path):
            logger.debug(f"Staged file {staged.path} was still present at request end")
