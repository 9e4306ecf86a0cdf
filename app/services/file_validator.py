"""Allow-list check for uploaded study files."""

from pathlib import Path

from app.core.exceptions import ValidationError
from app.core.logging_config import get_logger
from app.models.document import FileType
from app.services.upload_staging import StagedFile, remove_staged_file

logger = get_logger(__name__)

PDF_TYPES = {"application/pdf"}
WORD_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
}
POWERPOINT_TYPES = {
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}

# extension -> (accepted media types, stored file type)
ALLOWED_UPLOADS = {
    "pdf": (PDF_TYPES, FileType.PDF),
    "docx": (WORD_TYPES, FileType.DOCX),
    "ppt": (POWERPOINT_TYPES, FileType.PPT),
    "pptx": (POWERPOINT_TYPES, FileType.PPT),
}

INVALID_TYPE_MESSAGE = "Invalid file type. Only PDF, DOCX, PPT, PPTX allowed"


def file_extension(filename: str) -> str:
    """Lower-cased extension without the dot, or "" when there is none."""
    return Path(filename).suffix.lower().lstrip(".")


def validate_upload(staged: StagedFile) -> str:
    """
    Check a staged upload against the allow-list.

    Returns the normalized file type ("pdf", "docx" or "ppt").

    Raises:
        ValidationError: extension or media type not allowed. The staged file
            has been deleted by the time this is raised.
    """
    ext = file_extension(staged.original_filename)
    media_type = (staged.content_type or "").split(";")[0].strip().lower()

    allowed = ALLOWED_UPLOADS.get(ext)
    if allowed is None or media_type not in allowed[0]:
        logger.warning(
            f"Rejected upload {staged.original_filename!r} | ext={ext or '-'} | media_type={media_type or '-'}"
        )
        remove_staged_file(staged.path)
        raise ValidationError(INVALID_TYPE_MESSAGE)

    return allowed[1].value
