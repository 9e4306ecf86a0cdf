"""
Caller-facing error kinds.

Each carries the HTTP status and the message that is safe to show to the
client. Internal causes are chained with ``raise ... from`` and logged where
they are translated; they never reach the response body.
"""

from fastapi import status


class StudyGeniError(Exception):
    """Base class for errors rendered as ``{"success": false, "message": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudyGeniError):
    """Missing required field or disallowed upload. No side effects were performed."""

    status_code = status.HTTP_400_BAD_REQUEST


class PayloadTooLargeError(ValidationError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE


class StorageError(StudyGeniError):
    """Remote upload (or the record write that follows it) failed."""


class NotFoundError(StudyGeniError):
    status_code = status.HTTP_404_NOT_FOUND


class GenerationError(StudyGeniError):
    """Backend call failed or its output could not be decoded/validated."""
