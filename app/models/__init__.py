from app.models.user import User, UserRole
from app.models.document import Document, FileType

__all__ = [
    "User",
    "UserRole",
    "Document",
    "FileType",
]
