from app.schemas.user import UserCreate, UserResponse, Token
from app.schemas.document import (
    DocumentResponse, DocumentEnvelope, DocumentCreatedEnvelope, DocumentListEnvelope,
)
from app.schemas.artifact import QuizQuestion, SummaryEnvelope, QuizEnvelope

__all__ = [
    "UserCreate", "UserResponse", "Token",
    "DocumentResponse", "DocumentEnvelope", "DocumentCreatedEnvelope", "DocumentListEnvelope",
    "QuizQuestion", "SummaryEnvelope", "QuizEnvelope",
]
