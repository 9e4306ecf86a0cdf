"""
Study artifact generation: load document, build prompt, call the backend,
shape the result. Nothing is persisted; every call regenerates.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.exceptions import GenerationError, NotFoundError
from app.core.logging_config import get_logger
from app.models.document import Document
from app.schemas.artifact import QuizData, SummaryData
from app.services.document_store import get_document
from app.services.prompt_builder import ArtifactMode, build_prompt
from app.services.quiz_parser import QuizParseError, parse_quiz

logger = get_logger(__name__)

FILE_NOT_FOUND = "File not found"


def _failure_message(mode: ArtifactMode) -> str:
    return f"Failed to generate {mode.value}. Please try again."


def load_document(db: Session, document_id: int) -> Document:
    document = get_document(db, document_id)
    if not document:
        raise NotFoundError(FILE_NOT_FOUND)
    return document


async def _generate(generator, document: Document, mode: ArtifactMode) -> str:
    prompt = build_prompt(mode, document.title, document.subject, document.description)
    try:
        return await generator.generate(prompt)
    except Exception as e:
        logger.error(
            f"{mode.value.capitalize()} generation failed | document={document.id} | "
            f"error_type={type(e).__name__} | error={e}"
        )
        raise GenerationError(_failure_message(mode)) from e


async def generate_summary(db: Session, document_id: int, generator) -> SummaryData:
    """Generate a prose summary. The backend's text is returned verbatim."""
    document = load_document(db, document_id)
    summary = await _generate(generator, document, ArtifactMode.SUMMARY)

    return SummaryData(
        file_id=document.id,
        title=document.title,
        subject=document.subject,
        summary=summary,
        generated_at=datetime.now(timezone.utc),
    )


async def generate_quiz(db: Session, document_id: int, generator) -> QuizData:
    """Generate a five question quiz; malformed backend output is a GenerationError."""
    document = load_document(db, document_id)
    raw = await _generate(generator, document, ArtifactMode.QUIZ)

    try:
        questions = parse_quiz(raw)
    except QuizParseError as e:
        logger.error(
            f"Quiz response rejected | document={document.id} | reason={e.reason} | "
            f"response_length={len(raw or '')}"
        )
        logger.debug(f"Rejected quiz response: {raw!r}")
        raise GenerationError(_failure_message(ArtifactMode.QUIZ)) from e

    return QuizData(
        file_id=document.id,
        title=document.title,
        subject=document.subject,
        quiz=questions,
        total_questions=len(questions),
        generated_at=datetime.now(timezone.utc),
    )
