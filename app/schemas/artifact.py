from datetime import datetime

from pydantic import BaseModel, field_validator

from app.schemas.document import CamelModel

ANSWER_LABELS = ("A", "B", "C", "D")
QUIZ_LENGTH = 5


class QuizQuestion(CamelModel):
    """A single multiple-choice question as returned by the generation backend."""
    question: str
    options: list[str]  # ["A) ...", "B) ...", "C) ...", "D) ..."]
    correct_answer: str
    explanation: str

    @field_validator("question", "explanation")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("options")
    @classmethod
    def four_options(cls, v: list[str]) -> list[str]:
        if len(v) != len(ANSWER_LABELS):
            raise ValueError(f"expected {len(ANSWER_LABELS)} options, got {len(v)}")
        if any(not option.strip() for option in v):
            raise ValueError("options must not be blank")
        return v

    @field_validator("correct_answer")
    @classmethod
    def answer_is_label(cls, v: str) -> str:
        label = v.strip().upper()
        if label not in ANSWER_LABELS:
            raise ValueError(f"correctAnswer must be one of {', '.join(ANSWER_LABELS)}")
        return label


class SummaryData(CamelModel):
    file_id: int
    title: str
    subject: str
    summary: str
    generated_at: datetime


class QuizData(CamelModel):
    file_id: int
    title: str
    subject: str
    quiz: list[QuizQuestion]
    total_questions: int
    generated_at: datetime


class SummaryEnvelope(BaseModel):
    success: bool = True
    data: SummaryData


class QuizEnvelope(BaseModel):
    success: bool = True
    data: QuizData
