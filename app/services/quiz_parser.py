"""
Decoding of quiz payloads returned by the generation backend.

The backend is asked for a bare JSON array but its text is untrusted: fences
are stripped, the payload is decoded and every question is validated. Any
deviation fails the whole quiz.
"""

import json
import re

import pydantic

from app.schemas.artifact import QuizQuestion, QUIZ_LENGTH

_OPENING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```$")


class QuizParseError(ValueError):
    """Generation produced unparsable output."""

    def __init__(self, reason: str):
        super().__init__(f"Generation produced unparsable output: {reason}")
        self.reason = reason


def strip_code_fences(text: str) -> str:
    """Strip surrounding markdown code fences (```json ... ```) from an AI response."""
    stripped = text.strip()
    stripped = _OPENING_FENCE.sub("", stripped, count=1)
    stripped = _CLOSING_FENCE.sub("", stripped.rstrip(), count=1)
    return stripped.strip()


def parse_quiz(raw_text: str) -> list[QuizQuestion]:
    """
    Parse and validate a quiz response.

    Returns:
        Exactly five validated questions, in the order given

    Raises:
        QuizParseError: payload is not JSON, not an array of five objects,
            or any question is missing fields or malformed
    """
    if raw_text is None:
        raise QuizParseError("empty response")

    payload = strip_code_fences(raw_text)
    if not payload:
        raise QuizParseError("empty response")

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise QuizParseError(f"invalid JSON ({e.msg} at position {e.pos})") from e

    if not isinstance(data, list):
        raise QuizParseError(f"expected a JSON array, got {type(data).__name__}")
    if len(data) != QUIZ_LENGTH:
        raise QuizParseError(f"expected {QUIZ_LENGTH} questions, got {len(data)}")

    questions = []
    for index, item in enumerate(data, 1):
        if not isinstance(item, dict):
            raise QuizParseError(f"question {index} is not an object")
        try:
            questions.append(QuizQuestion.model_validate(item))
        except pydantic.ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'question'}: {err['msg']}"
                for err in e.errors()
            )
            raise QuizParseError(f"question {index} is invalid ({problems})") from e

    return questions
