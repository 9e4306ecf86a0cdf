"""
Prompt templates for study artifacts.

Rendering is pure: the same document metadata always yields the same prompt,
so generation can be reproduced against a stubbed backend.
"""

import enum


class ArtifactMode(str, enum.Enum):
    SUMMARY = "summary"
    QUIZ = "quiz"


MISSING_DESCRIPTION = "Not provided"

SUMMARY_TEMPLATE = """You are an educational AI assistant. Generate a comprehensive and well-structured summary for a study material.

Title: "{title}"
Subject: {subject}
Description: {description}

Please provide:
1. A brief overview (2-3 sentences)
2. Key concepts and topics covered (bullet points)
3. Important points students should remember (bullet points)
4. Learning objectives

Make it educational, clear, and easy to understand for students."""

QUIZ_TEMPLATE = """You are an educational AI assistant. Generate a quiz for study material.

Title: "{title}"
Subject: {subject}
Description: {description}

Generate exactly 5 multiple-choice questions to test student understanding.

IMPORTANT: Return ONLY a valid JSON array with no additional text, markdown, or formatting. Use this exact format:

[
  {{
    "question": "Question text here?",
    "options": ["A) First option", "B) Second option", "C) Third option", "D) Fourth option"],
    "correctAnswer": "A",
    "explanation": "Brief explanation why this answer is correct"
  }}
]

Requirements:
- The array must contain exactly 5 objects
- Each question must have exactly 4 options prefixed "A) ", "B) ", "C) " and "D) "
- correctAnswer must be a single letter: A, B, C or D
- Questions should test understanding, not just memorization
- Options should be plausible and challenging
- Explanations should be educational
- Do not wrap the array in code fences
- Return ONLY the JSON array, nothing else"""

_TEMPLATES = {
    ArtifactMode.SUMMARY: SUMMARY_TEMPLATE,
    ArtifactMode.QUIZ: QUIZ_TEMPLATE,
}


def build_prompt(mode: ArtifactMode | str, title: str, subject: str, description: str | None = None) -> str:
    """
    Render the generation prompt for a document.

    Args:
        mode: "summary" or "quiz"
        title: Document title
        subject: Document subject
        description: Optional description; blank renders as "Not provided"

    Raises:
        ValueError: unknown mode
    """
    template = _TEMPLATES[ArtifactMode(mode)]
    return template.format(
        title=title,
        subject=subject,
        description=description if description and description.strip() else MISSING_DESCRIPTION,
    )
