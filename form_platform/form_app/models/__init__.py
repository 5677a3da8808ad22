"""Pipeline value objects."""

from .draft import (
    MAX_DRAFT_QUESTIONS,
    QUESTION_TYPES,
    Draft,
    ExtractionResult,
    Question,
    add_question,
    dedupe_questions,
)

__all__ = [
    "MAX_DRAFT_QUESTIONS",
    "QUESTION_TYPES",
    "Draft",
    "ExtractionResult",
    "Question",
    "add_question",
    "dedupe_questions",
]
