"""Serialization / validation schemas (Marshmallow)."""

from .form_schema import (
    LLM_DRAFT_JSON_SCHEMA,
    DraftRequestSchema,
    LlmDraftSchema,
    LlmQuestionSchema,
)

__all__ = [
    "LLM_DRAFT_JSON_SCHEMA",
    "DraftRequestSchema",
    "LlmDraftSchema",
    "LlmQuestionSchema",
]
