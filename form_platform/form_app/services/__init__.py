"""Business logic modules (extraction, rule engine, LLM drafting, Forms API)."""

from . import (
    readability,
    field_library,
    quiz_bank,
    intent_classifier,
    text_extractor,
    pdf_ingest_service,
    upload_service,
    rule_builder,
    draft_validator,
    ai_client,
    draft_service,
    forms_payload,
    forms_client,
)

__all__ = [
    "readability",
    "field_library",
    "quiz_bank",
    "intent_classifier",
    "text_extractor",
    "pdf_ingest_service",
    "upload_service",
    "rule_builder",
    "draft_validator",
    "ai_client",
    "draft_service",
    "forms_payload",
    "forms_client",
]
