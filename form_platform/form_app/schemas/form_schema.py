"""Schemas for form draft requests and LLM draft payloads."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from ..models import QUESTION_TYPES


class DraftRequestSchema(Schema):
    """Multipart form fields accepted by the draft / generate endpoints."""

    class Meta:
        unknown = EXCLUDE

    prompt = fields.String(load_default="")


class LlmQuestionSchema(Schema):
    """Loose shape of one LLM question; coercion happens in the validator."""

    class Meta:
        unknown = EXCLUDE

    key = fields.Raw(load_default=None, allow_none=True)
    title = fields.Raw(load_default=None, allow_none=True)
    type = fields.Raw(load_default=None, allow_none=True)
    required = fields.Raw(load_default=False, allow_none=True)
    options = fields.Raw(load_default=None, allow_none=True)
    correctAnswer = fields.Raw(load_default=None, allow_none=True)
    points = fields.Raw(load_default=None, allow_none=True)


class LlmDraftSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    isQuiz = fields.Boolean(required=True)
    title = fields.String(required=True, allow_none=True)
    description = fields.String(required=True, allow_none=True)
    questions = fields.List(fields.Raw(), required=True, validate=validate.Length(min=1))


# JSON schema handed to the model as a strict structured-output contract.
LLM_DRAFT_JSON_SCHEMA = {
    "name": "google_form_draft",
    "strict": True,
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "isQuiz": {"type": "boolean"},
            "title": {"type": "string"},
            "description": {"type": "string"},
            "questions": {
                "type": "array",
                "minItems": 1,
                "maxItems": 15,
                "items": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "key": {"type": "string"},
                        "title": {"type": "string"},
                        "type": {"type": "string", "enum": list(QUESTION_TYPES)},
                        "required": {"type": "boolean"},
                        "options": {"type": "array", "items": {"type": "string"}},
                        "correctAnswer": {"type": "string"},
                        "points": {"type": "number"},
                    },
                    "required": ["key", "title", "type", "required", "options", "correctAnswer", "points"],
                },
            },
        },
        "required": ["isQuiz", "title", "description", "questions"],
    },
}
