"""Form generation endpoints."""

from __future__ import annotations

from functools import wraps
from http import HTTPStatus

from flask import Blueprint, current_app, g, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from ..models import ExtractionResult
from ..schemas import DraftRequestSchema
from ..services import draft_service, forms_client, upload_service
from ..services.forms_client import FormsApiError, FormsAuthError

forms_bp = Blueprint("forms_bp", __name__)

draft_request_schema = DraftRequestSchema()

SUPPORTED_UPLOADS_HINT = "Prompt or a supported file (.csv/.json/.txt/.md/.tsv/.pdf) is required."
GENERIC_FAILURE_MESSAGE = "Failed to generate form."
QUIZ_LLM_REQUIRED_MESSAGE = (
    "该主题的 quiz 需要 LLM 生成题目。请检查 OPENAI_API_KEY/OPENAI_MODEL，"
    "且确保服务端可访问 api.openai.com（可设置 OPENAI_PROXY=http://127.0.0.1:7890）。"
)


class DraftRequestError(Exception):
    def __init__(self, code: str, message: str, status: HTTPStatus = HTTPStatus.BAD_REQUEST):
        super().__init__(code)
        self.code = code
        self.message = message
        self.status = status


@forms_bp.errorhandler(ValidationError)
def handle_validation_error(err: ValidationError):
    return jsonify({"errors": err.messages}), HTTPStatus.BAD_REQUEST


@forms_bp.errorhandler(DraftRequestError)
def handle_draft_request_error(err: DraftRequestError):
    return jsonify({"error": err.code, "message": err.message}), err.status


@forms_bp.errorhandler(Exception)
def handle_unexpected_error(err: Exception):
    if isinstance(err, HTTPException):
        return err
    current_app.logger.exception("Form request failed")
    return (
        jsonify({"error": "form_generation_failed", "message": GENERIC_FAILURE_MESSAGE}),
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )


def google_token_required(fn):
    """Require a Google access token in the ``Authorization: Bearer`` header."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return (
                jsonify({"error": "not_authenticated", "message": "Please log in with Google first."}),
                HTTPStatus.UNAUTHORIZED,
            )
        g.google_access_token = token.strip()
        return fn(*args, **kwargs)

    return wrapper


def _prepare_draft():
    payload = draft_request_schema.load(request.form.to_dict())
    prompt = (payload.get("prompt") or "").strip()
    upload = request.files.get("sourceFile")

    source_name = ""
    source = ExtractionResult()
    if upload is not None:
        source_name = upload.filename or ""
        source = upload_service.extract_source(upload.read(), source_name, upload.mimetype or "")

    if upload is not None and source.file_type == "pdf" and not source.questions:
        raise DraftRequestError("pdf_parse_empty", upload_service.describe_pdf_issue(source.parse_issue))
    if not prompt and not source.questions:
        raise DraftRequestError("invalid_prompt", SUPPORTED_UPLOADS_HINT)

    draft = draft_service.build_draft(prompt, source.questions, source_name, source.source_text)
    if draft.need_llm_for_quiz and draft.generation_mode != "llm":
        raise DraftRequestError(
            "quiz_llm_required", QUIZ_LLM_REQUIRED_MESSAGE, HTTPStatus.SERVICE_UNAVAILABLE
        )
    summary = source.summary(source_name) if upload is not None else None
    return draft, summary


@forms_bp.get("/ping")
def ping():
    return jsonify({"module": "forms", "status": "ok"})


@forms_bp.post("/draft")
def preview_draft():
    draft, summary = _prepare_draft()
    return jsonify({"ok": True, "draft": draft.to_dict(), "source": summary})


@forms_bp.post("/generate")
@google_token_required
def generate_form():
    draft, summary = _prepare_draft()
    try:
        client = forms_client.get_forms_client(g.google_access_token)
        published = forms_client.publish_draft(draft, client)
    except FormsAuthError as exc:
        return (
            jsonify({"error": "form_generation_failed", "message": str(exc)}),
            HTTPStatus.UNAUTHORIZED,
        )
    except Exception as exc:
        current_app.logger.exception("Form generation failed")
        message = str(exc) if isinstance(exc, FormsApiError) else GENERIC_FAILURE_MESSAGE
        return (
            jsonify({"error": "form_generation_failed", "message": message}),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    return jsonify(
        {
            "ok": True,
            **published,
            "title": draft.title,
            "questions": [q.title for q in draft.questions],
            "source": summary,
            "generationMode": draft.generation_mode,
            "llmModelUsed": draft.llm_model_used,
            "isQuiz": draft.is_quiz,
            "answerKeyCount": draft.answer_key_count,
        }
    )
