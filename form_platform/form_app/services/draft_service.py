"""Draft orchestration: LLM draft first, rule-based draft as the fallback."""

from __future__ import annotations

import json
from typing import List, Optional, Sequence

from flask import current_app

from ..metrics import record_draft, record_llm_attempt
from ..models import Draft, Question
from ..schemas import LLM_DRAFT_JSON_SCHEMA
from . import intent_classifier
from .ai_client import AIClient, get_ai_client
from .draft_validator import DraftRejected, validate_llm_draft
from .retry import AllCandidatesFailed, first_success
from .rule_builder import build_rule_draft

FALLBACK_MODELS = ("gpt-4.1-mini", "gpt-4o-mini")
MAX_SOURCE_EXCERPT = 6000

SYSTEM_INSTRUCTION = (
    "你是表单设计助手。输出必须是合法JSON，严格满足schema。优先生成可直接使用的Google Form草稿。"
    "quiz场景优先choice题，并为每道choice题填写correctAnswer和points（答案不要写进题干）。"
    "quiz必须严格围绕用户主题出题，禁止输出“你希望难度是/目标是”这类元问题。"
    "非quiz场景correctAnswer留空、points设0。"
)


class LlmDraftError(RuntimeError):
    """Every candidate model failed to produce an acceptable draft."""


def candidate_models(primary: str | None) -> List[str]:
    models: List[str] = []
    for model in (primary, *FALLBACK_MODELS):
        if model and model not in models:
            models.append(model)
    return models


def build_user_message(
    prompt: str,
    source_name: str = "",
    source_text: str = "",
    quiz_requested: bool = False,
) -> str:
    parts = [
        f"用户需求：{prompt or '未提供'}",
        f"目标题量：{intent_classifier.parse_desired_question_count(prompt)} 题" if quiz_requested else "",
        f"上传文件：{source_name}" if source_name else "",
        f"文件内容节选：\n{source_text[:MAX_SOURCE_EXCERPT]}" if source_text else "",
    ]
    return "\n\n".join(part for part in parts if part)


def _request_payload(model: str, user_message: str) -> dict:
    return {
        "model": model,
        "temperature": 0.2,
        "response_format": {"type": "json_schema", "json_schema": LLM_DRAFT_JSON_SCHEMA},
        "messages": [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": user_message},
        ],
    }


def _attempt_model(
    client: AIClient,
    model: str,
    prompt: str,
    user_message: str,
    quiz_requested: bool,
) -> Draft:
    logger = current_app.logger
    try:
        response = client.chat_via_any_path(_request_payload(model, user_message))
    except AllCandidatesFailed as exc:
        record_llm_attempt(model, "network")
        logger.error("OpenAI request failed with model %s: %s", model, exc)
        raise

    if not 200 <= response.status <= 299:
        record_llm_attempt(model, "http_error")
        logger.error("OpenAI API error with model %s: %s %s", model, response.status, response.text[:200])
        raise LlmDraftError(f"status {response.status}")

    try:
        body = json.loads(response.text)
        content = body["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        record_llm_attempt(model, "bad_body")
        logger.error("OpenAI non-JSON response with model %s: %s", model, response.text[:200])
        raise LlmDraftError("non-JSON body") from exc
    if content and not isinstance(content, str):
        record_llm_attempt(model, "bad_body")
        logger.error("OpenAI non-string content with model %s: %r", model, content)
        raise LlmDraftError("non-string content")
    if not content:
        record_llm_attempt(model, "empty")
        logger.error("OpenAI empty content with model %s", model)
        raise LlmDraftError("empty content")

    try:
        validated = validate_llm_draft(json.loads(content), quiz_requested=quiz_requested)
    except (DraftRejected, json.JSONDecodeError) as exc:
        record_llm_attempt(model, "rejected")
        logger.error("OpenAI draft rejected with model %s: %s", model, exc)
        raise

    record_llm_attempt(model, "accepted")
    return Draft(
        title=validated["title"] or intent_classifier.infer_title(prompt),
        description=validated["description"] or f"原始需求：{prompt or '无'}",
        questions=tuple(validated["questions"]),
        is_quiz=validated["is_quiz"],
        generation_mode="llm",
        llm_model_used=model,
    )


def generate_draft_with_llm(
    prompt: str,
    source_name: str = "",
    source_text: str = "",
    quiz_requested: bool = False,
) -> Optional[Draft]:
    """Return an accepted LLM draft, ``None`` when no key is configured, or raise :class:`LlmDraftError`."""
    client = get_ai_client()
    if not client.enabled:
        return None

    user_message = build_user_message(prompt, source_name, source_text, quiz_requested)
    models = candidate_models(client.default_model)
    try:
        _model, draft = first_success(
            models,
            lambda model: _attempt_model(client, model, prompt, user_message, quiz_requested),
        )
    except AllCandidatesFailed as exc:
        raise LlmDraftError(f"All OpenAI model attempts failed: {', '.join(models)}") from exc
    return draft


def build_draft(
    prompt: str,
    source_questions: Sequence[Question] = (),
    source_name: str = "",
    source_text: str = "",
) -> Draft:
    prompt = (prompt or "").strip()
    llm_prompt = prompt or f"请根据文件内容生成可直接使用的表单：{source_name or 'uploaded file'}"
    quiz_requested = intent_classifier.is_quiz_intent(prompt)
    desired_count = intent_classifier.parse_desired_question_count(prompt)

    try:
        llm_draft = generate_draft_with_llm(llm_prompt, source_name, source_text, quiz_requested)
    except LlmDraftError as exc:
        current_app.logger.error("LLM draft generation failed: %s", exc)
        llm_draft = None

    if llm_draft is not None:
        questions = llm_draft.questions[:desired_count] if quiz_requested else llm_draft.questions
        draft = Draft(
            title=llm_draft.title,
            description=llm_draft.description,
            questions=questions,
            is_quiz=quiz_requested or llm_draft.is_quiz,
            generation_mode="llm",
            llm_model_used=llm_draft.llm_model_used,
        )
    else:
        draft = build_rule_draft(prompt, source_questions, source_name)

    record_draft(draft.generation_mode)
    return draft
