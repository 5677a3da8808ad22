"""Normalize and gate LLM-produced form drafts."""

from __future__ import annotations

import math
from typing import Any, List

from marshmallow import ValidationError

from ..models import MAX_DRAFT_QUESTIONS, QUESTION_TYPES, Question, add_question
from ..schemas import LlmDraftSchema, LlmQuestionSchema

MAX_CHOICE_OPTIONS = 8
MIN_CHOICE_OPTIONS = 2
MIN_QUIZ_ANSWER_KEYS = 3
QUIZ_ANSWER_COVERAGE = 0.8

draft_schema = LlmDraftSchema()
question_schema = LlmQuestionSchema()


class DraftRejected(ValueError):
    """The LLM draft cannot be used; the caller should try another source."""


def _coerce_points(value: Any) -> float:
    try:
        points = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(points):
        return 0
    points = max(0.0, points)
    return int(points) if points.is_integer() else points


def _normalize_question(raw: Any, index: int) -> Question | None:
    try:
        data = question_schema.load(raw)
    except ValidationError:
        return None
    title = str(data.get("title") or "").strip()
    if not title:
        return None

    qtype = data.get("type") if data.get("type") in QUESTION_TYPES else "text"
    key = str(data.get("key") or "").strip() or f"llm_q_{index}"
    required = bool(data.get("required"))

    if qtype != "choice":
        return Question(key=key, title=title, type=qtype, required=required)

    raw_options = data.get("options") if isinstance(data.get("options"), list) else []
    options = [str(opt if opt is not None else "").strip() for opt in raw_options]
    options = [opt for opt in options if opt][:MAX_CHOICE_OPTIONS]
    if len(options) < MIN_CHOICE_OPTIONS:
        # Not enough options to ask a choice question; keep it as free text.
        return Question(key=key, title=title, type="text", required=required)

    answer = str(data.get("correctAnswer") or "").strip()
    points = _coerce_points(data.get("points"))
    if answer and answer not in options:
        answer, points = "", 0
    return Question(
        key=key,
        title=title,
        type="choice",
        required=required,
        options=tuple(options),
        correct_answer=answer,
        points=points,
    )


def normalize_llm_questions(raw_questions: Any) -> List[Question]:
    if not isinstance(raw_questions, list):
        return []
    questions: List[Question] = []
    seen: set = set()
    for index, raw in enumerate(raw_questions, start=1):
        add_question(questions, seen, _normalize_question(raw, index))
    return questions[:MAX_DRAFT_QUESTIONS]


def required_answer_keys(question_count: int) -> int:
    return max(MIN_QUIZ_ANSWER_KEYS, math.ceil(QUIZ_ANSWER_COVERAGE * question_count))


def validate_llm_draft(payload: Any, quiz_requested: bool = False) -> dict:
    """Return ``{is_quiz, title, description, questions}`` or raise :class:`DraftRejected`."""
    try:
        data = draft_schema.load(payload if isinstance(payload, dict) else {})
    except ValidationError as exc:
        raise DraftRejected(f"schema mismatch: {exc.messages}") from exc

    questions = normalize_llm_questions(data["questions"])
    if not questions:
        raise DraftRejected("no usable questions")

    is_quiz = bool(data["isQuiz"])
    if quiz_requested:
        answer_keys = sum(1 for q in questions if q.has_answer)
        needed = required_answer_keys(len(questions))
        if not is_quiz or answer_keys < needed:
            raise DraftRejected(
                f"quiz draft missing quiz signals (isQuiz={is_quiz}, answers={answer_keys}/{needed})"
            )

    return {
        "is_quiz": is_quiz,
        "title": (data.get("title") or "").strip(),
        "description": (data.get("description") or "").strip(),
        "questions": questions,
    }
