"""Deterministic fallback that turns a prompt into a question list without an LLM."""

from __future__ import annotations

import re
from typing import List, Sequence

from ..models import MAX_DRAFT_QUESTIONS, Draft, Question, add_question
from . import intent_classifier
from .field_library import FIELD_LIBRARY, field_by_key, find_field, normalize_token, slugify
from .quiz_bank import draw_questions

MAX_RULE_QUESTIONS = 12

_EXPLICIT_MARKER = re.compile(r"(?:收集|包括|包含|字段|信息)[：: ]?(.+)")
_TOKEN_SPLIT = re.compile(r"[、，,/和及与]")
_REGISTRATION_HINT = re.compile(r"报名|预约|申请|登记")
_SURVEY_HINT = re.compile(r"问卷|反馈|调研|满意度|评价")

SATISFACTION_QUESTION = Question(
    key="satisfaction",
    title="整体满意度如何？",
    type="choice",
    required=True,
    options=("非常满意", "满意", "一般", "不满意", "非常不满意"),
)
FEEDBACK_QUESTION = Question(
    key="feedback",
    title="还有什么建议或补充？",
    type="paragraph",
)
CUSTOM_NEED_QUESTION = Question(
    key="custom_need",
    title="请描述你的具体需求",
    type="paragraph",
    required=True,
)


def extract_explicit_tokens(prompt: str) -> List[str]:
    """Field tokens listed after a "收集/包括/字段..." marker."""
    source = (prompt or "").replace("\r", "").strip()
    match = _EXPLICIT_MARKER.search(source)
    if not match:
        return []
    tokens = (normalize_token(token) for token in _TOKEN_SPLIT.split(match.group(1)))
    return [token for token in tokens if token]


def generate_quiz_questions(prompt: str) -> List[Question]:
    topic = intent_classifier.detect_quiz_topic(prompt)
    count = intent_classifier.parse_desired_question_count(prompt)
    return draw_questions(topic, count)


def parse_prompt_to_questions(prompt: str, source_questions: Sequence[Question] = ()) -> List[Question]:
    if source_questions:
        return list(source_questions)[:MAX_DRAFT_QUESTIONS]

    prompt = prompt or ""
    if intent_classifier.is_quiz_intent(prompt):
        return generate_quiz_questions(prompt)[:MAX_DRAFT_QUESTIONS]

    questions: List[Question] = []
    seen: set = set()

    for token in extract_explicit_tokens(prompt):
        known = find_field(token)
        if known:
            add_question(questions, seen, known.to_question())
        elif len(token) >= 2:
            add_question(
                questions,
                seen,
                Question(key=f"custom_{slugify(token)}", title=f"{token}（请填写）"),
            )

    for descriptor in FIELD_LIBRARY:
        if descriptor.matches(prompt):
            add_question(questions, seen, descriptor.to_question())

    if _REGISTRATION_HINT.search(prompt):
        add_question(questions, seen, field_by_key("name").to_question())
        add_question(questions, seen, field_by_key("email").to_question())
        add_question(questions, seen, field_by_key("phone").to_question().with_required(True))

    if _SURVEY_HINT.search(prompt):
        add_question(questions, seen, SATISFACTION_QUESTION)
        add_question(questions, seen, FEEDBACK_QUESTION)

    if not questions:
        add_question(questions, seen, field_by_key("name").to_question())
        add_question(questions, seen, field_by_key("email").to_question())
        add_question(questions, seen, CUSTOM_NEED_QUESTION)

    return questions[:MAX_RULE_QUESTIONS]


def build_rule_draft(
    prompt: str,
    source_questions: Sequence[Question] = (),
    source_name: str = "",
) -> Draft:
    prompt = prompt or ""
    quiz_intent = intent_classifier.is_quiz_intent(prompt)
    questions = parse_prompt_to_questions(prompt, source_questions)
    is_quiz = quiz_intent or any(q.has_answer for q in questions)
    need_llm_for_quiz = is_quiz and intent_classifier.detect_quiz_topic(prompt) == "unknown"

    if source_questions:
        title = f"{source_name or '文件'} - 自动生成表单"
        description = (
            "该表单由上传文件自动生成。\n"
            f"文件：{source_name or 'unknown'}\n"
            f"共 {len(source_questions)} 题。\n"
            f"用户补充需求：{prompt or '无'}"
        )
    elif quiz_intent:
        title = intent_classifier.infer_title(prompt)
        description = f"该测验由对话自动生成。\n共 {len(questions)} 题。\n原始需求：{prompt}"
    else:
        title = intent_classifier.infer_title(prompt)
        description = f"该表单由对话自动生成。\n请根据实际情况填写。\n原始需求：{prompt}"

    return Draft(
        title=title,
        description=description,
        questions=tuple(questions),
        is_quiz=is_quiz,
        generation_mode="rule",
        need_llm_for_quiz=need_llm_for_quiz,
    )
