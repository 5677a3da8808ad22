"""Tests for prompt intent heuristics, quiz banks and the rule-based draft builder."""

from __future__ import annotations

import pytest

from form_app.models import Question
from form_app.services import intent_classifier
from form_app.services.quiz_bank import QUIZ_BANKS, draw_questions
from form_app.services.rule_builder import (
    build_rule_draft,
    extract_explicit_tokens,
    parse_prompt_to_questions,
)


@pytest.mark.parametrize(
    "prompt, expected",
    [
        ("出 5 道题", 5),
        ("30题的测验", 20),
        ("1 question please", 3),
        ("五题测验", 5),
        ("来个测验", 8),
        ("", 8),
    ],
)
def test_parse_desired_question_count(prompt, expected):
    assert intent_classifier.parse_desired_question_count(prompt) == expected


@pytest.mark.parametrize(
    "prompt, topic",
    [
        ("ChatGPT quiz", "openai"),
        ("大模型知识测验", "openai"),
        ("中国历史测验", "china"),
        ("Chinese culture quiz", "china"),
        ("量子物理测验", "unknown"),
    ],
)
def test_detect_quiz_topic(prompt, topic):
    assert intent_classifier.detect_quiz_topic(prompt) == topic


def test_quiz_intent_and_titles():
    assert intent_classifier.is_quiz_intent("Make a QUIZ")
    assert not intent_classifier.is_quiz_intent("活动报名")
    assert intent_classifier.infer_title("中国知识测验") == "中国知识测验"
    assert intent_classifier.infer_title("物理测验") == "知识测验"
    assert intent_classifier.infer_title("做个讲座报名") == "活动报名表"
    assert intent_classifier.infer_title("用户调研") == "问卷调研表"
    assert intent_classifier.infer_title("hello") == "hello - 自动生成表单"
    assert intent_classifier.detect_category("面试简历收集") == "recruitment"
    assert intent_classifier.detect_category("hello") is None


def test_quiz_bank_entries_are_consistent():
    for topic in ("openai", "china"):
        for question in draw_questions(topic, 20):
            assert question.type == "choice"
            assert question.required is True
            assert question.correct_answer in question.options
            assert question.points == 1
    generic = draw_questions("anything", 8)
    assert len(generic) == len(QUIZ_BANKS["generic"])
    assert not any(q.has_answer for q in generic)


def test_china_quiz_draft():
    draft = build_rule_draft("做一个中国知识测验，8题")
    assert draft.is_quiz is True
    assert draft.generation_mode == "rule"
    assert draft.need_llm_for_quiz is False
    assert draft.title == "中国知识测验"
    assert len(draft.questions) == 8
    assert draft.answer_key_count == 8
    assert draft.questions[0].key == "china_capital"
    assert "共 8 题" in draft.description


def test_quiz_count_is_bounded_by_bank():
    questions = parse_prompt_to_questions("中国测验 20题")
    assert len(questions) == len(QUIZ_BANKS["china"])


def test_unknown_quiz_topic_needs_llm():
    draft = build_rule_draft("帮我出一份量子物理测验")
    assert draft.is_quiz is True
    assert draft.need_llm_for_quiz is True
    assert draft.answer_key_count == 0


def test_registration_prompt():
    draft = build_rule_draft("报名表")
    assert draft.title == "活动报名表"
    assert [q.key for q in draft.questions] == ["name", "email", "phone"]
    assert all(q.required for q in draft.questions)
    assert draft.is_quiz is False


def test_explicit_tokens():
    assert extract_explicit_tokens("我要收集姓名、邮箱和公司") == ["姓名", "邮箱", "公司"]
    assert extract_explicit_tokens("随便做个表") == []


def test_explicit_fields_are_mapped_and_deduplicated():
    questions = parse_prompt_to_questions("我要收集姓名、邮箱和公司")
    assert [q.key for q in questions] == ["name", "email", "company"]


def test_unknown_explicit_token_becomes_custom_question():
    questions = parse_prompt_to_questions("请收集姓名、籍贯")
    assert [q.key for q in questions] == ["name", "custom_籍贯"]
    assert questions[1].title == "籍贯（请填写）"


def test_survey_prompt_adds_satisfaction_and_feedback():
    questions = parse_prompt_to_questions("课程满意度问卷")
    keys = [q.key for q in questions]
    assert keys == ["satisfaction", "feedback"]
    assert questions[0].type == "choice"
    assert questions[1].type == "paragraph"


def test_fallback_questions_for_vague_prompt():
    draft = build_rule_draft("hello")
    assert [q.key for q in draft.questions] == ["name", "email", "custom_need"]
    assert draft.title == "hello - 自动生成表单"


def test_source_questions_take_priority():
    source = [Question(key=f"f{i}", title=f"Field {i}") for i in range(20)]
    draft = build_rule_draft("报名表", source_questions=source, source_name="fields.csv")
    assert len(draft.questions) == 15
    assert draft.title == "fields.csv - 自动生成表单"
    assert "文件：fields.csv" in draft.description
    assert "共 20 题" in draft.description
    assert "用户补充需求：报名表" in draft.description


def test_rule_draft_is_deterministic():
    prompt = "活动报名，收集姓名、性别、饮食偏好和备注"
    assert build_rule_draft(prompt) == build_rule_draft(prompt)


def test_rule_draft_keys_are_unique():
    draft = build_rule_draft("报名活动，收集姓名、姓名、邮箱、email、电话")
    keys = [q.key for q in draft.questions]
    assert len(keys) == len(set(keys))
    assert len(keys) <= 12


def test_china_quiz_from_conversational_prompt():
    prompt = "帮我做一个关于中国的测验，8题"
    assert intent_classifier.detect_quiz_topic(prompt) == "china"
    assert intent_classifier.parse_desired_question_count(prompt) == 8
    questions = parse_prompt_to_questions(prompt)
    assert [q.key for q in questions] == [entry.key for entry in QUIZ_BANKS["china"]]
    assert questions[-1].key == "china_festival"
    for question in questions:
        assert question.required is True
        assert question.correct_answer in question.options
