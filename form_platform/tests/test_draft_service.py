"""Tests for the LLM draft path, its fallbacks and the AI client egress paths."""

from __future__ import annotations

import json

import pytest
import requests
from prometheus_client import REGISTRY

from conftest import FakeResponse, chat_completion
from form_app.services import ai_client as ai_client_module
from form_app.services import draft_service
from form_app.services.ai_client import AIClient
from form_app.services.draft_service import LlmDraftError, build_draft, candidate_models


def _llm_draft(num_questions=3, answered=0, is_quiz=False, title="活动报名"):
    questions = []
    for idx in range(num_questions):
        answer = "A" if idx < answered else ""
        questions.append(
            {
                "key": f"q{idx}",
                "title": f"问题 {idx}",
                "type": "choice",
                "required": True,
                "options": ["A", "B", "C"],
                "correctAnswer": answer,
                "points": 1 if answer else 0,
            }
        )
    return {"isQuiz": is_quiz, "title": title, "description": "由模型生成", "questions": questions}


@pytest.fixture()
def chat_calls(monkeypatch):
    """Record outbound chat requests and answer from a queue of responses."""
    state = {"calls": [], "responses": []}

    def fake_post(url, headers=None, data=None, proxies=None, timeout=None):
        payload = json.loads(data.decode("utf-8"))
        state["calls"].append({"url": url, "model": payload["model"], "proxies": proxies, "payload": payload})
        outcome = state["responses"].pop(0) if len(state["responses"]) > 1 else state["responses"][0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(ai_client_module.requests, "post", fake_post)
    return state


def test_candidate_models():
    assert candidate_models("gpt-4.1-mini") == ["gpt-4.1-mini", "gpt-4o-mini"]
    assert candidate_models("gpt-4o") == ["gpt-4o", "gpt-4.1-mini", "gpt-4o-mini"]
    assert candidate_models(None) == ["gpt-4.1-mini", "gpt-4o-mini"]


def test_egress_paths_are_deduplicated_and_end_direct():
    client = AIClient(
        api_key="k",
        api_base="https://api.example.com/v1",
        default_model="m",
        proxy_candidates=("http://p:1", "", "http://p:1", "http://q:2"),
    )
    assert client.egress_paths() == ["http://p:1", "http://q:2", ""]


def test_build_user_message():
    message = draft_service.build_user_message("中国测验 5题", "a.pdf", "正文", quiz_requested=True)
    assert "用户需求：中国测验 5题" in message
    assert "目标题量：5 题" in message
    assert "上传文件：a.pdf" in message
    assert "文件内容节选：\n正文" in message
    assert draft_service.build_user_message("", "", "") == "用户需求：未提供"


def test_no_api_key_uses_rule_builder(app, chat_calls):
    draft = build_draft("报名表")
    assert draft.generation_mode == "rule"
    assert draft.llm_model_used is None
    assert chat_calls["calls"] == []


def test_llm_draft_is_used_when_accepted(llm_app, chat_calls):
    chat_calls["responses"] = [FakeResponse(200, chat_completion(_llm_draft()))]
    draft = build_draft("报名表")
    assert draft.generation_mode == "llm"
    assert draft.llm_model_used == "gpt-4.1-mini"
    assert draft.title == "活动报名"
    assert [q.key for q in draft.questions] == ["q0", "q1", "q2"]

    (call,) = chat_calls["calls"]
    assert call["url"] == "https://api.openai.com/v1/chat/completions"
    assert call["proxies"] is None
    assert call["payload"]["temperature"] == 0.2
    assert call["payload"]["response_format"]["json_schema"]["name"] == "google_form_draft"


def test_next_model_is_tried_after_http_error(llm_app, chat_calls):
    chat_calls["responses"] = [
        FakeResponse(500, text="upstream error"),
        FakeResponse(200, chat_completion(_llm_draft())),
    ]
    draft = build_draft("报名表")
    assert draft.llm_model_used == "gpt-4o-mini"
    assert [call["model"] for call in chat_calls["calls"]] == ["gpt-4.1-mini", "gpt-4o-mini"]


def test_bad_bodies_fall_back_to_rule_draft(llm_app, chat_calls):
    chat_calls["responses"] = [
        FakeResponse(200, text="<html>not json</html>"),
        FakeResponse(200, chat_completion("")),
    ]
    draft = build_draft("报名表")
    assert draft.generation_mode == "rule"
    assert [q.key for q in draft.questions] == ["name", "email", "phone"]


def test_proxy_failure_falls_through_to_direct(llm_app, chat_calls):
    llm_app.config["OPENAI_PROXY"] = "http://127.0.0.1:7890"
    llm_app.extensions.pop("ai_client", None)
    chat_calls["responses"] = [
        requests.ConnectionError("proxy refused"),
        FakeResponse(200, chat_completion(_llm_draft())),
    ]
    draft = build_draft("报名表")
    assert draft.generation_mode == "llm"
    assert [call["proxies"] for call in chat_calls["calls"]] == [
        {"http": "http://127.0.0.1:7890", "https": "http://127.0.0.1:7890"},
        None,
    ]


def test_all_models_failing_raises(llm_app, chat_calls):
    chat_calls["responses"] = [requests.ConnectionError("network down")]
    with pytest.raises(LlmDraftError):
        draft_service.generate_draft_with_llm("报名表")
    assert [call["model"] for call in chat_calls["calls"]] == ["gpt-4.1-mini", "gpt-4o-mini"]


def test_quiz_draft_is_trimmed_to_requested_count(llm_app, chat_calls):
    payload = _llm_draft(num_questions=5, answered=5, is_quiz=True, title="中国知识测验")
    chat_calls["responses"] = [FakeResponse(200, chat_completion(payload))]
    draft = build_draft("中国知识测验 3题")
    assert draft.generation_mode == "llm"
    assert draft.is_quiz is True
    assert len(draft.questions) == 3
    assert draft.answer_key_count == 3


def test_quiz_without_answer_keys_is_rejected(llm_app, chat_calls):
    payload = _llm_draft(num_questions=5, answered=1, is_quiz=True)
    chat_calls["responses"] = [FakeResponse(200, chat_completion(payload))]
    draft = build_draft("中国知识测验 3题")
    assert draft.generation_mode == "rule"
    assert [q.key for q in draft.questions] == ["china_capital", "china_national_day", "china_longest_river"]
    assert len(chat_calls["calls"]) == 2


def test_file_only_request_prompts_llm_with_file_name(llm_app, chat_calls):
    chat_calls["responses"] = [FakeResponse(200, chat_completion(_llm_draft()))]
    build_draft("", source_name="fields.csv", source_text="姓名,邮箱")
    user_message = chat_calls["calls"][0]["payload"]["messages"][1]["content"]
    assert "请根据文件内容生成可直接使用的表单：fields.csv" in user_message
    assert "姓名,邮箱" in user_message


def _bad_body_count(model):
    return REGISTRY.get_sample_value(
        "form_llm_attempts_total", {"model": model, "outcome": "bad_body"}
    ) or 0.0


def test_non_string_content_is_recorded_per_model(llm_app, chat_calls):
    structured = FakeResponse(200, {"choices": [{"message": {"content": {"isQuiz": False}}}]})
    chat_calls["responses"] = [structured]
    before = {model: _bad_body_count(model) for model in ("gpt-4.1-mini", "gpt-4o-mini")}

    draft = build_draft("报名表")

    assert draft.generation_mode == "rule"
    assert [call["model"] for call in chat_calls["calls"]] == ["gpt-4.1-mini", "gpt-4o-mini"]
    for model, count in before.items():
        assert _bad_body_count(model) == count + 1
