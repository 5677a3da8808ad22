"""Tests for LLM draft normalization and the quiz gate."""

from __future__ import annotations

import pytest

from form_app.services.draft_validator import (
    DraftRejected,
    normalize_llm_questions,
    required_answer_keys,
    validate_llm_draft,
)


def _choice(key, answer="A", points=1):
    return {
        "key": key,
        "title": f"Question {key}",
        "type": "choice",
        "required": True,
        "options": ["A", "B", "C"],
        "correctAnswer": answer,
        "points": points,
    }


def _draft(questions, is_quiz=True):
    return {"isQuiz": is_quiz, "title": " Quiz ", "description": "desc", "questions": questions}


def test_required_answer_keys():
    assert required_answer_keys(1) == 3
    assert required_answer_keys(3) == 3
    assert required_answer_keys(5) == 4
    assert required_answer_keys(10) == 8
    assert required_answer_keys(11) == 9


def test_valid_quiz_draft():
    result = validate_llm_draft(_draft([_choice(f"q{i}") for i in range(5)]), quiz_requested=True)
    assert result["is_quiz"] is True
    assert result["title"] == "Quiz"
    assert len(result["questions"]) == 5
    assert all(q.points == 1 for q in result["questions"])


def test_quiz_with_too_few_answers_is_rejected():
    questions = [_choice("q1")] + [_choice(f"q{i}", answer="") for i in range(2, 6)]
    with pytest.raises(DraftRejected):
        validate_llm_draft(_draft(questions), quiz_requested=True)


def test_quiz_flag_required_when_quiz_requested():
    questions = [_choice(f"q{i}") for i in range(4)]
    with pytest.raises(DraftRejected):
        validate_llm_draft(_draft(questions, is_quiz=False), quiz_requested=True)
    result = validate_llm_draft(_draft(questions, is_quiz=False), quiz_requested=False)
    assert result["is_quiz"] is False


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"title": "t", "description": "d", "questions": [{"title": "x"}]},
        {"isQuiz": False, "title": "t", "description": "d", "questions": []},
        {"isQuiz": False, "title": "t", "description": "d", "questions": "nope"},
    ],
)
def test_schema_mismatch_is_rejected(payload):
    with pytest.raises(DraftRejected):
        validate_llm_draft(payload)


def test_no_usable_questions_is_rejected():
    with pytest.raises(DraftRejected):
        validate_llm_draft(_draft([{"title": "  "}, "junk", 3], is_quiz=False))


def test_null_title_and_description_become_empty():
    result = validate_llm_draft(
        {"isQuiz": False, "title": None, "description": None, "questions": [{"title": "Name"}]}
    )
    assert result["title"] == ""
    assert result["description"] == ""
    assert result["questions"][0].key == "llm_q_1"
    assert result["questions"][0].type == "text"


def test_choice_with_single_option_downgrades_to_text():
    (question,) = normalize_llm_questions(
        [{"key": "k", "title": "Pick", "type": "choice", "options": ["only", " ", None], "correctAnswer": "only", "points": 2}]
    )
    assert question.type == "text"
    assert question.options == ()
    assert question.correct_answer == ""
    assert question.points == 0


def test_answer_outside_options_is_cleared():
    (question,) = normalize_llm_questions([_choice("k", answer="Z", points=3)])
    assert question.type == "choice"
    assert question.correct_answer == ""
    assert question.points == 0


def test_options_are_trimmed_and_capped():
    options = [f" opt{i} " for i in range(12)]
    (question,) = normalize_llm_questions([{"title": "Pick", "type": "choice", "options": options}])
    assert len(question.options) == 8
    assert question.options[0] == "opt0"


@pytest.mark.parametrize("points, expected", [("2", 2), (-1, 0), ("abc", 0), (1.5, 1.5), (float("nan"), 0)])
def test_points_are_coerced(points, expected):
    (question,) = normalize_llm_questions([_choice("k", points=points)])
    assert question.points == expected


def test_unknown_type_becomes_text_and_keys_are_deduplicated():
    questions = normalize_llm_questions(
        [
            {"key": "a", "title": "First", "type": "date"},
            {"key": "a", "title": "Duplicate"},
            {"key": "", "title": "Third"},
        ]
    )
    assert [q.key for q in questions] == ["a", "llm_q_3"]
    assert questions[0].type == "text"


def test_question_list_is_capped():
    questions = normalize_llm_questions([{"title": f"Q{i}"} for i in range(30)])
    assert len(questions) == 15
