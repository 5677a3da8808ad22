"""Translate a draft into Google Forms ``batchUpdate`` requests."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import Draft, Question


def to_create_item_request(question: Question, index: int) -> Dict[str, Any]:
    if question.type == "choice":
        choice_question: Dict[str, Any] = {
            "required": question.required,
            "choiceQuestion": {
                "type": "RADIO",
                "options": [{"value": value} for value in question.options],
            },
        }
        if question.correct_answer and question.correct_answer in question.options:
            choice_question["grading"] = {
                "pointValue": question.points if question.points > 0 else 1,
                "correctAnswers": {"answers": [{"value": question.correct_answer}]},
            }
        body = choice_question
    else:
        body = {
            "required": question.required,
            "textQuestion": {"paragraph": question.type == "paragraph"},
        }

    return {
        "createItem": {
            "location": {"index": index},
            "item": {
                "title": question.title,
                "questionItem": {"question": body},
            },
        }
    }


def build_batch_requests(draft: Draft) -> List[Dict[str, Any]]:
    requests_: List[Dict[str, Any]] = [
        {
            "updateFormInfo": {
                "info": {"description": draft.description},
                "updateMask": "description",
            }
        }
    ]
    if draft.is_quiz:
        requests_.append(
            {
                "updateSettings": {
                    "settings": {"quizSettings": {"isQuiz": True}},
                    "updateMask": "quizSettings.isQuiz",
                }
            }
        )
    requests_.extend(to_create_item_request(q, idx) for idx, q in enumerate(draft.questions))
    return requests_
