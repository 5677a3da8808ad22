"""Value objects that flow through the draft pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

QUESTION_TYPES = ("text", "paragraph", "choice")
MAX_DRAFT_QUESTIONS = 15


@dataclass(frozen=True)
class Question:
    key: str
    title: str
    type: str = "text"
    required: bool = False
    options: Tuple[str, ...] = ()
    correct_answer: str = ""
    points: float = 0

    def __post_init__(self) -> None:
        if self.type not in QUESTION_TYPES:
            raise ValueError(f"Unknown question type: {self.type}")
        if self.type != "choice" and (self.options or self.correct_answer or self.points):
            raise ValueError("Only choice questions may carry options, answers or points")
        if self.correct_answer and self.correct_answer not in self.options:
            raise ValueError("correct_answer must be one of the options")
        if self.points < 0:
            raise ValueError("points must be non-negative")

    @property
    def has_answer(self) -> bool:
        return bool(self.correct_answer)

    def with_required(self, required: bool) -> "Question":
        return replace(self, required=required)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "type": self.type,
            "required": self.required,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "points": self.points,
        }


def add_question(questions: List[Question], seen_keys: set, question: Optional[Question]) -> None:
    """Append ``question`` unless a question with the same key is already present."""
    if question is None:
        return
    if question.key and question.key in seen_keys:
        return
    if question.key:
        seen_keys.add(question.key)
    questions.append(question)


def dedupe_questions(candidates: Iterable[Optional[Question]]) -> List[Question]:
    questions: List[Question] = []
    seen: set = set()
    for candidate in candidates:
        add_question(questions, seen, candidate)
    return questions


@dataclass
class ExtractionResult:
    """Outcome of reading one uploaded file."""

    questions: List[Question] = field(default_factory=list)
    file_type: str = ""
    text_length: int = 0
    parse_issue: str = ""
    readability_score: float = 0.0
    used_ocr: bool = False
    source_text: str = ""
    extract_method: str = ""

    def summary(self, file_name: str) -> Dict[str, Any]:
        return {
            "fileName": file_name,
            "fileType": self.file_type,
            "textLength": self.text_length,
            "readabilityScore": round(self.readability_score, 2),
            "usedFileQuestions": bool(self.questions),
            "parseIssue": self.parse_issue or None,
            "usedOcr": self.used_ocr,
            "extractMethod": self.extract_method or "unknown",
        }


@dataclass(frozen=True)
class Draft:
    title: str
    description: str
    questions: Tuple[Question, ...]
    is_quiz: bool
    generation_mode: str
    llm_model_used: Optional[str] = None
    need_llm_for_quiz: bool = False

    @property
    def answer_key_count(self) -> int:
        return sum(1 for q in self.questions if q.has_answer)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "questions": [q.to_dict() for q in self.questions],
            "isQuiz": self.is_quiz,
            "generationMode": self.generation_mode,
            "llmModelUsed": self.llm_model_used,
            "needLlmForQuiz": self.need_llm_for_quiz,
            "answerKeyCount": self.answer_key_count,
        }
