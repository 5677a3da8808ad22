"""Turn free-form document text into candidate form questions.

Four strategies run in order and the first one that yields questions wins:
explicit interrogative lines, list items, declarative sentences, and finally
bare field-name lines mapped through the field library.
"""

from __future__ import annotations

import re
from typing import Callable, List, Sequence

from ..models import MAX_DRAFT_QUESTIONS, Question, dedupe_questions
from ..utils.file_parser import extract_field_lines
from .field_library import is_paragraph_hint, question_from_field
from .readability import LINE_READABILITY_MIN, readability_score

MIN_TEXT_LENGTH = 20
FILL_IN_SUFFIX = "（请填写）"
SENTENCE_PREFIX = "请根据文档内容说明："

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_INLINE_SPACE = re.compile(r"[ \t]+")
_BLANK_RUNS = re.compile(r"\n{3,}")
_ENDS_AS_QUESTION = re.compile(r"([?？]|吗)$")
_QUESTION_MARKER = re.compile(r"^q[\d:：.\s]", re.IGNORECASE)
_BULLET = re.compile(r"^[-*•]\s*")
_ORDINAL = re.compile(r"^\d+[).、]\s*")
_SENTENCE_BREAK = re.compile(r"[。.!！？\n]")
_URL = re.compile(r"^https?://", re.IGNORECASE)

Strategy = Callable[[str, List[str]], List[Question]]


def normalize_text(text: str) -> str:
    text = _CONTROL_CHARS.sub(" ", text or "")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _INLINE_SPACE.sub(" ", text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip()


def _readable_lines(normalized: str) -> List[str]:
    lines = (line.strip() for line in normalized.split("\n"))
    return [line for line in lines if line and readability_score(line) >= LINE_READABILITY_MIN]


def _interrogative_lines(_normalized: str, lines: List[str]) -> List[Question]:
    picked = [
        line
        for line in lines
        if 4 <= len(line) <= 120 and (_ENDS_AS_QUESTION.search(line) or _QUESTION_MARKER.match(line))
    ][:15]
    return [
        Question(
            key=f"pdf_q_{idx}",
            title=line if _ENDS_AS_QUESTION.search(line) else f"{line}{FILL_IN_SUFFIX}",
            type="paragraph" if len(line) > 36 else "text",
        )
        for idx, line in enumerate(picked, start=1)
    ]


def _list_items(_normalized: str, lines: List[str]) -> List[Question]:
    items = []
    for line in lines:
        item = _ORDINAL.sub("", _BULLET.sub("", line)).strip()
        if 2 <= len(item) <= 60:
            items.append(item)
    items = items[:12]
    if len(items) < 3:
        return []
    return [
        Question(
            key=f"pdf_list_{idx}",
            title=f"{item}{FILL_IN_SUFFIX}",
            type="paragraph" if is_paragraph_hint(item) else "text",
        )
        for idx, item in enumerate(items, start=1)
    ]


def _sentences(normalized: str, _lines: List[str]) -> List[Question]:
    fragments = (fragment.strip() for fragment in _SENTENCE_BREAK.split(normalized))
    picked = [s for s in fragments if 8 <= len(s) <= 72 and not _URL.match(s)][:8]
    return [
        Question(key=f"pdf_sentence_{idx}", title=f"{SENTENCE_PREFIX}{sentence}", type="paragraph")
        for idx, sentence in enumerate(picked, start=1)
    ]


def _bare_field_names(normalized: str, _lines: List[str]) -> List[Question]:
    questions = dedupe_questions(question_from_field(name) for name in extract_field_lines(normalized))
    return questions[:MAX_DRAFT_QUESTIONS]


STRATEGIES: Sequence[Strategy] = (
    _interrogative_lines,
    _list_items,
    _sentences,
    _bare_field_names,
)


def extract_questions_from_text(text: str) -> List[Question]:
    normalized = normalize_text(text)
    if len(normalized) < MIN_TEXT_LENGTH:
        return []
    lines = _readable_lines(normalized)
    for strategy in STRATEGIES:
        questions = strategy(normalized, lines)
        if questions:
            return questions
    return []
