"""Prompt intent heuristics: quiz detection, topic, desired count, form category."""

from __future__ import annotations

import re
from typing import Optional, Sequence, Tuple

DEFAULT_QUIZ_COUNT = 8
MIN_QUIZ_COUNT = 3
MAX_QUIZ_COUNT = 20
TITLE_SUMMARY_CHARS = 28

_QUIZ_INTENT = re.compile(r"(quiz|测验|测试|考察|知识问答|知识测试)", re.IGNORECASE)
_ARABIC_COUNT = re.compile(r"(\d{1,2})\s*(题|道|questions?)", re.IGNORECASE)
_CHINESE_COUNT = re.compile(r"([三四五六七八九十])\s*(题|道)")
_CHINESE_NUMERALS = {"三": 3, "四": 4, "五": 5, "六": 6, "七": 7, "八": 8, "九": 9, "十": 10}

_TOPIC_OPENAI = re.compile(r"(openai|chatgpt|gpt|llm|大模型|提示词|prompt|api)", re.IGNORECASE)
_TOPIC_CHINA = re.compile(r"(中国|中华|china|chinese)", re.IGNORECASE)

# (category, pattern, title template); first match wins.
CATEGORY_RULES: Sequence[Tuple[str, "re.Pattern[str]", str]] = (
    ("registration", re.compile(r"报名|活动|参会|参赛|讲座"), "活动报名表"),
    ("survey", re.compile(r"问卷|调研|调查"), "问卷调研表"),
    ("recruitment", re.compile(r"招聘|应聘|简历"), "岗位申请表"),
    ("booking", re.compile(r"预约|预定|排期"), "预约登记表"),
)


def is_quiz_intent(prompt: str) -> bool:
    return bool(_QUIZ_INTENT.search(prompt or ""))


def parse_desired_question_count(prompt: str) -> int:
    prompt = prompt or ""
    arabic = _ARABIC_COUNT.search(prompt)
    if arabic:
        return min(max(int(arabic.group(1)), MIN_QUIZ_COUNT), MAX_QUIZ_COUNT)

    chinese = _CHINESE_COUNT.search(prompt)
    if chinese and chinese.group(1) in _CHINESE_NUMERALS:
        return _CHINESE_NUMERALS[chinese.group(1)]

    return DEFAULT_QUIZ_COUNT


def detect_quiz_topic(prompt: str) -> str:
    prompt = prompt or ""
    if _TOPIC_OPENAI.search(prompt):
        return "openai"
    if _TOPIC_CHINA.search(prompt):
        return "china"
    return "unknown"


def detect_category(prompt: str) -> Optional[str]:
    for category, pattern, _title in CATEGORY_RULES:
        if pattern.search(prompt or ""):
            return category
    return None


def infer_title(prompt: str) -> str:
    prompt = prompt or ""
    if is_quiz_intent(prompt):
        return "中国知识测验" if _TOPIC_CHINA.search(prompt) else "知识测验"
    for _category, pattern, title in CATEGORY_RULES:
        if pattern.search(prompt):
            return title
    summary = prompt.strip()[:TITLE_SUMMARY_CHARS]
    return f"{summary} - 自动生成表单" if summary else "自动生成表单"
