"""Readability scoring used to detect OCR / encoding garbage."""

from __future__ import annotations

import re

LINE_READABILITY_MIN = 0.50
TEXT_LAYER_READABILITY_MIN = 0.42
OCR_READABILITY_MIN = 0.35

_WHITESPACE = re.compile(r"\s+")
_READABLE_CHAR = re.compile(
    r"[\u4e00-\u9fa5A-Za-z0-9，。！？、；：“”‘’（）()【】《》,.!?;:'\"_%@#&/+\-]"
)


def readability_score(text: str | None) -> float:
    """Fraction of non-whitespace characters that look like real CJK/Latin text."""
    if not text:
        return 0.0
    compact = _WHITESPACE.sub("", text)
    if not compact:
        return 0.0
    readable = len(_READABLE_CHAR.findall(compact))
    return readable / len(compact)
