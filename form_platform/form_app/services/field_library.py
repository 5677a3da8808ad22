"""Canonical form fields and the normalizer that maps raw tokens onto them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..models import Question
from ..utils.file_parser import strip_list_marker


@dataclass(frozen=True)
class FieldDescriptor:
    key: str
    keywords: Tuple[str, ...]
    title: str
    type: str = "text"
    required: bool = False
    options: Tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        return any(keyword.lower() in lowered for keyword in self.keywords)

    def to_question(self) -> Question:
        return Question(
            key=self.key,
            title=self.title,
            type=self.type,
            required=self.required,
            options=self.options,
        )


# Ordered: the first descriptor whose keywords match wins.
FIELD_LIBRARY: Sequence[FieldDescriptor] = (
    FieldDescriptor(
        key="name",
        keywords=("姓名", "名字", "名称", "name"),
        title="你的姓名是？",
        required=True,
    ),
    FieldDescriptor(
        key="email",
        keywords=("邮箱", "邮件", "email", "e-mail"),
        title="你的邮箱是？",
        required=True,
    ),
    FieldDescriptor(
        key="phone",
        keywords=("手机", "电话", "联系方式", "phone", "mobile"),
        title="你的手机号是？",
    ),
    FieldDescriptor(
        key="company",
        keywords=("公司", "单位", "company", "organization"),
        title="你的公司名称是？",
    ),
    FieldDescriptor(
        key="role",
        keywords=("职位", "岗位", "角色", "部门", "position", "department"),
        title="你的职位/部门是？",
    ),
    FieldDescriptor(
        key="gender",
        keywords=("性别", "gender"),
        title="你的性别是？",
        type="choice",
        options=("男", "女", "不便透露", "其他"),
    ),
    FieldDescriptor(
        key="diet",
        keywords=("饮食", "忌口", "餐食", "食物偏好", "diet"),
        title="你的饮食偏好是？",
        type="choice",
        options=("无特殊要求", "素食", "清真", "其他"),
    ),
    FieldDescriptor(
        key="joinMode",
        keywords=("线上", "线下", "参会方式", "参与方式"),
        title="你希望以哪种方式参加？",
        type="choice",
        options=("线下", "线上"),
    ),
)

_FILLER_WORDS = re.compile(r"(我要|我想要|请|帮我|需要|收集|包含|包括|字段|信息)")
_PARAGRAPH_HINT = re.compile(r"(备注|说明|描述|建议|comment|note|description|feedback)", re.IGNORECASE)
_SLUG_BREAK = re.compile(r"[^0-9a-z_\u4e00-\u9fa5]+")
_WORD_START = re.compile(r"\b[a-z]", re.ASCII)


def normalize_token(token: str) -> str:
    """Drop bullets, ordinals and request filler words from a raw token."""
    return _FILLER_WORDS.sub("", strip_list_marker(token)).strip()


def is_paragraph_hint(text: str) -> bool:
    return bool(_PARAGRAPH_HINT.search(text))


def slugify(text: str) -> str:
    return _SLUG_BREAK.sub("_", text.strip().lower())


def prettify_field_name(name: str) -> str:
    pretty = re.sub(r"[_-]+", " ", (name or "").strip())
    pretty = re.sub(r"\s+", " ", pretty)
    return _WORD_START.sub(lambda m: m.group(0).upper(), pretty)


def find_field(text: str) -> Optional[FieldDescriptor]:
    for descriptor in FIELD_LIBRARY:
        if descriptor.matches(text):
            return descriptor
    return None


def field_by_key(key: str) -> FieldDescriptor:
    for descriptor in FIELD_LIBRARY:
        if descriptor.key == key:
            return descriptor
    raise KeyError(key)


def matching_fields(text: str) -> List[FieldDescriptor]:
    return [descriptor for descriptor in FIELD_LIBRARY if descriptor.matches(text)]


def question_from_field(field_name: str) -> Optional[Question]:
    """Map a raw field name onto a canonical question, or synthesize one."""
    raw = (field_name or "").strip()
    if not raw:
        return None
    cleaned = normalize_token(raw) or raw

    known = find_field(cleaned)
    if known:
        return known.to_question()

    return Question(
        key=f"field_{slugify(cleaned)}",
        title=f"{prettify_field_name(cleaned)}（请填写）",
        type="paragraph" if is_paragraph_hint(cleaned) else "text",
        required=False,
    )
