"""Utilities for reading uploaded files into raw field names."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import List

FILE_KIND_CSV = "csv"
FILE_KIND_JSON = "json"
FILE_KIND_PDF = "pdf"
FILE_KIND_TEXT = "text"

TEXT_SUFFIXES = {".txt", ".md", ".tsv"}
MAX_FIELD_LINES = 30
MAX_FIELD_LINE_LENGTH = 40

_HEADER_SPLIT = re.compile(r",|\t|;")
_LEADING_MARKERS = re.compile(r"^[-*\d\s.)]+")


def strip_list_marker(text: str) -> str:
    return _LEADING_MARKERS.sub("", text).strip()


def decode_text(data: bytes | str) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def classify_file(filename: str, mimetype: str) -> str | None:
    """Return the extraction path for an upload; extension wins over MIME."""
    name = (filename or "").lower()
    mime = (mimetype or "").lower()
    suffix = Path(name).suffix
    if suffix == ".csv" or "csv" in mime:
        return FILE_KIND_CSV
    if suffix == ".json" or "json" in mime:
        return FILE_KIND_JSON
    if suffix == ".pdf" or "pdf" in mime:
        return FILE_KIND_PDF
    if suffix in TEXT_SUFFIXES or mime.startswith("text/"):
        return FILE_KIND_TEXT
    return None


def file_type_label(filename: str, kind: str | None) -> str:
    if kind == FILE_KIND_PDF:
        return "pdf"
    name = (filename or "").lower()
    if "." in name:
        return name.rsplit(".", 1)[-1] or "unknown"
    return name or "unknown"


def parse_csv_header(text: str) -> List[str]:
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []
    first_line = lines[0].lstrip("\ufeff").strip()
    if not first_line:
        return []
    headers = []
    for cell in _HEADER_SPLIT.split(first_line):
        cell = re.sub(r'^"|"$', "", cell).strip()
        if cell:
            headers.append(cell)
    return headers


def parse_json_keys(text: str) -> List[str]:
    try:
        value = json.loads(text)
    except (TypeError, ValueError):
        return []
    if isinstance(value, list):
        if value and isinstance(value[0], dict):
            return list(value[0].keys())
        return []
    if isinstance(value, dict):
        return list(value.keys())
    return []


def extract_field_lines(text: str) -> List[str]:
    """Short, non-empty lines that plausibly name a form field."""
    lines = [line.strip() for line in text.splitlines() if line.strip()][:MAX_FIELD_LINES]
    fields = []
    for line in lines:
        if len(line) > MAX_FIELD_LINE_LENGTH:
            continue
        cleaned = strip_list_marker(line)
        if len(cleaned) >= 2:
            fields.append(cleaned)
    return fields
