"""Dispatch an uploaded file to the matching extractor."""

from __future__ import annotations

from typing import List

from flask import current_app, has_app_context

from ..metrics import record_upload
from ..models import MAX_DRAFT_QUESTIONS, ExtractionResult, dedupe_questions
from ..utils.file_parser import (
    FILE_KIND_CSV,
    FILE_KIND_JSON,
    FILE_KIND_PDF,
    FILE_KIND_TEXT,
    classify_file,
    decode_text,
    extract_field_lines,
    file_type_label,
    parse_csv_header,
    parse_json_keys,
)
from .field_library import question_from_field
from .pdf_ingest_service import (
    DEFAULT_OCR_LANGUAGES,
    DEFAULT_OCR_MAX_PAGES,
    DEFAULT_OCR_RESOLUTION,
    ingest_pdf_document,
)

MAX_SOURCE_TEXT = 12000

PDF_ISSUE_MESSAGES = {
    "pdf_no_text": "这个 PDF 没有可提取文字（通常是扫描图片 PDF）。请换可复制文字的 PDF，或上传 TXT/CSV/JSON。",
    "pdf_low_quality_text": "这个 PDF 的可提取文本大多是乱码（编码映射缺失）。请换可复制文字版 PDF，或改用 OCR 后的文本文件。",
}
PDF_ISSUE_DEFAULT_MESSAGE = "PDF 解析失败，请换一个 PDF 重试，或上传 TXT/CSV/JSON。"

_FIELD_READERS = {
    FILE_KIND_CSV: parse_csv_header,
    FILE_KIND_JSON: parse_json_keys,
    FILE_KIND_TEXT: extract_field_lines,
}


def extract_source(data: bytes | None, filename: str = "", mimetype: str = "") -> ExtractionResult:
    """Build an :class:`ExtractionResult` for one upload. Unknown kinds yield an empty result."""
    if not data:
        return ExtractionResult()

    kind = classify_file(filename, mimetype)
    file_type = file_type_label(filename, kind)
    fields: List[str] = []

    if kind == FILE_KIND_PDF:
        result = ingest_pdf_document(data, **_ocr_options())
    else:
        result = ExtractionResult()
        if kind in _FIELD_READERS:
            text = decode_text(data)
            result.text_length = len(text)
            result.source_text = text
            result.extract_method = "raw_text"
            fields = _FIELD_READERS[kind](text)
    result.file_type = file_type

    if not result.questions:
        result.questions = dedupe_questions(question_from_field(name) for name in fields)
    result.questions = result.questions[:MAX_DRAFT_QUESTIONS]
    result.source_text = result.source_text[:MAX_SOURCE_TEXT]
    record_upload(result.file_type, result.extract_method)
    return result


def describe_pdf_issue(parse_issue: str) -> str:
    return PDF_ISSUE_MESSAGES.get(parse_issue, PDF_ISSUE_DEFAULT_MESSAGE)


def _ocr_options() -> dict:
    if not has_app_context():
        return {}
    config = current_app.config
    return {
        "ocr_max_pages": int(config.get("PDF_OCR_MAX_PAGES", DEFAULT_OCR_MAX_PAGES)),
        "ocr_resolution": int(config.get("PDF_OCR_RESOLUTION", DEFAULT_OCR_RESOLUTION)),
        "ocr_languages": tuple(config.get("OCR_LANGUAGES") or DEFAULT_OCR_LANGUAGES),
    }
