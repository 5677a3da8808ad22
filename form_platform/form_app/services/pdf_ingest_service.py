"""Two-phase PDF ingest: embedded text layer first, OCR of rendered pages as fallback."""

from __future__ import annotations

import io
import logging
from typing import Iterable, List, Sequence

import pdfplumber
import pytesseract

from ..models import ExtractionResult
from .readability import OCR_READABILITY_MIN, TEXT_LAYER_READABILITY_MIN, readability_score
from .text_extractor import extract_questions_from_text

logger = logging.getLogger(__name__)

PARSE_ISSUE_NO_TEXT = "pdf_no_text"
PARSE_ISSUE_LOW_QUALITY = "pdf_low_quality_text"
PARSE_ISSUE_FAILED = "pdf_parse_failed"

DEFAULT_OCR_MAX_PAGES = 2
DEFAULT_OCR_RESOLUTION = 108  # 1.5x of the 72 dpi PDF user space
DEFAULT_OCR_LANGUAGES: Sequence[str] = ("chi_sim+eng", "eng")


def ingest_pdf_document(
    data: bytes,
    *,
    ocr_max_pages: int = DEFAULT_OCR_MAX_PAGES,
    ocr_resolution: int = DEFAULT_OCR_RESOLUTION,
    ocr_languages: Sequence[str] = DEFAULT_OCR_LANGUAGES,
) -> ExtractionResult:
    """Extract candidate questions from raw PDF bytes.

    The text layer is always tried first. OCR only runs once that attempt has
    finished without producing questions, and an OCR result is only accepted
    when it is readable and yields questions of its own.
    """
    result = ExtractionResult(file_type="pdf")
    _read_text_layer(data, result)
    if result.questions:
        return result

    try:
        ocr_text = extract_text_with_ocr(
            data,
            max_pages=ocr_max_pages,
            resolution=ocr_resolution,
            languages=ocr_languages,
        )
    except Exception as exc:
        logger.warning("PDF OCR failed: %s", exc)
        return result

    ocr_readability = readability_score(ocr_text)
    if not ocr_text or ocr_readability < OCR_READABILITY_MIN:
        logger.info("OCR text rejected (readability %.2f)", ocr_readability)
        return result
    questions = extract_questions_from_text(ocr_text)
    if not questions:
        return result

    result.questions = questions
    result.used_ocr = True
    result.parse_issue = ""
    result.text_length = len(ocr_text)
    result.readability_score = ocr_readability
    result.source_text = ocr_text
    result.extract_method = "pdf_ocr"
    return result


def _read_text_layer(data: bytes, result: ExtractionResult) -> None:
    pdf = None
    try:
        pdf = pdfplumber.open(io.BytesIO(data))
        text = "\n".join(_page_texts(pdf.pages))
        result.text_length = len(text.strip())
        result.source_text = text
        result.extract_method = "pdf_text"
        result.readability_score = readability_score(text)
        if not result.text_length:
            result.parse_issue = PARSE_ISSUE_NO_TEXT
        elif result.readability_score < TEXT_LAYER_READABILITY_MIN:
            # Garbled glyph mappings must not leak into the form.
            result.parse_issue = PARSE_ISSUE_LOW_QUALITY
        else:
            result.questions = extract_questions_from_text(text)
    except Exception as exc:
        logger.error("Failed to parse PDF: %s", exc)
        result.parse_issue = PARSE_ISSUE_FAILED
        result.questions = []
    finally:
        _close_quietly(pdf)


def _page_texts(pages: Iterable) -> List[str]:
    return [page.extract_text() or "" for page in pages]


def extract_text_with_ocr(
    data: bytes,
    *,
    max_pages: int = DEFAULT_OCR_MAX_PAGES,
    resolution: int = DEFAULT_OCR_RESOLUTION,
    languages: Sequence[str] = DEFAULT_OCR_LANGUAGES,
) -> str:
    """Render the leading pages and OCR them one at a time."""
    pdf = None
    try:
        pdf = pdfplumber.open(io.BytesIO(data))
        chunks: List[str] = []
        for page in pdf.pages[:max_pages]:
            image = page.to_image(resolution=resolution).original.convert("RGB")
            text = _recognize_page(image, languages)
            if text:
                chunks.append(text)
        return "\n".join(chunks).strip()
    finally:
        _close_quietly(pdf)


def _recognize_page(image, languages: Sequence[str]) -> str:
    primary, *fallbacks = languages
    try:
        return pytesseract.image_to_string(image, lang=primary).strip()
    except pytesseract.TesseractError as exc:
        if not fallbacks:
            raise
        logger.warning("OCR with %s failed, retrying with %s: %s", primary, fallbacks[0], exc)
    return _recognize_page(image, fallbacks)


def _close_quietly(pdf) -> None:
    if pdf is None:
        return
    try:
        pdf.close()
    except Exception as exc:
        logger.debug("Ignoring PDF close failure: %s", exc)
