"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

REQUEST_COUNT = Counter(
    "form_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "form_request_latency_seconds",
    "Latency of HTTP requests in seconds",
    ["endpoint"],
)
DRAFT_COUNT = Counter(
    "form_draft_total",
    "Form drafts produced, by generation mode",
    ["mode"],
)
LLM_ATTEMPTS = Counter(
    "form_llm_attempts_total",
    "LLM draft attempts per model and outcome",
    ["model", "outcome"],
)
UPLOAD_COUNT = Counter(
    "form_upload_total",
    "Uploaded source files by type and extraction method",
    ["file_type", "extract_method"],
)


def record_request(method: str, endpoint: str, status: int, latency: float) -> None:
    REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency)


def record_draft(mode: str) -> None:
    DRAFT_COUNT.labels(mode=mode).inc()


def record_llm_attempt(model: str, outcome: str) -> None:
    LLM_ATTEMPTS.labels(model=model, outcome=outcome).inc()


def record_upload(file_type: str, extract_method: str) -> None:
    UPLOAD_COUNT.labels(file_type=file_type or "unknown", extract_method=extract_method or "none").inc()


def latest_metrics() -> tuple[bytes, str]:
    data = generate_latest()
    return data, CONTENT_TYPE_LATEST
