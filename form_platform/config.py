"""Application configuration objects."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Type


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class BaseConfig:
    """Shared defaults across all environments."""

    APP_NAME = "Form Chat Generator"
    SERVICE_NAME = "form-chat-generator"
    SECRET_KEY = os.getenv("SESSION_SECRET", "change_me")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
    OPENAI_API_BASE = os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1")
    OPENAI_PROXY = os.getenv("OPENAI_PROXY", "")
    HTTPS_PROXY = os.getenv("HTTPS_PROXY", "")
    HTTP_PROXY = os.getenv("HTTP_PROXY", "")
    OPENAI_FALLBACK_PROXY = os.getenv("OPENAI_FALLBACK_PROXY", "http://127.0.0.1:7890")
    AI_CONNECT_TIMEOUT_SEC = int(os.getenv("AI_CONNECT_TIMEOUT_SEC", "15"))
    AI_READ_TIMEOUT_SEC = int(os.getenv("AI_READ_TIMEOUT_SEC", "30"))
    GOOGLE_API_PROXY = os.getenv("GOOGLE_API_PROXY", "")
    FORMS_API_BASE = os.getenv("FORMS_API_BASE", "https://forms.googleapis.com/v1")
    FORMS_TIMEOUT_SEC = int(os.getenv("FORMS_TIMEOUT_SEC", "30"))
    FORMS_RETRY_ATTEMPTS = int(os.getenv("FORMS_RETRY_ATTEMPTS", "3"))
    FORMS_RETRY_BACKOFF_SEC = float(os.getenv("FORMS_RETRY_BACKOFF_SEC", "0.4"))
    PDF_OCR_MAX_PAGES = int(os.getenv("PDF_OCR_MAX_PAGES", "2"))
    PDF_OCR_RESOLUTION = int(os.getenv("PDF_OCR_RESOLUTION", "108"))
    OCR_LANGUAGES = [
        lang.strip() for lang in os.getenv("OCR_LANGUAGES", "chi_sim+eng;eng").split(";") if lang.strip()
    ]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    RATE_LIMIT_DEFAULTS = [
        limit.strip()
        for limit in os.getenv("RATE_LIMIT_DEFAULTS", "200 per minute;1000 per day").split(";")
        if limit.strip()
    ]
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "true")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    JSON_SORT_KEYS = False


class DevConfig(BaseConfig):
    DEBUG = True


class ProdConfig(BaseConfig):
    DEBUG = False


class TestConfig(BaseConfig):
    TESTING = True
    OPENAI_API_KEY = ""
    OPENAI_PROXY = ""
    HTTPS_PROXY = ""
    HTTP_PROXY = ""
    OPENAI_FALLBACK_PROXY = ""
    GOOGLE_API_PROXY = ""
    FORMS_RETRY_BACKOFF_SEC = 0.0
    RATELIMIT_ENABLED = False


CONFIG_ALIASES: dict[str, Type[BaseConfig]] = {
    "dev": DevConfig,
    "development": DevConfig,
    "prod": ProdConfig,
    "production": ProdConfig,
    "test": TestConfig,
    "testing": TestConfig,
}


@lru_cache
def resolve_config(name_or_class: Any) -> Any:
    """Resolve config argument to the object expected by `app.config.from_object`."""

    if name_or_class is None:
        return DevConfig
    if isinstance(name_or_class, str):
        return CONFIG_ALIASES.get(name_or_class, name_or_class)
    return name_or_class
