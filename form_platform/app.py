"""WSGI entry point for the form draft service.

Serves ``POST /api/forms/draft`` (prompt or uploaded file -> editable draft) and
``POST /api/forms/generate`` (draft -> published Google Form). ``.env`` files next
to this module and at the repository root are read before the app is built so
OPENAI_API_KEY, OPENAI_PROXY and the PDF_OCR_* settings reach ``config.py``.

    flask --app app run               # API on FLASK_RUN_PORT
    flask --app app preview-draft --prompt 报名表
    python app.py                     # API on PORT, default 3000
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

SERVICE_ROOT = Path(__file__).resolve().parent
ENV_FILES = (SERVICE_ROOT / ".env", SERVICE_ROOT.parent / ".env")
DEFAULT_PORT = 3000


def _load_env_files() -> None:
    if os.getenv("FLASK_SKIP_DOTENV") in {"1", "true", "True"}:
        return
    for env_file in ENV_FILES:
        try:
            # Earlier files win; load_dotenv never overrides variables already set.
            load_dotenv(env_file)
        except PermissionError:
            continue


_load_env_files()

from form_app import create_app  # noqa: E402  (config reads the environment at import)

app = create_app()


def _resolve_port() -> int:
    return int(os.getenv("PORT", os.getenv("FLASK_RUN_PORT", DEFAULT_PORT)))


if __name__ == "__main__":  # pragma: no cover
    app.run(
        debug=app.config.get("DEBUG", False),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_resolve_port(),
    )
