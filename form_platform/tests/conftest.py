"""Pytest configuration for ensuring project modules resolve correctly."""

from __future__ import annotations

import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from form_app import create_app


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(payload, ensure_ascii=False) if payload is not None else ""
        self.text = text
        self.content = text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


@pytest.fixture()
def app():
    app = create_app("test")
    with app.app_context():
        yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def google_token():
    return "ya29.test-token"


@pytest.fixture()
def llm_app(app):
    """App with an API key configured so the LLM path is attempted."""
    app.config["OPENAI_API_KEY"] = "sk-test"
    app.extensions.pop("ai_client", None)
    return app


def chat_completion(content) -> dict:
    if not isinstance(content, str):
        content = json.dumps(content, ensure_ascii=False)
    return {"choices": [{"message": {"content": content}}]}
