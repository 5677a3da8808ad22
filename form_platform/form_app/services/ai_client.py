"""Simple AI client for calling an OpenAI-compatible chat completions endpoint."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import List, Sequence

import requests
from flask import current_app

from .retry import first_success

DIRECT = ""


@dataclass
class ChatResponse:
    status: int
    text: str
    proxy_url: str = DIRECT


@dataclass
class AIClient:
    api_key: str
    api_base: str
    default_model: str
    proxy_candidates: Sequence[str] = field(default_factory=tuple)
    connect_timeout: float = 15
    read_timeout: float = 30

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def egress_paths(self) -> List[str]:
        """Configured proxies in order, de-duplicated, followed by a direct attempt."""
        paths: List[str] = []
        for proxy in self.proxy_candidates:
            if proxy and proxy not in paths:
                paths.append(proxy)
        paths.append(DIRECT)
        return paths

    def post_chat(self, payload: dict, proxy_url: str = DIRECT) -> ChatResponse:
        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is not configured")
        proxies = {"http": proxy_url, "https": proxy_url} if proxy_url else None
        response = requests.post(
            f"{self.api_base.rstrip('/')}/chat/completions",
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            proxies=proxies,
            timeout=(self.connect_timeout, self.read_timeout),
        )
        return ChatResponse(status=response.status_code, text=response.text, proxy_url=proxy_url)

    def chat_via_any_path(self, payload: dict) -> ChatResponse:
        """Send ``payload`` through the first egress path that answers with an HTTP status."""
        _path, response = first_success(self.egress_paths(), lambda path: self.post_chat(payload, path))
        return response


def get_ai_client() -> AIClient:
    app = current_app
    client = app.extensions.get("ai_client")
    if client is None:
        config = app.config
        client = AIClient(
            api_key=config.get("OPENAI_API_KEY", ""),
            api_base=config.get("OPENAI_API_BASE", "https://api.openai.com/v1"),
            default_model=config.get("OPENAI_MODEL", "gpt-4.1-mini"),
            proxy_candidates=(
                config.get("OPENAI_PROXY", ""),
                config.get("HTTPS_PROXY", ""),
                config.get("HTTP_PROXY", ""),
                config.get("OPENAI_FALLBACK_PROXY", ""),
            ),
            connect_timeout=config.get("AI_CONNECT_TIMEOUT_SEC", 15),
            read_timeout=config.get("AI_READ_TIMEOUT_SEC", 30),
        )
        app.extensions["ai_client"] = client
    return client
