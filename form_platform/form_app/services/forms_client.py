"""Google Forms REST client with network retries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

import requests
from flask import current_app

from ..models import Draft
from .forms_payload import build_batch_requests
from .retry import RetryPolicy, linear_backoff

EDIT_URL_TEMPLATE = "https://docs.google.com/forms/d/{form_id}/edit"


class FormsApiError(RuntimeError):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class FormsAuthError(FormsApiError):
    """The Google access token was rejected; the user must log in again."""


@dataclass
class GoogleFormsClient:
    access_token: str
    api_base: str = "https://forms.googleapis.com/v1"
    proxy_url: str = ""
    timeout: float = 30
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)

    def _request(self, method: str, path: str, payload: Dict[str, Any] | None = None) -> Dict[str, Any]:
        proxies = {"http": self.proxy_url, "https": self.proxy_url} if self.proxy_url else None
        response = requests.request(
            method,
            f"{self.api_base.rstrip('/')}{path}",
            headers={"Authorization": f"Bearer {self.access_token}"},
            json=payload,
            proxies=proxies,
            timeout=self.timeout,
        )
        if response.status_code == 401:
            raise FormsAuthError("Google authorization expired. Please login again.", status=401)
        if response.status_code >= 400:
            raise FormsApiError(
                f"Google Forms API error {response.status_code}: {response.text[:200]}",
                status=response.status_code,
            )
        return response.json() if response.content else {}

    def create_form(self, title: str) -> Dict[str, Any]:
        body = {"info": {"title": title, "documentTitle": title}}
        return self.retry_policy.run("forms.create", lambda: self._request("POST", "/forms", body))

    def batch_update(self, form_id: str, requests_: list) -> Dict[str, Any]:
        body = {"requests": requests_}
        return self.retry_policy.run(
            "forms.batchUpdate",
            lambda: self._request("POST", f"/forms/{form_id}:batchUpdate", body),
        )

    def get_form(self, form_id: str) -> Dict[str, Any]:
        return self.retry_policy.run("forms.get", lambda: self._request("GET", f"/forms/{form_id}"))


def get_forms_client(access_token: str) -> GoogleFormsClient:
    config = current_app.config
    return GoogleFormsClient(
        access_token=access_token,
        api_base=config.get("FORMS_API_BASE", "https://forms.googleapis.com/v1"),
        proxy_url=config.get("GOOGLE_API_PROXY") or config.get("HTTPS_PROXY") or config.get("HTTP_PROXY") or "",
        timeout=config.get("FORMS_TIMEOUT_SEC", 30),
        retry_policy=RetryPolicy(
            max_attempts=int(config.get("FORMS_RETRY_ATTEMPTS", 3)),
            backoff=linear_backoff(float(config.get("FORMS_RETRY_BACKOFF_SEC", 0.4))),
        ),
    )


def publish_draft(draft: Draft, client: GoogleFormsClient) -> Dict[str, Any]:
    """Create the form, apply the draft and return its identifiers and URLs."""
    created = client.create_form(draft.title)
    form_id = created.get("formId")
    if not form_id:
        raise FormsApiError("Google Forms API did not return formId")

    client.batch_update(form_id, build_batch_requests(draft))
    form = client.get_form(form_id)
    return {
        "formId": form_id,
        "editUrl": EDIT_URL_TEMPLATE.format(form_id=form_id),
        "responderUrl": form.get("responderUri"),
    }
