"""form_app package – application factory and blueprint registration."""

from __future__ import annotations

import json
import os
from pathlib import Path
from time import perf_counter

import click
from flask import Flask, g, request

from config import resolve_config
from .blueprints import BLUEPRINTS
from .extensions import cors, limiter
from .logging_config import configure_logging, assign_request_id
from .metrics import record_request


def create_app(config_name: str | None = None) -> Flask:
    """Application factory used by both CLI and runtime servers."""

    app = Flask(__name__)
    _configure_app(app, config_name)
    configure_logging(app)
    _register_extensions(app)
    _register_blueprints(app)
    _register_cli(app)
    _register_request_hooks(app)

    return app


def _configure_app(app: Flask, config_name: str | None) -> None:
    env_name = config_name or os.getenv("FLASK_CONFIG")
    config_obj = resolve_config(env_name)
    app.config.from_object(config_obj)


def _register_extensions(app: Flask) -> None:
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )
    limiter.default_limits = app.config.get("RATE_LIMIT_DEFAULTS", [])
    limiter.init_app(app)


def _register_blueprints(app: Flask) -> None:
    for blueprint, prefix in BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix=prefix)


def _register_request_hooks(app: Flask) -> None:
    @app.before_request
    def start_request():
        assign_request_id()
        g.request_started_at = perf_counter()

    @app.after_request
    def finalize(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers["X-Request-ID"] = request_id
        started = getattr(g, "request_started_at", None)
        latency = perf_counter() - started if started else 0.0
        endpoint = request.endpoint or request.path
        record_request(request.method, endpoint, response.status_code, latency)
        return response


def _register_cli(app: Flask) -> None:
    @app.cli.command("preview-draft")
    @click.option("--prompt", default="", help="Free-text description of the desired form.")
    @click.option(
        "--file",
        "source_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Optional source document (.csv/.json/.txt/.md/.tsv/.pdf).",
    )
    def preview_draft(prompt: str, source_file: Path | None) -> None:
        """Print the draft that would be sent to Google Forms, as JSON."""

        from .models import ExtractionResult
        from .services import draft_service, upload_service

        source = ExtractionResult()
        source_name = ""
        if source_file is not None:
            source_name = source_file.name
            source = upload_service.extract_source(source_file.read_bytes(), source_name)
        if not prompt.strip() and not source.questions:
            raise click.UsageError("Provide --prompt or a file that yields questions.")

        draft = draft_service.build_draft(prompt, source.questions, source_name, source.source_text)
        output = {"draft": draft.to_dict()}
        if source_file is not None:
            output["source"] = source.summary(source_name)
        click.echo(json.dumps(output, ensure_ascii=False, indent=2))
