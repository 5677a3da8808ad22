"""Operational endpoints: health check and Prometheus scraping."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify

from ..metrics import latest_metrics

metrics_bp = Blueprint("metrics_bp", __name__)


@metrics_bp.get("/healthz")
def healthz():
    return jsonify({"ok": True, "service": current_app.config.get("SERVICE_NAME", "form-chat-generator")})


@metrics_bp.get("/metrics")
def metrics():
    payload, content_type = latest_metrics()
    return Response(payload, mimetype=content_type)
