"""REST API blueprints (form generation, metrics)."""

from __future__ import annotations

from .forms_bp import forms_bp
from .metrics_bp import metrics_bp

BLUEPRINTS = (
    (forms_bp, "/api/forms"),
    (metrics_bp, ""),
)

__all__ = [
    "BLUEPRINTS",
    "forms_bp",
    "metrics_bp",
]
