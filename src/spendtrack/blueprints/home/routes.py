"""Root health check."""

from __future__ import annotations

from flask import current_app, jsonify

from . import bp


@bp.get("/")
def index():
    return jsonify({"status": "ok", "app": current_app.config.get("APP_NAME", "SpendTrack")})
