from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    state = current_app.extensions["sketchspy"]
    return jsonify({
        "status": "ok",
        "rooms": len(state["registry"]),
        "connections": len(state["connections"]),
    })
