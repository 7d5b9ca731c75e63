from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    room = current_app.extensions["sketchspy"]["registry"].get_room(code)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    with room.lock:
        return jsonify(room.public_state())
