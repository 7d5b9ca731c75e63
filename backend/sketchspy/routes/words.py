from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("words", __name__)


@bp.get("/categories")
def get_categories():
    word_bank = current_app.extensions["sketchspy"]["registry"].word_bank
    return jsonify({"categories": word_bank.categories()})
