# Overview: Flask API routes exposing the closed value sets (roles, conditions, ...).

from flask import Blueprint, jsonify

from ..choices import ENUM_OPTIONS, get_options
from ..validation import ValidationError

options_bp = Blueprint("options", __name__, url_prefix="/api/options")


@options_bp.get("")
def list_option_sets():
    return jsonify({name: list(values) for name, values in ENUM_OPTIONS.items()})


@options_bp.get("/<string:name>")
def get_option_set(name: str):
    try:
        values = get_options(name)
    except ValidationError as e:
        return {"error": str(e)}, 404
    return jsonify({"name": name, "options": values})
