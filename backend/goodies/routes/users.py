# Overview: Flask API routes for the user directory.

from flask import Blueprint, request, g, jsonify

from ..services import user_service
from ..decorators import require_auth
from .errors import DOMAIN_ERRORS, json_error

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("/me")
@require_auth
def current_user_route():
    """The local user behind the caller's session token."""
    return {"user": g.current_user.to_dict()}, 200


@users_bp.get("/lite")
@require_auth
def list_users_lite_route():
    """
    Oldest-first page of {id, label} entries for user pickers.

    Query params:
    - cursor: str (optional)
    - page_size: int (optional)
    """
    try:
        result = user_service.list_users_lite(
            cursor=request.args.get("cursor"),
            page_size=request.args.get("page_size", type=int),
        )
    except DOMAIN_ERRORS as e:
        return json_error(e)
    return jsonify(result)


@users_bp.get("")
@require_auth
def list_all_users_route():
    items = user_service.list_all_users()
    return jsonify({"items": items, "count": len(items)})
