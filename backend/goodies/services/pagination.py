# Overview: Keyset (cursor) pagination over id-ordered queries.

"""
Cursor pagination.

A cursor is an opaque, signed token holding the last id returned and the
listing it belongs to ("scope"). Replaying it continues strictly after that
id, so pages never overlap or skip rows as long as the set is not being
mutated between calls. Tampered or foreign cursors are rejected.
"""

from __future__ import annotations

from flask import current_app
from itsdangerous import BadSignature, URLSafeSerializer

from ..validation import ValidationError

CURSOR_SALT = "goodies.pagination.cursor"


def _serializer() -> URLSafeSerializer:
    return URLSafeSerializer(current_app.config["SECRET_KEY"], salt=CURSOR_SALT)


def normalize_page_size(page_size: int | None) -> int:
    if page_size is None:
        return current_app.config["DEFAULT_PAGE_SIZE"]
    if page_size < 1:
        raise ValidationError("page_size must be >= 1")
    return min(page_size, current_app.config["MAX_PAGE_SIZE"])


def decode_cursor(cursor: str | None, scope: str) -> int | None:
    if not cursor:
        return None
    try:
        payload = _serializer().loads(cursor)
    except BadSignature:
        raise ValidationError("Invalid cursor")
    if not isinstance(payload, dict) or payload.get("scope") != scope:
        raise ValidationError("Cursor does not belong to this listing")
    after = payload.get("after")
    if not isinstance(after, int):
        raise ValidationError("Invalid cursor")
    return after


def encode_cursor(last_id: int, scope: str) -> str:
    return _serializer().dumps({"scope": scope, "after": last_id})


def paginate(
    query,
    *,
    id_column,
    scope: str,
    cursor: str | None,
    page_size: int | None,
    descending: bool = True,
) -> dict:
    """
    Fetch one page of query ordered by id_column.

    Returns {"page": [rows], "next_cursor": str | None, "is_done": bool}.
    """
    size = normalize_page_size(page_size)
    after = decode_cursor(cursor, scope)

    if after is not None:
        query = query.filter(id_column < after if descending else id_column > after)

    order = id_column.desc() if descending else id_column.asc()
    rows = query.order_by(order).limit(size + 1).all()

    has_more = len(rows) > size
    rows = rows[:size]

    return {
        "page": rows,
        "next_cursor": encode_cursor(rows[-1].id, scope) if has_more else None,
        "is_done": not has_more,
    }
