from __future__ import annotations
from datetime import datetime
from goodies.time_utils import parse_iso_datetime

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Integer, JSON, String, Text, DateTime
from sqlalchemy.orm import DeclarativeMeta


# Maximum price: 9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical prices
MAX_PRICE_CENTS = 999_999_999

PRICE_FIELDS = ("purchase_price_cents", "sell_price_cents", "sale_price_cents")


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate participant)."""


class NotFoundError(LookupError):
    """404-level: a referenced user, product, event, listing or participant does not exist."""


class InvalidTransitionError(ValueError):
    """409-level: the requested change is forbidden in the entity's current state."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    - extra_fields: accepted keys that are not columns (e.g. target_user_id)
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore
    extra_fields: set[str] | None = None


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_int(key: str, value: Any) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    if isinstance(coltype, Integer):
        return _coerce_int(col.key, value)

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            if dt is None:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{col.key} must be a datetime")

    # JSON columns hold lists of names/tags
    if isinstance(coltype, JSON):
        if not isinstance(value, (list, tuple)):
            raise ValidationError(f"{col.key} must be a list of strings")
        cleaned = []
        for item in value:
            if not isinstance(item, str):
                raise ValidationError(f"{col.key} must be a list of strings")
            item = item.strip()
            if item:
                cleaned.append(item)
        return cleaned

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    # Default: leave as-is
    return value


def _defaults_to_blank(col) -> bool:
    return col.default is not None and getattr(col.default, "arg", None) == ""


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)
    extra = policy.extra_fields or set()

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k in extra:
            continue
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        if k in extra:
            patch[k] = _coerce_int(k, raw) if raw is not None else None
            continue

        col = cols[k]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields without an empty default
        if isinstance(col.type, (String, Text)) and not col.nullable and not _defaults_to_blank(col):
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_price_cents(field: str, price) -> None:
    if price is None:
        return
    if not isinstance(price, int) or isinstance(price, bool):
        raise ValidationError(f"{field} must be an integer")
    if price < 0:
        raise ValidationError(f"{field} must be >= 0")
    if price > MAX_PRICE_CENTS:
        raise ValidationError(f"{field} cannot exceed {MAX_PRICE_CENTS}")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    from .choices import Condition, ProductType, Status

    for field in PRICE_FIELDS:
        if field in patch:
            enforce_price_cents(field, patch[field])

    for field in ("quantity", "threshold"):
        if field in patch and patch[field] is not None and patch[field] < 0:
            raise ValidationError(f"{field} must be >= 0")

    if "condition" in patch and patch["condition"] not in Condition.ALL:
        raise ValidationError(f"condition must be one of: {', '.join(Condition.ALL)}")

    if "status" in patch and patch["status"] not in Status.ALL:
        raise ValidationError(f"status must be one of: {', '.join(Status.ALL)}")

    if "product_types" in patch:
        unknown = [t for t in patch["product_types"] if t not in ProductType.ALL]
        if unknown:
            raise ValidationError(f"Unknown product types: {', '.join(unknown)}")

    # Lists must carry at least one entry
    for field in ("character_names", "license_names", "product_types"):
        if field in patch and not patch[field]:
            raise ValidationError(f"{field} must contain at least one value")


def enforce_rules_event(patch: dict) -> None:
    start = patch.get("start_time")
    end = patch.get("end_time")
    if start is not None and end is not None and end <= start:
        raise ValidationError("end_time must be after start_time")
