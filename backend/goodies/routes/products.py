# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/goodies/routes/products.py
"""
Product management routes.

SECURITY: All routes require authentication.
- Reads are open to any signed-in user (paginated listing is owner-scoped)
- Writes require ownership or the Administrator role (see permission_service)
"""
from flask import Blueprint, request, g, jsonify, current_app

from ..models import Product
from ..services import products_service
from ..services.products_service import PRODUCT_MUTABLE_FIELDS
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
)
from ..decorators import require_auth
from .errors import DOMAIN_ERRORS, json_error

PRODUCT_CREATE_POLICY = ModelValidationPolicy(
    writable_fields=set(PRODUCT_MUTABLE_FIELDS),
    required_on_create={
        "name",
        "character_names",
        "license_names",
        "product_types",
        "condition",
        "status",
        "storage_location",
        "purchase_location",
        "purchase_date",
        "purchase_price_cents",
    },
    extra_fields={"target_user_id"},
)

# Reassigning ownership is allowed on update (Administrator only, checked in the service)
PRODUCT_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields=set(PRODUCT_MUTABLE_FIELDS) | {"owner_user_id"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def _listing(products):
    items = [p.to_dict() for p in products]
    return jsonify({"items": items, "count": len(items)})


@products_bp.get("")
@require_auth
def list_products_route():
    """List every product, oldest first."""
    return _listing(products_service.list_products())


@products_bp.get("/status/<string:status>")
@require_auth
def list_products_by_status_route(status: str):
    try:
        products = products_service.list_products_by_status(status)
    except ValidationError as e:
        return {"error": str(e)}, 400
    return _listing(products)


@products_bp.get("/type/<string:product_type>")
@require_auth
def list_products_by_type_route(product_type: str):
    try:
        products = products_service.list_products_by_type(product_type)
    except ValidationError as e:
        return {"error": str(e)}, 400
    return _listing(products)


@products_bp.get("/paginated")
@require_auth
def list_products_paginated_route():
    """
    Newest-first page of products.

    Query params:
    - cursor: str (optional) - next_cursor from the previous page
    - page_size: int (optional) - default 20, max 100
    - target_user_id: int (optional) - list this owner's products
    """
    try:
        result = products_service.list_products_paginated(
            actor=g.current_user,
            cursor=request.args.get("cursor"),
            page_size=request.args.get("page_size", type=int),
            target_user_id=request.args.get("target_user_id", type=int),
        )
    except DOMAIN_ERRORS as e:
        return json_error(e)
    return jsonify(result)


@products_bp.get("/mine")
@require_auth
def list_my_products_route():
    return _listing(products_service.list_my_products(actor=g.current_user))


@products_bp.get("/<int:product_id>")
@require_auth
def get_product_route(product_id: int):
    product = products_service.get_product(product_id)
    if product is None:
        return {"error": "Product not found"}, 404
    return {"product": product.to_dict()}, 200


@products_bp.post("")
@require_auth
def create_product_route():
    """
    Create a product owned by the caller.

    An Administrator may pass target_user_id to create on someone's behalf.
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_CREATE_POLICY, partial=False)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        product_id = products_service.create_product(patch=patch, actor=g.current_user)
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return {"id": product_id}, 201


@products_bp.patch("/<int:product_id>")
@require_auth
def update_product_route(product_id: int):
    """Partially update a product (owner or Administrator)."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_UPDATE_POLICY, partial=True)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        updated_id = products_service.update_product(
            product_id=product_id, patch=patch, actor=g.current_user
        )
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to update product %s", product_id)
        return {"error": "Internal server error"}, 500

    return {"id": updated_id}, 200


@products_bp.delete("/<int:product_id>")
@require_auth
def delete_product_route(product_id: int):
    """Delete a product and its event listings (owner or Administrator)."""
    try:
        products_service.delete_product(product_id=product_id, actor=g.current_user)
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to delete product %s", product_id)
        return {"error": "Internal server error"}, 500

    return {"ok": True}, 200


@products_bp.post("/<int:product_id>/availability")
@require_auth
def set_availability_route(product_id: int):
    """
    Owner-side availability for an event sale.

    Body: {"event_id": int, "available": bool}
    """
    payload = request.get_json(silent=True) or {}
    event_id = payload.get("event_id")
    available = payload.get("available")

    if not isinstance(event_id, int) or isinstance(event_id, bool):
        return {"error": "event_id must be an integer"}, 400
    if not isinstance(available, bool):
        return {"error": "available must be a boolean"}, 400

    try:
        listing = products_service.set_availability_for_event(
            product_id=product_id,
            event_id=event_id,
            available=available,
            actor=g.current_user,
        )
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to set availability for product %s", product_id)
        return {"error": "Internal server error"}, 500

    return {"listing": listing.to_dict() if listing else None}, 200


@products_bp.get("/event-sale/<int:event_id>")
@require_auth
def list_products_for_event_sale_route(event_id: int):
    """Listings currently On Sale in an event."""
    items = products_service.list_products_for_event_sale(event_id)
    return jsonify({"items": items, "count": len(items)})
