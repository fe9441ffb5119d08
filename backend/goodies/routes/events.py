# Overview: Flask API routes for events, rosters, sale listings and analytics.

# backend/goodies/routes/events.py
"""
Event routes.

SECURITY: All routes require authentication. Roster changes, sale
listings and analytics require the event organizer tier (participant role
Administrator / Board of directors, or the event's recorded admin).
"""
from flask import Blueprint, request, g, jsonify, current_app

from ..models import Event, EventProduct
from ..services import analytics_service, event_service
from ..validation import ModelValidationPolicy, validate_payload
from ..decorators import require_auth
from .errors import DOMAIN_ERRORS, json_error

EVENT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "location", "start_time", "end_time"},
    required_on_create={"name", "start_time", "end_time"},
)

SALE_LISTING_POLICY = ModelValidationPolicy(
    writable_fields={"product_id", "sale_price_cents"},
    required_on_create={"product_id"},
)

events_bp = Blueprint("events", __name__, url_prefix="/api/events")
event_products_bp = Blueprint("event_products", __name__, url_prefix="/api/event-products")


@events_bp.post("")
@require_auth
def create_event_route():
    """Create an event; the caller becomes its admin."""
    payload = request.get_json(silent=True) or {}
    if isinstance(payload, dict) and not payload.get("location"):
        # Blank location falls back to the configured default
        payload.pop("location", None)

    try:
        patch = validate_payload(model=Event, payload=payload, policy=EVENT_POLICY, partial=False)
        event_id = event_service.create_event(patch=patch, actor=g.current_user)
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to create event")
        return {"error": "Internal server error"}, 500

    return {"id": event_id}, 201


@events_bp.get("")
@require_auth
def list_events_route():
    items = [e.to_dict() for e in event_service.list_events()]
    return jsonify({"items": items, "count": len(items)})


@events_bp.get("/mine")
@require_auth
def my_events_route():
    """Events the caller participates in, with the caller's role."""
    items = event_service.get_my_events(actor=g.current_user)
    return jsonify({"items": items, "count": len(items)})


@events_bp.get("/<int:event_id>")
@require_auth
def event_details_route(event_id: int):
    details = event_service.get_event_details(event_id)
    if details is None:
        return {"error": "Event not found"}, 404
    return {"event": details}, 200


@events_bp.post("/<int:event_id>/participants")
@require_auth
def add_participant_route(event_id: int):
    """
    Add a user to the event by email.

    Body: {"email": str, "role": str}
    """
    payload = request.get_json(silent=True) or {}
    email = payload.get("email")
    role = payload.get("role")

    if not isinstance(email, str) or not email.strip():
        return {"error": "email is required"}, 400
    if not isinstance(role, str) or not role:
        return {"error": "role is required"}, 400

    try:
        participant_id = event_service.add_participant(
            event_id=event_id, email=email.strip(), role=role, actor=g.current_user
        )
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to add participant to event %s", event_id)
        return {"error": "Internal server error"}, 500

    return {"id": participant_id}, 201


@events_bp.delete("/<int:event_id>/participants/<int:user_id>")
@require_auth
def remove_participant_route(event_id: int, user_id: int):
    try:
        event_service.remove_participant(event_id=event_id, user_id=user_id, actor=g.current_user)
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to remove user %s from event %s", user_id, event_id)
        return {"error": "Internal server error"}, 500

    return {"ok": True}, 200


@events_bp.post("/<int:event_id>/participate")
@require_auth
def participate_route(event_id: int):
    """Join the event as Guest."""
    try:
        participant_id = event_service.participate(event_id=event_id, actor=g.current_user)
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to join event %s", event_id)
        return {"error": "Internal server error"}, 500

    return {"id": participant_id}, 201


@events_bp.post("/<int:event_id>/products")
@require_auth
def add_product_to_sale_route(event_id: int):
    """
    List a product On Sale in the event (repeat calls update the listing).

    Body: {"product_id": int, "sale_price_cents": int | null}
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=EventProduct, payload=payload, policy=SALE_LISTING_POLICY, partial=False)
        listing = event_service.add_product_to_sale(
            event_id=event_id,
            product_id=patch["product_id"],
            sale_price_cents=patch.get("sale_price_cents"),
            actor=g.current_user,
        )
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to list product for sale in event %s", event_id)
        return {"error": "Internal server error"}, 500

    return {"listing": listing.to_dict()}, 200


@events_bp.get("/<int:event_id>/analytics")
@require_auth
def event_analytics_route(event_id: int):
    try:
        analytics = analytics_service.get_event_analytics(event_id=event_id, actor=g.current_user)
    except DOMAIN_ERRORS as e:
        return json_error(e)
    return jsonify(analytics)


@event_products_bp.patch("/<int:event_product_id>")
@require_auth
def update_event_product_status_route(event_product_id: int):
    """
    Organizer status override for a listing.

    Body: {"status": str}
    """
    payload = request.get_json(silent=True) or {}
    status = payload.get("status")
    if not isinstance(status, str) or not status:
        return {"error": "status is required"}, 400

    try:
        listing = event_service.update_product_status(
            event_product_id=event_product_id, status=status, actor=g.current_user
        )
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to update event product %s", event_product_id)
        return {"error": "Internal server error"}, 500

    return {"listing": listing.to_dict()}, 200


@event_products_bp.delete("/<int:event_product_id>")
@require_auth
def remove_event_product_route(event_product_id: int):
    try:
        event_service.remove_product_from_sale(event_product_id=event_product_id, actor=g.current_user)
    except DOMAIN_ERRORS as e:
        return json_error(e)
    except Exception:
        current_app.logger.exception("Failed to remove event product %s", event_product_id)
        return {"error": "Internal server error"}, 500

    return {"ok": True}, 200
