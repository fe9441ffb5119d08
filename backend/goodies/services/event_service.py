# Overview: Service-layer operations for events, their rosters and sale listings.

"""
Event Service

ROSTER:
- The creator becomes the event admin (events.admin_id) and gets a
  participant row with EVENT_CREATOR_ROLE in the same transaction.
- Organizers add users by email under any role; users join themselves as
  Guest; one row per (event, user).
- The recorded admin cannot be removed while no other participant holds
  the Administrator role.

SALE LISTINGS are delegated to sale_state_service after the organizer
check passes here.
"""

from __future__ import annotations

from flask import current_app

from ..choices import EVENT_CREATOR_ROLE, ORGANIZER_ROLES, Role
from ..extensions import db
from ..models import Event, EventParticipant, EventProduct, Product, User
from ..validation import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    enforce_price_cents,
    enforce_rules_event,
)
from . import permission_service, sale_state_service
from .concurrency import commit_or_conflict
from .session_service import require_actor


def _require_event(event_id: int, message: str = "Event not found") -> Event:
    event = db.session.get(Event, event_id)
    if event is None:
        raise NotFoundError(message)
    return event


def create_event(*, patch: dict, actor: User | None) -> int:
    """
    Create an event owned by the caller.

    Event row and the creator's participant row are committed together;
    if either insert fails nothing is kept.
    """
    actor = require_actor(actor)
    enforce_rules_event(patch)

    location = patch.get("location") or current_app.config["DEFAULT_EVENT_LOCATION"]

    try:
        event = Event(
            name=patch["name"],
            description=patch.get("description") or "",
            start_time=patch["start_time"],
            end_time=patch["end_time"],
            location=location,
            admin_id=actor.id,
        )
        db.session.add(event)
        db.session.flush()

        db.session.add(EventParticipant(event_id=event.id, user_id=actor.id, role=EVENT_CREATOR_ROLE))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info("Event %s created by user %s", event.id, actor.id)
    return event.id


def add_participant(*, event_id: int, email: str, role: str, actor: User | None) -> int:
    """Add the user with this email to the event under role. Returns the participant id."""
    actor = require_actor(actor)

    if role not in Role.ALL:
        raise ValidationError(f"role must be one of: {', '.join(Role.ALL)}")

    event = _require_event(event_id)
    permission_service.require_event_manager(
        actor,
        event,
        action="event.participant.add",
        message="Only event organizers can add users to the event.",
    )

    user_to_add = db.session.query(User).filter_by(email=email).one_or_none()
    if user_to_add is None:
        raise NotFoundError(f"User with email {email} not found.")

    if permission_service.get_participation(event.id, user_to_add.id) is not None:
        raise ConflictError("User is already part of this event.")

    participant = EventParticipant(event_id=event.id, user_id=user_to_add.id, role=role)
    db.session.add(participant)
    commit_or_conflict("User is already part of this event.")
    return participant.id


def remove_participant(*, event_id: int, user_id: int, actor: User | None) -> None:
    """
    Remove a user from the event (self-removal or by an organizer).

    Raises:
        InvalidTransitionError: removing the recorded admin would leave no
            other Administrator participant
        NotFoundError: event missing, or the user is not a participant
    """
    actor = require_actor(actor)

    event = _require_event(event_id)
    permission_service.require_participant_removal(actor, event, user_id)

    if permission_service.would_orphan_event(event, user_id):
        raise InvalidTransitionError("Cannot remove the last organizer/admin of the event.")

    participant = permission_service.get_participation(event.id, user_id)
    if participant is None:
        raise NotFoundError("User is not part of this event or already removed.")

    db.session.delete(participant)
    db.session.commit()


def list_events() -> list[Event]:
    return db.session.query(Event).order_by(Event.id.desc()).all()


def get_event_details(event_id: int) -> dict | None:
    """Event with its roster (display names) and listings (product names/prices)."""
    event = db.session.get(Event, event_id)
    if event is None:
        return None

    participants = (
        db.session.query(EventParticipant, User)
        .outerjoin(User, User.id == EventParticipant.user_id)
        .filter(EventParticipant.event_id == event_id)
        .order_by(EventParticipant.id.asc())
        .all()
    )
    listings = (
        db.session.query(EventProduct, Product)
        .outerjoin(Product, Product.id == EventProduct.product_id)
        .filter(EventProduct.event_id == event_id)
        .order_by(EventProduct.id.asc())
        .all()
    )

    return {
        **event.to_dict(),
        "participants": [
            {**p.to_dict(), "user_name": user.display_name if user else "Unknown User"}
            for p, user in participants
        ],
        "products": [
            {
                **ep.to_dict(),
                "product_name": product.name if product else "Unknown Product",
                "product_description": product.description if product else "",
                "original_price_cents": product.purchase_price_cents if product else 0,
            }
            for ep, product in listings
        ],
    }


def get_my_events(*, actor: User | None) -> list[dict]:
    """Every event the caller participates in, with the caller's role in it."""
    actor = require_actor(actor)

    rows = (
        db.session.query(Event, EventParticipant.role)
        .join(EventParticipant, EventParticipant.event_id == Event.id)
        .filter(EventParticipant.user_id == actor.id)
        .order_by(Event.id.desc())
        .all()
    )
    return [{**event.to_dict(), "role": role} for event, role in rows]


def participate(*, event_id: int, actor: User | None) -> int:
    """Join an event as Guest. Returns the participant id."""
    actor = require_actor(actor)
    event = _require_event(event_id)

    existing = permission_service.get_participation(event.id, actor.id)
    if existing is not None:
        if existing.role in ORGANIZER_ROLES or event.admin_id == actor.id:
            raise ConflictError(
                "User is already an organizer for this event. Cannot change role to participant."
            )
        raise ConflictError("User is already participating in this event.")

    participant = EventParticipant(event_id=event.id, user_id=actor.id, role=Role.GUEST)
    db.session.add(participant)
    commit_or_conflict("User is already participating in this event.")
    return participant.id


def add_product_to_sale(
    *,
    event_id: int,
    product_id: int,
    sale_price_cents: int | None,
    actor: User | None,
) -> EventProduct:
    """List a product On Sale in the event; repeating the call updates the same listing."""
    actor = require_actor(actor)
    enforce_price_cents("sale_price_cents", sale_price_cents)

    event = _require_event(event_id)
    permission_service.require_event_manager(
        actor,
        event,
        action="event.product.list",
        message="Only event organizers can add products to the event sale.",
    )

    if db.session.get(Product, product_id) is None:
        raise NotFoundError("Product not found")

    return sale_state_service.list_for_sale(
        event_id=event.id,
        product_id=product_id,
        sale_price_cents=sale_price_cents,
    )


def update_product_status(*, event_product_id: int, status: str, actor: User | None) -> EventProduct:
    actor = require_actor(actor)

    listing = sale_state_service.get_listing_by_id(event_product_id)
    event = _require_event(listing.event_id)
    permission_service.require_event_manager(
        actor,
        event,
        action="event.product.status",
        message="Only event organizers can update product status.",
    )

    return sale_state_service.set_status(listing, status)


def remove_product_from_sale(*, event_product_id: int, actor: User | None) -> None:
    actor = require_actor(actor)

    listing = sale_state_service.get_listing_by_id(event_product_id)
    event = _require_event(listing.event_id, "Associated event not found.")
    permission_service.require_event_manager(
        actor,
        event,
        action="event.product.delist",
        message="Only event organizers or the event admin can remove products from the event sale.",
    )

    sale_state_service.delist(listing)
