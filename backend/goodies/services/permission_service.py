# Overview: Service-layer authorization policy; decides who may act on products and events.

"""
Authorization Policy

WHY: Every role and ownership comparison lives here, so products, events
and analytics apply the same rules.

RULES:
- Product mutation: owner or global Administrator.
- Product reassignment (owner_user_id): global Administrator only.
- Event management (roster, sale listings, analytics): the event's
  recorded admin, or a participant whose event role is in ORGANIZER_ROLES.
- Participant removal: the participant themselves, or an event manager.

DESIGN PRINCIPLES:
- Fail closed: an absent actor is never allowed.
- The predicates only read; the require_* guards raise
  PermissionDeniedError and log the denial.
"""

from __future__ import annotations

from flask import current_app

from ..choices import ORGANIZER_ROLES, Role
from ..extensions import db
from ..models import Event, EventParticipant, Product, User


class PermissionDeniedError(Exception):
    """Raised when the actor lacks the role or ownership an action needs."""
    pass


def get_participation(event_id: int, user_id: int) -> EventParticipant | None:
    return (
        db.session.query(EventParticipant)
        .filter_by(event_id=event_id, user_id=user_id)
        .one_or_none()
    )


def can_act_on_own_resource(actor: User | None, resource_owner_id: int | None) -> bool:
    return actor is not None and resource_owner_id is not None and actor.id == resource_owner_id


def is_administrator(actor: User | None) -> bool:
    return actor is not None and actor.role == Role.ADMINISTRATOR


def is_event_organizer(actor: User | None, event: Event) -> bool:
    """True for the event's recorded admin or an organizer-tier participant."""
    if actor is None:
        return False
    if event.admin_id is not None and event.admin_id == actor.id:
        return True
    participation = get_participation(event.id, actor.id)
    return participation is not None and participation.role in ORGANIZER_ROLES


def can_mutate_product(actor: User | None, product: Product) -> bool:
    return can_act_on_own_resource(actor, product.owner_user_id) or is_administrator(actor)


def can_manage_event(actor: User | None, event: Event) -> bool:
    return is_event_organizer(actor, event)


def can_remove_participant(actor: User | None, event: Event, user_id: int) -> bool:
    if actor is None:
        return False
    return actor.id == user_id or can_manage_event(actor, event)


def would_orphan_event(event: Event, user_id: int) -> bool:
    """
    Removing the event's recorded admin is only allowed while another
    participant holds the Administrator role.
    """
    if event.admin_id is None or user_id != event.admin_id:
        return False
    others = (
        db.session.query(EventParticipant)
        .filter(
            EventParticipant.event_id == event.id,
            EventParticipant.role == Role.ADMINISTRATOR,
            EventParticipant.user_id != user_id,
        )
        .count()
    )
    return others == 0


def _deny(actor: User | None, action: str, message: str) -> None:
    current_app.logger.warning(
        "Permission denied: user_id=%s action=%s reason=%s",
        actor.id if actor is not None else None,
        action,
        message,
    )
    raise PermissionDeniedError(message)


def require_administrator(actor: User | None, *, action: str, message: str) -> None:
    if not is_administrator(actor):
        _deny(actor, action, message)


def require_product_mutation(actor: User | None, product: Product, *, action: str, message: str) -> None:
    if not can_mutate_product(actor, product):
        _deny(actor, action, message)


def require_event_manager(actor: User | None, event: Event, *, action: str, message: str) -> None:
    if not can_manage_event(actor, event):
        _deny(actor, action, message)


def require_participant_removal(actor: User | None, event: Event, user_id: int) -> None:
    if not can_remove_participant(actor, event, user_id):
        _deny(
            actor,
            "event.participant.remove",
            "You do not have permission to remove this user from the event.",
        )
