# Overview: Service-layer operations for syncing identity-provider users into the local users table.

"""
Identity Sync

WHY: Users sign up and edit their profile at the identity provider (Clerk).
The provider calls our webhook; after svix signature verification the
event is dispatched here:

    user.created / user.updated -> upsert_from_identity(data)
    user.deleted                -> delete_from_identity(data["id"])
    anything else               -> logged and ignored

No authorization applies: the only way in is a verified webhook.

UPSERT is keyed by external_id and is a full overwrite: optional fields
missing from the payload are cleared, not kept.
"""

from __future__ import annotations

import json

from flask import current_app
from svix.webhooks import Webhook, WebhookVerificationError

from ..choices import DEFAULT_USER_ROLE, Role
from ..config import require_setting
from ..extensions import db
from ..models import Collection, Event, EventParticipant, Product, User
from ..validation import ValidationError
from .concurrency import commit_or_conflict
from .products_service import delete_product_rows
from .session_service import user_by_external_id

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")

UPSERT_EVENT_TYPES = {"user.created", "user.updated"}
DELETE_EVENT_TYPE = "user.deleted"


def _primary_email(data: dict) -> str | None:
    addresses = data.get("email_addresses") or []
    primary_id = data.get("primary_email_address_id")
    if primary_id:
        for address in addresses:
            if address.get("id") == primary_id and address.get("email_address"):
                return address["email_address"]
    if addresses and addresses[0].get("email_address"):
        return addresses[0]["email_address"]
    return None


def _first_phone(data: dict) -> str | None:
    numbers = data.get("phone_numbers") or []
    if numbers:
        return numbers[0].get("phone_number")
    return None


def _role_hint(data: dict) -> str:
    metadata = data.get("public_metadata") or {}
    role = metadata.get("role") if isinstance(metadata, dict) else None
    return role if role in Role.ALL else DEFAULT_USER_ROLE


def normalize_identity_payload(data: dict) -> dict:
    """Map a provider user payload to users-table attributes."""
    if not isinstance(data, dict):
        raise ValidationError("Identity payload must be an object")

    external_id = data.get("id")
    if not external_id:
        raise ValidationError("Identity payload is missing 'id'")

    email = _primary_email(data)
    if not email:
        raise ValidationError("Identity payload has no email address")

    return {
        "external_id": external_id,
        "email": email,
        "first_name": data.get("first_name"),
        "last_name": data.get("last_name"),
        "nickname": data.get("username"),
        "phone_number": _first_phone(data),
        "image_url": data.get("image_url"),
        "role": _role_hint(data),
    }


def upsert_from_identity(data: dict) -> User:
    """
    Insert or fully overwrite the local user for this provider payload.

    Raises:
        ValidationError: payload lacks id or email
        ConflictError: email already used by another local user
    """
    attributes = normalize_identity_payload(data)

    user = user_by_external_id(attributes["external_id"])
    created = user is None
    if created:
        user = User(**attributes)
        db.session.add(user)
    else:
        for key, value in attributes.items():
            setattr(user, key, value)

    commit_or_conflict("Email is already used by another user")

    current_app.logger.info(
        "%s user %s from identity provider (external_id=%s)",
        "Created" if created else "Updated",
        user.id,
        attributes["external_id"],
    )
    return user


def delete_from_identity(external_id: str) -> bool:
    """
    Delete the local user for a provider id.

    Their participations, collections, products and those products'
    listings go with them; events they administered keep running without a recorded
    admin. An unknown id is not an error (the provider may report users we
    never synced).

    Returns:
        True if a user was deleted
    """
    user = user_by_external_id(external_id)
    if user is None:
        current_app.logger.warning(
            "Can't delete user, there is none for identity provider user ID: %s", external_id
        )
        return False

    user_id = user.id

    db.session.query(EventParticipant).filter(EventParticipant.user_id == user_id).delete(
        synchronize_session="fetch"
    )
    products = db.session.query(Product).filter(Product.owner_user_id == user_id).all()
    removed_listings = delete_product_rows(products)
    for collection in db.session.query(Collection).filter(Collection.user_id == user_id).all():
        db.session.delete(collection)
    db.session.query(Event).filter(Event.admin_id == user_id).update(
        {Event.admin_id: None}, synchronize_session="fetch"
    )
    db.session.delete(user)
    db.session.commit()

    current_app.logger.info(
        "Deleted user %s (external_id=%s): %s products, %s listings",
        user_id,
        external_id,
        len(products),
        removed_listings,
    )
    return True


def handle_identity_event(event: dict) -> None:
    """Dispatch a verified {type, data} webhook event."""
    event_type = event.get("type")
    data = event.get("data") or {}

    if event_type in UPSERT_EVENT_TYPES:
        upsert_from_identity(data)
    elif event_type == DELETE_EVENT_TYPE:
        external_id = data.get("id")
        if not external_id:
            current_app.logger.error("Missing 'id' in event.data for user.deleted event")
            raise ValidationError("Invalid event data")
        delete_from_identity(external_id)
    else:
        current_app.logger.info("Ignored identity webhook event %s", event_type)


def verify_identity_webhook(payload: bytes | str, headers) -> dict:
    """
    Verify a webhook request's svix signature and return the event.

    Raises:
        ConfigurationError: CLERK_WEBHOOK_SECRET is not set
        ValidationError: missing headers, bad signature or malformed event
    """
    svix_headers = {name: headers.get(name) for name in SVIX_HEADERS}
    if not all(svix_headers.values()):
        current_app.logger.error("Missing required Svix headers")
        raise ValidationError("Missing required Svix headers")

    secret = require_setting("CLERK_WEBHOOK_SECRET")

    try:
        Webhook(secret).verify(payload, svix_headers)
        event = json.loads(payload)
    except (WebhookVerificationError, json.JSONDecodeError) as exc:
        current_app.logger.error("Error verifying webhook event: %s", exc)
        raise ValidationError("Webhook verification failed")

    if not isinstance(event, dict) or not isinstance(event.get("type"), str) or not isinstance(event.get("data"), dict):
        current_app.logger.error("Invalid webhook event structure")
        raise ValidationError("Invalid webhook event structure")

    return event
