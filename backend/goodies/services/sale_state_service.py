# Overview: Lifecycle of a product's sale listing within an event.

"""
Event Listing State Machine

States (per event, per product):

    (absent) --list_for_sale--> On Sale
    On Sale  --owner_mark_unavailable / set_status--> Reserved
    On Sale  --set_status--> Sold
    Reserved --list_for_sale--> On Sale
    any      --delist--> (absent)

Sold is terminal for the owner path: owner_mark_available and
owner_mark_unavailable refuse to touch a sold listing. Organizer calls
(list_for_sale, set_status) are authoritative and may still move a sold
listing; those moves are logged as warnings.

Only organizer operations create or delete rows. Callers check
authorization before calling in here.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..choices import Status
from ..extensions import db
from ..models import EventProduct
from ..validation import InvalidTransitionError, NotFoundError, ValidationError


def get_listing(event_id: int, product_id: int) -> EventProduct | None:
    return (
        db.session.query(EventProduct)
        .filter_by(event_id=event_id, product_id=product_id)
        .one_or_none()
    )


def get_listing_by_id(event_product_id: int) -> EventProduct:
    listing = db.session.get(EventProduct, event_product_id)
    if listing is None:
        raise NotFoundError("Event product not found")
    return listing


def _warn_if_leaving_sold(listing: EventProduct, new_status: str) -> None:
    if listing.status == Status.SOLD and new_status != Status.SOLD:
        current_app.logger.warning(
            "Event product %s moved out of Sold to %s by an organizer", listing.id, new_status
        )


def list_for_sale(*, event_id: int, product_id: int, sale_price_cents: int | None) -> EventProduct:
    """
    Put a product on sale in an event (upsert keyed by event + product).

    An existing listing is patched back to On Sale with the new price;
    otherwise a new row is inserted. If a concurrent call inserted the row
    first, the unique constraint rejects ours and we patch theirs instead.
    """
    listing = get_listing(event_id, product_id)
    if listing is None:
        listing = EventProduct(
            event_id=event_id,
            product_id=product_id,
            status=Status.ON_SALE,
            sale_price_cents=sale_price_cents,
        )
        db.session.add(listing)
        try:
            db.session.commit()
            return listing
        except IntegrityError:
            db.session.rollback()
            listing = get_listing(event_id, product_id)
            if listing is None:
                raise

    _warn_if_leaving_sold(listing, Status.ON_SALE)
    listing.status = Status.ON_SALE
    listing.sale_price_cents = sale_price_cents
    db.session.commit()
    return listing


def owner_mark_available(listing: EventProduct | None, *, user_id: int) -> EventProduct | None:
    """
    Owner says the product may be sold. This records intent only: a missing
    listing stays missing until an organizer lists it, and an existing one
    keeps its status.
    """
    if listing is None:
        current_app.logger.info(
            "User %s marked a product available for an event; it is not listed yet", user_id
        )
        return None

    if listing.status == Status.SOLD:
        raise InvalidTransitionError("Cannot make a sold product available again through this action.")

    current_app.logger.info(
        "User %s marked event product %s available; current status: %s",
        user_id,
        listing.id,
        listing.status,
    )
    return listing


def owner_mark_unavailable(listing: EventProduct | None, *, user_id: int) -> EventProduct | None:
    """Owner withdraws the product: On Sale becomes Reserved, anything else but Sold is left alone."""
    if listing is None:
        return None

    if listing.status == Status.SOLD:
        raise InvalidTransitionError("Cannot make a sold product unavailable.")

    if listing.status == Status.ON_SALE:
        listing.status = Status.RESERVED
        db.session.commit()
        return listing

    current_app.logger.info(
        "User %s marked event product %s unavailable; current status: %s",
        user_id,
        listing.id,
        listing.status,
    )
    return listing


def set_status(listing: EventProduct, status: str) -> EventProduct:
    """Organizer override: any Status value is accepted."""
    if status not in Status.ALL:
        raise ValidationError(f"status must be one of: {', '.join(Status.ALL)}")
    _warn_if_leaving_sold(listing, status)
    listing.status = status
    db.session.commit()
    return listing


def delist(listing: EventProduct) -> None:
    db.session.delete(listing)
    db.session.commit()
