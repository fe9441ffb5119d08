# Overview: Service-layer operations for event analytics; read-only summaries.

from __future__ import annotations

from datetime import datetime

from ..choices import Status
from ..extensions import db
from ..models import Event, EventParticipant, EventProduct, User
from ..validation import NotFoundError
from goodies.time_utils import as_naive_utc, milliseconds_between, to_utc_z, utcnow
from . import permission_service
from .session_service import require_actor


def get_event_analytics(*, event_id: int, actor: User | None, now: datetime | None = None) -> dict:
    """
    Sale and roster summary for one event, recomputed on every call.

    Only On Sale and Sold listings count towards the totals; a listing
    without a price counts as 0.
    """
    actor = require_actor(actor)

    event = db.session.get(Event, event_id)
    if event is None:
        raise NotFoundError("Event not found")

    permission_service.require_event_manager(
        actor,
        event,
        action="event.analytics",
        message="Only event organizers or the event admin can view analytics.",
    )

    listings = db.session.query(EventProduct).filter(EventProduct.event_id == event_id).all()

    total_value_on_sale_cents = 0
    total_value_sold_cents = 0
    products_on_sale_count = 0
    products_sold_count = 0

    for listing in listings:
        if listing.status == Status.ON_SALE:
            products_on_sale_count += 1
            total_value_on_sale_cents += listing.sale_price_cents or 0
        elif listing.status == Status.SOLD:
            products_sold_count += 1
            total_value_sold_cents += listing.sale_price_cents or 0

    participants = (
        db.session.query(EventParticipant, User)
        .outerjoin(User, User.id == EventParticipant.user_id)
        .filter(EventParticipant.event_id == event_id)
        .order_by(EventParticipant.id.asc())
        .all()
    )

    now = as_naive_utc(now or utcnow())
    time_remaining_ms = max(0, milliseconds_between(now, as_naive_utc(event.end_time)))

    return {
        "event_name": event.name,
        "start_time": to_utc_z(event.start_time),
        "end_time": to_utc_z(event.end_time),
        "total_value_on_sale_cents": total_value_on_sale_cents,
        "total_value_sold_cents": total_value_sold_cents,
        "products_on_sale_count": products_on_sale_count,
        "products_sold_count": products_sold_count,
        "participant_count": len(participants),
        "participants": [
            {
                "user_id": p.user_id,
                "role": p.role,
                "nickname": (user.nickname or user.email) if user else "Unknown",
            }
            for p, user in participants
        ],
        "time_remaining_ms": time_remaining_ms,
    }
