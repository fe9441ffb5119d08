from __future__ import annotations

from ..extensions import db
from goodies.time_utils import to_utc_z


class Event(db.Model):
    """
    A sales occasion.

    admin_id records the creating user; that user keeps authority over the
    event even without an organizer-tier participant row. It is cleared when
    the user is removed by identity sync.
    """
    __tablename__ = "events"
    __table_args__ = (
        db.Index("ix_events_admin", "admin_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    location = db.Column(db.String(255), nullable=False)
    start_time = db.Column(db.DateTime(timezone=True), nullable=False)
    end_time = db.Column(db.DateTime(timezone=True), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    admin = db.relationship("User", foreign_keys=[admin_id])

    def __repr__(self) -> str:
        return f"<Event id={self.id} name={self.name!r} admin_id={self.admin_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "admin_id": self.admin_id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "start_time": to_utc_z(self.start_time),
            "end_time": to_utc_z(self.end_time),
            "created_at": to_utc_z(self.created_at),
        }


class EventParticipant(db.Model):
    """
    Membership of a user in an event under a role (choices.Role).

    At most one row per (event_id, user_id); the unique constraint is the
    authority, not the lookup that precedes an insert.
    """
    __tablename__ = "event_participants"
    __table_args__ = (
        db.UniqueConstraint("event_id", "user_id", name="uq_event_participants_event_user"),
        db.Index("ix_event_participants_user", "user_id"),
        db.Index("ix_event_participants_event_role", "event_id", "role"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey("events.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    role = db.Column(db.String(64), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    event = db.relationship("Event", backref=db.backref("participants", lazy=True))
    user = db.relationship("User", backref=db.backref("participations", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "user_id": self.user_id,
            "role": self.role,
            "created_at": to_utc_z(self.created_at),
        }


class EventProduct(db.Model):
    """
    Sale listing of one product within one event.

    LIFECYCLE: (absent) -> On Sale -> Reserved | Sold; Reserved -> On Sale by
    re-listing. See services/sale_state_service.py.

    At most one row per (event_id, product_id).
    """
    __tablename__ = "event_products"
    __table_args__ = (
        db.UniqueConstraint("event_id", "product_id", name="uq_event_products_event_product"),
        db.Index("ix_event_products_product", "product_id"),
        db.Index("ix_event_products_event_status", "event_id", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey("events.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    status = db.Column(db.String(32), nullable=False)
    sale_price_cents = db.Column(db.Integer, nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    event = db.relationship("Event", backref=db.backref("listings", lazy=True))
    product = db.relationship("Product", backref=db.backref("listings", lazy=True))
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return (
            f"<EventProduct id={self.id} event_id={self.event_id} "
            f"product_id={self.product_id} status={self.status!r}>"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "product_id": self.product_id,
            "status": self.status,
            "sale_price_cents": self.sale_price_cents,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
