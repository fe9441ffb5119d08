from __future__ import annotations

from ..extensions import db
from goodies.time_utils import to_utc_z
from goodies.choices import DEFAULT_USER_ROLE

class User(db.Model):
    """
    Local mirror of an identity-provider account.

    Rows are written only by identity sync (webhook upsert/delete), keyed by
    external_id (the provider's user id, also the `sub` claim of its session
    tokens). Email is unique across users.

    role is one of choices.Role; it comes from the provider's public metadata
    and falls back to Guest.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("external_id", name="uq_users_external_id"),
        db.UniqueConstraint("email", name="uq_users_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    external_id = db.Column(db.String(255), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False, index=True)

    nickname = db.Column(db.String(128), nullable=True)
    first_name = db.Column(db.String(128), nullable=True)
    last_name = db.Column(db.String(128), nullable=True)
    phone_number = db.Column(db.String(64), nullable=True)
    image_url = db.Column(db.String(1024), nullable=True)

    role = db.Column(db.String(64), nullable=False, default=DEFAULT_USER_ROLE)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"

    @property
    def display_name(self) -> str:
        return self.nickname or self.email

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "external_id": self.external_id,
            "email": self.email,
            "nickname": self.nickname,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone_number": self.phone_number,
            "image_url": self.image_url,
            "role": self.role,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
