from __future__ import annotations

from ..extensions import db
from goodies.time_utils import to_utc_z


class Collection(db.Model):
    """A named group of a user's products (e.g. "Evangelion figures")."""
    __tablename__ = "collections"
    __table_args__ = (
        db.Index("ix_collections_user", "user_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    user = db.relationship("User", backref=db.backref("collections", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "created_at": to_utc_z(self.created_at),
        }


class Product(db.Model):
    """
    A merchandise item owned by one user.

    OWNERSHIP: owner_user_id is always set at creation (the creator, or the
    user an Administrator created it for) and only an Administrator can
    reassign it afterwards.

    Prices are stored in cents. character_names, license_names and
    product_types are JSON lists; product_types values come from
    choices.ProductType.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_owner", "owner_user_id"),
        db.Index("ix_products_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    owner_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    collection_id = db.Column(db.Integer, db.ForeignKey("collections.id"), nullable=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    quantity = db.Column(db.Integer, nullable=False, default=1)

    character_names = db.Column(db.JSON, nullable=False, default=list)
    license_names = db.Column(db.JSON, nullable=False, default=list)
    product_types = db.Column(db.JSON, nullable=False, default=list)

    condition = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(32), nullable=False)

    storage_location = db.Column(db.String(255), nullable=False)
    purchase_location = db.Column(db.String(255), nullable=False)
    purchase_date = db.Column(db.DateTime(timezone=True), nullable=False)
    purchase_price_cents = db.Column(db.Integer, nullable=False)

    sell_location = db.Column(db.String(255), nullable=True)
    sell_date = db.Column(db.DateTime(timezone=True), nullable=True)
    sell_price_cents = db.Column(db.Integer, nullable=True)

    # Low-stock alert level
    threshold = db.Column(db.Integer, nullable=False, default=0)

    photo = db.Column(db.String(1024), nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    owner = db.relationship("User", backref=db.backref("products", lazy=True))
    collection = db.relationship("Collection", backref=db.backref("products", lazy=True))
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} owner_user_id={self.owner_user_id}>"

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_user_id": self.owner_user_id,
            "collection_id": self.collection_id,
            "name": self.name,
            "description": self.description,
            "quantity": self.quantity,
            "character_names": list(self.character_names or []),
            "license_names": list(self.license_names or []),
            "product_types": list(self.product_types or []),
            "condition": self.condition,
            "status": self.status,
            "storage_location": self.storage_location,
            "purchase_location": self.purchase_location,
            "purchase_date": to_utc_z(self.purchase_date),
            "purchase_price_cents": self.purchase_price_cents,
            "sell_location": self.sell_location,
            "sell_date": to_utc_z(self.sell_date),
            "sell_price_cents": self.sell_price_cents,
            "threshold": self.threshold,
            "is_low_stock": self.is_low_stock,
            "photo": self.photo,
            "version_id": self.version_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
