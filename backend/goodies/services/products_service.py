# backend/goodies/services/products_service.py
"""
Products Service

OWNERSHIP: Every product has an owner_user_id.
- create_product sets it to the caller, or to target_user_id when an
  Administrator creates on someone's behalf
- update_product / delete_product require owner or Administrator
- only an Administrator may change owner_user_id

Bulk reads (list_products, by status, by type) are not owner-scoped;
list_products_paginated is where scoping happens.
"""
from __future__ import annotations

from flask import current_app

from ..choices import ProductType, Status
from ..extensions import db
from ..models import Collection, Event, EventProduct, Product, User
from ..validation import NotFoundError, ValidationError
from . import permission_service, sale_state_service
from .concurrency import run_with_retry
from .pagination import paginate
from .permission_service import PermissionDeniedError
from .session_service import require_actor

PRODUCT_MUTABLE_FIELDS = {
    "name",
    "description",
    "quantity",
    "character_names",
    "license_names",
    "product_types",
    "condition",
    "status",
    "storage_location",
    "purchase_location",
    "purchase_date",
    "purchase_price_cents",
    "sell_location",
    "sell_date",
    "sell_price_cents",
    "threshold",
    "photo",
    "collection_id",
}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _require_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _require_collection(collection_id: int | None) -> None:
    if collection_id is None:
        return
    if db.session.get(Collection, collection_id) is None:
        raise NotFoundError("Collection not found")


def _require_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def create_product(*, patch: dict, actor: User | None) -> int:
    """
    Create a product using a validated patch dict.

    patch may carry target_user_id; it selects the owner and is never
    persisted. Creating for anyone but yourself requires Administrator.

    Returns:
        The new product's id

    Raises:
        NotAuthenticatedError: no actor
        PermissionDeniedError: non-admin targeting another user
        NotFoundError: target user or collection does not exist
    """
    actor = require_actor(actor)

    fields = dict(patch)
    target_user_id = fields.pop("target_user_id", None)
    owner_id = target_user_id if target_user_id is not None else actor.id

    if owner_id != actor.id:
        permission_service.require_administrator(
            actor,
            action="product.create",
            message="You cannot create products for someone else",
        )
        _require_user(owner_id)

    _require_collection(fields.get("collection_id"))

    p = Product(owner_user_id=owner_id)
    apply_product_patch(p, fields)

    db.session.add(p)
    db.session.commit()

    current_app.logger.info("Product %s created by user %s for owner %s", p.id, actor.id, owner_id)
    return p.id


def get_product(product_id: int) -> Product | None:
    return db.session.get(Product, product_id)


def list_products() -> list[Product]:
    return db.session.query(Product).order_by(Product.id.asc()).all()


def list_products_by_status(status: str) -> list[Product]:
    if status not in Status.ALL:
        raise ValidationError(f"status must be one of: {', '.join(Status.ALL)}")
    return (
        db.session.query(Product)
        .filter(Product.status == status)
        .order_by(Product.id.asc())
        .all()
    )


def list_products_by_type(product_type: str) -> list[Product]:
    """Products tagged with product_type (among possibly several tags)."""
    if product_type not in ProductType.ALL:
        raise ValidationError(f"product_type must be one of: {', '.join(ProductType.ALL)}")
    # JSON list membership is filtered here to stay portable across backends
    products = db.session.query(Product).order_by(Product.id.asc()).all()
    return [p for p in products if product_type in (p.product_types or [])]


def list_products_paginated(
    *,
    actor: User | None,
    page_size: int | None,
    cursor: str | None,
    target_user_id: int | None = None,
) -> dict:
    """
    Newest-first cursor pagination.

    An Administrator without target_user_id sees every owner's products;
    otherwise the listing is scoped to target_user_id or the caller.

    Returns:
        {"page": [product dicts], "next_cursor": str | None, "is_done": bool}
    """
    actor = require_actor(actor)

    if target_user_id is None and permission_service.is_administrator(actor):
        owner_id = None
    else:
        owner_id = target_user_id if target_user_id is not None else actor.id

    query = db.session.query(Product)
    if owner_id is not None:
        query = query.filter(Product.owner_user_id == owner_id)

    result = paginate(
        query,
        id_column=Product.id,
        scope=f"products:{owner_id if owner_id is not None else 'all'}",
        cursor=cursor,
        page_size=page_size,
        descending=True,
    )
    result["page"] = [p.to_dict() for p in result["page"]]
    return result


def list_my_products(*, actor: User | None) -> list[Product]:
    actor = require_actor(actor)
    return (
        db.session.query(Product)
        .filter(Product.owner_user_id == actor.id)
        .order_by(Product.id.desc())
        .all()
    )


def update_product(*, product_id: int, patch: dict, actor: User | None) -> int:
    """
    Partially update a product.

    Only keys present in patch are written. An empty patch is a no-op
    that still returns the id.

    Raises:
        NotFoundError: product (or new owner / collection) missing
        PermissionDeniedError: not owner nor Administrator, or a
            non-admin trying to change owner_user_id
    """
    actor = require_actor(actor)

    def _op() -> int:
        p = _require_product(product_id)

        permission_service.require_product_mutation(
            actor, p, action="product.update", message="You cannot update this product"
        )

        fields = dict(patch)
        desired_owner = fields.pop("owner_user_id", None)
        if desired_owner is not None:
            permission_service.require_administrator(
                actor,
                action="product.reassign",
                message="Only administrators can change the ownerUserId",
            )
            _require_user(desired_owner)

        if "collection_id" in fields:
            _require_collection(fields["collection_id"])

        if not fields and desired_owner is None:
            return p.id

        apply_product_patch(p, fields)
        if desired_owner is not None:
            p.owner_user_id = desired_owner

        db.session.commit()
        return p.id

    return run_with_retry(_op)


def delete_product(*, product_id: int, actor: User | None) -> int:
    """
    Delete a product and its event listings.

    Listings are removed with the product so no event keeps a row that
    points at a missing product.
    """
    actor = require_actor(actor)

    p = _require_product(product_id)
    permission_service.require_product_mutation(
        actor, p, action="product.delete", message="You cannot delete this product"
    )

    removed = delete_product_rows([p])
    db.session.commit()

    current_app.logger.info(
        "Product %s deleted by user %s (%s event listings removed)", product_id, actor.id, removed
    )
    return product_id


def delete_product_rows(products: list[Product]) -> int:
    """Stage deletion of products plus their listings; caller commits. Returns listings removed."""
    if not products:
        return 0
    ids = [p.id for p in products]
    removed = (
        db.session.query(EventProduct)
        .filter(EventProduct.product_id.in_(ids))
        .delete(synchronize_session="fetch")
    )
    for p in products:
        db.session.delete(p)
    return removed


def set_availability_for_event(
    *,
    product_id: int,
    event_id: int,
    available: bool,
    actor: User | None,
) -> EventProduct | None:
    """
    Owner-side availability for an event sale.

    Never creates or deletes listings. available=True only records intent;
    available=False turns an On Sale listing into Reserved. Sold listings
    reject both directions.

    Raises:
        NotFoundError: product or event missing
        PermissionDeniedError: caller does not own the product
        InvalidTransitionError: listing already Sold
    """
    actor = require_actor(actor)

    p = _require_product(product_id)
    if not permission_service.can_act_on_own_resource(actor, p.owner_user_id):
        current_app.logger.warning(
            "Permission denied: user_id=%s action=product.availability product_id=%s",
            actor.id,
            product_id,
        )
        raise PermissionDeniedError("User does not own this product.")

    if db.session.get(Event, event_id) is None:
        raise NotFoundError("Event not found")

    listing = sale_state_service.get_listing(event_id, product_id)
    if available:
        return sale_state_service.owner_mark_available(listing, user_id=actor.id)
    return sale_state_service.owner_mark_unavailable(listing, user_id=actor.id)


def list_products_for_event_sale(event_id: int) -> list[dict]:
    """Listings currently On Sale in an event, with product display fields."""
    rows = (
        db.session.query(EventProduct, Product)
        .outerjoin(Product, Product.id == EventProduct.product_id)
        .filter(EventProduct.event_id == event_id, EventProduct.status == Status.ON_SALE)
        .order_by(EventProduct.id.asc())
        .all()
    )
    return [
        {
            **listing.to_dict(),
            "product_name": product.name if product else "Unknown Product",
            "product_description": product.description if product else "",
            "original_price_cents": product.purchase_price_cents if product else 0,
            "owner_id": product.owner_user_id if product else None,
        }
        for listing, product in rows
    ]
