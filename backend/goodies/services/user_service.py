# Overview: Service-layer operations for the user directory (pickers, admin bootstrap).

from __future__ import annotations

from ..choices import Role
from ..extensions import db
from ..models import User
from ..validation import NotFoundError, ValidationError
from .pagination import paginate


def list_users_lite(*, cursor: str | None, page_size: int | None) -> dict:
    """
    Oldest-first page of {id, label} entries for user pickers.

    label is the nickname, or the email when no nickname is set.
    """
    result = paginate(
        db.session.query(User),
        id_column=User.id,
        scope="users",
        cursor=cursor,
        page_size=page_size,
        descending=False,
    )
    result["page"] = [{"id": u.id, "label": u.display_name} for u in result["page"]]
    return result


def list_all_users() -> list[dict]:
    users = db.session.query(User).order_by(User.id.asc()).all()
    return [{"id": u.id, "email": u.email, "nickname": u.nickname} for u in users]


def get_user_by_email(email: str) -> User:
    user = db.session.query(User).filter_by(email=email).one_or_none()
    if user is None:
        raise NotFoundError(f"User with email {email} not found.")
    return user


def set_user_role(*, email: str, role: str) -> User:
    """
    Set a user's global role locally.

    The next user.updated webhook overwrites it with the provider's
    public_metadata role, so this is meant for bootstrapping.
    """
    if role not in Role.ALL:
        raise ValidationError(f"role must be one of: {', '.join(Role.ALL)}")
    user = get_user_by_email(email)
    user.role = role
    db.session.commit()
    return user
