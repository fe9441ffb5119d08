# Overview: Service-layer operations for resolving the calling user.

"""
Actor Resolution

WHY: Identity is owned by the external provider. Every authenticated call
carries the provider's session token; its `sub` claim is the external id we
synced into users.external_id. This module turns that assertion into a
local User, or fails before any authorization check runs.

FAILURE MODES:
- No token / bad signature / expired -> NotAuthenticatedError
- Valid token but no synced local user -> ActorNotFoundError
- Verification key not configured -> ConfigurationError
"""

from __future__ import annotations

import jwt
from flask import current_app

from ..config import require_setting
from ..extensions import db
from ..models import User


class NotAuthenticatedError(Exception):
    """Raised when the caller's identity cannot be established."""
    pass


class ActorNotFoundError(Exception):
    """Raised when the identity is valid but has no local user record."""
    pass


def _algorithms() -> list[str]:
    raw = current_app.config.get("IDENTITY_JWT_ALGORITHMS") or "RS256"
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [a.strip() for a in raw.split(",") if a.strip()]


def external_id_from_token(token: str | None) -> str:
    """
    Verify a provider session token and return its subject.

    Raises NotAuthenticatedError if the token is missing, malformed,
    wrongly signed or expired.
    """
    if not token:
        raise NotAuthenticatedError("User not authenticated")

    key = require_setting("IDENTITY_JWT_KEY")
    issuer = current_app.config.get("IDENTITY_JWT_ISSUER")

    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=_algorithms(),
            issuer=issuer or None,
            options={"require": ["sub", "exp"], "verify_aud": False},
        )
    except jwt.PyJWTError as exc:
        current_app.logger.info("Rejected identity token: %s", exc)
        raise NotAuthenticatedError("Invalid or expired token")

    return claims["sub"]


def user_by_external_id(external_id: str) -> User | None:
    return db.session.query(User).filter_by(external_id=external_id).one_or_none()


def resolve_actor(external_id: str | None) -> User:
    """Map a verified external id to the local User."""
    if not external_id:
        raise NotAuthenticatedError("User not authenticated")

    user = user_by_external_id(external_id)
    if user is None:
        raise ActorNotFoundError("User not found")
    return user


def require_actor(actor: User | None) -> User:
    """Service-side guard for operations that need a resolved caller."""
    if actor is None:
        raise NotAuthenticatedError("User not authenticated")
    return actor
