# backend/goodies/config.py
from __future__ import annotations
import os

from flask import current_app


DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173,http://127.0.0.1:5173,"
    "http://localhost:4173,http://127.0.0.1:4173"
)


class ConfigurationError(RuntimeError):
    """500-level problem: a required secret or setting is missing."""


class Config:
    # Optional "SECRET_KEY", with default dev key. Also signs pagination cursors.
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/goodies.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///goodies.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Identity provider (Clerk). The webhook secret is the svix signing secret
    # ("whsec_..."); the JWT key verifies the provider's session tokens.
    CLERK_WEBHOOK_SECRET = os.environ.get("CLERK_WEBHOOK_SECRET")
    IDENTITY_JWT_KEY = os.environ.get("IDENTITY_JWT_KEY")
    IDENTITY_JWT_ALGORITHMS = os.environ.get("IDENTITY_JWT_ALGORITHMS", "RS256")
    IDENTITY_JWT_ISSUER = os.environ.get("IDENTITY_JWT_ISSUER")

    DEFAULT_PAGE_SIZE = int(os.environ.get("DEFAULT_PAGE_SIZE", "20"))
    MAX_PAGE_SIZE = int(os.environ.get("MAX_PAGE_SIZE", "100"))

    DEFAULT_EVENT_LOCATION = os.environ.get("DEFAULT_EVENT_LOCATION", "A déterminer")

    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS)


def require_setting(key: str) -> str:
    """
    Fetch a required setting from the running app's config.

    Raises ConfigurationError when the value is absent or blank, so the
    affected request fails instead of running half-configured.
    """
    value = current_app.config.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError(f"Environment variable {key} is not set.")
    return value
