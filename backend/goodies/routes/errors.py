# Overview: Maps service-layer exceptions to JSON error responses.

from flask import jsonify, current_app

from ..config import ConfigurationError
from ..services.permission_service import PermissionDeniedError
from ..services.session_service import ActorNotFoundError, NotAuthenticatedError
from ..validation import ConflictError, InvalidTransitionError, NotFoundError, ValidationError

# Exceptions a route may let through to json_error without logging a traceback
DOMAIN_ERRORS = (
    ValidationError,
    NotAuthenticatedError,
    ActorNotFoundError,
    PermissionDeniedError,
    NotFoundError,
    ConflictError,
    InvalidTransitionError,
    ConfigurationError,
)


def json_error(exc: Exception):
    if isinstance(exc, ValidationError):
        return jsonify({"error": str(exc)}), 400
    if isinstance(exc, (NotAuthenticatedError, ActorNotFoundError)):
        return jsonify({"error": str(exc)}), 401
    if isinstance(exc, PermissionDeniedError):
        return jsonify({"error": str(exc)}), 403
    if isinstance(exc, NotFoundError):
        return jsonify({"error": str(exc)}), 404
    if isinstance(exc, (ConflictError, InvalidTransitionError)):
        return jsonify({"error": str(exc)}), 409
    if isinstance(exc, ConfigurationError):
        current_app.logger.error("Configuration error: %s", exc)
        return jsonify({"error": "Server misconfigured"}), 500
    return jsonify({"error": "Internal server error"}), 500
