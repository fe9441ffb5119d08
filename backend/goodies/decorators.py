# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .config import ConfigurationError
from .services import session_service
from .services.session_service import ActorNotFoundError, NotAuthenticatedError


def require_auth(f):
    """
    Require an identity-provider session token and resolve the local user.

    Sets the following Flask g attributes:
    - g.current_user: the local User matching the token's subject
    - g.external_id: the verified subject itself

    Returns 401 if:
    - No Authorization header
    - Invalid or expired token
    - No local user synced for the subject yet
    Returns 500 if the token verification key is not configured.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1]

        try:
            external_id = session_service.external_id_from_token(token)
            user = session_service.resolve_actor(external_id)
        except NotAuthenticatedError as e:
            return jsonify({"error": str(e)}), 401
        except ActorNotFoundError as e:
            return jsonify({"error": str(e)}), 401
        except ConfigurationError as e:
            current_app.logger.error("Cannot authenticate request: %s", e)
            return jsonify({"error": "Server misconfigured"}), 500

        g.current_user = user
        g.external_id = external_id

        return f(*args, **kwargs)

    return decorated_function
