# Overview: Inbound webhook from the identity provider (Clerk, signed with svix).

from flask import Blueprint, request, jsonify, current_app

from ..config import ConfigurationError
from ..services.identity_service import handle_identity_event, verify_identity_webhook
from ..validation import ConflictError, ValidationError

webhooks_bp = Blueprint("webhooks", __name__, url_prefix="/api/webhooks")


@webhooks_bp.post("/identity")
def identity_webhook():
    """
    Sync users from identity-provider events.

    No session auth: the svix signature is the only credential.

    Returns:
    - 200: event applied or ignored
    - 400: missing svix headers, bad signature, malformed event or payload
    - 409: email already used by another user
    - 500: webhook secret not configured
    """
    try:
        event = verify_identity_webhook(request.get_data(), request.headers)
        handle_identity_event(event)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ConfigurationError as e:
        current_app.logger.error("Identity webhook rejected: %s", e)
        return jsonify({"error": "Server misconfigured"}), 500
    except Exception:
        current_app.logger.exception("Failed to process identity webhook")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"success": True}), 200
