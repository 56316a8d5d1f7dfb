# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services.auth_service import InvalidCredentials
from ..decorators import require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Exchange username/password for a signed token.

    The token goes in the Authorization header ("Bearer <token>") of every
    other request and expires after TOKEN_TTL_HOURS.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not username or not password:
        return jsonify({"error": "username & password required"}), 400

    try:
        token = auth_service.authenticate(str(username), str(password))
    except InvalidCredentials as e:
        current_app.logger.info("Failed login for %r", username)
        return jsonify({"error": str(e)}), 401
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"token": token}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    """Echo the identity carried by the caller's token."""
    return jsonify({"user": g.current_user.to_dict()}), 200
