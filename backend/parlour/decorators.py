# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services.token_service import AuthError, verify_authorization_header


def require_auth(f):
    """
    Require a valid bearer token.

    Sets g.current_user to the verified token Claims (id, username, role).

    Returns 401 with a JSON error if:
    - No Authorization header ("missing token")
    - Header is not "Bearer <token>" ("malformed token")
    - Bad signature or expired token ("invalid token")
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            claims = verify_authorization_header(request.headers.get("Authorization"))
        except AuthError as e:
            return jsonify({"error": str(e)}), 401

        g.current_user = claims
        return f(*args, **kwargs)

    return decorated_function
