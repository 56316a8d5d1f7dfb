# Overview: Flask API routes for ledger operations; parses input and returns JSON responses.

"""
Time semantics:
- from/to are YYYY-MM-DD calendar days, both inclusive.
- Responses serialize dates as ISO-8601 'Z' strings.
"""
from flask import Blueprint, request, jsonify, current_app

from ..services import ledger_service
from ..validation import ValidationError
from ..decorators import require_auth

ledger_bp = Blueprint("ledger", __name__, url_prefix="/api")


@ledger_bp.get("/transactions")
@require_auth
def list_transactions_route():
    """Transaction history, newest first."""
    try:
        return jsonify(ledger_service.list_transactions()), 200
    except Exception:
        current_app.logger.exception("Failed to fetch transactions")
        return jsonify({"error": "Failed to fetch transactions"}), 500


@ledger_bp.post("/transactions")
@require_auth
def post_transaction_route():
    """Free-form ledger post (expense, other income...). t_type defaults to DR."""
    payload = request.get_json(silent=True) or {}

    try:
        tx_id = ledger_service.post_transaction(payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to post transaction")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"id": tx_id}), 200


@ledger_bp.get("/date/transactions")
@require_auth
def transactions_by_date_route():
    try:
        rows = ledger_service.transactions_in_range(
            request.args.get("from"),
            request.args.get("to"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to fetch transactions by date")
        return jsonify({"error": "Server error"}), 500

    return jsonify(rows), 200
