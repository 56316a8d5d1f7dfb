from flask import Blueprint, jsonify, request, current_app

from ..decorators import require_auth
from ..services import ledger_service
from ..validation import ValidationError


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/pl")
@require_auth
def profit_and_loss_report():
    try:
        report = ledger_service.profit_and_loss(request.args.get("from"), request.args.get("to"))
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to build profit & loss report")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "revenue": report["revenue"],
        "cost": report["cost"],
        "profit": report["profit"],
        "transactionsCount": report["count"],
    }), 200


@reports_bp.get("/balance")
@require_auth
def balance_sheet_report():
    try:
        report = ledger_service.balance_sheet(request.args.get("from"), request.args.get("to"))
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to build balance sheet")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(report), 200
