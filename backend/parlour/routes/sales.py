# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..services import sales_service
from ..validation import ValidationError, ConflictError, NotFoundError
from ..decorators import require_auth


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("/sell")
@require_auth
def sell_route():
    """
    Sell units of a product.

    400 for missing fields or not enough stock, 404 for an unknown product.
    The ledger entry and the stock decrement commit together or not at all.
    """
    data = request.get_json(silent=True) or {}

    try:
        sales_service.sell_product(
            product_id=data.get("product_id"),
            quantity=data.get("quantity"),
            selling_price=data.get("selling_price"),
            customer_name=data.get("customer_name"),
        )
    except (ValidationError, ConflictError) as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to sell product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"success": True, "message": "Sale completed!"}), 200
