# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/parlour/routes/products.py
"""
Product catalog routes. All routes require a valid token.

POST /api/products with stock > 0 also books the opening stock as an
expense in the ledger.
"""
from flask import Blueprint, request, jsonify, current_app

from ..services import catalog_service, sales_service
from ..validation import ValidationError, NotFoundError
from ..decorators import require_auth

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products():
    return jsonify(catalog_service.list_products()), 200


@products_bp.post("")
@require_auth
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        product_id = catalog_service.create_product(payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"id": product_id}), 200


@products_bp.put("/<int:product_id>")
@require_auth
def update_product_route(product_id: int):
    """
    Overwrite a product. Unknown ids still answer {"success": true}; existing
    clients rely on that.
    """
    payload = request.get_json(silent=True) or {}

    try:
        catalog_service.update_product(product_id, payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"success": True}), 200


@products_bp.delete("/<int:product_id>")
@require_auth
def delete_product_route(product_id: int):
    try:
        catalog_service.delete_product(product_id)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"success": True}), 200


@products_bp.post("/add-stock")
@require_auth
def add_stock_route():
    """Restock: increments stock and posts an expense/DR ledger entry."""
    data = request.get_json(silent=True) or {}

    try:
        sales_service.add_stock(
            product_id=data.get("product_id"),
            quantity=data.get("quantity"),
            notes=data.get("notes"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to add stock")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"success": True, "msg": "Stock added successfully"}), 200
