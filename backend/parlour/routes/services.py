# Overview: Flask API routes for services (catalog of rendered services); parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..services import catalog_service, sales_service
from ..validation import ValidationError, NotFoundError
from ..decorators import require_auth

services_bp = Blueprint("services", __name__, url_prefix="/api/services")


@services_bp.get("")
@require_auth
def list_services():
    return jsonify(catalog_service.list_services()), 200


@services_bp.post("")
@require_auth
def create_service_route():
    payload = request.get_json(silent=True) or {}

    try:
        service_id = catalog_service.create_service(payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create service")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"id": service_id}), 200


@services_bp.put("/<int:service_id>")
@require_auth
def update_service_route(service_id: int):
    """Update name, description, price or cost; 404 for an unknown service."""
    payload = request.get_json(silent=True) or {}

    try:
        catalog_service.update_service(service_id, payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update service")
        return jsonify({"error": "Server error"}), 500

    return jsonify({"success": True, "message": "Service updated successfully"}), 200


@services_bp.post("/serve")
@require_auth
def serve_service_route():
    """Record a rendered service as a service_sale/CR ledger entry."""
    data = request.get_json(silent=True) or {}

    try:
        sales_service.serve_service(
            service_id=data.get("service_id"),
            selling_price=data.get("selling_price"),
            customer_name=data.get("customer_name"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to serve service")
        return jsonify({"error": "Server error"}), 500

    return jsonify({"success": True, "message": "Service served and transaction recorded."}), 200
