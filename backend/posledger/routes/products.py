# Overview: Flask API routes for catalog operations; parses input and returns JSON responses.

# backend/posledger/routes/products.py
"""
Product catalog routes.

- Reads are open to any consumer
- Writes require an acting cashier (X-Cashier-Name)
- Stock moves only through POST /<id>/stock
"""
from flask import Blueprint, request, jsonify, current_app

from ..extensions import get_ledger
from ..services import inventory_service
from ..validation import LedgerError
from ..decorators import require_actor

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List catalog products.

    Query params:
    - search: str (optional) - name (case-insensitive) or barcode substring
    - category: str (optional) - exact category; "all" disables the filter
    """
    products = inventory_service.list_products(
        get_ledger(),
        search=request.args.get("search"),
        category=request.args.get("category"),
    )
    return jsonify({
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }), 200


@products_bp.get("/categories")
def list_categories():
    return jsonify({"categories": inventory_service.list_categories(get_ledger())}), 200


@products_bp.get("/<int:product_id>")
def get_product(product_id: int):
    try:
        product = inventory_service.get_product(get_ledger(), product_id)
        return jsonify({"product": product.to_dict()}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code


@products_bp.get("/barcode/<barcode>")
def get_product_by_barcode(barcode: str):
    try:
        product = inventory_service.find_by_barcode(get_ledger(), barcode)
        return jsonify({"product": product.to_dict()}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code


@products_bp.post("")
@require_actor
def create_product():
    """
    Create a product.

    Request body:
    {
        "name": "Agua 2L",
        "category": "Bebidas",
        "price_cents": 150,
        "stock": 300,
        "barcode": "7501234567896"  (optional, generated when blank)
    }
    """
    try:
        data = inventory_service.ensure_valid_patch(request.get_json(silent=True) or {})
        product = inventory_service.add_product(get_ledger(), data)
        return jsonify({"product": product.to_dict()}), 201
    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.patch("/<int:product_id>")
@require_actor
def update_product(product_id: int):
    try:
        patch = inventory_service.ensure_valid_patch(request.get_json(silent=True) or {})
        product = inventory_service.update_product(get_ledger(), product_id, patch)
        return jsonify({"product": product.to_dict()}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.delete("/<int:product_id>")
@require_actor
def delete_product(product_id: int):
    try:
        product = inventory_service.delete_product(get_ledger(), product_id)
        return jsonify({"deleted": True, "product": product.to_dict()}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.post("/<int:product_id>/stock")
@require_actor
def adjust_stock(product_id: int):
    """
    Manual stock adjustment.

    Request body:
    {
        "delta": 24    (negative to remove stock)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        if "delta" not in data:
            return jsonify({"error": "delta required"}), 400

        product = inventory_service.adjust_stock(get_ledger(), product_id, data["delta"])
        return jsonify({"product": product.to_dict()}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to adjust stock")
        return jsonify({"error": "Internal server error"}), 500
