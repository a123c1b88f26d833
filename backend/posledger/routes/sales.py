# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/posledger/routes/sales.py
"""Sales API routes"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import get_ledger
from ..services import sales_service
from ..validation import LedgerError
from ..decorators import require_actor


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
@require_actor
def create_sale_route():
    """
    Complete a sale in one step.

    Request body:
    {
        "items": [{"product_id": 1, "quantity": 2}],
        "payment_method": "cash",
        "amount_paid_cents": 1000   (cash only)
    }
    """
    try:
        data = request.get_json(silent=True) or {}

        sale = sales_service.create_sale(
            get_ledger(),
            data.get("items") or [],
            data.get("payment_method"),
            data.get("amount_paid_cents"),
            g.actor.name,
            tax_rate_bps=current_app.config["TAX_RATE_BPS"],
        )

        return jsonify({"sale": sale.to_dict()}), 201

    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("")
def list_sales_route():
    """
    List sales, newest first.

    Query params:
    - limit: int (optional)
    - session_id: int (optional) - sales attributed to one drawer session
    """
    sales = sales_service.list_sales(
        get_ledger(),
        limit=request.args.get("limit", type=int),
        session_id=request.args.get("session_id", type=int),
    )
    return jsonify({
        "sales": [s.to_dict() for s in sales],
        "count": len(sales),
    }), 200


@sales_bp.get("/<int:sale_id>")
def get_sale_route(sale_id: int):
    try:
        sale = sales_service.get_sale(get_ledger(), sale_id)
        return jsonify({"sale": sale.to_dict()}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
