# Overview: Flask API routes for the cash register session; parses input and returns JSON responses.

# backend/posledger/routes/registers.py
"""
Cash Register API Routes

DESIGN:
- Drawer lifecycle: open -> close (closed snapshot returned, not kept)
- Income/expense movements adjust the running balance
- Any identified cashier may operate the drawer
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import get_ledger
from ..services import register_service
from ..validation import LedgerError
from ..decorators import require_actor


registers_bp = Blueprint("registers", __name__, url_prefix="/api/register")


@registers_bp.get("/current")
def current_session_route():
    """Open session, or null when the drawer is closed."""
    session = register_service.get_open_session(get_ledger())
    return jsonify({"session": session.to_dict() if session else None}), 200


@registers_bp.post("/open")
@require_actor
def open_session_route():
    """
    Open the drawer.

    Request body:
    {
        "initial_amount_cents": 10000
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        if "initial_amount_cents" not in data:
            return jsonify({"error": "initial_amount_cents required"}), 400

        session = register_service.open_session(
            get_ledger(),
            data["initial_amount_cents"],
            g.actor.name,
        )
        return jsonify({"session": session.to_dict()}), 201

    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to open cash register")
        return jsonify({"error": "Internal server error"}), 500


@registers_bp.post("/close")
@require_actor
def close_session_route():
    """
    Close the drawer with the counted cash.

    Request body:
    {
        "closing_amount_cents": 10500
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        if "closing_amount_cents" not in data:
            return jsonify({"error": "closing_amount_cents required"}), 400

        closed = register_service.close_session(
            get_ledger(),
            data["closing_amount_cents"],
            g.actor.name,
        )
        return jsonify({"session": closed.to_dict()}), 200

    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to close cash register")
        return jsonify({"error": "Internal server error"}), 500


@registers_bp.post("/movements")
@require_actor
def record_movement_route():
    """
    Record an income or expense.

    Request body:
    {
        "type": "expense",
        "amount_cents": 500,
        "description": "Cleaning supplies"
    }
    """
    try:
        data = request.get_json(silent=True) or {}

        movement = register_service.record_movement(
            get_ledger(),
            data.get("type"),
            data.get("amount_cents"),
            data.get("description"),
            g.actor.name,
        )
        return jsonify({"movement": movement.to_dict()}), 201

    except LedgerError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to record cash movement")
        return jsonify({"error": "Internal server error"}), 500


@registers_bp.get("/movements")
def list_movements_route():
    """
    List movements, newest first.

    Query params:
    - session_id: int (optional)
    - current: "true" to restrict to the open session
    """
    ledger = get_ledger()
    if request.args.get("current", "false").lower() == "true":
        movements = register_service.current_session_movements(ledger)
    else:
        movements = register_service.list_movements(
            ledger,
            session_id=request.args.get("session_id", type=int),
        )
    return jsonify({
        "movements": [m.to_dict() for m in movements],
        "count": len(movements),
    }), 200


@registers_bp.get("/summary")
def session_summary_route():
    summary = register_service.session_summary(get_ledger())
    if summary is None:
        return jsonify({"error": "No cash register session is open"}), 404
    return jsonify(summary), 200
