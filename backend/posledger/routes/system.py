# backend/posledger/routes/system.py
"""
System health and state endpoints.
"""

import time
from flask import Blueprint, current_app, jsonify
from ..extensions import db, get_ledger
from ..models import StoreBlob

system_bp = Blueprint("system", __name__)


def check_storage_health() -> dict:
    """
    Check the blob table is reachable.

    Returns dict with status and details.
    """
    if current_app.config["LEDGER_STORAGE"] == "memory":
        return {"status": "healthy", "details": {"backend": "memory"}}

    start_time = time.time()
    try:
        blob_count = db.session.query(StoreBlob).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"backend": "sql", "blobs": blob_count},
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Storage health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    storage = check_storage_health()
    ledger = get_ledger()
    session = ledger.session()
    status_code = 200 if storage["status"] == "healthy" else 503
    return jsonify({
        "status": storage["status"],
        "storage": storage,
        "ledger": {
            "products": len(ledger.products()),
            "sales": len(ledger.sales()),
            "movements": len(ledger.movements()),
            "register_open": session is not None,
        },
    }), status_code


@system_bp.get("/api/state")
def state_snapshot():
    """Plain snapshot of the four collections for UI rendering."""
    return jsonify(get_ledger().snapshot()), 200
