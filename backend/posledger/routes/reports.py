from flask import Blueprint, jsonify, request, current_app

from ..extensions import get_ledger
from ..services import reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/sales")
def sales_report():
    window = request.args.get("window", "today")

    try:
        sales = reporting_service.sales_for_window(get_ledger(), window)
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify({
        "window": window,
        "count": len(sales),
        "revenue_cents": reporting_service.revenue(sales),
        "sales": [s.to_dict() for s in sales],
    }), 200


@reports_bp.get("/top-products")
def top_products_report():
    limit = request.args.get("limit", default=current_app.config["TOP_SELLERS_LIMIT"], type=int)

    try:
        rows = reporting_service.top_selling_products(get_ledger(), limit)
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify({"limit": limit, "rows": rows}), 200


@reports_bp.get("/low-stock")
def low_stock_report():
    threshold = request.args.get("threshold", default=current_app.config["LOW_STOCK_THRESHOLD"], type=int)
    products = reporting_service.low_stock_products(get_ledger(), threshold)
    return jsonify({
        "threshold": threshold,
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }), 200


@reports_bp.get("/revenue")
def revenue_report():
    ledger = get_ledger()
    return jsonify({
        "total_revenue_cents": reporting_service.total_revenue(ledger),
        "average_ticket_cents": reporting_service.average_ticket_cents(ledger),
        "sales_count": len(ledger.sales()),
    }), 200


@reports_bp.get("/sales-by-day")
def sales_by_day_report():
    days = request.args.get("days", default=7, type=int)

    try:
        rows = reporting_service.sales_by_day(get_ledger(), days)
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify({"days": days, "rows": rows}), 200


@reports_bp.get("/categories")
def category_report():
    return jsonify({"revenue_by_category": reporting_service.revenue_by_category(get_ledger())}), 200


@reports_bp.get("/payment-methods")
def payment_methods_report():
    return jsonify({"payment_methods": reporting_service.payment_method_breakdown(get_ledger())}), 200


@reports_bp.get("/dashboard")
def dashboard_report():
    summary = reporting_service.dashboard_summary(
        get_ledger(),
        low_stock_threshold=current_app.config["LOW_STOCK_THRESHOLD"],
        top_limit=current_app.config["TOP_SELLERS_LIMIT"],
    )
    return jsonify(summary), 200
