# Overview: Read-only aggregations over the ledger; nothing here mutates state.

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from ..models import Product, Sale
from ..models.sales import PAYMENT_METHODS
from ..time_utils import last_n_days, same_calendar_day, same_calendar_month, utcnow
from .ledger_store import LedgerStore

DEFAULT_LOW_STOCK_THRESHOLD = 20
DEFAULT_TOP_SELLERS_LIMIT = 5
MAX_SALES_BY_DAY = 366


class ReportError(Exception):
    """Raised when report parameters are unusable."""
    pass


# =============================================================================
# DATE WINDOWS (UTC calendar)
# =============================================================================

def sales_today(ledger: LedgerStore, now: datetime | None = None) -> list[Sale]:
    now = now or utcnow()
    return [s for s in ledger.sales() if same_calendar_day(s.created_at, now)]


def sales_this_week(ledger: LedgerStore, now: datetime | None = None) -> list[Sale]:
    """Rolling 7 days back from now (not a calendar week)."""
    now = now or utcnow()
    week_ago = now - timedelta(days=7)
    return [s for s in ledger.sales() if s.created_at >= week_ago]


def sales_this_month(ledger: LedgerStore, now: datetime | None = None) -> list[Sale]:
    now = now or utcnow()
    return [s for s in ledger.sales() if same_calendar_month(s.created_at, now)]


def sales_for_window(ledger: LedgerStore, window: str, now: datetime | None = None) -> list[Sale]:
    if window == "today":
        return sales_today(ledger, now)
    if window == "week":
        return sales_this_week(ledger, now)
    if window == "month":
        return sales_this_month(ledger, now)
    if window == "all":
        return ledger.sales()
    raise ReportError("window must be today, week, month, or all")


# =============================================================================
# TOTALS
# =============================================================================

def revenue(sales: Iterable[Sale]) -> int:
    return sum(s.total_cents for s in sales)


def total_revenue(ledger: LedgerStore) -> int:
    """Sum of total_cents over every sale, regardless of date."""
    return revenue(ledger.sales())


def average_ticket_cents(ledger: LedgerStore) -> int | None:
    sales = ledger.sales()
    if not sales:
        return None
    # Round half up to the cent
    return (2 * revenue(sales) + len(sales)) // (2 * len(sales))


# =============================================================================
# PRODUCTS
# =============================================================================

def top_selling_products(ledger: LedgerStore, limit: int = DEFAULT_TOP_SELLERS_LIMIT) -> list[dict]:
    """
    Group every sold line item by product id.

    Ordering: quantity desc, then revenue desc, then product id asc.
    Name/category/price come from the most recent sale of the product.
    """
    if limit < 0:
        raise ReportError("limit must be >= 0")

    grouped: dict[int, dict] = {}
    for sale in ledger.sales():
        for item in sale.items:
            row = grouped.get(item.product_id)
            if row is None:
                row = grouped[item.product_id] = {
                    "product_id": item.product_id,
                    "name": item.name,
                    "category": item.category,
                    "unit_price_cents": item.unit_price_cents,
                    "total_quantity": 0,
                    "total_revenue_cents": 0,
                }
            row["total_quantity"] += item.quantity
            row["total_revenue_cents"] += item.line_total_cents

    ranked = sorted(
        grouped.values(),
        key=lambda r: (-r["total_quantity"], -r["total_revenue_cents"], r["product_id"]),
    )
    return ranked[:limit]


def low_stock_products(ledger: LedgerStore, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> list[Product]:
    """Catalog order; stock <= threshold."""
    return [p for p in ledger.products() if p.stock <= threshold]


def out_of_stock_products(ledger: LedgerStore) -> list[Product]:
    return [p for p in ledger.products() if p.stock == 0]


# =============================================================================
# BREAKDOWNS
# =============================================================================

def sales_by_day(ledger: LedgerStore, days: int = 7, now: datetime | None = None) -> list[dict]:
    """Per-day totals for the last `days` calendar days, oldest first."""
    if days <= 0:
        raise ReportError("days must be positive")
    if days > MAX_SALES_BY_DAY:
        raise ReportError(f"days must be at most {MAX_SALES_BY_DAY}")
    now = now or utcnow()
    sales = ledger.sales()

    rows = []
    for day in last_n_days(now, days):
        day_sales = [s for s in sales if s.created_at.date() == day]
        rows.append({
            "date": day.isoformat(),
            "weekday": day.strftime("%a"),
            "total_cents": revenue(day_sales),
            "count": len(day_sales),
        })
    return rows


def revenue_by_category(ledger: LedgerStore) -> dict[str, int]:
    """Line-item revenue (pre-tax) per category snapshot."""
    totals: dict[str, int] = {}
    for sale in ledger.sales():
        for item in sale.items:
            totals[item.category] = totals.get(item.category, 0) + item.line_total_cents
    return totals


def payment_method_breakdown(ledger: LedgerStore) -> dict[str, dict]:
    breakdown = {method: {"count": 0, "total_cents": 0} for method in PAYMENT_METHODS}
    for sale in ledger.sales():
        row = breakdown.setdefault(sale.payment_method, {"count": 0, "total_cents": 0})
        row["count"] += 1
        row["total_cents"] += sale.total_cents
    return breakdown


def dashboard_summary(
    ledger: LedgerStore,
    now: datetime | None = None,
    *,
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    top_limit: int = DEFAULT_TOP_SELLERS_LIMIT,
) -> dict:
    now = now or utcnow()
    today = sales_today(ledger, now)
    month = sales_this_month(ledger, now)
    session = ledger.session()
    products = ledger.products()

    return {
        "today_revenue_cents": revenue(today),
        "today_sales_count": len(today),
        "month_revenue_cents": revenue(month),
        "month_sales_count": len(month),
        "total_revenue_cents": total_revenue(ledger),
        "register_open": session is not None,
        "register_current_amount_cents": session.current_amount_cents if session else None,
        "products_count": len(products),
        "products_in_stock": sum(1 for p in products if p.stock > 0),
        "low_stock_count": len(low_stock_products(ledger, low_stock_threshold)),
        "out_of_stock_count": len(out_of_stock_products(ledger)),
        "top_selling_products": top_selling_products(ledger, top_limit),
        "recent_sales": [s.to_dict() for s in ledger.sales()[:5]],
    }
