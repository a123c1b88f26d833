"""
Sales Service - single-step sale coordination

WHY: A completed sale touches three collections at once (stock, sales,
drawer balance). They either all change or none do.

ORDER OF CHECKS (all before any write):
1. cart not empty, payment method known, quantities positive
2. every product exists with enough stock (duplicates summed)
3. cash needs an open drawer session
4. totals from snapshot prices, tax from TAX_RATE_BPS
5. cash paid must cover the total; card is always paid exactly
"""

from __future__ import annotations

import copy

from ..models import LineItem, Sale, PAYMENT_METHODS
from ..models.sales import PAYMENT_CASH
from ..time_utils import utcnow
from ..validation import (
    InsufficientPaymentError,
    InsufficientStockError,
    NoOpenSessionError,
    NotFoundError,
    ValidationError,
    optional_text,
    parse_cents,
    parse_int,
    parse_quantity,
)
from .inventory_service import apply_stock_delta
from .ledger_store import LedgerState, LedgerStore
from .register_service import credit_cash_sale

DEFAULT_TAX_RATE_BPS = 1600


def compute_tax_cents(subtotal_cents: int, tax_rate_bps: int = DEFAULT_TAX_RATE_BPS) -> int:
    """Round half up to the cent."""
    return (subtotal_cents * tax_rate_bps + 5_000) // 10_000


def _normalize_cart(cart_items) -> dict[int, int]:
    """Cart rows -> {product_id: total quantity}, preserving first-seen order."""
    if not cart_items:
        raise ValidationError("Cannot create a sale with an empty cart")

    quantities: dict[int, int] = {}
    for row in cart_items:
        if not isinstance(row, dict):
            raise ValidationError("Cart items must be objects with product_id and quantity")
        product_id = parse_int(row.get("product_id"), "product_id")
        quantity = parse_quantity(row.get("quantity"), "quantity")
        quantities[product_id] = quantities.get(product_id, 0) + quantity
    return quantities


def _validate_on_hand(state: LedgerState, quantities: dict[int, int]) -> None:
    """A product missing from the catalog counts as zero on hand."""
    insufficient = []
    for product_id, qty in quantities.items():
        product = state.find_product(product_id)
        on_hand = product.stock if product is not None else 0
        if on_hand < qty:
            insufficient.append({
                "product_id": product_id,
                "name": product.name if product is not None else None,
                "requested_quantity": qty,
                "on_hand": on_hand,
            })

    if insufficient:
        raise InsufficientStockError(
            "Insufficient stock to complete sale",
            details={"items": insufficient},
        )


def create_sale(
    ledger: LedgerStore,
    cart_items,
    payment_method: str,
    amount_paid_cents,
    cashier: str,
    *,
    tax_rate_bps: int = DEFAULT_TAX_RATE_BPS,
) -> Sale:
    """
    Validate and commit a sale in one unit.

    Args:
        cart_items: [{"product_id": int, "quantity": int}, ...]
        payment_method: "cash" or "card"
        amount_paid_cents: cash tendered; ignored for card
        cashier: attribution only

    Raises:
        ValidationError, InsufficientStockError,
        NoOpenSessionError, InsufficientPaymentError
    """
    if payment_method not in PAYMENT_METHODS:
        raise ValidationError(
            "payment_method must be cash or card",
            details={"payment_method": payment_method},
        )
    quantities = _normalize_cart(cart_items)
    cashier = optional_text(cashier)

    with ledger.transaction() as state:
        _validate_on_hand(state, quantities)

        if payment_method == PAYMENT_CASH and state.session is None:
            raise NoOpenSessionError("Open the cash register before taking cash payments")

        items = []
        for product_id, qty in quantities.items():
            product = state.find_product(product_id)
            items.append(LineItem(
                product_id=product.id,
                name=product.name,
                unit_price_cents=product.price_cents,
                quantity=qty,
                category=product.category,
            ))

        subtotal = sum(item.line_total_cents for item in items)
        tax = compute_tax_cents(subtotal, tax_rate_bps)
        total = subtotal + tax

        if payment_method == PAYMENT_CASH:
            paid = parse_cents(amount_paid_cents if amount_paid_cents is not None else 0, "amount_paid_cents")
            if paid < total:
                raise InsufficientPaymentError(
                    "Amount paid is less than the total due",
                    details={"total_cents": total, "amount_paid_cents": paid},
                )
            change = paid - total
        else:
            paid = total
            change = 0

        for item in items:
            apply_stock_delta(state, item.product_id, -item.quantity)

        sale = Sale(
            id=ledger.next_id("sale"),
            created_at=utcnow(),
            cashier=cashier,
            payment_method=payment_method,
            subtotal_cents=subtotal,
            tax_cents=tax,
            total_cents=total,
            amount_paid_cents=paid,
            change_cents=change,
            register_session_id=state.session.id if state.session is not None else None,
            items=items,
        )
        state.sales.insert(0, sale)

        if payment_method == PAYMENT_CASH:
            credit_cash_sale(state, total)

    return copy.deepcopy(sale)


def get_sale(ledger: LedgerStore, sale_id: int) -> Sale:
    for sale in ledger.sales():
        if sale.id == sale_id:
            return sale
    raise NotFoundError("Sale not found", details={"sale_id": sale_id})


def list_sales(
    ledger: LedgerStore,
    limit: int | None = None,
    session_id: int | None = None,
) -> list[Sale]:
    """Sales newest first (head insertion order)."""
    sales = ledger.sales()
    if session_id is not None:
        sales = [s for s in sales if s.register_session_id == session_id]
    if limit is not None:
        sales = sales[:max(limit, 0)]
    return sales
