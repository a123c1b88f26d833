# Overview: Service-layer operations for the product catalog and stock levels.

"""
Inventory Service

DESIGN PRINCIPLES:
- Stock never goes negative. Sales and manual adjustments move it through
  apply_stock_delta; a product edit may set a counted value outright
- Barcodes are unique across the catalog and generated when absent
- Deleting a product never touches past sales (line items are snapshots)
"""

from __future__ import annotations

import copy

from ..models import Product
from ..validation import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
    optional_text,
    parse_cents,
    parse_int,
    parse_quantity,
    require_text,
)
from .ledger_store import LedgerState, LedgerStore

PRODUCT_MUTABLE_FIELDS = {"name", "category", "price_cents", "stock", "barcode"}

BARCODE_PREFIX = "750"


def _generate_barcode(state: LedgerState, product_id: int) -> str:
    candidate = product_id % 10**10
    while True:
        barcode = f"{BARCODE_PREFIX}{candidate:010d}"
        if state.find_product_by_barcode(barcode) is None:
            return barcode
        candidate = (candidate + 1) % 10**10


def _ensure_barcode_free(state: LedgerState, barcode: str, *, exclude_id: int | None = None) -> None:
    existing = state.find_product_by_barcode(barcode)
    if existing is not None and existing.id != exclude_id:
        raise ConflictError(
            "Barcode already exists in the catalog.",
            details={"barcode": barcode, "product_id": existing.id},
        )


def _require_product(state: LedgerState, product_id: int) -> Product:
    product = state.find_product(product_id)
    if product is None:
        raise NotFoundError("Product not found", details={"product_id": product_id})
    return product


def _clean_patch(patch: dict) -> dict:
    """Validate + normalize writable fields; unknown keys are dropped."""
    cleaned: dict = {}
    for key, value in patch.items():
        if key not in PRODUCT_MUTABLE_FIELDS:
            continue
        if key == "name":
            cleaned[key] = require_text(value, "name")
        elif key == "category":
            cleaned[key] = optional_text(value)
        elif key == "price_cents":
            cleaned[key] = parse_cents(value, "price_cents")
        elif key == "stock":
            cleaned[key] = parse_quantity(value, "stock", allow_zero=True)
        elif key == "barcode":
            cleaned[key] = require_text(value, "barcode")
    return cleaned


def apply_stock_delta(state: LedgerState, product_id: int, delta: int) -> Product:
    """
    Move stock by delta inside an open transaction.

    Raises:
        NotFoundError: unknown product
        InsufficientStockError: result would be negative
    """
    product = _require_product(state, product_id)
    new_stock = product.stock + delta
    if new_stock < 0:
        raise InsufficientStockError(
            f"Insufficient stock for {product.name}",
            details={
                "product_id": product.id,
                "on_hand": product.stock,
                "requested_delta": delta,
            },
        )
    product.stock = new_stock
    return product


# =============================================================================
# CATALOG
# =============================================================================

def add_product(ledger: LedgerStore, data: dict) -> Product:
    """
    Create a catalog product.

    Args:
        data: name (required), category, price_cents (>= 0), stock (>= 0),
              barcode (generated when blank)

    Raises:
        ValidationError: empty name, negative price or stock
        ConflictError: barcode already used
    """
    name = require_text(data.get("name"), "name")
    price_cents = parse_cents(data.get("price_cents", 0), "price_cents")
    stock = parse_quantity(data.get("stock", 0), "stock", allow_zero=True)
    category = optional_text(data.get("category"))
    barcode = optional_text(data.get("barcode"))

    with ledger.transaction() as state:
        if barcode:
            _ensure_barcode_free(state, barcode)
        product_id = ledger.next_id("product")
        if not barcode:
            barcode = _generate_barcode(state, product_id)

        product = Product(
            id=product_id,
            name=name,
            category=category,
            price_cents=price_cents,
            stock=stock,
            barcode=barcode,
        )
        state.products.append(product)

    return copy.deepcopy(product)


def update_product(ledger: LedgerStore, product_id: int, patch: dict) -> Product:
    """
    Merge patch fields into an existing product.

    Raises:
        NotFoundError: unknown product
        ValidationError: invalid field value (negative stock included)
        ConflictError: barcode taken by another product
    """
    cleaned = _clean_patch(patch)

    with ledger.transaction() as state:
        product = _require_product(state, product_id)
        if "barcode" in cleaned:
            _ensure_barcode_free(state, cleaned["barcode"], exclude_id=product.id)
        for key, value in cleaned.items():
            setattr(product, key, value)

    return copy.deepcopy(product)


def delete_product(ledger: LedgerStore, product_id: int) -> Product:
    """
    Remove a product from the catalog.

    No cascade: sales keep their own line-item snapshot.
    """
    with ledger.transaction() as state:
        product = _require_product(state, product_id)
        state.products = [p for p in state.products if p.id != product_id]

    return product


def adjust_stock(ledger: LedgerStore, product_id: int, delta) -> Product:
    """Manual restock (positive delta) or shrinkage (negative delta)."""
    delta = parse_int(delta, "delta")

    with ledger.transaction() as state:
        product = apply_stock_delta(state, product_id, delta)

    return copy.deepcopy(product)


# =============================================================================
# QUERIES
# =============================================================================

def get_product(ledger: LedgerStore, product_id: int) -> Product:
    for product in ledger.products():
        if product.id == product_id:
            return product
    raise NotFoundError("Product not found", details={"product_id": product_id})


def list_products(
    ledger: LedgerStore,
    search: str | None = None,
    category: str | None = None,
) -> list[Product]:
    """
    Catalog in insertion order, optionally filtered.

    search matches the name (case-insensitive) or a barcode substring;
    category "all" or None disables the category filter.
    """
    term = (search or "").strip()
    lowered = term.lower()
    results = []
    for product in ledger.products():
        if term and lowered not in product.name.lower() and term not in product.barcode:
            continue
        if category and category != "all" and product.category != category:
            continue
        results.append(product)
    return results


def list_categories(ledger: LedgerStore) -> list[str]:
    seen: list[str] = []
    for product in ledger.products():
        if product.category not in seen:
            seen.append(product.category)
    return seen


def find_by_barcode(ledger: LedgerStore, barcode: str) -> Product:
    for product in ledger.products():
        if product.barcode == barcode:
            return product
    raise NotFoundError("Product not found", details={"barcode": barcode})


def ensure_valid_patch(patch) -> dict:
    if not isinstance(patch, dict):
        raise ValidationError("Request body must be a JSON object")
    return patch
