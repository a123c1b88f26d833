"""
Pytest fixtures for posledger backend tests.

Provides a Flask app on in-memory SQLite, a test client, and bare ledgers
backed by the in-memory blob adapter.
"""

from datetime import datetime

import pytest
from posledger import create_app
from posledger.extensions import db, get_ledger
from posledger.models import Sale, LineItem
from posledger.services import inventory_service
from posledger.services.ledger_store import LedgerState, LedgerStore
from posledger.services.storage import MemoryBlobAdapter


CASHIER_HEADERS = {"X-Cashier-Name": "Ana", "X-Cashier-Role": "cashier"}


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SEED_CATALOG': True,
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def app_ledger(app):
    with app.app_context():
        return get_ledger()


@pytest.fixture(scope='function')
def adapter():
    return MemoryBlobAdapter()


@pytest.fixture(scope='function')
def ledger(adapter):
    """Empty ledger (no seed catalog)."""
    return LedgerStore.load(adapter, seed_catalog=False)


@pytest.fixture(scope='function')
def soda(ledger):
    return inventory_service.add_product(ledger, {
        "name": "Coca Cola 600ml",
        "category": "Bebidas",
        "price_cents": 250,
        "stock": 10,
        "barcode": "7501234567890",
    })


@pytest.fixture(scope='function')
def bread(ledger):
    return inventory_service.add_product(ledger, {
        "name": "Pan Integral",
        "category": "Panadería",
        "price_cents": 320,
        "stock": 1,
        "barcode": "7501234567891",
    })


def make_sale(
    sale_id: int,
    created_at: datetime,
    items: list[tuple[int, str, int, int, str]],
    *,
    payment_method: str = "card",
    register_session_id: int | None = None,
) -> Sale:
    """Build a sale directly; items are (product_id, name, unit_price_cents, quantity, category)."""
    lines = [
        LineItem(product_id=pid, name=name, unit_price_cents=price, quantity=qty, category=cat)
        for pid, name, price, qty, cat in items
    ]
    subtotal = sum(line.line_total_cents for line in lines)
    tax = (subtotal * 1600 + 5000) // 10000
    total = subtotal + tax
    return Sale(
        id=sale_id,
        created_at=created_at,
        cashier="Ana",
        payment_method=payment_method,
        subtotal_cents=subtotal,
        tax_cents=tax,
        total_cents=total,
        amount_paid_cents=total,
        change_cents=0,
        register_session_id=register_session_id,
        items=lines,
    )


def ledger_with_sales(sales: list[Sale], products=None) -> LedgerStore:
    return LedgerStore(MemoryBlobAdapter(), LedgerState(products=products or [], sales=sales))
