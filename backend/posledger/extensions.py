# Overview: Flask extension instances for database and migrations, plus ledger lookup.

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

if TYPE_CHECKING:
    from .services.ledger_store import LedgerStore

db = SQLAlchemy()
migrate = Migrate()

LEDGER_EXTENSION_KEY = "posledger.ledger"

_ledger_lock = threading.Lock()


def load_ledger(app: Flask) -> "LedgerStore":
    from .services.ledger_store import LedgerStore
    from .services.storage import MemoryBlobAdapter, SqlBlobAdapter

    if app.config["LEDGER_STORAGE"] == "memory":
        adapter = MemoryBlobAdapter()
    else:
        # Schema comes from migrations (flask db upgrade); store_blobs must exist by now.
        adapter = SqlBlobAdapter(app)

    return LedgerStore.load(adapter, seed_catalog=app.config["SEED_CATALOG"])


def get_ledger() -> "LedgerStore":
    """
    Ledger store bound to the current Flask app.

    Loaded on first use, so commands that never touch the ledger
    (flask db upgrade) do not read the blob table.
    """
    app = current_app._get_current_object()
    ledger = app.extensions.get(LEDGER_EXTENSION_KEY)
    if ledger is None:
        with _ledger_lock:
            ledger = app.extensions.get(LEDGER_EXTENSION_KEY)
            if ledger is None:
                ledger = app.extensions[LEDGER_EXTENSION_KEY] = load_ledger(app)
    return ledger


def flush_ledger(app: Flask) -> None:
    """Rewrite the blobs if the ledger was ever loaded (shutdown hook)."""
    ledger = app.extensions.get(LEDGER_EXTENSION_KEY)
    if ledger is not None:
        ledger.flush()
