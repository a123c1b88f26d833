# Overview: Durable store adapters; move whole JSON blobs in and out of persistent storage.

from __future__ import annotations

import copy
from typing import Any, Protocol

from flask import Flask

from ..extensions import db
from ..models import StoreBlob

CATALOG_KEY = "catalog"
SALES_KEY = "sales"
SESSION_KEY = "register_session"
MOVEMENTS_KEY = "movements"

LEDGER_KEYS = (CATALOG_KEY, SALES_KEY, SESSION_KEY, MOVEMENTS_KEY)


class BlobAdapter(Protocol):
    """
    Key-value persistence contract.

    No business logic lives behind this interface; payloads are plain
    JSON-serializable values and are always whole-collection snapshots.
    """

    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, payload: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryBlobAdapter:
    """In-process adapter for tests and throwaway runs."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self.blobs: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.writes: list[str] = []

    def load(self, key: str) -> Any | None:
        if key not in self.blobs:
            return None
        return copy.deepcopy(self.blobs[key])

    def save(self, key: str, payload: Any) -> None:
        self.blobs[key] = copy.deepcopy(payload)
        self.writes.append(key)

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)
        self.writes.append(key)


class SqlBlobAdapter:
    """
    Persists each key as one row of the store_blobs table.

    Pushes its own app context so writes work the same from a request,
    a CLI command or a shutdown hook.
    """

    def __init__(self, app: Flask):
        self.app = app

    def load(self, key: str) -> Any | None:
        with self.app.app_context():
            row = db.session.get(StoreBlob, key)
            return row.payload if row is not None else None

    def save(self, key: str, payload: Any) -> None:
        with self.app.app_context():
            try:
                row = db.session.get(StoreBlob, key)
                if row is None:
                    db.session.add(StoreBlob(key=key, payload=payload))
                else:
                    row.payload = payload
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise

    def delete(self, key: str) -> None:
        with self.app.app_context():
            try:
                db.session.query(StoreBlob).filter_by(key=key).delete()
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise
