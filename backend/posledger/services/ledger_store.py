# Overview: Authoritative in-memory ledger; the only holder of mutable POS state.

"""
Ledger Store Invariants (authoritative)

- Holds the catalog, the sales (newest first), the open drawer session
  (or None) and the cash movements (newest first).
- Every mutation runs inside transaction(): one re-entrant lock, a deep
  copied working state, and a swap on success. A raised exception discards
  the working copy, so callers never observe partial writes.
- Persistence is write-through after the swap: each changed collection is
  rewritten as a whole blob. Adapter failures are logged, never raised to
  the business caller.
- Identifiers come from per-kind monotonic counters that resume after the
  largest persisted id.
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from ..models import Product, Sale, CashRegisterSession, CashMovement
from ..seed import seed_products
from .storage import (
    BlobAdapter,
    CATALOG_KEY,
    SALES_KEY,
    SESSION_KEY,
    MOVEMENTS_KEY,
    LEDGER_KEYS,
)

logger = logging.getLogger(__name__)

ID_KINDS = ("product", "sale", "session", "movement")

Listener = Callable[[dict], None]


@dataclass
class LedgerState:
    products: list[Product] = field(default_factory=list)
    sales: list[Sale] = field(default_factory=list)
    session: CashRegisterSession | None = None
    movements: list[CashMovement] = field(default_factory=list)

    def find_product(self, product_id: int) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def find_product_by_barcode(self, barcode: str) -> Product | None:
        for product in self.products:
            if product.barcode == barcode:
                return product
        return None

    def collection(self, key: str) -> Any:
        if key == CATALOG_KEY:
            return self.products
        if key == SALES_KEY:
            return self.sales
        if key == SESSION_KEY:
            return self.session
        if key == MOVEMENTS_KEY:
            return self.movements
        raise KeyError(key)

    def serialize(self, key: str) -> Any:
        value = self.collection(key)
        if value is None:
            return None
        if isinstance(value, list):
            return [item.to_dict() for item in value]
        return value.to_dict()


class LedgerStore:
    def __init__(self, adapter: BlobAdapter, state: LedgerState | None = None):
        self._adapter = adapter
        self._state = state or LedgerState()
        self._lock = threading.RLock()
        self._working: LedgerState | None = None
        self._listeners: list[Listener] = []
        self._counters = self._init_counters(self._state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, adapter: BlobAdapter, *, seed_catalog: bool = True) -> "LedgerStore":
        """
        Build the store from persisted blobs.

        A missing catalog falls back to the demo seed list (persisted right
        away); missing sales/movements start empty and a missing session
        means the drawer is closed.
        """
        raw_catalog = adapter.load(CATALOG_KEY)
        raw_sales = adapter.load(SALES_KEY)
        raw_session = adapter.load(SESSION_KEY)
        raw_movements = adapter.load(MOVEMENTS_KEY)

        seeded = raw_catalog is None and seed_catalog
        if raw_catalog is None:
            products = seed_products() if seed_catalog else []
        else:
            products = [Product.from_dict(row) for row in raw_catalog]

        state = LedgerState(
            products=products,
            sales=[Sale.from_dict(row) for row in raw_sales or []],
            session=CashRegisterSession.from_dict(raw_session) if raw_session else None,
            movements=[CashMovement.from_dict(row) for row in raw_movements or []],
        )
        store = cls(adapter, state)
        if seeded:
            store._write_through([CATALOG_KEY])
        return store

    def flush(self) -> None:
        """Rewrite every blob from the current state (shutdown / repair)."""
        with self._lock:
            self._write_through(LEDGER_KEYS)

    def reset(self, *, seed_catalog: bool = False) -> None:
        """Drop all state; used by the CLI to start from an empty store."""
        with self.transaction() as state:
            state.products = seed_products() if seed_catalog else []
            state.sales = []
            state.session = None
            state.movements = []
        with self._lock:
            self._counters = self._init_counters(self._state)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[LedgerState]:
        """
        Exclusive, all-or-nothing unit of work.

        Nested calls from the same thread join the outer unit; only the
        outermost commit swaps state, persists and notifies.
        """
        with self._lock:
            if self._working is not None:
                yield self._working
                return

            working = copy.deepcopy(self._state)
            self._working = working
            try:
                yield working
            finally:
                self._working = None

            previous, self._state = self._state, working
            changed = [key for key in LEDGER_KEYS if previous.collection(key) != working.collection(key)]
            self._write_through(changed)
            snapshot = self._snapshot_locked() if changed and self._listeners else None
            listeners = list(self._listeners)

        if snapshot is not None:
            for listener in listeners:
                try:
                    listener(snapshot)
                except Exception:
                    logger.exception("Ledger listener %r failed", listener)

    def next_id(self, kind: str) -> int:
        with self._lock:
            return next(self._counters[kind])

    # ------------------------------------------------------------------
    # Reads (copies; callers never get a writable reference)
    # ------------------------------------------------------------------

    def products(self) -> list[Product]:
        with self._lock:
            return copy.deepcopy(self._state.products)

    def sales(self) -> list[Sale]:
        with self._lock:
            return copy.deepcopy(self._state.sales)

    def session(self) -> CashRegisterSession | None:
        with self._lock:
            return copy.deepcopy(self._state.session)

    def movements(self) -> list[CashMovement]:
        with self._lock:
            return copy.deepcopy(self._state.movements)

    def snapshot(self) -> dict:
        with self._lock:
            return self._snapshot_locked()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _snapshot_locked(self) -> dict:
        return {
            "products": self._state.serialize(CATALOG_KEY),
            "sales": self._state.serialize(SALES_KEY),
            "register_session": self._state.serialize(SESSION_KEY),
            "movements": self._state.serialize(MOVEMENTS_KEY),
        }

    def _write_through(self, keys) -> None:
        for key in keys:
            payload = self._state.serialize(key)
            try:
                if payload is None:
                    self._adapter.delete(key)
                else:
                    self._adapter.save(key, payload)
            except Exception:
                logger.exception("Failed to persist ledger blob %r", key)

    @staticmethod
    def _init_counters(state: LedgerState) -> dict[str, Iterator[int]]:
        session_ids = [m.register_session_id for m in state.movements]
        session_ids += [s.register_session_id for s in state.sales if s.register_session_id is not None]
        if state.session is not None:
            session_ids.append(state.session.id)

        # Deleted products still live on in sale snapshots; never reissue their ids.
        product_ids = [p.id for p in state.products]
        product_ids += [item.product_id for s in state.sales for item in s.items]

        highest = {
            "product": max(product_ids, default=0),
            "sale": max((s.id for s in state.sales), default=0),
            "session": max(session_ids, default=0),
            "movement": max((m.id for m in state.movements), default=0),
        }
        return {kind: itertools.count(highest[kind] + 1) for kind in ID_KINDS}
