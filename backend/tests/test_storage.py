from posledger.extensions import db
from posledger.models import StoreBlob
from posledger.services import inventory_service, register_service
from posledger.services.ledger_store import LedgerStore
from posledger.services.storage import (
    CATALOG_KEY,
    SESSION_KEY,
    MemoryBlobAdapter,
    SqlBlobAdapter,
)


class TestMemoryBlobAdapter:

    def test_payloads_are_isolated(self):
        adapter = MemoryBlobAdapter()
        payload = [{"id": 1}]
        adapter.save("k", payload)
        payload[0]["id"] = 2

        loaded = adapter.load("k")
        loaded.append("x")

        assert adapter.load("k") == [{"id": 1}]

    def test_missing_key(self):
        assert MemoryBlobAdapter().load("nope") is None


class TestSqlBlobAdapter:

    def test_save_load_delete(self, app):
        adapter = SqlBlobAdapter(app)

        adapter.save("sample", {"a": 1})
        assert adapter.load("sample") == {"a": 1}

        adapter.save("sample", {"a": 2})
        assert adapter.load("sample") == {"a": 2}

        adapter.delete("sample")
        assert adapter.load("sample") is None

    def test_seed_catalog_persisted_at_startup(self, app):
        with app.app_context():
            row = db.session.get(StoreBlob, CATALOG_KEY)
            assert row is not None
            assert len(row.payload) == 12

    def test_app_ledger_survives_restart(self, app, app_ledger):
        product = inventory_service.add_product(app_ledger, {"name": "Pilas AA", "price_cents": 999, "stock": 4})
        register_service.open_session(app_ledger, 5000, "Ana")

        reloaded = LedgerStore.load(SqlBlobAdapter(app))

        assert reloaded.snapshot() == app_ledger.snapshot()
        assert inventory_service.get_product(reloaded, product.id).name == "Pilas AA"
        assert reloaded.session().initial_amount_cents == 5000

        register_service.close_session(app_ledger, 5000, "Ana")
        with app.app_context():
            assert db.session.get(StoreBlob, SESSION_KEY) is None
