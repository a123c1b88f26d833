import pytest

from posledger.services import inventory_service
from posledger.validation import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)


class TestAddProduct:

    def test_assigns_id_and_generated_barcode(self, ledger):
        product = inventory_service.add_product(ledger, {"name": "Agua 2L", "price_cents": 150, "stock": 5})

        assert product.id == 1
        assert product.barcode == "7500000000001"
        assert ledger.products()[0].barcode == product.barcode

    def test_keeps_supplied_barcode(self, ledger, soda):
        assert soda.barcode == "7501234567890"

    def test_ids_are_unique_across_rapid_inserts(self, ledger):
        ids = {inventory_service.add_product(ledger, {"name": f"P{i}"}).id for i in range(50)}
        assert len(ids) == 50

    def test_generated_barcode_skips_taken_value(self, ledger):
        inventory_service.add_product(ledger, {"name": "Taken", "barcode": "7500000000002"})
        product = inventory_service.add_product(ledger, {"name": "Second"})

        assert product.id == 2
        assert product.barcode == "7500000000003"

    @pytest.mark.parametrize("data", [
        {"name": "", "price_cents": 100},
        {"name": "   ", "price_cents": 100},
        {"price_cents": 100},
        {"name": "Bad price", "price_cents": -1},
        {"name": "Float price", "price_cents": 1.5},
        {"name": "Negative stock", "stock": -3},
    ])
    def test_rejects_invalid_input(self, ledger, data):
        with pytest.raises(ValidationError):
            inventory_service.add_product(ledger, data)
        assert ledger.products() == []

    def test_rejects_duplicate_barcode(self, ledger, soda):
        with pytest.raises(ConflictError):
            inventory_service.add_product(ledger, {"name": "Clone", "barcode": soda.barcode})
        assert len(ledger.products()) == 1


class TestUpdateProduct:

    def test_merges_patch(self, ledger, soda):
        updated = inventory_service.update_product(ledger, soda.id, {"price_cents": 300, "name": "Coca Cola"})

        assert updated.price_cents == 300
        assert updated.name == "Coca Cola"
        assert updated.stock == soda.stock
        assert updated.category == soda.category

    def test_ignores_unknown_fields(self, ledger, soda):
        updated = inventory_service.update_product(ledger, soda.id, {"id": 99, "color": "red"})
        assert updated.id == soda.id

    def test_unknown_product(self, ledger):
        with pytest.raises(NotFoundError):
            inventory_service.update_product(ledger, 404, {"name": "Ghost"})

    def test_rejects_negative_stock(self, ledger, soda):
        with pytest.raises(ValidationError):
            inventory_service.update_product(ledger, soda.id, {"stock": -1})
        assert ledger.products()[0].stock == 10

    def test_sets_counted_stock(self, ledger, soda):
        updated = inventory_service.update_product(ledger, soda.id, {"stock": 0})
        assert updated.stock == 0
        assert ledger.products()[0].stock == 0

    def test_rejects_barcode_of_other_product(self, ledger, soda, bread):
        with pytest.raises(ConflictError):
            inventory_service.update_product(ledger, bread.id, {"barcode": soda.barcode})

    def test_same_barcode_on_itself_is_fine(self, ledger, soda):
        updated = inventory_service.update_product(ledger, soda.id, {"barcode": soda.barcode})
        assert updated.barcode == soda.barcode


class TestDeleteProduct:

    def test_removes_product(self, ledger, soda, bread):
        inventory_service.delete_product(ledger, soda.id)
        assert [p.id for p in ledger.products()] == [bread.id]

    def test_unknown_product(self, ledger):
        with pytest.raises(NotFoundError):
            inventory_service.delete_product(ledger, 1)


class TestAdjustStock:

    def test_restock_and_remove(self, ledger, soda):
        assert inventory_service.adjust_stock(ledger, soda.id, 5).stock == 15
        assert inventory_service.adjust_stock(ledger, soda.id, -15).stock == 0

    def test_never_negative(self, ledger, soda):
        with pytest.raises(InsufficientStockError) as exc:
            inventory_service.adjust_stock(ledger, soda.id, -11)

        assert exc.value.details["on_hand"] == 10
        assert ledger.products()[0].stock == 10

    def test_unknown_product(self, ledger):
        with pytest.raises(NotFoundError):
            inventory_service.adjust_stock(ledger, 7, 1)

    def test_rejects_non_integer_delta(self, ledger, soda):
        with pytest.raises(ValidationError):
            inventory_service.adjust_stock(ledger, soda.id, "2.5")


class TestQueries:

    def test_search_by_name_or_barcode(self, ledger, soda, bread):
        assert [p.id for p in inventory_service.list_products(ledger, search="coca")] == [soda.id]
        assert [p.id for p in inventory_service.list_products(ledger, search="67891")] == [bread.id]

    def test_filter_by_category(self, ledger, soda, bread):
        assert [p.id for p in inventory_service.list_products(ledger, category="Panadería")] == [bread.id]
        assert len(inventory_service.list_products(ledger, category="all")) == 2

    def test_categories_in_catalog_order(self, ledger, soda, bread):
        inventory_service.add_product(ledger, {"name": "Agua", "category": "Bebidas"})
        assert inventory_service.list_categories(ledger) == ["Bebidas", "Panadería"]

    def test_find_by_barcode(self, ledger, soda):
        assert inventory_service.find_by_barcode(ledger, soda.barcode).id == soda.id
        with pytest.raises(NotFoundError):
            inventory_service.find_by_barcode(ledger, "000")

    def test_returned_products_are_copies(self, ledger, soda):
        product = inventory_service.get_product(ledger, soda.id)
        product.stock = -100
        assert ledger.products()[0].stock == 10
