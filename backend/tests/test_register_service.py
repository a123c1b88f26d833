import pytest

from posledger.models.registers import STATUS_CLOSED
from posledger.services import register_service, sales_service
from posledger.validation import (
    AlreadyOpenError,
    NoOpenSessionError,
    ValidationError,
)


class TestOpenSession:

    def test_open_creates_session_and_opening_marker(self, ledger):
        session = register_service.open_session(ledger, 10000, "Ana")

        assert session.is_open
        assert session.initial_amount_cents == 10000
        assert session.current_amount_cents == 10000

        movements = ledger.movements()
        assert len(movements) == 1
        assert movements[0].type == "opening"
        assert movements[0].amount_cents == 10000
        assert movements[0].register_session_id == session.id

    def test_second_open_rejected(self, ledger):
        register_service.open_session(ledger, 0, "Ana")
        with pytest.raises(AlreadyOpenError):
            register_service.open_session(ledger, 500, "Luis")
        assert len(ledger.movements()) == 1

    def test_negative_initial_amount(self, ledger):
        with pytest.raises(ValidationError):
            register_service.open_session(ledger, -1, "Ana")
        assert ledger.session() is None


class TestMovements:

    def test_income_and_expense_move_balance(self, ledger):
        register_service.open_session(ledger, 10000, "Ana")
        register_service.record_movement(ledger, "income", 2500, "Change fund", "Ana")
        register_service.record_movement(ledger, "expense", 700, "Cleaning", "Ana")

        assert ledger.session().current_amount_cents == 11800
        assert [m.type for m in ledger.movements()] == ["expense", "income", "opening"]

    def test_requires_open_session(self, ledger):
        with pytest.raises(NoOpenSessionError):
            register_service.record_movement(ledger, "income", 100, "", "Ana")
        assert ledger.movements() == []

    @pytest.mark.parametrize("movement_type,amount", [
        ("income", 0),
        ("expense", -5),
        ("opening", 100),
        ("closing", 100),
        ("refund", 100),
    ])
    def test_rejects_bad_input(self, ledger, movement_type, amount):
        register_service.open_session(ledger, 1000, "Ana")
        with pytest.raises(ValidationError):
            register_service.record_movement(ledger, movement_type, amount, "", "Ana")
        assert ledger.session().current_amount_cents == 1000

    def test_listing_by_session(self, ledger):
        first = register_service.open_session(ledger, 100, "Ana")
        register_service.close_session(ledger, 100, "Ana")
        second = register_service.open_session(ledger, 200, "Luis")
        register_service.record_movement(ledger, "income", 50, "", "Luis")

        assert len(register_service.list_movements(ledger, first.id)) == 2
        assert [m.type for m in register_service.current_session_movements(ledger)] == ["income", "opening"]
        assert all(m.register_session_id == second.id for m in register_service.current_session_movements(ledger))


class TestCloseSession:

    def test_close_computes_difference_and_clears_session(self, ledger):
        register_service.open_session(ledger, 10000, "Ana")
        register_service.record_movement(ledger, "income", 580, "", "Ana")

        closed = register_service.close_session(ledger, 10500, "Ana")

        assert closed.status == STATUS_CLOSED
        assert closed.closing_amount_cents == 10500
        assert closed.difference_cents == -80
        assert closed.closed_at is not None
        assert ledger.session() is None

        closing = ledger.movements()[0]
        assert closing.type == "closing"
        assert closing.amount_cents == 10500
        assert closing.register_session_id == closed.id

    def test_close_without_session(self, ledger):
        with pytest.raises(NoOpenSessionError):
            register_service.close_session(ledger, 0, "Ana")

    def test_negative_closing_amount(self, ledger):
        register_service.open_session(ledger, 100, "Ana")
        with pytest.raises(ValidationError):
            register_service.close_session(ledger, -1, "Ana")
        assert ledger.session() is not None

    def test_reopen_after_close_gets_new_id(self, ledger):
        first = register_service.open_session(ledger, 100, "Ana")
        register_service.close_session(ledger, 100, "Ana")
        second = register_service.open_session(ledger, 100, "Ana")
        assert second.id != first.id


class TestSessionSummary:

    def test_none_when_closed(self, ledger):
        assert register_service.session_summary(ledger) is None

    def test_balance_reconciliation(self, ledger, soda):
        register_service.open_session(ledger, 10000, "Ana")
        register_service.record_movement(ledger, "income", 1000, "", "Ana")
        register_service.record_movement(ledger, "expense", 300, "", "Ana")
        cash = sales_service.create_sale(ledger, [{"product_id": soda.id, "quantity": 1}], "cash", 1000, "Ana")
        card = sales_service.create_sale(ledger, [{"product_id": soda.id, "quantity": 2}], "card", None, "Ana")

        summary = register_service.session_summary(ledger)

        assert summary["income_cents"] == 1000
        assert summary["expense_cents"] == 300
        assert summary["cash_sales_cents"] == cash.total_cents
        assert summary["card_sales_cents"] == card.total_cents
        assert summary["sales_count"] == 2
        assert summary["current_amount_cents"] == 10000 + 1000 - 300 + cash.total_cents
        assert summary["expected_amount_cents"] == summary["current_amount_cents"]
