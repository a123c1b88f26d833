"""
Cash Register Session Service

WHY: Cash accountability. The drawer is either Closed (no session) or
Open (exactly one session) and every cash movement is attributed to the
session that was open when it happened.

DESIGN PRINCIPLES:
- At most one open session at any time
- current amount = initial + income - expense + cash sale totals
- opening/closing movements are markers; they never move the balance
- Cash sales credit the drawer but are not movements (the sale carries
  register_session_id instead)
- Variance (difference) = counted closing amount - current amount
"""

from __future__ import annotations

import copy

from ..models import CashRegisterSession, CashMovement
from ..models.registers import (
    MOVEMENT_CLOSING,
    MOVEMENT_EXPENSE,
    MOVEMENT_INCOME,
    MOVEMENT_OPENING,
    STATUS_CLOSED,
)
from ..models.sales import PAYMENT_CARD, PAYMENT_CASH
from ..time_utils import utcnow
from ..validation import (
    AlreadyOpenError,
    NoOpenSessionError,
    ValidationError,
    optional_text,
    parse_cents,
)
from .ledger_store import LedgerState, LedgerStore

RECORDABLE_MOVEMENT_TYPES = (MOVEMENT_INCOME, MOVEMENT_EXPENSE)


def _require_open(state: LedgerState) -> CashRegisterSession:
    if state.session is None:
        raise NoOpenSessionError("No cash register session is open")
    return state.session


def _append_movement(
    ledger: LedgerStore,
    state: LedgerState,
    *,
    movement_type: str,
    amount_cents: int,
    description: str,
    cashier: str,
) -> CashMovement:
    movement = CashMovement(
        id=ledger.next_id("movement"),
        type=movement_type,
        amount_cents=amount_cents,
        description=description,
        cashier=cashier,
        occurred_at=utcnow(),
        register_session_id=state.session.id,
    )
    state.movements.insert(0, movement)
    return movement


def credit_cash_sale(state: LedgerState, total_cents: int) -> CashRegisterSession:
    """Apply a cash sale total to the open drawer (inside a transaction)."""
    session = _require_open(state)
    session.current_amount_cents += total_cents
    return session


# =============================================================================
# SESSION LIFECYCLE
# =============================================================================

def open_session(ledger: LedgerStore, initial_amount_cents, cashier: str) -> CashRegisterSession:
    """
    Open the drawer.

    Raises:
        ValidationError: negative initial amount
        AlreadyOpenError: a session is already open
    """
    initial_amount_cents = parse_cents(initial_amount_cents, "initial_amount_cents")
    cashier = optional_text(cashier)

    with ledger.transaction() as state:
        if state.session is not None:
            raise AlreadyOpenError(
                f"Cash register already has an open session (session {state.session.id})",
                details={"session_id": state.session.id},
            )

        state.session = CashRegisterSession(
            id=ledger.next_id("session"),
            cashier=cashier,
            opened_at=utcnow(),
            initial_amount_cents=initial_amount_cents,
            current_amount_cents=initial_amount_cents,
        )
        _append_movement(
            ledger,
            state,
            movement_type=MOVEMENT_OPENING,
            amount_cents=initial_amount_cents,
            description="Cash register opened",
            cashier=cashier,
        )
        session = state.session

    return copy.deepcopy(session)


def record_movement(
    ledger: LedgerStore,
    movement_type: str,
    amount_cents,
    description: str | None,
    cashier: str,
) -> CashMovement:
    """
    Record cash put into (income) or taken out of (expense) the drawer.

    Raises:
        ValidationError: unsupported type or non-positive amount
        NoOpenSessionError: drawer closed
    """
    if movement_type not in RECORDABLE_MOVEMENT_TYPES:
        raise ValidationError(
            "type must be income or expense",
            details={"type": movement_type},
        )
    amount_cents = parse_cents(amount_cents, "amount_cents", positive=True)
    cashier = optional_text(cashier)

    with ledger.transaction() as state:
        session = _require_open(state)
        movement = _append_movement(
            ledger,
            state,
            movement_type=movement_type,
            amount_cents=amount_cents,
            description=optional_text(description),
            cashier=cashier,
        )
        session.current_amount_cents += movement.signed_amount_cents

    return copy.deepcopy(movement)


def close_session(ledger: LedgerStore, closing_amount_cents, cashier: str) -> CashRegisterSession:
    """
    Close the drawer and compute the variance.

    IMMUTABLE: the closed snapshot is returned for the receipt; ledger state
    goes back to "no session".

    Raises:
        ValidationError: negative closing amount
        NoOpenSessionError: drawer already closed
    """
    closing_amount_cents = parse_cents(closing_amount_cents, "closing_amount_cents")
    cashier = optional_text(cashier)

    with ledger.transaction() as state:
        session = _require_open(state)
        difference = closing_amount_cents - session.current_amount_cents

        _append_movement(
            ledger,
            state,
            movement_type=MOVEMENT_CLOSING,
            amount_cents=closing_amount_cents,
            description=f"Cash register closed. Difference: {difference / 100:.2f}",
            cashier=cashier,
        )

        closed = copy.deepcopy(session)
        closed.status = STATUS_CLOSED
        closed.closed_at = utcnow()
        closed.closing_amount_cents = closing_amount_cents
        closed.difference_cents = difference

        state.session = None

    return closed


# =============================================================================
# QUERIES
# =============================================================================

def get_open_session(ledger: LedgerStore) -> CashRegisterSession | None:
    return ledger.session()


def list_movements(ledger: LedgerStore, session_id: int | None = None) -> list[CashMovement]:
    """Movements newest first, optionally restricted to one session."""
    movements = ledger.movements()
    if session_id is None:
        return movements
    return [m for m in movements if m.register_session_id == session_id]


def current_session_movements(ledger: LedgerStore) -> list[CashMovement]:
    session = ledger.session()
    if session is None:
        return []
    return list_movements(ledger, session.id)


def session_summary(ledger: LedgerStore) -> dict | None:
    """
    Breakdown of the open session's running balance.

    Returns None when the drawer is closed.
    """
    session = ledger.session()
    if session is None:
        return None

    movements = list_movements(ledger, session.id)
    sales = [s for s in ledger.sales() if s.register_session_id == session.id]

    income = sum(m.amount_cents for m in movements if m.type == MOVEMENT_INCOME)
    expense = sum(m.amount_cents for m in movements if m.type == MOVEMENT_EXPENSE)
    cash_sales = sum(s.total_cents for s in sales if s.payment_method == PAYMENT_CASH)
    card_sales = sum(s.total_cents for s in sales if s.payment_method == PAYMENT_CARD)

    return {
        "session": session.to_dict(),
        "initial_amount_cents": session.initial_amount_cents,
        "income_cents": income,
        "expense_cents": expense,
        "cash_sales_cents": cash_sales,
        "card_sales_cents": card_sales,
        "sales_count": len(sales),
        "movements_count": len(movements),
        "current_amount_cents": session.current_amount_cents,
        "expected_amount_cents": session.initial_amount_cents + income - expense + cash_sales,
    }
