from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..time_utils import to_utc_z, parse_iso_datetime

STATUS_OPEN = "open"
STATUS_CLOSED = "closed"

MOVEMENT_OPENING = "opening"
MOVEMENT_CLOSING = "closing"
MOVEMENT_INCOME = "income"
MOVEMENT_EXPENSE = "expense"
MOVEMENT_TYPES = (MOVEMENT_OPENING, MOVEMENT_CLOSING, MOVEMENT_INCOME, MOVEMENT_EXPENSE)


@dataclass
class CashRegisterSession:
    """
    Cash drawer session.

    LIFECYCLE:
    - open: current_amount_cents tracks initial + income - expense + cash sales
    - closed: closing_amount_cents counted, difference_cents = closing - current

    Only the open session is held as ledger state; a closed snapshot is
    handed back to the caller for the receipt.
    """
    id: int
    cashier: str
    opened_at: datetime
    initial_amount_cents: int
    current_amount_cents: int
    status: str = STATUS_OPEN
    closed_at: datetime | None = None
    closing_amount_cents: int | None = None
    difference_cents: int | None = None

    @property
    def is_open(self) -> bool:
        return self.status == STATUS_OPEN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cashier": self.cashier,
            "opened_at": to_utc_z(self.opened_at),
            "initial_amount_cents": self.initial_amount_cents,
            "current_amount_cents": self.current_amount_cents,
            "status": self.status,
            "closed_at": to_utc_z(self.closed_at),
            "closing_amount_cents": self.closing_amount_cents,
            "difference_cents": self.difference_cents,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CashRegisterSession":
        return cls(
            id=int(data["id"]),
            cashier=data.get("cashier") or "",
            opened_at=parse_iso_datetime(data["opened_at"]),
            initial_amount_cents=int(data["initial_amount_cents"]),
            current_amount_cents=int(data["current_amount_cents"]),
            status=data.get("status", STATUS_OPEN),
            closed_at=parse_iso_datetime(data.get("closed_at")),
            closing_amount_cents=data.get("closing_amount_cents"),
            difference_cents=data.get("difference_cents"),
        )


@dataclass
class CashMovement:
    """
    Append-only drawer event.

    EVENT TYPES:
    - opening: marker, amount = initial count
    - closing: marker, amount = counted closing cash
    - income: cash put into the drawer, raises the running balance
    - expense: cash taken out of the drawer, lowers the running balance
    """
    id: int
    type: str
    amount_cents: int
    description: str
    cashier: str
    occurred_at: datetime
    register_session_id: int

    @property
    def signed_amount_cents(self) -> int:
        if self.type == MOVEMENT_INCOME:
            return self.amount_cents
        if self.type == MOVEMENT_EXPENSE:
            return -self.amount_cents
        return 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "amount_cents": self.amount_cents,
            "description": self.description,
            "cashier": self.cashier,
            "occurred_at": to_utc_z(self.occurred_at),
            "register_session_id": self.register_session_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CashMovement":
        return cls(
            id=int(data["id"]),
            type=data["type"],
            amount_cents=int(data["amount_cents"]),
            description=data.get("description") or "",
            cashier=data.get("cashier") or "",
            occurred_at=parse_iso_datetime(data["occurred_at"]),
            register_session_id=int(data["register_session_id"]),
        )
