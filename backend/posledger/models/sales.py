from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..time_utils import to_utc_z, parse_iso_datetime

PAYMENT_CASH = "cash"
PAYMENT_CARD = "card"
PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_CARD)


@dataclass
class LineItem:
    """
    Snapshot of a product at sale time.

    Later catalog edits (price, name, deletion) never reach back into a sale.
    """
    product_id: int
    name: str
    unit_price_cents: int
    quantity: int
    category: str

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price_cents": self.unit_price_cents,
            "quantity": self.quantity,
            "category": self.category,
            "line_total_cents": self.line_total_cents,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        return cls(
            product_id=int(data["product_id"]),
            name=data["name"],
            unit_price_cents=int(data["unit_price_cents"]),
            quantity=int(data["quantity"]),
            category=data.get("category") or "",
        )


@dataclass
class Sale:
    """
    Completed, immutable sale.

    total_cents = subtotal_cents + tax_cents
    change_cents = amount_paid_cents - total_cents (cash), 0 (card)
    """
    id: int
    created_at: datetime
    cashier: str
    payment_method: str
    subtotal_cents: int
    tax_cents: int
    total_cents: int
    amount_paid_cents: int
    change_cents: int
    register_session_id: int | None = None
    items: list[LineItem] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": to_utc_z(self.created_at),
            "cashier": self.cashier,
            "payment_method": self.payment_method,
            "subtotal_cents": self.subtotal_cents,
            "tax_cents": self.tax_cents,
            "total_cents": self.total_cents,
            "amount_paid_cents": self.amount_paid_cents,
            "change_cents": self.change_cents,
            "register_session_id": self.register_session_id,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Sale":
        return cls(
            id=int(data["id"]),
            created_at=parse_iso_datetime(data["created_at"]),
            cashier=data.get("cashier") or "",
            payment_method=data["payment_method"],
            subtotal_cents=int(data["subtotal_cents"]),
            tax_cents=int(data["tax_cents"]),
            total_cents=int(data["total_cents"]),
            amount_paid_cents=int(data["amount_paid_cents"]),
            change_cents=int(data["change_cents"]),
            register_session_id=data.get("register_session_id"),
            items=[LineItem.from_dict(item) for item in data.get("items", [])],
        )
