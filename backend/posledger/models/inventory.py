from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Product:
    """
    Catalog entry.

    INVARIANTS:
    - stock is never negative
    - barcode is non-empty and unique across the catalog
    """
    id: int
    name: str
    category: str
    price_cents: int
    stock: int
    barcode: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price_cents": self.price_cents,
            "stock": self.stock,
            "barcode": self.barcode,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            category=data.get("category") or "",
            price_cents=int(data["price_cents"]),
            stock=int(data["stock"]),
            barcode=str(data["barcode"]),
        )
