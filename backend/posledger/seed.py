# Overview: Demo catalog used when no catalog blob has been persisted yet.

from __future__ import annotations

from .models import Product

SEED_CATALOG: list[dict] = [
    {"id": 1, "name": "Coca Cola 600ml", "category": "Bebidas", "price_cents": 250, "stock": 150, "barcode": "7501234567890"},
    {"id": 2, "name": "Pan Integral", "category": "Panadería", "price_cents": 320, "stock": 80, "barcode": "7501234567891"},
    {"id": 3, "name": "Leche Entera 1L", "category": "Lácteos", "price_cents": 450, "stock": 100, "barcode": "7501234567892"},
    {"id": 4, "name": "Arroz 1kg", "category": "Abarrotes", "price_cents": 580, "stock": 200, "barcode": "7501234567893"},
    {"id": 5, "name": "Aceite Vegetal 1L", "category": "Abarrotes", "price_cents": 890, "stock": 75, "barcode": "7501234567894"},
    {"id": 6, "name": "Huevos x12", "category": "Lácteos", "price_cents": 420, "stock": 120, "barcode": "7501234567895"},
    {"id": 7, "name": "Agua 2L", "category": "Bebidas", "price_cents": 150, "stock": 300, "barcode": "7501234567896"},
    {"id": 8, "name": "Galletas María", "category": "Snacks", "price_cents": 280, "stock": 90, "barcode": "7501234567897"},
    {"id": 9, "name": "Yogurt Natural", "category": "Lácteos", "price_cents": 350, "stock": 60, "barcode": "7501234567898"},
    {"id": 10, "name": "Jamón 500g", "category": "Carnes", "price_cents": 1250, "stock": 45, "barcode": "7501234567899"},
    {"id": 11, "name": "Queso 500g", "category": "Lácteos", "price_cents": 1500, "stock": 35, "barcode": "7501234567800"},
    {"id": 12, "name": "Cerveza 355ml", "category": "Bebidas", "price_cents": 300, "stock": 200, "barcode": "7501234567801"},
]


def seed_products() -> list[Product]:
    return [Product.from_dict(row) for row in SEED_CATALOG]
