# Overview: Model package exports for ledger entities and the blob table.

from .inventory import Product
from .sales import LineItem, Sale, PAYMENT_METHODS
from .registers import CashRegisterSession, CashMovement, MOVEMENT_TYPES
from .storage import StoreBlob

__all__ = [
    "Product",
    "LineItem",
    "Sale",
    "PAYMENT_METHODS",
    "CashRegisterSession",
    "CashMovement",
    "MOVEMENT_TYPES",
    "StoreBlob",
]
