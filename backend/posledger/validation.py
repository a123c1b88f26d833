# Overview: Ledger error taxonomy and input coercion helpers shared by services and routes.

from __future__ import annotations

from typing import Any


class LedgerError(Exception):
    """Base class for business-rule violations. Never leaves partial state behind."""

    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": str(self), "kind": type(self).__name__, "details": self.details}


class ValidationError(LedgerError):
    """400-level input problem."""


class ConflictError(ValidationError):
    """409-level uniqueness conflict (e.g., duplicate barcode)."""

    status_code = 409


class NotFoundError(LedgerError):
    status_code = 404


class InsufficientStockError(LedgerError):
    status_code = 409


class NoOpenSessionError(LedgerError):
    status_code = 409


class AlreadyOpenError(LedgerError):
    status_code = 409


class InsufficientPaymentError(LedgerError):
    status_code = 400


# Maximum price: $9,999,999.99 (999,999,999 cents)
MAX_PRICE_CENTS = 999_999_999


def parse_int(value: Any, field: str) -> int:
    """
    Strict integer coercion: rejects bools, floats, decimals and scientific notation.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if "." in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    raise ValidationError(f"{field} must be an integer")


def parse_cents(value: Any, field: str, *, positive: bool = False) -> int:
    """Money amount in cents; >= 0, or > 0 when positive=True."""
    if value is None:
        raise ValidationError(f"{field} is required")
    cents = parse_int(value, field)
    if positive and cents <= 0:
        raise ValidationError(f"{field} must be greater than zero", details={field: cents})
    if cents < 0:
        raise ValidationError(f"{field} cannot be negative", details={field: cents})
    if cents > MAX_PRICE_CENTS:
        raise ValidationError(f"{field} exceeds maximum of {MAX_PRICE_CENTS}", details={field: cents})
    return cents


def parse_quantity(value: Any, field: str = "quantity", *, allow_zero: bool = False) -> int:
    qty = parse_int(value, field)
    if allow_zero and qty < 0:
        raise ValidationError(f"{field} cannot be negative", details={field: qty})
    if not allow_zero and qty <= 0:
        raise ValidationError(f"{field} must be a positive integer", details={field: qty})
    return qty


def require_text(value: Any, field: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{field} is required")
    return text


def optional_text(value: Any) -> str:
    return str(value).strip() if value is not None else ""
