# backend/posledger/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB holding the four ledger blobs
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///posledger.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Sales tax in basis points (1600 = 16%)
    TAX_RATE_BPS = int(os.environ.get("TAX_RATE_BPS", "1600"))

    LOW_STOCK_THRESHOLD = int(os.environ.get("LOW_STOCK_THRESHOLD", "20"))
    TOP_SELLERS_LIMIT = int(os.environ.get("TOP_SELLERS_LIMIT", "5"))

    # Fall back to the demo catalog when no catalog blob is stored yet
    SEED_CATALOG = _env_bool("SEED_CATALOG", True)

    # "sql" persists through SQLAlchemy; "memory" keeps blobs in-process only
    LEDGER_STORAGE = os.environ.get("LEDGER_STORAGE", "sql")
